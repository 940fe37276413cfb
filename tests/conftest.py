"""Shared fixtures: small company tables built in memory."""

from typing import Dict, List

import pandas as pd
import pytest

from core.data import COLUMNS


def make_rows(records: List[Dict[str, str]]) -> pd.DataFrame:
    """Build a row set with every column present and missing fields as ''."""
    return pd.DataFrame([{col: rec.get(col, "") for col in COLUMNS} for rec in records], columns=COLUMNS, dtype=str)


@pytest.fixture
def row_factory():
    return make_rows


@pytest.fixture
def acme_beta() -> pd.DataFrame:
    return make_rows(
        [
            {"Company": "Acme", "Acquisition History": ""},
            {"Company": "Beta", "Acquisition History": "Beta acquired Acme in 2020"},
        ]
    )


@pytest.fixture
def companies() -> pd.DataFrame:
    return make_rows(
        [
            {
                "Company": "Acme Outdoors",
                "Main Sport Focus": "Climbing, Hiking",
                "Year Founded": "1990",
                "Ownership Status": "Private",
                "Headquarters": "Boulder, Colorado",
                "Acquisition History": "",
            },
            {
                "Company": "Beta Gear",
                "Main Sport Focus": "Skiing",
                "Year Founded": "2000",
                "Ownership Status": "Public",
                "Headquarters": "Denver, Colorado",
                "Acquisition History": "Acquired Acme Outdoors in 2015",
            },
            {
                "Company": "Gamma Paddle",
                "Main Sport Focus": "Kayaking, Rafting",
                "Year Founded": "1985",
                "Ownership Status": "Private",
                "Headquarters": "Portland, Oregon",
                "Acquisition History": "Sold to Beta Gear in 2019",
            },
            {
                "Company": "Delta Trails",
                "Main Sport Focus": "Trail Running",
                "Year Founded": "unknown",
                "Ownership Status": "Private",
                "Headquarters": "Bend, Oregon",
                "Acquisition History": "",
            },
        ]
    )
