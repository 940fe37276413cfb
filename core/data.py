from __future__ import annotations

import csv
import io
import logging
import os
from pathlib import Path
from typing import List, Optional

import pandas as pd
import requests


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
CSV_FILENAME = "companies.csv"
BASE_PATH_ENV = "DASHBOARD_BASE_PATH"
FETCH_TIMEOUT_S = 30

COMPANY = "Company"
MAIN_SPORT_FOCUS = "Main Sport Focus"
YEAR_FOUNDED = "Year Founded"
FINANCIALS = "Financials"
OWNERSHIP_STATUS = "Ownership Status"
HEADQUARTERS = "Headquarters"
MAIN_MANUFACTURING = "Main Manufacturing"
SUSTAINABILITY = "Environmental & Sustainability Policies"
ACQUISITION_HISTORY = "Acquisition History"

COLUMNS: List[str] = [
    COMPANY,
    MAIN_SPORT_FOCUS,
    YEAR_FOUNDED,
    FINANCIALS,
    OWNERSHIP_STATUS,
    HEADQUARTERS,
    MAIN_MANUFACTURING,
    SUSTAINABILITY,
    ACQUISITION_HISTORY,
]


class DatasetError(Exception):
    """Base class for dataset load failures."""


class NetworkError(DatasetError):
    """The CSV resource could not be fetched."""


class ParseError(DatasetError):
    """The CSV resource was fetched but is not a valid company table."""


def get_base_path() -> str:
    return os.environ.get(BASE_PATH_ENV, "/") or "/"


def is_url(location: str) -> bool:
    return str(location).lower().startswith(("http://", "https://"))


def resolve_dataset_location(base_path: Optional[str] = None, filename: str = CSV_FILENAME) -> str:
    """Join the deployment base path with the CSV file name.

    ``/`` and subpath prefixes like ``/indie-outdoors/`` resolve under DATA_DIR;
    an absolute ``http(s)://`` prefix resolves to a URL.
    """
    base = get_base_path() if base_path is None else base_path
    base = (base or "/").strip()
    if is_url(base):
        return base.rstrip("/") + "/" + filename
    sub = base.strip("/")
    return str(DATA_DIR / sub / filename) if sub else str(DATA_DIR / filename)


def fetch_text(location: str) -> str:
    if is_url(location):
        try:
            response = requests.get(location, timeout=FETCH_TIMEOUT_S)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkError(f"Could not fetch {location}: {exc}") from exc
        response.encoding = "utf-8"
        return response.text

    try:
        raw = Path(location).read_bytes()
    except OSError as exc:
        raise NetworkError(f"Could not read {location}: {exc}") from exc
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(f"{location} is not UTF-8 text") from exc


def _check_field_counts(text: str) -> None:
    """Reject rows carrying more fields than the header, trailing delimiters included."""
    try:
        reader = csv.reader(io.StringIO(text))
        header = next(reader, None)
        if header is None:
            return
        for row in reader:
            if len(row) > len(header):
                raise ParseError(f"Line {reader.line_num} has {len(row)} fields, header has {len(header)}")
    except csv.Error as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc


def parse_companies_csv(text: str) -> pd.DataFrame:
    """Parse CSV text into the company row set (all values are strings)."""
    _check_field_counts(text)
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False, index_col=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc

    # Short rows come back as NaN even with keep_default_na=False.
    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        raise ParseError(f"Missing columns: {', '.join(missing)}")

    companies = df[COMPANY]
    if (companies.str.strip() == "").any():
        raise ParseError("Every row needs a non-empty Company")
    dupes = sorted(companies[companies.duplicated()].unique().tolist())
    if dupes:
        raise ParseError(f"Duplicate companies: {', '.join(dupes)}")

    return df.reset_index(drop=True)


def load_companies(location: Optional[str] = None) -> pd.DataFrame:
    location = location or resolve_dataset_location()
    df = parse_companies_csv(fetch_text(location))
    logger.info("Loaded %d companies from %s", len(df), location)
    return df
