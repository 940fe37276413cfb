from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

import pandas as pd

from core.data import COLUMNS, COMPANY, HEADQUARTERS, MAIN_SPORT_FOCUS, YEAR_FOUNDED


logger = logging.getLogger(__name__)

SEARCH_COLUMNS = [COMPANY, MAIN_SPORT_FOCUS, HEADQUARTERS]

YearRange = Tuple[int, int]
Constraint = Union[str, YearRange]

_YEAR_RE = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass(frozen=True)
class DashboardFilters:
    search_term: str = ""
    filter_state: Dict[str, Constraint] = field(default_factory=dict)


def parse_year(value: object) -> Optional[int]:
    """Strict integer parse; anything but an optionally signed digit run is None."""
    if value is None:
        return None
    s = str(value)
    if not _YEAR_RE.match(s):
        return None
    return int(s)


def _as_year_range(value: object) -> Optional[YearRange]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    try:
        lo, hi = int(value[0]), int(value[1])
    except (TypeError, ValueError):
        return None
    return (lo, hi) if lo <= hi else (hi, lo)


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}
    search_term = str(raw.get("search_term") or "").strip()

    state: Dict[str, Constraint] = {}
    for col, value in (raw.get("filter_state") or {}).items():
        if col not in COLUMNS:
            logger.warning("Ignoring filter on unknown column %r", col)
            continue
        if col == YEAR_FOUNDED:
            year_range = _as_year_range(value)
            if year_range is None:
                if value not in (None, "", []):
                    logger.warning("Ignoring malformed year range %r", value)
                continue
            state[col] = year_range
        elif value is not None and str(value) != "":
            state[col] = str(value)

    return DashboardFilters(search_term=search_term, filter_state=state)


def _search_mask(rows: pd.DataFrame, search_term: str) -> pd.Series:
    mask = pd.Series(False, index=rows.index)
    q = search_term.lower()
    for col in SEARCH_COLUMNS:
        if col in rows.columns:
            mask |= rows[col].astype(str).str.lower().str.contains(q, regex=False)
    return mask


def _constraint_mask(rows: pd.DataFrame, col: str, constraint: Optional[Constraint]) -> pd.Series:
    if constraint is None or (isinstance(constraint, (str, list, tuple)) and len(constraint) == 0):
        return pd.Series(True, index=rows.index)
    values = rows[col] if col in rows.columns else pd.Series("", index=rows.index)
    if col == YEAR_FOUNDED and not isinstance(constraint, str):
        lo, hi = constraint
        years = values.map(parse_year)
        return years.map(lambda y: y is not None and lo <= y <= hi).astype(bool)
    return values.astype(str) == str(constraint)


def apply_filters(rows: pd.DataFrame, search_term: str = "", filter_state: Optional[Mapping[str, Constraint]] = None) -> pd.DataFrame:
    """Return the rows passing both the search and the per-column filter stage.

    Row order and index are preserved; ``rows`` is not modified.
    """
    mask = pd.Series(True, index=rows.index)
    if search_term:
        mask &= _search_mask(rows, search_term)
    for col, constraint in (filter_state or {}).items():
        mask &= _constraint_mask(rows, col, constraint)
    return rows[mask].copy()


def filter_rows(rows: pd.DataFrame, filters: DashboardFilters) -> pd.DataFrame:
    return apply_filters(rows, filters.search_term, filters.filter_state)
