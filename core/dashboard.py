from __future__ import annotations

from dataclasses import asdict
import html
from typing import Any, Dict, List, Optional

import pandas as pd

from core.charts import build_group_chart, build_network_chart, to_vega_spec
from core.data import (
    ACQUISITION_HISTORY,
    COLUMNS,
    COMPANY,
    HEADQUARTERS,
    MAIN_MANUFACTURING,
    MAIN_SPORT_FOCUS,
    OWNERSHIP_STATUS,
    YEAR_FOUNDED,
)
from core.filters import DashboardFilters, filter_rows, parse_year
from core.graph import derive_graph, to_networkx
from core.layout import compute_layout, focus_viewport, highlighted_ids


OPTION_COLUMNS = [MAIN_SPORT_FOCUS, OWNERSHIP_STATUS, HEADQUARTERS, MAIN_MANUFACTURING]


def compute_filter_options(rows: pd.DataFrame) -> Dict[str, Any]:
    options: Dict[str, List[str]] = {}
    for col in OPTION_COLUMNS:
        values = rows[col].astype(str) if col in rows.columns else pd.Series(dtype=str)
        options[col] = sorted(v for v in values.unique().tolist() if v != "")

    years = [y for y in (parse_year(v) for v in rows.get(YEAR_FOUNDED, pd.Series(dtype=str))) if y is not None]
    year_bounds = [min(years), max(years)] if years else None
    return {"options": options, "year_bounds": year_bounds, "unparseable_years": int(len(rows) - len(years))}


def compute_dashboard(filters: DashboardFilters, rows: pd.DataFrame, *, dedupe_links: bool = False) -> Dict[str, Any]:
    filtered = filter_rows(rows, filters)
    nodes, links = derive_graph(filtered, dedupe=dedupe_links)
    positions = compute_layout(nodes, links)
    highlighted = highlighted_ids(nodes, filters.search_term)
    viewport = focus_viewport(positions, highlighted)

    degrees = dict(to_networkx(nodes, links).degree()) if nodes else {}
    hl = set(highlighted)
    node_records = [
        {
            "id": n.id,
            "group": n.group,
            "x": positions[n.id][0],
            "y": positions[n.id][1],
            "degree": int(degrees.get(n.id, 0)),
            "highlighted": n.id in hl,
        }
        for n in nodes
    ]

    charts: Dict[str, Any] = {}
    if nodes:
        charts["network"] = to_vega_spec(build_network_chart(nodes, links, positions, highlighted, viewport))
        charts["groups"] = to_vega_spec(build_group_chart(nodes))

    return {
        "filters": asdict(filters),
        "kpis": {
            "companies": int(len(filtered)),
            "total_companies": int(len(rows)),
            "links": len(links),
            "groups": len({n.group for n in nodes}),
            "highlighted": len(highlighted),
        },
        "nodes": node_records,
        "links": [asdict(link) for link in links],
        "viewport": asdict(viewport),
        "rows": filtered.to_dict(orient="records"),
        "charts": charts,
    }


def compute_company_details(rows: pd.DataFrame, company: str) -> Optional[Dict[str, Any]]:
    match = rows[rows[COMPANY] == company]
    if match.empty:
        return None
    record = match.iloc[0]
    history = str(record[ACQUISITION_HISTORY])
    others = rows[rows[COMPANY] != company]

    mentions = [str(c) for c in others[COMPANY] if str(c) and str(c) in history]
    mentioned_by = [str(c) for c, h in zip(others[COMPANY], others[ACQUISITION_HISTORY]) if company in str(h)]
    return {
        "company": company,
        "fields": {col: str(record[col]) for col in COLUMNS},
        "year_founded": parse_year(record[YEAR_FOUNDED]),
        "mentions": mentions,
        "mentioned_by": mentioned_by,
    }


def format_filter_summary(search_term: str, filter_state: Dict[str, Any]) -> str:
    """Chip-row HTML for the page header; chip text is escaped."""
    chips: List[str] = [f"Search: {search_term}" if search_term else "Search: none"]
    for col, value in filter_state.items():
        if isinstance(value, tuple):
            chips.append(f"{col}: {value[0]}–{value[1]}")
        else:
            chips.append(f"{col}: {value}")
    if len(chips) == 1:
        chips.append("Filters: none")
    return "".join([f"<span class='chip'>{html.escape(txt)}</span>" for txt in chips])
