import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Dict, Optional

from core.dashboard import OPTION_COLUMNS, compute_company_details, compute_filter_options, format_filter_summary
from core.data import COLUMNS, COMPANY, YEAR_FOUNDED
from core.filters import normalize_filters
from core.session import DashboardSession, LoadStatus

ALL_OPTION = "All"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 2px solid #2A2A2A;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.6rem;font-weight: 700;color: #C75C2C;text-transform: uppercase;letter-spacing: 0.05em;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #2A5B5B;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #FAF6F1;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "companies.csv"):
    inject_base_styles()
    top = st.container()
    c1, c2 = top.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def render_company_details(details: Optional[Dict[str, object]]):
    if details is None:
        st.info("Select a company to see its details.")
        return
    st.markdown(f"#### {details['company']}")
    fields = details["fields"]
    st.dataframe(
        pd.DataFrame({"Field": list(fields.keys()), "Value": list(fields.values())}),
        hide_index=True,
        use_container_width=True,
    )
    cols = st.columns(2)
    cols[0].markdown("**Mentions in its history**")
    cols[0].write(details["mentions"] or "None")
    cols[1].markdown("**Mentioned by**")
    cols[1].write(details["mentioned_by"] or "None")


# ---------- UI setup ----------
st.set_page_config(page_title="Indie Outdoors | Company Relationships", layout="wide")
inject_base_styles()

if "session" not in st.session_state:
    st.session_state["session"] = DashboardSession()
session: DashboardSession = st.session_state["session"]

if session.status == LoadStatus.IDLE:
    with st.spinner("Loading data..."):
        session.load()
if session.status == LoadStatus.FAILED:
    st.error(session.error)
    st.stop()

rows = session.require_rows()
meta = compute_filter_options(rows)

# ----- Sidebar: search + filters -----
with st.sidebar:
    st.markdown("### Search")
    search_term = st.text_input("Company, sport focus or headquarters", "")

    st.markdown("---")
    st.markdown("### Filters")
    raw_state: Dict[str, object] = {}
    for col in OPTION_COLUMNS:
        choice = st.selectbox(col, options=[ALL_OPTION] + meta["options"][col], index=0)
        if choice != ALL_OPTION:
            raw_state[col] = choice

    year_bounds = meta["year_bounds"]
    if year_bounds and year_bounds[0] < year_bounds[1]:
        use_years = st.checkbox("Filter by Year Founded", value=False)
        year_range = st.slider("Year Founded", min_value=year_bounds[0], max_value=year_bounds[1], value=tuple(year_bounds), disabled=not use_years)
        if use_years:
            raw_state[YEAR_FOUNDED] = list(year_range)
        if meta["unparseable_years"]:
            st.caption(f"{meta['unparseable_years']} companies have no usable founding year and drop out of a year filter.")

    st.markdown("---")
    with st.expander("Advanced settings", expanded=False):
        dedupe_links = st.checkbox("Merge mutual mentions into one link", value=False)

filters = normalize_filters({"search_term": search_term, "filter_state": raw_state})
payload = session.view(filters, dedupe_links=dedupe_links)
filtered = pd.DataFrame(payload["rows"], columns=COLUMNS)
kpis = payload["kpis"]
highlighted = [n["id"] for n in payload["nodes"] if n["highlighted"]]

# ----- Page -----
render_page_header(
    "Indie Outdoors",
    "Home / Company Relationships",
    format_filter_summary(filters.search_term, filters.filter_state),
    export_df=filtered,
)

kpi_cols = st.columns(4)
kpi_cols[0].metric("Companies", f"{kpis['companies']}", delta=None if kpis["companies"] == kpis["total_companies"] else f"of {kpis['total_companies']}", delta_color="off")
kpi_cols[1].metric("Links", f"{kpis['links']}")
kpi_cols[2].metric("Sport groups", f"{kpis['groups']}")
kpi_cols[3].metric("Highlighted", f"{kpis['highlighted']}")

if filtered.empty:
    st.info("No companies match the current search and filters.")
    st.stop()

graph_col, detail_col = st.columns([3, 2])
with graph_col:
    with card("Network Graph", actions=f"zoom ×{payload['viewport']['zoom']:g}" if highlighted else None):
        st.vega_lite_chart(payload["charts"]["network"], use_container_width=True)
with detail_col:
    with card("Company Details"):
        companies = filtered[COMPANY].tolist()
        default_idx = companies.index(highlighted[0]) if highlighted else 0
        selected = st.selectbox("Company", options=companies, index=default_idx)
        render_company_details(compute_company_details(rows, selected))
    with card("Companies per Sport Focus"):
        st.vega_lite_chart(payload["charts"]["groups"], use_container_width=True)

with card("Companies"):
    st.dataframe(filtered, hide_index=True, use_container_width=True)
