"""
Tests for Dashboard Payloads
============================
"""

from core.dashboard import compute_company_details, compute_dashboard, compute_filter_options, format_filter_summary
from core.filters import DashboardFilters, normalize_filters


class TestComputeDashboard:
    """Tests for the page payload."""

    def test_full_view(self, companies):
        payload = compute_dashboard(DashboardFilters(), companies)
        assert payload["kpis"] == {"companies": 4, "total_companies": 4, "links": 2, "groups": 4, "highlighted": 0}
        assert [r["Company"] for r in payload["rows"]] == ["Acme Outdoors", "Beta Gear", "Gamma Paddle", "Delta Trails"]
        assert {n["id"]: n["degree"] for n in payload["nodes"]}["Beta Gear"] == 2
        assert set(payload["charts"]) == {"network", "groups"}
        assert payload["viewport"]["zoom"] == 1.0

    def test_search_highlights_and_focuses(self, companies):
        payload = compute_dashboard(normalize_filters({"search_term": "Acme"}), companies)
        assert payload["kpis"]["companies"] == 1
        assert payload["kpis"]["highlighted"] == 1
        node = payload["nodes"][0]
        assert node["highlighted"]
        assert (payload["viewport"]["center_x"], payload["viewport"]["center_y"]) == (node["x"], node["y"])

    def test_filters_are_echoed(self, companies):
        filters = normalize_filters({"filter_state": {"Year Founded": [1990, 2000]}})
        payload = compute_dashboard(filters, companies)
        assert payload["filters"]["filter_state"] == {"Year Founded": (1990, 2000)}
        assert payload["kpis"]["companies"] == 2

    def test_empty_result_has_no_charts(self, companies):
        payload = compute_dashboard(DashboardFilters(search_term="nothing matches"), companies)
        assert payload["nodes"] == []
        assert payload["links"] == []
        assert payload["charts"] == {}

    def test_dedupe_links(self, row_factory):
        rows = row_factory(
            [
                {"Company": "North", "Acquisition History": "Acquired by Parent"},
                {"Company": "Parent", "Acquisition History": "Acquired North"},
            ]
        )
        assert compute_dashboard(DashboardFilters(), rows)["kpis"]["links"] == 2
        assert compute_dashboard(DashboardFilters(), rows, dedupe_links=True)["kpis"]["links"] == 1


class TestFilterOptions:
    """Tests for filter dropdown options."""

    def test_options_and_year_bounds(self, companies):
        meta = compute_filter_options(companies)
        assert meta["options"]["Ownership Status"] == ["Private", "Public"]
        assert meta["options"]["Main Sport Focus"][0] == "Climbing, Hiking"
        assert meta["year_bounds"] == [1985, 2000]
        assert meta["unparseable_years"] == 1

    def test_no_years(self, row_factory):
        meta = compute_filter_options(row_factory([{"Company": "A"}]))
        assert meta["year_bounds"] is None
        assert meta["options"]["Headquarters"] == []


class TestCompanyDetails:
    """Tests for the detail panel."""

    def test_mentions_both_ways(self, companies):
        details = compute_company_details(companies, "Beta Gear")
        assert details["fields"]["Headquarters"] == "Denver, Colorado"
        assert details["year_founded"] == 2000
        assert details["mentions"] == ["Acme Outdoors"]
        assert details["mentioned_by"] == ["Gamma Paddle"]

    def test_unknown_company(self, companies):
        assert compute_company_details(companies, "Nobody") is None


class TestFilterSummary:
    """Tests for the header chip row."""

    def test_nothing_active(self):
        html_out = format_filter_summary("", {})
        assert "Search: none" in html_out
        assert "Filters: none" in html_out

    def test_year_range_and_exact_match(self):
        html_out = format_filter_summary("acme", {"Year Founded": (1990, 2000), "Ownership Status": "Private"})
        assert "Search: acme" in html_out
        assert "Year Founded: 1990–2000" in html_out
        assert "Ownership Status: Private" in html_out
        assert "Filters: none" not in html_out

    def test_markup_in_values_is_escaped(self):
        html_out = format_filter_summary("<b", {"Headquarters": "<i>x</i>"})
        assert "Search: &lt;b" in html_out
        assert "Headquarters: &lt;i&gt;x&lt;/i&gt;" in html_out
        assert "<b" not in html_out
        assert "<i>" not in html_out
        assert html_out.count("<span class='chip'>") == 2
