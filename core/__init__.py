"""Core (UI-agnostic) dashboard logic.

This package contains:
- data loading (CSV -> pandas)
- filter normalization and the row filter
- graph derivation (companies -> nodes, acquisition mentions -> links)
- force layout, highlight and focus helpers
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
