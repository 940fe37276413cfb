from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

from core.graph import Link, Node
from core.layout import CANVAS_HEIGHT, CANVAS_WIDTH, Position, Viewport

alt.data_transformers.disable_max_rows()

HIGHLIGHT_COLOR = "#C75C2C"
LINK_COLOR = "#9ca3af"
NODE_SIZE = 120
HIGHLIGHT_NODE_SIZE = 420


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def node_frame(nodes: List[Node], positions: Dict[str, Position], highlighted: List[str]) -> pd.DataFrame:
    hl = set(highlighted)
    records = [
        {
            "id": n.id,
            "group": n.group,
            "x": positions.get(n.id, (0.0, 0.0))[0],
            "y": positions.get(n.id, (0.0, 0.0))[1],
            "highlighted": n.id in hl,
        }
        for n in nodes
    ]
    return pd.DataFrame(records, columns=["id", "group", "x", "y", "highlighted"])


def link_frame(links: List[Link], positions: Dict[str, Position]) -> pd.DataFrame:
    records = []
    for link in links:
        if link.source not in positions or link.target not in positions:
            continue
        (x, y), (x2, y2) = positions[link.source], positions[link.target]
        records.append({"source": link.source, "target": link.target, "x": x, "y": y, "x2": x2, "y2": y2})
    return pd.DataFrame(records, columns=["source", "target", "x", "y", "x2", "y2"])


def build_network_chart(
    nodes: List[Node],
    links: List[Link],
    positions: Dict[str, Position],
    highlighted: List[str],
    viewport: Viewport,
    *,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> alt.LayerChart:
    nodes_df = node_frame(nodes, positions, highlighted)
    links_df = link_frame(links, positions)

    x_scale = alt.Scale(domain=list(viewport.x_domain), nice=False, zero=False)
    y_scale = alt.Scale(domain=list(viewport.y_domain), nice=False, zero=False, reverse=True)
    x_enc = alt.X("x:Q", scale=x_scale, axis=None)
    y_enc = alt.Y("y:Q", scale=y_scale, axis=None)

    edges = (
        alt.Chart(links_df)
        .mark_rule(color=LINK_COLOR, opacity=0.6, strokeWidth=1.2)
        .encode(
            x=x_enc,
            y=y_enc,
            x2="x2:Q",
            y2="y2:Q",
            tooltip=[alt.Tooltip("source:N", title="Mentioned"), alt.Tooltip("target:N", title="In history of")],
        )
    )

    circles = (
        alt.Chart(nodes_df)
        .mark_circle(opacity=0.9, stroke="#ffffff", strokeWidth=1)
        .encode(
            x=x_enc,
            y=y_enc,
            size=alt.condition("datum.highlighted", alt.value(HIGHLIGHT_NODE_SIZE), alt.value(NODE_SIZE)),
            color=alt.condition("datum.highlighted", alt.value(HIGHLIGHT_COLOR), alt.Color("group:N", title="Sport Focus")),
            tooltip=[alt.Tooltip("id:N", title="Company"), alt.Tooltip("group:N", title="Group")],
        )
    )

    labels = (
        alt.Chart(nodes_df)
        .transform_filter("!datum.highlighted")
        .mark_text(align="left", dx=8, fontSize=10, color="#374151")
        .encode(x=x_enc, y=y_enc, text="id:N")
    )
    bold_labels = (
        alt.Chart(nodes_df)
        .transform_filter("datum.highlighted")
        .mark_text(align="left", dx=10, fontSize=13, fontWeight="bold", color="#111827")
        .encode(x=x_enc, y=y_enc, text="id:N")
    )

    return (
        alt.layer(edges, circles, labels, bold_labels)
        .properties(width=width, height=height)
        .interactive()
    )


def build_group_chart(nodes: List[Node]) -> alt.Chart:
    counts = (
        pd.Series([n.group or "(none)" for n in nodes], dtype=object)
        .value_counts()
        .rename_axis("group")
        .reset_index(name="companies")
    )
    return (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            x=alt.X("companies:Q", title="Companies", axis=alt.Axis(format="d", tickMinStep=1)),
            y=alt.Y("group:N", title="Main Sport Focus", sort="-x"),
            tooltip=["group", "companies"],
        )
        .properties(height=max(120, 24 * len(counts)))
    )
