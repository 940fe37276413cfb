from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import networkx as nx
import numpy as np

from core.graph import Link, Node, to_networkx


CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600
CANVAS_MARGIN = 40
LAYOUT_SEED = 42
LAYOUT_ITERATIONS = 100
SINGLE_FOCUS_ZOOM = 1.5
MULTI_FOCUS_ZOOM = 2.0

Position = Tuple[float, float]


@dataclass(frozen=True)
class Viewport:
    center_x: float
    center_y: float
    zoom: float
    x_domain: Tuple[float, float]
    y_domain: Tuple[float, float]


def compute_layout(
    nodes: List[Node],
    links: List[Link],
    *,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    seed: int = LAYOUT_SEED,
    iterations: int = LAYOUT_ITERATIONS,
) -> Dict[str, Position]:
    """Force-directed positions in canvas pixels, centered on the canvas midpoint."""
    if not nodes:
        return {}
    graph = to_networkx(nodes, links)
    scale = max(1.0, min(width, height) / 2 - CANVAS_MARGIN)
    center = (width / 2, height / 2)
    if graph.number_of_nodes() == 1:
        return {nodes[0].id: (float(center[0]), float(center[1]))}
    pos = nx.spring_layout(graph, seed=seed, iterations=iterations, scale=scale, center=center)
    return {str(n): (float(xy[0]), float(xy[1])) for n, xy in pos.items()}


def is_highlighted(node_id: str, search_term: str) -> bool:
    if not search_term:
        return False
    return search_term.lower() in str(node_id).lower()


def highlighted_ids(nodes: Iterable[Node], search_term: str) -> List[str]:
    return [n.id for n in nodes if is_highlighted(n.id, search_term)]


def focus_viewport(
    positions: Dict[str, Position],
    highlighted: List[str],
    *,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> Viewport:
    """Visible domain of the network chart.

    With no highlighted node the whole canvas is shown. Otherwise the view is
    centered on the centroid of the highlighted positions and zoomed in, further
    when several nodes are highlighted.
    """
    points = [positions[h] for h in highlighted if h in positions]
    if not points:
        cx, cy, zoom = width / 2, height / 2, 1.0
    else:
        cx, cy = (float(v) for v in np.mean(np.array(points), axis=0))
        zoom = MULTI_FOCUS_ZOOM if len(points) > 1 else SINGLE_FOCUS_ZOOM

    half_w = width / (2 * zoom)
    half_h = height / (2 * zoom)
    return Viewport(
        center_x=cx,
        center_y=cy,
        zoom=zoom,
        x_domain=(cx - half_w, cx + half_w),
        y_domain=(cy - half_h, cy + half_h),
    )
