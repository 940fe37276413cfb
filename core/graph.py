"""Relationship graph derived from the filtered company rows.

A link ``source -> target`` means the target's Acquisition History mentions the
source company by name. Matching is a plain case-sensitive substring test, so a
company whose name is contained in another name (``"Arc"`` in ``"Arc'teryx"``)
links wherever the longer name is mentioned. Links are drawn undirected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import networkx as nx
import pandas as pd

from core.data import ACQUISITION_HISTORY, COMPANY, MAIN_SPORT_FOCUS


@dataclass(frozen=True)
class Node:
    id: str
    group: str


@dataclass(frozen=True)
class Link:
    source: str
    target: str


def primary_group(sport_focus: object) -> str:
    """Text before the first comma of Main Sport Focus, trimmed."""
    return str(sport_focus or "").split(",", 1)[0].strip()


def derive_nodes(rows: pd.DataFrame) -> List[Node]:
    return [Node(id=str(company), group=primary_group(focus)) for company, focus in zip(rows[COMPANY], rows[MAIN_SPORT_FOCUS])]


def derive_links(rows: pd.DataFrame, *, dedupe: bool = False) -> List[Link]:
    companies = [str(c) for c in rows[COMPANY]]
    histories = [str(h) for h in rows[ACQUISITION_HISTORY]]

    links: List[Link] = []
    seen = set()
    for i, source in enumerate(companies):
        if not source:
            continue
        for j, target in enumerate(companies):
            if i == j or source not in histories[j]:
                continue
            if dedupe:
                pair = frozenset((source, target))
                if pair in seen:
                    continue
                seen.add(pair)
            links.append(Link(source=source, target=target))
    return links


def derive_graph(rows: pd.DataFrame, *, dedupe: bool = False) -> Tuple[List[Node], List[Link]]:
    return derive_nodes(rows), derive_links(rows, dedupe=dedupe)


def to_networkx(nodes: List[Node], links: List[Link]) -> nx.Graph:
    graph = nx.Graph()
    for node in nodes:
        graph.add_node(node.id, group=node.group)
    for link in links:
        graph.add_edge(link.source, link.target)
    return graph
