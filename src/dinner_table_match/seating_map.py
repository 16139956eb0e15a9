"""Interactive seating map rendered with networkx and pyvis."""
from __future__ import annotations

import math
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx
from pyvis.network import Network

from .geo import CoordinateResolver, distance_miles
from .models import Guest
from .report import size_status
from .utils import group_by_table

PALETTE = [
    "#FFB347", "#77DD77", "#AEC6CF", "#C23B22", "#F49AC2", "#B39EB5",
    "#03C03C", "#779ECB", "#966FD6", "#FFD700", "#FF6961", "#CB99C9",
]
NEAR_MILES = 10.0
FAR_MILES = 25.0


def generate_seating_map(
    guests: Sequence[Guest],
    resolver: Optional[CoordinateResolver] = None,
    show_distances: bool = True,
    canvas_size: Tuple[int, int] = (1600, 1000),
) -> str:
    """
    Build an interactive seating map.

    Guests are drawn as dots coloured by table and seated on a circle around
    their table centre. Tablemates are joined by edges labelled with the
    distance between their home locations.

    Returns:
      HTML string with embedded network.
    """
    resolver = resolver or CoordinateResolver()
    tables = group_by_table(guests)
    width, height = canvas_size
    centers = _compute_table_centers(list(tables), width, height)
    colors = {label: PALETTE[i % len(PALETTE)] for i, label in enumerate(tables)}

    G = nx.Graph()
    for label, members in tables.items():
        cx, cy = centers[label]
        seats = _circle_layout(cx, cy, 60 + 6 * len(members), len(members))
        status = size_status(len(members))
        for guest, (x, y) in zip(members, seats):
            G.add_node(
                guest.key,
                label=guest.name,
                title=_node_tooltip(guest, status),
                color=colors[label],
                x=x,
                y=y,
                physics=False,
                borderWidth=4 if status != "valid" else 2,
                shape="dot",
                size=18,
            )

        if not show_distances:
            continue
        for a, b in combinations(members, 2):
            miles = distance_miles(resolver.resolve(a.location), resolver.resolve(b.location))
            G.add_edge(
                a.key,
                b.key,
                color=_edge_color(miles),
                weight=1 if miles >= FAR_MILES else 2,
                label=f"{miles:.1f} mi",
            )

    net = Network(height="700px", width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)
    net.from_nx(G)
    return net.generate_html()


def _compute_table_centers(tables: List[str], width: int, height: int) -> Dict[str, Tuple[int, int]]:
    """Lay table centres out row by row on a square-ish grid."""
    if not tables:
        return {}
    cols = max(1, math.ceil(math.sqrt(len(tables))))
    rows = math.ceil(len(tables) / cols)
    margin = 120
    step_x = max(1, width - 2 * margin) // cols
    step_y = max(1, height - 2 * margin) // rows
    return {
        label: (margin + (i % cols) * step_x + step_x // 2, margin + (i // cols) * step_y + step_y // 2)
        for i, label in enumerate(tables)
    }


def _circle_layout(cx: int, cy: int, r: int, n: int) -> List[Tuple[int, int]]:
    return [
        (int(cx + r * math.cos(2 * math.pi * i / n)), int(cy + r * math.sin(2 * math.pi * i / n)))
        for i in range(n)
    ]


def _edge_color(miles: float) -> str:
    if miles < NEAR_MILES:
        return "#3CB371"  # near: green
    if miles > FAR_MILES:
        return "#FF6B6B"  # far: red
    return "#A9A9A9"


def _node_tooltip(guest: Guest, status: str) -> str:
    return (
        f"<b>{guest.name}</b><br>"
        f"Table: {guest.table} ({status})<br>"
        f"Age: {guest.age}<br>"
        f"Location: {guest.location or 'n/a'}"
    )
