"""Interactive seating map rendered with pyvis."""
from __future__ import annotations

import math
from typing import List, Tuple

import networkx as nx
from pyvis.network import Network

from .arrangement import SeatedTable, layout_table
from .models import SeatLabels

_PALETTE = [
    "#FFB347", "#77DD77", "#AEC6CF", "#C23B22", "#F49AC2", "#B39EB5",
    "#03C03C", "#779ECB", "#966FD6", "#FFD700", "#FF6961", "#CB99C9",
    "#CFCFC4", "#FDFD96", "#84B6F4", "#FDCAE1",
]


# ---------------------------
# Public API
# ---------------------------

def generate_layout_map(
    tables: List[SeatedTable],
    canvas_size: Tuple[int, int] = (1600, 1000),
    icon_size: float = 18,
    labels: SeatLabels = SeatLabels.NUMERIC,
    show_seat_labels: bool = True,
) -> str:
    """
    Build an interactive seating map.

    Tables are placed on a grid over the canvas. Each table's seats come
    from the geometry engine, laid out inside its grid cell, and the seats
    of a table are joined in a ring in seat order.

    Returns:
      HTML string with embedded network.
    """
    width, height = canvas_size
    cells = compute_table_cells(len(tables), width, height)
    graph = build_layout_graph(tables, cells, icon_size, labels, show_seat_labels)

    net = Network(height="700px", width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions are fixed
    net.from_nx(graph)
    return _inject_legend_html(net.generate_html())


def build_layout_graph(
    tables: List[SeatedTable],
    cells: List[Tuple[int, int, int, int]],
    icon_size: float,
    labels: SeatLabels = SeatLabels.NUMERIC,
    show_seat_labels: bool = True,
) -> nx.Graph:
    """Graph with one node per seated guest, fixed at its seat position."""
    G = nx.Graph()
    for t_idx, (table, cell) in enumerate(zip(tables, cells)):
        left, top, cell_w, cell_h = cell
        color = _PALETTE[t_idx % len(_PALETTE)]
        seated = layout_table(table, (cell_w, cell_h), icon_size, labels)
        ring: List[str] = []
        for guest, pos, label in seated:
            node_id = f"{t_idx}:{guest.id}"
            text = f"{label}. {guest.name}" if show_seat_labels else guest.name
            G.add_node(
                node_id,
                label=text,
                title=_node_tooltip(guest.name, table.title, label, guest.is_vip, guest.group),
                color=color,
                x=left + pos.x,
                y=top + pos.y,
                physics=False,
                borderWidth=4 if guest.is_vip else 2,
                shape="dot",
                size=icon_size / 2,
            )
            ring.append(node_id)
        if len(ring) > 1:
            for a, b in zip(ring, ring[1:] + ring[:1]):
                if a != b and not G.has_edge(a, b):
                    G.add_edge(a, b, color="#A9A9A9", width=1)
    return G


def compute_table_cells(count: int, width: int, height: int) -> List[Tuple[int, int, int, int]]:
    """
    Split the canvas into a near-square grid, one ``(left, top, w, h)`` cell per table.
    """
    if count <= 0:
        return []
    cols = max(1, int(math.ceil(math.sqrt(count))))
    rows = int(math.ceil(count / cols))
    step_x = max(1, width // cols)
    step_y = max(1, height // rows)
    cells = []
    for idx in range(count):
        r, c = divmod(idx, cols)
        cells.append((c * step_x, r * step_y, step_x, step_y))
    return cells


# ---------------------------
# Internals
# ---------------------------

def _node_tooltip(name: str, table: str, seat: str, vip: bool, group: str | None) -> str:
    return (
        f"<b>{name}</b><br>"
        f"Table: {table}<br>"
        f"Seat: {seat}<br>"
        f"VIP: {'Yes' if vip else 'No'}<br>"
        f"Group: {group or 'n/a'}"
    )


def _inject_legend_html(html: str) -> str:
    legend = """
    <style>
    .legend-box{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }
    </style>
    <div class="legend-box">
      <div>node color: table</div>
      <div>thick border: VIP</div>
      <div>ring: seat order</div>
    </div>
    """
    if "</body>" in html:
        return html.replace("</body>", legend + "</body>", 1)
    return html + legend
