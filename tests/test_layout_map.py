import pathlib
import sys

# Ensure src package is on path
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1] / "src"))

from seat_maker.arrangement import SeatedTable
from seat_maker.layout_map import build_layout_graph, compute_table_cells, generate_layout_map
from seat_maker.models import Guest, TableShape


def _tables():
    out = []
    for t, shape in enumerate([TableShape.ROUND, TableShape.SQUARE, TableShape.RECTANGLE]):
        guests = [Guest(name=f"T{t}G{i}", id=f"t{t}g{i}", is_vip=i == 0) for i in range(4)]
        out.append(SeatedTable(
            title=f"Table {t + 1}",
            shape=shape,
            guests=guests,
            seat_assignments={g.id: i for i, g in enumerate(guests)},
        ))
    out.append(SeatedTable(title="Table 4", shape=TableShape.ROUND))
    return out


def test_cells_cover_grid():
    cells = compute_table_cells(5, 1500, 1000)
    assert len(cells) == 5
    assert cells[0] == (0, 0, 500, 500)
    assert cells[4] == (500, 500, 500, 500)
    assert compute_table_cells(0, 100, 100) == []


def test_graph_has_seat_nodes_inside_cells():
    tables = _tables()
    cells = compute_table_cells(len(tables), 1600, 1000)
    G = build_layout_graph(tables, cells, icon_size=18)
    assert G.number_of_nodes() == 12
    # each table of four is a ring
    assert G.number_of_edges() == 12
    for node, data in G.nodes(data=True):
        t_idx = int(node.split(":")[0])
        left, top, w, h = cells[t_idx]
        assert left <= data["x"] <= left + w
        assert top <= data["y"] <= top + h
    assert G.nodes["0:t0g0"]["borderWidth"] == 4
    assert G.nodes["0:t0g0"]["label"] == "1. T0G0"


def test_map_html_contains_guests():
    html = generate_layout_map(_tables())
    assert "T1G2" in html
    assert "legend-box" in html
