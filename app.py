"""Streamlit UI for Seat Maker with guest list preview and table layouts."""
from __future__ import annotations

# Add src to sys.path so seat_maker can be found
import sys
import os
import io
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import random

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from seat_maker.arrangement import build_tables, export_csv, export_summary, shuffle_seats
from seat_maker.assignment import distribute
from seat_maker.csv_loader import guests_from_names, load_guests
from seat_maker.layout_map import generate_layout_map
from seat_maker.models import (
    AssignmentMode,
    GroupConstraint,
    SeatLabels,
    SeatingSettings,
    ShapeRotation,
    TableShape,
)

# -----------------------------
# Helpers
# -----------------------------

def uploadedfile_to_buffer(uploaded_file) -> io.StringIO | None:
    """Read a Streamlit UploadedFile into a CSV buffer positioned at start."""
    if uploaded_file is None:
        return None
    uploaded_file.seek(0)
    return io.StringIO(uploaded_file.read().decode("utf-8"))


def tables_to_df(tables) -> pd.DataFrame:
    """One row per table with its guests in seat order."""
    return pd.DataFrame(
        {
            "table": [t.title for t in tables],
            "shape": [t.shape.value for t in tables],
            "people": [len(t.guests) for t in tables],
            "guests": [", ".join(g.name for g in t.ordered_guests()) for t in tables],
        }
    )

# -----------------------------
# Sidebar options
# -----------------------------

st.sidebar.header("Seating Options")
people_per_table = st.sidebar.number_input(
    "People per table",
    min_value=1,
    max_value=20,
    value=8,
    help="Target number of guests at each table. Tables never seat more than 20.",
)
manual_tables = st.sidebar.checkbox(
    "Set number of tables",
    value=False,
    help="Use a fixed table count instead of computing it from people per table.",
)
manual_table_count = st.sidebar.number_input(
    "Number of tables",
    min_value=1,
    max_value=200,
    value=1,
    disabled=not manual_tables,
)
group_constraint = st.sidebar.selectbox(
    "Groups",
    options=[c.value for c in GroupConstraint],
    format_func=lambda v: v.replace("_", " ").capitalize(),
    help="Keep guests of the same group at one table, or spread them out.",
)
assignment_mode = st.sidebar.selectbox(
    "Assignment",
    options=[m.value for m in AssignmentMode],
    index=1,
    format_func=lambda v: v.replace("_", " ").capitalize(),
    help="Fill tables one by one, or deal guests round the tables.",
)
shapes = st.sidebar.multiselect(
    "Table shapes",
    options=[s.value for s in TableShape],
    default=["round"],
)
cycle_shapes = st.sidebar.checkbox("Cycle shapes across tables", value=False)
alphabetic = st.sidebar.checkbox("Letter seats A..N", value=False)
seed = st.sidebar.number_input("Shuffle seed (0 = random)", min_value=0, value=0)

settings = SeatingSettings(
    people_per_table=int(people_per_table),
    manual_table_count_enabled=manual_tables,
    manual_table_count=int(manual_table_count),
    group_constraint=GroupConstraint(group_constraint),
    assignment_mode=AssignmentMode(assignment_mode),
    shapes=[TableShape(s) for s in shapes],
    rotation=ShapeRotation.CYCLE if cycle_shapes else ShapeRotation.STATIC,
    seat_labels=SeatLabels.ALPHABETIC if alphabetic else SeatLabels.NUMERIC,
)

# -----------------------------
# Main UI and previews
# -----------------------------

st.title("Seat Maker")

event_title = st.text_input("Event title", value="")
_guests_file = st.file_uploader("Guest list CSV", type="csv")
pasted = st.text_area("Or paste names, one per line", value="")

guests = []
try:
    if _guests_file is not None:
        guests = load_guests(uploadedfile_to_buffer(_guests_file))
    elif pasted.strip():
        guests = guests_from_names(pasted.splitlines())
except ValueError as e:
    st.error(f"Input validation error: {e}")
    st.stop()

if guests:
    st.subheader("Guests preview")
    st.dataframe(
        pd.DataFrame(
            {
                "name": [g.name for g in guests],
                "vip": [g.is_vip for g in guests],
                "group": [g.group or "" for g in guests],
                "tags": [", ".join(g.tags) for g in guests],
            }
        ),
        use_container_width=True,
    )

# -----------------------------
# Run buttons
# -----------------------------

col_assign, col_shuffle = st.columns(2)
assign_clicked = col_assign.button("Assign tables", disabled=not guests, key="assign_button")
shuffle_clicked = col_shuffle.button(
    "Shuffle seats", disabled="tables" not in st.session_state, key="shuffle_button"
)

rng = random.Random(int(seed)) if seed else random.Random()

try:
    if assign_clicked and guests:
        distribution = distribute(guests, settings, rng=rng)
        st.session_state["tables"] = build_tables(distribution, settings, event_title or None)
        st.session_state["dropped"] = distribution.dropped
    elif shuffle_clicked:
        st.session_state["tables"] = [shuffle_seats(t, rng=rng) for t in st.session_state["tables"]]
except Exception as e:
    st.exception(e)
    st.stop()

# -----------------------------
# Results
# -----------------------------

tables = st.session_state.get("tables")
if tables:
    dropped = st.session_state.get("dropped", [])
    if dropped:
        st.warning(
            f"{len(dropped)} guests did not fit: " + ", ".join(g.name for g in dropped)
        )

    st.subheader("Guests per table")
    st.dataframe(tables_to_df(tables), use_container_width=True)

    st.download_button(
        "Download assignments as CSV",
        export_csv(tables).encode("utf-8"),
        file_name="assignments.csv",
    )
    st.download_button(
        "Download summary",
        export_summary(tables, event_title or None).encode("utf-8"),
        file_name="seating.txt",
    )

    st.subheader("Seating Map")
    html = generate_layout_map(tables, labels=settings.seat_labels)
    components.html(html, height=720, scrolling=True)
