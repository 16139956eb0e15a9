"""Streamlit admin page for DinnerTableMatch: RSVPs, table assignment and seating map."""
from __future__ import annotations

# Add src to sys.path so dinner_table_match can be found
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from datetime import datetime, timezone

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from dinner_table_match.csv_loader import (
    guests_to_frame,
    load_coordinates,
    load_guests,
    merge_guest_lists,
)
from dinner_table_match.geo import CoordinateResolver
from dinner_table_match.models import Guest
from dinner_table_match.report import summarize_tables, table_description, table_report
from dinner_table_match.seating_map import generate_seating_map
from dinner_table_match.solver import SeatingModel

# -----------------------------
# State
# -----------------------------

if "guests" not in st.session_state:
    st.session_state.guests = []
if "last_guest" not in st.session_state:
    st.session_state.last_guest = None


def current_resolver(coordinates_file) -> CoordinateResolver:
    """Resolver over the uploaded coordinates, or the built-in registry."""
    if coordinates_file is None:
        return CoordinateResolver()
    coordinates_file.seek(0)
    return CoordinateResolver(load_coordinates(coordinates_file))


# -----------------------------
# Sidebar
# -----------------------------

st.sidebar.header("Guest list")
_guests_file = st.sidebar.file_uploader("Guests CSV", type="csv")
_coordinates_file = st.sidebar.file_uploader("Coordinates CSV", type="csv")
if _guests_file is not None and st.sidebar.button("Load guests"):
    try:
        st.session_state.guests = merge_guest_lists(st.session_state.guests, load_guests(_guests_file))
    except ValueError as e:
        st.sidebar.error(f"Input validation error: {e}")

try:
    resolver = current_resolver(_coordinates_file)
except ValueError as e:
    st.sidebar.error(f"Input validation error: {e}")
    resolver = CoordinateResolver()
model = SeatingModel(resolver=resolver)

# -----------------------------
# RSVP form
# -----------------------------

st.title("Weekly Dinner RSVP")

with st.form("rsvp"):
    name = st.text_input("Full Name")
    age = st.number_input("Age", min_value=18, max_value=120, value=30, step=1)
    location = st.text_input("Location", placeholder="Phoenix, AZ")
    submitted = st.form_submit_button("Submit RSVP")

if submitted:
    if not name.strip():
        st.error("Please enter a name.")
    else:
        new_guest = Guest(
            name=name.strip(),
            age=int(age),
            location=location.strip(),
            submitted_at=datetime.now(timezone.utc).isoformat(),
        )
        seated = model.assign_incoming(new_guest, st.session_state.guests)
        st.session_state.guests = merge_guest_lists(st.session_state.guests, [seated])
        st.session_state.last_guest = seated

if st.session_state.last_guest is not None:
    seated = st.session_state.last_guest
    st.success(
        f"Thanks {seated.name}! You are seated at {seated.table} "
        f"({table_description(st.session_state.guests, seated.table)})."
    )

for d in resolver.diagnostics:
    st.warning(d.message)

# -----------------------------
# Admin view
# -----------------------------

guests = st.session_state.guests
st.header("All RSVPs")

if not guests:
    st.info("No RSVPs yet.")
    st.stop()

summary = summarize_tables(guests)
c1, c2, c3, c4 = st.columns(4)
c1.metric("Guests", len(guests))
c2.metric("Valid tables", f"{summary['valid_tables']}/{summary['total_tables']}")
c3.metric("Small tables", summary["small_tables"])
c4.metric("Large tables", summary["large_tables"])
if summary["not_enough_guests"]:
    st.warning("Fewer than 4 guests: tables cannot be valid yet.")
elif not summary["all_valid"]:
    st.warning("Some tables are outside the 4 to 6 guest range.")

if st.button("Reassign all tables", disabled=len(guests) < model.min_guests,
             help=f"Needs at least {model.min_guests} RSVPs."):
    result = model.reoptimize_all(guests)
    if result.accepted:
        st.session_state.guests = result.guests
        guests = result.guests
        st.success(f"Tables reassigned after {result.passes} passes and {result.swaps} swaps.")
    for d in result.diagnostics:
        if result.accepted:
            st.warning(d.message)
        else:
            st.error(d.message)

guests_df = guests_to_frame(guests).sort_values(["table", "name"]).reset_index(drop=True)
st.subheader("Guests")
st.dataframe(guests_df, use_container_width=True)
st.download_button(
    "Download guests as CSV",
    guests_df.to_csv(index=False).encode("utf-8"),
    file_name="guests.csv",
)

st.subheader("Tables")
st.dataframe(pd.DataFrame(table_report(guests, resolver)), use_container_width=True)

st.subheader("Seating Map")
components.html(generate_seating_map(guests, resolver), height=720, scrolling=True)
