# app.py

import os
import logging
from dotenv import load_dotenv

load_dotenv()  # ← Must precede any import depending on .env

import streamlit as st

from core.ics_export import CalendarRangeError, export_ics, ics_filename
from core.models import Itinerary
from services import planner

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

# ──────────────────────────────────────────────────────────────────────────────
# 0. Streamlit configuration
# ──────────────────────────────────────────────────────────────────────────────
st.set_page_config(page_title="AI Trip Planner", layout="centered")

# ──────────────────────────────────────────────────────────────────────────────
# 1. session_state initialisation (default values)
# ──────────────────────────────────────────────────────────────────────────────
defaults = {
    "itinerary": None,       # Itinerary dataclass of the last successful run
    "prefs": None,           # TripPreferences used for that run
    "error_message": "",
    "destination": "",
    "duration": 7,
    "budget": 50000,
    "interest_tags": [],
    "interests_text": "",
}
for k, v in defaults.items():
    st.session_state.setdefault(k, v)

st.markdown("# AI Trip Planner")
st.markdown(
    "Generate personalized itineraries tailored to your budget, "
    "interests, and travel style"
)

# ──────────────────────────────────────────────────────────────────────────────
# 2. Quick start with popular destinations
# ──────────────────────────────────────────────────────────────────────────────
st.caption("Quick start with popular destinations:")
cols = st.columns(len(planner.QUICK_STARTS))
for col, name in zip(cols, planner.QUICK_STARTS):
    if col.button(name, key=f"qs_{name}"):
        preset = planner.quick_start(name)
        st.session_state.destination = preset["destination"]
        st.session_state.interest_tags = preset["interests"]
        st.session_state.budget = preset["budget"]
        st.session_state.duration = preset["duration"]
        st.rerun()

# ──────────────────────────────────────────────────────────────────────────────
# 3. Input form
# ──────────────────────────────────────────────────────────────────────────────
with st.form("trip_form"):
    c1, c2 = st.columns(2)
    destination = c1.text_input("Destination", placeholder="e.g., Goa, India", key="destination")
    duration = c2.number_input("Duration (days)", min_value=1, max_value=30, step=1, key="duration")

    budget = st.slider("Budget (INR)", min_value=1000, max_value=200000, step=500, key="budget")

    tags = st.multiselect("Interests & Preferences", planner.INTEREST_TAGS, key="interest_tags")
    typed = st.text_input(
        "More interests",
        placeholder="Add more interests (comma-separated)",
        key="interests_text",
    )

    c3, c4 = st.columns(2)
    language = c3.selectbox("Language", planner.LANGUAGES)
    start_date = c4.date_input("Start Date", value=None)

    c5, c6, c7 = st.columns(3)
    pace = c5.radio("Pace", planner.PACES, index=1, horizontal=True, format_func=str.title)
    travel_mode = c6.selectbox(
        "Travel Mode",
        ["mixed", "walk", "public", "car"],
        format_func={
            "mixed": "Mixed",
            "walk": "Walk First",
            "public": "Public Transport",
            "car": "Car/Taxi",
        }.get,
    )
    dietary = c7.text_input("Dietary", placeholder="e.g., vegetarian, vegan, halal")

    submitted = st.form_submit_button("Generate Itinerary")

# ──────────────────────────────────────────────────────────────────────────────
# 4. On form submission
# ──────────────────────────────────────────────────────────────────────────────
if submitted:
    st.session_state.itinerary = None
    try:
        prefs = planner.validate_preferences(
            {
                "destination": destination,
                "duration": duration,
                "budget": budget,
                "interests": planner.merge_interests(tags, typed),
                "language": language,
                "startDate": start_date,
                "pace": pace,
                "travelMode": travel_mode,
                "dietary": dietary,
            }
        )
        with st.spinner("Planning Your Trip..."):
            st.session_state.itinerary = planner.plan_trip(prefs)
        st.session_state.prefs = prefs
        st.session_state.error_message = ""
    except Exception as e:
        st.session_state.error_message = str(e) or "Unexpected error"

# ──────────────────────────────────────────────────────────────────────────────
# 5. Display error message if needed
# ──────────────────────────────────────────────────────────────────────────────
if st.session_state.error_message:
    st.error(f"**Error:** {st.session_state.error_message}")

# ──────────────────────────────────────────────────────────────────────────────
# 6. Itinerary + exports
# ──────────────────────────────────────────────────────────────────────────────
itin: Itinerary = st.session_state.itinerary
if itin:
    summary = itin.summary
    st.subheader(f"Your Trip to {summary.destination}")
    st.write(
        f"**Duration:** {summary.duration} days · "
        f"**Estimated Cost:** ₹{summary.total_estimated_cost:,.0f}"
    )

    # The start date is read from the form as it is now, so it can be set
    # after the itinerary was generated.
    try:
        ics = export_ics(itin, start_date)
    except CalendarRangeError as e:
        st.warning(f".ics export unavailable: {e}")
        ics = None
    b1, b2 = st.columns(2)
    b1.download_button(
        "Export .ics" + ("" if start_date else " (set start date)"),
        data=ics or "",
        file_name=ics_filename(),
        mime="text/calendar",
        disabled=ics is None,
    )
    b2.download_button(
        "Print view (Markdown)",
        data=planner.render_markdown(itin),
        file_name="itinerary.md",
        mime="text/markdown",
    )

    for day in itin.days:
        with st.expander(f"Day {day.day}: {day.theme}", expanded=True):
            for act in day.activities:
                left, right = st.columns([1, 4])
                left.markdown(f"**{act.time or ''}**")
                right.markdown(act.description)
                if act.location:
                    right.caption(f"📍 {act.location}")
                if act.cost:
                    right.caption(f"💰 ₹{act.cost:,.0f}")
