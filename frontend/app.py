"""Chisa - Streamlit Farmer Assistant.

Thin client for the Chisa backend. All prompt building and upstream calls
live in the FastAPI service. This file handles:
  - Page navigation and the language selector (st.session_state)
  - Image upload and downscaling before it is sent
  - Stat-chip rendering over the returned markdown
  - Client-local activity history and the dashboard summary
"""

import json
import os
import time
from datetime import datetime

import streamlit as st

from frontend.client import ApiError, AssistantClient
from frontend.dashboard import crop_health, daily_forecast, latest_activity, summarize_current
from frontend.history import History
from frontend.i18n import DEFAULT_LANGUAGE, LANGUAGES, language_instruction
from frontend.indicators import (
    PLANT_INDICATORS,
    PROGRESSION,
    SEVERITY,
    SOIL_INDICATORS,
    SOIL_TYPE,
    SPREAD_RISK,
    TONE_COLORS,
    Chip,
    classify_all,
)

# Config
API_URL = os.environ.get("API_URL", "http://localhost:3000")
DEFAULT_LAT = float(os.environ.get("DEFAULT_LAT", "12.9716"))
DEFAULT_LON = float(os.environ.get("DEFAULT_LON", "77.5946"))

PAGES = [
    "Dashboard",
    "AI Assistant",
    "Plant Vision",
    "Soil Analysis",
    "Crop Calendar",
    "Irrigation",
    "Natural Fertilizers",
    "Market Prices",
    "History",
]

# Page setup
st.set_page_config(
    page_title="Chisa - Farmer Assistant",
    layout="wide",
)

# Custom styles
st.markdown("""
<style>
    .stat-chip {
        display: inline-block;
        padding: 4px 12px;
        border-radius: 12px;
        font-size: 0.85rem;
        font-weight: 600;
        color: #fff;
    }
    .stat-title {
        font-size: 0.75rem;
        color: #6b7280;
        margin-bottom: 4px;
    }
    .status-badge {
        display: inline-block;
        padding: 2px 8px;
        border-radius: 12px;
        font-size: 0.75rem;
        font-weight: 600;
    }
    .status-ok { background: #d4edda; color: #155724; }
    .status-warn { background: #fff3cd; color: #856404; }
    .status-err { background: #f8d7da; color: #721c24; }
</style>
""", unsafe_allow_html=True)


def init_session():
    """Initialize session state on first load."""
    if "history" not in st.session_state:
        st.session_state.history = []
    if "messages" not in st.session_state:
        st.session_state.messages = []
    if "language" not in st.session_state:
        st.session_state.language = DEFAULT_LANGUAGE
    if "plant_report" not in st.session_state:
        st.session_state.plant_report = None


def get_client() -> AssistantClient:
    if "client" not in st.session_state:
        st.session_state.client = AssistantClient(API_URL)
    return st.session_state.client


def get_history() -> History:
    return History(st.session_state.history)


def lang() -> str:
    return language_instruction(st.session_state.language)


def render_chips(chips: dict[str, Chip]):
    """Row of stat cards, one per indicator."""
    columns = st.columns(len(chips))
    for column, (title, chip) in zip(columns, chips.items()):
        color = TONE_COLORS.get(chip.tone, TONE_COLORS["neutral"])
        column.markdown(
            f'<div class="stat-title">{title}</div>'
            f'<span class="stat-chip" style="background:{color}">{chip.label}</span>',
            unsafe_allow_html=True,
        )


def run_request(label: str, call):
    """Run a backend call under a status box; returns the markdown or None."""
    with st.status(f"[Chisa] {label}...", expanded=False) as status:
        start_time = time.monotonic()
        try:
            content = call()
        except ApiError as e:
            status.update(label="Request Failed", state="error")
            st.error(f"[ERROR] {e}")
            return None
        latency_ms = int((time.monotonic() - start_time) * 1000)
        status.update(label=f"[TIME] {latency_ms}ms", state="complete")
    return content


def render_sidebar():
    client = get_client()
    health = client.health()
    api_status = health.get("status", "unknown")

    with st.sidebar:
        st.title("Chisa")
        st.caption("AI assistant for farmers")

        if api_status == "healthy":
            st.markdown('<span class="status-badge status-ok">* API Healthy</span>', unsafe_allow_html=True)
        elif api_status == "degraded":
            st.markdown('<span class="status-badge status-warn">* API Degraded</span>', unsafe_allow_html=True)
            missing = [name for name, state in health.get("components", {}).items() if state != "ok"]
            if missing:
                st.caption("Not configured: " + ", ".join(missing))
        else:
            st.markdown('<span class="status-badge status-err">* API Offline</span>', unsafe_allow_html=True)

        if st.button("Check Connection", use_container_width=True):
            st.rerun()

        st.divider()
        codes = list(LANGUAGES)
        st.session_state.language = st.selectbox(
            "Language",
            codes,
            index=codes.index(st.session_state.language),
            format_func=lambda code: LANGUAGES[code][0],
        )

        st.divider()
        return st.radio("Navigate", PAGES, label_visibility="collapsed")


def page_dashboard():
    st.header("Dashboard")
    client = get_client()
    history = get_history()

    col_lat, col_lon = st.columns(2)
    lat = col_lat.number_input("Latitude", value=DEFAULT_LAT, format="%.4f")
    lon = col_lon.number_input("Longitude", value=DEFAULT_LON, format="%.4f")

    weather_col, health_col = st.columns([2, 1])
    with weather_col:
        st.subheader("Weather")
        try:
            current = summarize_current(client.get_weather(lat, lon))
            forecast = daily_forecast(client.get_forecast(lat, lon))
        except ApiError as e:
            st.error(f"[ERROR] {e}")
            current, forecast = None, []

        if current:
            a, b, c = st.columns(3)
            a.metric("Temperature", f"{current.temp_c}°C", current.description)
            b.metric("Wind", f"{current.wind_kmh} km/h")
            c.metric("Humidity", f"{current.humidity}%" if current.humidity is not None else "-")
        if forecast:
            for column, day in zip(st.columns(len(forecast)), forecast):
                column.image(day.icon_url, width=48)
                column.markdown(f"**{day.day}**  \n{day.temp_c}°C  \n{day.condition}")

    with health_col:
        st.subheader("Crop Health")
        health = crop_health(history)
        st.metric("Health Score", f"{health.score}%")
        st.progress(health.score / 100)
        st.markdown(f"Pest risk: **{health.pest_risk}**")

        st.subheader("Latest Activity")
        activity = latest_activity(history)
        if activity:
            title, text = activity
            st.markdown(f"**{title}**  \n{text}")
        else:
            st.caption("No activity yet.")


def page_chat():
    st.header("AI Assistant")
    client = get_client()

    for msg in st.session_state.messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    if user_input := st.chat_input("Ask about crops, pests, weather or mandi prices..."):
        st.session_state.messages.append({"role": "user", "content": user_input})
        with st.chat_message("user"):
            st.markdown(user_input)

        with st.chat_message("assistant"):
            answer = run_request("Thinking", lambda: client.ask_llm(user_input, lang_instruction=lang()))
            if answer is not None:
                st.markdown(answer)
                st.session_state.messages.append({"role": "assistant", "content": answer})
                get_history().add("chat", {"prompt": user_input, "snippet": answer[:120]})


def page_vision():
    st.header("Plant Vision")
    client = get_client()

    upload = st.file_uploader("Upload a leaf or plant photo", type=["jpg", "jpeg", "png", "webp"])
    if upload is None:
        return
    st.image(upload, width=320)

    if st.button("Analyze Plant", type="primary"):
        image = upload.getvalue()
        report = run_request("Analyzing plant", lambda: client.ask_vision(image, lang_instruction=lang()))
        if report is None:
            return
        chips = classify_all(report, PLANT_INDICATORS)
        healthy = SEVERITY.classify(report).label == "Healthy"
        st.session_state.plant_report = {
            "generated_at": datetime.now().isoformat(timespec="seconds"),
            "file_name": upload.name,
            "indicators": {title: chip.label for title, chip in chips.items()},
            "progression": PROGRESSION.classify(report).label,
            "spread_risk_percent": SPREAD_RISK.classify(report).percent,
            "report": report,
        }
        get_history().add("vision", {"health": "good" if healthy else "bad", "file_name": upload.name})

    report = st.session_state.plant_report
    if report:
        render_chips(classify_all(report["report"], PLANT_INDICATORS))

        progression = PROGRESSION.classify(report["report"])
        spread = SPREAD_RISK.classify(report["report"])
        left, right = st.columns(2)
        left.markdown(f"**Disease Progression:** {progression.label}")
        left.progress(progression.percent / 100)
        right.markdown(f"**Spread Risk:** {spread.label}")
        right.progress(spread.percent / 100)

        st.markdown(report["report"])
        st.download_button(
            "Download Report (JSON)",
            data=json.dumps(report, indent=2, ensure_ascii=False),
            file_name=f"plant_report_{int(time.time())}.json",
            mime="application/json",
        )


def page_soil():
    st.header("Soil Analysis")
    client = get_client()

    upload = st.file_uploader("Upload a soil photo", type=["jpg", "jpeg", "png", "webp"])
    if upload is None:
        return
    st.image(upload, width=320)

    if st.button("Analyze Soil", type="primary"):
        image = upload.getvalue()
        report = run_request("Analyzing soil", lambda: client.ask_soil_vision(image, lang_instruction=lang()))
        if report is None:
            return
        render_chips(classify_all(report, SOIL_INDICATORS))
        st.markdown(report)
        get_history().add("soil", {"soil_type": SOIL_TYPE.classify(report).label})


def page_calendar():
    st.header("Crop Calendar")
    client = get_client()

    with st.form("calendar"):
        crop = st.text_input("Crop", placeholder="e.g. Rice")
        location = st.text_input("Location", placeholder="India")
        season = st.selectbox("Season", ["", "Kharif", "Rabi", "Zaid"], format_func=lambda s: s or "Current season")
        submitted = st.form_submit_button("Generate Calendar", type="primary")

    if submitted:
        plan = run_request("Planning", lambda: client.ask_calendar(crop, location, season, lang_instruction=lang()))
        if plan is not None:
            st.markdown(plan)
            get_history().add("calendar", {"crop": crop, "location": location, "season": season})


def page_irrigation():
    st.header("Irrigation Management")
    client = get_client()

    with st.form("irrigation"):
        crop = st.text_input("Crop", placeholder="e.g. Wheat")
        growth_stage = st.selectbox(
            "Growth stage",
            ["", "Germination", "Vegetative", "Flowering", "Fruiting", "Maturity"],
            format_func=lambda s: s or "General",
        )
        climate = st.text_input("Climate / recent weather", placeholder="e.g. hot and dry")
        submitted = st.form_submit_button("Get Irrigation Plan", type="primary")

    if submitted:
        plan = run_request(
            "Planning",
            lambda: client.ask_irrigation(crop, growth_stage, climate, lang_instruction=lang()),
        )
        if plan is not None:
            st.markdown(plan)
            get_history().add("irrigation", {"crop": crop, "growth_stage": growth_stage})


def page_fertilizers():
    st.header("Natural Fertilizer Guide")
    client = get_client()

    with st.form("fertilizers"):
        crop = st.text_input("Crop", placeholder="e.g. Tomato")
        soil_type = st.text_input("Soil type", placeholder="e.g. Red loam")
        goal = st.text_input("Goal", placeholder="Improve yield and soil health")
        problem = st.text_area("Current problem (optional)")
        region = st.text_input("Region", placeholder="India")
        submitted = st.form_submit_button("Get Organic Plan", type="primary")

    if submitted:
        plan = run_request(
            "Planning",
            lambda: client.ask_natural_fertilizers(crop, soil_type, goal, problem, region, lang_instruction=lang()),
        )
        if plan is not None:
            st.markdown(plan)
            get_history().add("fertilizer", {"crop": crop, "soil_type": soil_type})


def page_market():
    st.header("Market Prices")
    client = get_client()

    with st.form("market"):
        crop = st.text_input("Crop", placeholder="e.g. Onion")
        region = st.text_input("State / region", placeholder="e.g. Maharashtra")
        district = st.text_input("District / mandi", placeholder="e.g. Nashik")
        submitted = st.form_submit_button("Check Prices", type="primary")

    if submitted:
        insight = run_request("Checking mandi prices", lambda: client.ask_market(crop, region, district, lang_instruction=lang()))
        if insight is not None:
            st.markdown(insight)
            get_history().add("market", {"crop": crop, "region": region, "district": district})


def page_history():
    st.header("History")
    history = get_history()

    if not len(history):
        st.caption("No activity yet. Results from every tool appear here.")
        return

    if st.button("[DEL] Clear History"):
        history.clear()
        st.rerun()

    for entry in history:
        with st.expander(f"{entry.timestamp:%Y-%m-%d %H:%M} - {entry.type}"):
            st.json(entry.data)


ROUTES = {
    "Dashboard": page_dashboard,
    "AI Assistant": page_chat,
    "Plant Vision": page_vision,
    "Soil Analysis": page_soil,
    "Crop Calendar": page_calendar,
    "Irrigation": page_irrigation,
    "Natural Fertilizers": page_fertilizers,
    "Market Prices": page_market,
    "History": page_history,
}


def main():
    """Run the Streamlit farmer assistant."""
    init_session()
    page = render_sidebar()
    ROUTES[page]()


if __name__ == "__main__":
    main()
