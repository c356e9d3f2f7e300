"""Pure helpers behind the dashboard page: weather summaries and activity metrics."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from frontend.history import History

BASE_HEALTH = 94
HEALTH_PENALTY_PER_ISSUE = 15
FORECAST_DAYS = 5
MIDDAY_HOUR = 11


@dataclass(frozen=True)
class CurrentWeather:
    temp_c: int
    description: str
    wind_kmh: int
    humidity: int | None


@dataclass(frozen=True)
class ForecastDay:
    day: str
    temp_c: int
    condition: str
    icon_url: str


@dataclass(frozen=True)
class CropHealth:
    score: int
    pest_risk: str
    tone: str


def summarize_current(data: dict) -> CurrentWeather | None:
    """Condense an OpenWeatherMap current-weather payload.

    Returns None when the payload lacks `main` or `weather` (e.g. an error body).
    """
    if not data or "main" not in data or not data.get("weather"):
        return None
    description = data["weather"][0].get("description", "")
    return CurrentWeather(
        temp_c=round(data["main"]["temp"]),
        description=" ".join(w.capitalize() for w in description.split(" ")),
        wind_kmh=round(data.get("wind", {}).get("speed", 0) * 3.6),
        humidity=data["main"].get("humidity"),
    )


def daily_forecast(data: dict, days: int = FORECAST_DAYS) -> list[ForecastDay]:
    """Pick one 3-hour slot per day, the first at or after late morning.

    Falls back to the first `days` slots when no slot qualifies.
    """
    if not data or not data.get("list"):
        return []

    offset = timedelta(seconds=data.get("city", {}).get("timezone", 0))
    tz = timezone(offset)

    picked: dict[str, dict] = {}
    for item in data["list"]:
        moment = datetime.fromtimestamp(item["dt"], tz)
        key = moment.date().isoformat()
        if key not in picked and moment.hour >= MIDDAY_HOUR:
            picked[key] = item

    slots = list(picked.values())[:days] or data["list"][:days]
    return [_forecast_day(item, tz) for item in slots]


def _forecast_day(item: dict, tz: timezone) -> ForecastDay:
    weather = item["weather"][0]
    return ForecastDay(
        day=datetime.fromtimestamp(item["dt"], tz).strftime("%a"),
        temp_c=round(item["main"]["temp"]),
        condition=weather.get("main", ""),
        icon_url=f"https://openweathermap.org/img/wn/{weather.get('icon', '01d')}.png",
    )


def crop_health(history: History) -> CropHealth:
    """Health score drops for every plant scan that found problems."""
    issues = [e for e in history.of_type("vision") if e.data.get("health") == "bad"]
    score = max(0, BASE_HEALTH - len(issues) * HEALTH_PENALTY_PER_ISSUE)
    if score > 80:
        tone = "success"
    elif score > 50:
        tone = "warning"
    else:
        tone = "danger"
    return CropHealth(score=score, pest_risk="High" if issues else "Low", tone=tone)


_ACTIVITY_TITLES = {
    "calendar": "Latest Crop Schedule",
    "irrigation": "Irrigation Alert",
    "fertilizer": "Organic Fertilizer Plan",
    "market": "Market Check",
    "soil": "Soil Scan",
    "vision": "Plant Scan",
    "chat": "Assistant Question",
}


def latest_activity(history: History) -> tuple[str, str] | None:
    """Title and one-line description of the most recent history entry."""
    latest = history.latest()
    if latest is None:
        return None

    title = _ACTIVITY_TITLES.get(latest.type, "Recent Activity")
    crop = latest.data.get("crop") or "Crop"
    if latest.type == "calendar":
        text = f"Generated calendar for {crop}"
    elif latest.type == "irrigation":
        text = f"Irrigation plan for {crop}"
    elif latest.type == "fertilizer":
        text = f"Organic fertilizer plan for {crop}"
    elif latest.type == "market":
        text = f"Checked mandi prices for {crop}"
    elif latest.type == "vision":
        text = "Analyzed plant health: " + ("Healthy" if latest.data.get("health") == "good" else "Issues Found")
    elif latest.type == "soil":
        text = f"Soil type detected: {latest.data.get('soil_type', 'Unknown')}"
    else:
        text = latest.data.get("snippet", "")
    return title, text
