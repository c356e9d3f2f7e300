"""HTTP client for the Chisa backend, used by the Streamlit app.

Every AI call returns the generated markdown (`choices[0].message.content`).
Backend `{"error": {"message": ...}}` bodies are raised as ApiError with the
message verbatim so the UI can show it in an inline alert.
"""

import base64
import io

import requests
from PIL import Image, UnidentifiedImageError

MAX_IMAGE_EDGE = 1024
JPEG_QUALITY = 80
REQUEST_TIMEOUT = 90

ADVANCED_VISION_PROMPT = """You are an Advanced Agricultural Plant Pathologist AI. Analyze the provided plant/leaf image with expert precision.

Provide your analysis in EXACTLY this Markdown structure (use these exact headings):

## 🔍 Plant Identification
- Plant species and variety

## ⚠️ Early-Stage Detection
- Detect ANY early symptoms BEFORE they become fully visible (micro-lesions, color shifts, texture anomalies)
- State confidence: [HIGH / MEDIUM / LOW]
- Early warning: [YES / NO]

## 🦠 Disease Detection (Multi-Disease Scan)
- List ALL detected diseases (even mild ones)
- For each disease: name, affected area %, severity [Mild / Moderate / Severe / Critical]

## 🧫 Pathogen Classification
- Primary pathogen type: [Fungal / Bacterial / Viral / Pest / Nutrient Deficiency / Abiotic]
- Specific pathogen name if identifiable
- Key diagnostic features used

## 📈 Disease Progression Stage
- Current stage: [Stage 1: Early / Stage 2: Moderate / Stage 3: Severe / Stage 4: Critical]
- Progression speed: [Slow / Moderate / Fast]
- Estimated days since infection onset

## 🔬 Root Cause Analysis
- Primary cause (why did this disease occur?)
- Contributing environmental factors
- Agronomic practices that led to this

## 🌍 Spread Risk Prediction
- Spread risk to neighboring plants: [Low / Medium / High / Critical]
- Transmission method (wind/water/contact/insect)
- Estimated radius of risk in meters
- Recommended isolation zone

## 💊 Treatment Protocol
- Immediate action (within 24 hours)
- Chemical treatment (if needed): product name + dosage
- Organic alternatives
- Preventive measures for healthy plants

## 📊 Recovery Prognosis
- Recovery probability: [percentage]
- Expected recovery time
- Long-term management advice

Keep the response detailed but farmer-friendly. Use bullet points. Provide specific, actionable advice."""

CHAT_PERSONA = "You are a helpful agricultural assistant for farmers. Keep answers concise and practical."


class ApiError(Exception):
    """The backend answered with an error body or could not be reached."""


def optimize_image(data: bytes, max_edge: int = MAX_IMAGE_EDGE, quality: int = JPEG_QUALITY) -> str:
    """Downscale an image so its longest edge is at most `max_edge` and re-encode as JPEG.

    Args:
        data: Raw bytes of any format Pillow can open.
        max_edge: Longest allowed side in pixels; smaller images are not upscaled.
        quality: JPEG quality (0-100).

    Returns:
        A `data:image/jpeg;base64,...` URL.

    Raises:
        ApiError: If the bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img = img.convert("RGB")
            img.thumbnail((max_edge, max_edge))
            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=quality)
    except (UnidentifiedImageError, OSError) as e:
        raise ApiError("Could not read the image. Please upload a valid photo.") from e
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


class AssistantClient:
    """One method per backend feature."""

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: int = REQUEST_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> str:
        try:
            resp = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        except requests.Timeout:
            raise ApiError("Request timed out. The server may be overloaded.")
        except requests.ConnectionError:
            raise ApiError("Cannot connect to the backend. Is the API server running?")

        data = self._json(resp)
        if "error" in data:
            raise ApiError(data["error"].get("message", "Unknown error"))
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ApiError("The AI service returned an unexpected response.")

    def _get(self, path: str, params: dict) -> dict:
        try:
            resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        except requests.RequestException:
            raise ApiError("Cannot connect to the backend. Is the API server running?")
        data = self._json(resp)
        if "error" in data:
            raise ApiError(data["error"].get("message", "Unknown error"))
        return data

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        try:
            data = resp.json()
        except ValueError:
            raise ApiError(f"Server error ({resp.status_code}). Please try again.")
        if not isinstance(data, dict):
            raise ApiError(f"Server error ({resp.status_code}). Please try again.")
        return data

    def ask_llm(self, user_prompt: str, system_prompt: str = CHAT_PERSONA, lang_instruction: str = "") -> str:
        return self._post("/api/chat", {
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "lang_instruction": lang_instruction,
        })

    def ask_vision(self, image: bytes, system_prompt: str = ADVANCED_VISION_PROMPT, lang_instruction: str = "") -> str:
        return self._post("/api/vision", {
            "system_prompt": system_prompt,
            "image": optimize_image(image),
            "lang_instruction": lang_instruction,
        })

    def ask_soil_vision(self, image: bytes, lang_instruction: str = "") -> str:
        return self._post("/api/soil-vision", {
            "image": optimize_image(image),
            "lang_instruction": lang_instruction,
        })

    def ask_calendar(self, crop: str, location: str = "", season: str = "", lang_instruction: str = "") -> str:
        return self._post("/api/crop-calendar", {
            "crop": crop,
            "location": location,
            "season": season,
            "lang_instruction": lang_instruction,
        })

    def ask_irrigation(self, crop: str, growth_stage: str = "", climate: str = "", lang_instruction: str = "") -> str:
        return self._post("/api/irrigation", {
            "crop": crop,
            "growth_stage": growth_stage,
            "climate": climate,
            "lang_instruction": lang_instruction,
        })

    def ask_natural_fertilizers(
        self,
        crop: str,
        soil_type: str = "",
        goal: str = "",
        problem: str = "",
        region: str = "",
        lang_instruction: str = "",
    ) -> str:
        return self._post("/api/natural-fertilizers", {
            "crop": crop,
            "soil_type": soil_type,
            "goal": goal,
            "problem": problem,
            "region": region,
            "lang_instruction": lang_instruction,
        })

    def ask_market(self, crop: str = "", region: str = "", district: str = "", lang_instruction: str = "") -> str:
        return self._post("/api/market-prices", {
            "crop": crop,
            "region": region,
            "district": district,
            "lang_instruction": lang_instruction,
        })

    def get_weather(self, lat: float, lon: float) -> dict:
        return self._get("/api/weather", {"lat": lat, "lon": lon})

    def get_forecast(self, lat: float, lon: float) -> dict:
        return self._get("/api/forecast", {"lat": lat, "lon": lon})

    def health(self) -> dict:
        try:
            resp = self.session.get(f"{self.base_url}/health", timeout=3)
            return resp.json()
        except (requests.RequestException, ValueError):
            return {"status": "offline", "components": {}}
