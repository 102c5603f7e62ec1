# ai/gemini.py
# ------------------------------------------------------------------------------
import os
import re
import json
import logging
import textwrap
import google.generativeai as genai
from core.models import TripPreferences, Itinerary
from core.schema import ItineraryParseError, parse_itinerary

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

# ──────────────────────────────────────────────────────────────────────────────
# Helper: get a configured Gemini model
# ──────────────────────────────────────────────────────────────────────────────
def _get_model():
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        raise RuntimeError("Missing GEMINI_API_KEY")
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(os.getenv("GEMINI_MODEL", DEFAULT_MODEL))

# ──────────────────────────────────────────────────────────────────────────────
# Prompt template – day-by-day itinerary as strict JSON
# ──────────────────────────────────────────────────────────────────────────────
_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are an expert travel agent specializing in personalized trips in India. Create a detailed, day-by-day travel itinerary based on the following user preferences.

    Preferences:
    - Destination: {destination}
    - Trip Duration: {duration} days
    - Budget: Approximately ₹{budget}
    - Key Interests: {interests}
    - Pace: {pace}
    - Preferred way of getting around: {travel_mode}
    - Dietary requirements: {dietary}

    Your response must be STRICT JSON (no markdown, no prose outside the JSON object) with the following structure:
    {{
      "tripSummary": {{
        "destination": "{destination}",
        "duration": {duration},
        "totalEstimatedCost": number
      }},
      "days": [
        {{
          "day": number,
          "theme": "string describing the day's focus",
          "activities": [
            {{
              "time": "e.g., 9:00 AM",
              "description": "detailed activity description",
              "location": "specific place name",
              "cost": number_in_rupees
            }}
          ]
        }}
      ]
    }}

    Instructions:
    - Create a logical plan for {duration} days in {destination}.
    - Focus on activities that match: {interests}.
    - Include recommendations for meals, transport, and accommodation suggestions.
    - Provide realistic cost estimates for each activity in Indian Rupees (₹).
    - Keep the total estimated cost within or slightly below ₹{budget}.
    - Include a mix of popular attractions and hidden gems.
    - Consider travel time between locations and practical logistics.
    - Add local cultural experiences and authentic food recommendations.
    - Write every description and theme in {language}; keep the JSON keys in English.
    - The output must be ONLY the JSON object, no other text.
    """
)

_PACE_HINTS = {
    "relaxed": "relaxed (2-3 activities a day, plenty of free time)",
    "balanced": "balanced (3-4 activities a day)",
    "packed": "packed (5 or more activities a day)",
}

_TRAVEL_MODE_HINTS = {
    "walk": "walking first, short hops",
    "public": "public transport",
    "car": "car or taxi",
    "mixed": "a mix of walking, public transport and taxis",
}


def build_prompt(prefs: TripPreferences) -> str:
    """Return the itinerary prompt string for Gemini."""
    return _PROMPT_TEMPLATE.format(
        destination=prefs.destination,
        duration=prefs.duration,
        budget=prefs.budget,
        interests=prefs.interests,
        pace=_PACE_HINTS.get(prefs.pace, prefs.pace),
        travel_mode=_TRAVEL_MODE_HINTS.get(prefs.travel_mode, prefs.travel_mode),
        dietary=prefs.dietary or "none",
        language=prefs.language,
    )

# ──────────────────────────────────────────────────────────────────────────────
# Response parsing
# ──────────────────────────────────────────────────────────────────────────────
_FENCED_JSON = re.compile(r"```json\n([\s\S]*?)\n```", re.IGNORECASE)


def extract_json(text: str) -> str:
    """Strip a ```json fenced block if the model wrapped its answer in one."""
    raw = text.strip()
    m = _FENCED_JSON.search(raw)
    if m:
        return m.group(1)
    return raw


def parse_response(text: str) -> Itinerary:
    try:
        data = json.loads(extract_json(text))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON from model: %s", text)
        raise ItineraryParseError() from e

    try:
        return parse_itinerary(data)
    except ItineraryParseError as e:
        logger.error("Model JSON does not match the itinerary shape: %s", e.details)
        raise

# ──────────────────────────────────────────────────────────────────────────────
# Generate itinerary
# ──────────────────────────────────────────────────────────────────────────────
def generate_itinerary(prompt: str) -> Itinerary:
    """
    Send the prompt to Gemini and map the JSON answer onto an Itinerary.
    Raises ItineraryParseError when the answer is not a usable itinerary.
    """
    model = _get_model()
    resp = model.generate_content(prompt)
    try:
        text = resp.candidates[0].content.parts[0].text
    except (IndexError, AttributeError) as e:
        # blocked or empty generation
        logger.error("Gemini returned no usable candidate: %r", resp)
        raise ItineraryParseError() from e
    itin = parse_response(text)
    logger.info(
        "Gemini returned %d days for %s", len(itin.days), itin.summary.destination
    )
    return itin
