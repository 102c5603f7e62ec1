# main.py

import os
import logging
from typing import Any, Dict, Optional
from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from dotenv import load_dotenv
from core.ics_export import CalendarRangeError, export_ics, ics_filename
from core.schema import ItineraryParseError, parse_itinerary
from services import planner

# Load environment variables (.env)
load_dotenv()

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AI Trip Planner",
    description="Gemini-generated itineraries with .ics export",
    version="1.0.0",
)

# Schema for the calendar export
class ExportRequest(BaseModel):
    itinerary: dict
    start_date: Optional[str] = Field(default=None, alias="startDate")


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.post("/api/plan-trip")
def plan_trip_endpoint(body: Dict[str, Any] = Body(...)):
    # 1) Validate the form input
    try:
        prefs = planner.validate_preferences(body)
    except planner.PreferencesError as e:
        return JSONResponse({"ok": False, "error": str(e)}, status_code=400)

    # 2) Ask Gemini for the itinerary
    try:
        itin = planner.plan_trip(prefs)
    except Exception as e:
        logger.exception("/api/plan-trip error")
        return JSONResponse({"ok": False, "error": str(e) or "Unexpected error occurred"}, status_code=500)

    return {"ok": True, "itinerary": itin.to_dict()}


@app.post("/api/export-ics")
def export_ics_endpoint(req: ExportRequest):
    try:
        itin = parse_itinerary(req.itinerary)
    except ItineraryParseError as e:
        raise HTTPException(status_code=422, detail=e.details or str(e))

    try:
        ics = export_ics(itin, req.start_date)
    except CalendarRangeError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if ics is None:
        raise HTTPException(status_code=400, detail="A valid start date (YYYY-MM-DD) is required")

    return Response(
        content=ics,
        media_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{ics_filename()}"'},
    )
