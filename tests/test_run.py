# tests/test_run.py

import json
import run
from core.schema import parse_itinerary

ITINERARY = {
    "tripSummary": {"destination": "Goa, India", "duration": 1, "totalEstimatedCost": 1500},
    "days": [{"day": 1, "theme": "Arrival", "activities": [{"time": "6:00 PM", "description": "Airport pickup"}]}],
}


def test_ics_command_writes_calendar(tmp_path):
    src = tmp_path / "itinerary.json"
    src.write_text(json.dumps(ITINERARY), encoding="utf-8")
    out = tmp_path / "trip.ics"

    assert run.main(["ics", str(src), "--start", "2024-01-10", "--out", str(out)]) == 0
    text = out.read_text(encoding="utf-8")
    assert "DTSTART:20240110T180000Z" in text
    assert text.endswith("END:VCALENDAR\n")


def test_ics_command_rejects_bad_date(tmp_path):
    src = tmp_path / "itinerary.json"
    src.write_text(json.dumps(ITINERARY), encoding="utf-8")
    assert run.main(["ics", str(src), "--start", "soon", "--out", str(tmp_path / "x.ics")]) == 1
    assert not (tmp_path / "x.ics").exists()


def test_ics_command_rejects_bad_json(tmp_path):
    src = tmp_path / "itinerary.json"
    src.write_text('{"days": []}', encoding="utf-8")
    assert run.main(["ics", str(src), "--start", "2024-01-10"]) == 1


def test_plan_command_validates_before_calling_model(monkeypatch):
    def fail(prefs):
        raise AssertionError("model should not be called")

    monkeypatch.setattr(run.planner, "plan_trip", fail)
    code = run.main(["plan", "--destination", "Goa", "--duration", "40", "--budget", "5000", "--interests", "food"])
    assert code == 2


def test_ics_command_day_out_of_range(tmp_path):
    far = json.loads(json.dumps(ITINERARY))
    far["days"][0]["day"] = 4_000_000
    src = tmp_path / "itinerary.json"
    src.write_text(json.dumps(far), encoding="utf-8")
    out = tmp_path / "far.ics"
    assert run.main(["ics", str(src), "--start", "2024-01-10", "--out", str(out)]) == 1
    assert not out.exists()


def test_plan_command_prints_bracketed_text_verbatim(monkeypatch, capsys):
    itin = parse_itinerary(
        {
            "tripSummary": {"destination": "Goa, India", "duration": 1, "totalEstimatedCost": 800},
            "days": [
                {
                    "day": 1,
                    "theme": "Markets [bold]",
                    "activities": [{"time": "10:00 AM", "description": "Shop at [/market] stalls"}],
                }
            ],
        }
    )
    monkeypatch.setattr(run.planner, "plan_trip", lambda prefs: itin)
    code = run.main(["plan", "--destination", "Goa", "--duration", "1", "--budget", "5000", "--interests", "shopping"])
    assert code == 0
    out = capsys.readouterr().out
    assert "[/market]" in out
    assert "[bold]" in out
