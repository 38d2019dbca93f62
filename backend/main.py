"""
FastAPI Backend - Skills Workspace API v1.

Stateless: every request rebuilds the engine from the request body
(roster + event list) or from the configured roster source.
No in-memory state between requests.

Endpoints:
  GET  /health    - liveness
  GET  /roster    - configured roster (empty on load failure)
  POST /taxonomy  - taxonomy tree + metadata summary for a roster
  POST /view      - replay events + return tables, hierarchy and leaves
  GET  /verify-determinism - replay the configured roster session and compare
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from skill_kernel.engine import SkillsEngine, build_roster_indices
from skill_kernel.events import BaseEvent, ReplaceRosterEvent, reconstruct_event
from skill_kernel.metadata import keys_without_templates
from skill_kernel.roster import parse_people
from skill_kernel.view_state import UnknownDomainError
from skill_kernel.projection import ProjectionService

from skill_runtime.loader import default_source, load_roster
from skill_runtime.session import DeterminismError, SkillsSession

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.environ.get("SKILLS_LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Skills Workspace API",
    version="1.0.0",
    description="Deterministic skills taxonomy, aggregates and table projections",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class EventModel(BaseModel):
    event_type: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    timestamp: str = ""


class RosterRequest(BaseModel):
    people: List[Dict[str, Any]] = Field(default_factory=list)


class ViewRequest(BaseModel):
    people: Optional[List[Dict[str, Any]]] = None
    events: List[EventModel] = Field(default_factory=list)
    aggregate_mode: bool = True


class ViewResponse(BaseModel):
    state: Dict[str, Any]
    view: Dict[str, Any]
    diagnostics: Dict[str, Any]


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _build_events(events: List[EventModel]) -> List[BaseEvent]:
    built: List[BaseEvent] = []
    for seq, evt in enumerate(events, start=2):
        try:
            built.append(reconstruct_event({
                "event_type": evt.event_type,
                "payload": evt.payload,
                "timestamp": evt.timestamp,
                "sequence": seq,
            }))
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
    return built


def _roster_payload(people: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Request roster if given, otherwise the configured source."""
    if people is not None:
        return people
    loaded = load_roster(default_source())
    return [p.to_dict() for p in loaded.people]


def _replay_and_project(req: ViewRequest) -> dict:
    """
    Full replay + projection.
    This is the core stateless operation behind /view.
    """
    events: List[BaseEvent] = [
        ReplaceRosterEvent(sequence=1, payload={"people": _roster_payload(req.people)}),
    ]
    events.extend(_build_events(req.events))

    engine = SkillsEngine()
    try:
        engine.replay(events)
    except UnknownDomainError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    view = ProjectionService(cache_size=1).build(engine, aggregate_mode=req.aggregate_mode)
    return {
        "state": engine.state.to_dict(),
        "view": view.to_dict(),
        "diagnostics": engine.get_diagnostics(),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/roster")
def get_roster():
    loaded = load_roster(default_source())
    return {
        "source": loaded.source,
        "ok": loaded.ok,
        "people": [p.to_dict() for p in loaded.people],
    }


@app.post("/taxonomy")
def post_taxonomy(req: RosterRequest):
    people, report = parse_people({"people": req.people})
    indices = build_roster_indices(people)
    return {
        "taxonomy": indices.taxonomy.to_dict(),
        "skill_keys": list(indices.metadata),
        "keys_without_templates": keys_without_templates(indices.metadata),
        "dropped_people": report.dropped_people,
        "skipped_records": report.skipped_records,
    }


@app.post("/view", response_model=ViewResponse)
def post_view(req: ViewRequest):
    result = _replay_and_project(req)
    logger.debug(
        "view %s: %d skill rows, %d person rows",
        result["view"]["signature"][:12],
        len(result["view"]["skillRows"]),
        len(result["view"]["personRows"]),
    )
    return result


@app.get("/verify-determinism")
def verify_determinism():
    """Load the configured roster into a session and replay its log."""
    session = SkillsSession(source=default_source())
    session.initialize()
    try:
        session.verify_determinism()
    except DeterminismError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return {"status": "ok", "signature": session.signature()}
