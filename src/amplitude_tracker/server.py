"""FastAPI relay exposing named trackers over HTTP."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .registry import TrackerRegistry, default_registry
from .tracker import Tracker


class InitPayload(BaseModel):
    api_key: str = Field(..., min_length=1)
    user_id: Optional[str] = None


class IdentityPayload(BaseModel):
    user_id: Optional[str] = None
    device_id: Optional[str] = None
    user_properties: Dict[str, Any] = Field(default_factory=dict)


class EventPayload(BaseModel):
    event_type: str = ""
    event_properties: Dict[str, Any] = Field(default_factory=dict)
    queue: bool = True


class OptOutPayload(BaseModel):
    opt_out: bool


class TrackerStateResponse(BaseModel):
    name: str
    has_api_key: bool
    user_id: Optional[str] = None
    device_id: Optional[str] = None
    user_properties: Dict[str, Any]
    queued_events: int
    opt_out: bool


def _state(name: str, tracker: Tracker) -> TrackerStateResponse:
    return TrackerStateResponse(
        name=name,
        has_api_key=bool(tracker.api_key),
        user_id=tracker.user_id,
        device_id=tracker.device_id,
        user_properties=tracker.user_properties,
        queued_events=len(tracker.queue),
        opt_out=tracker.opt_out,
    )


def _configuration_failure(exc: ConfigurationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"issue": exc.issue.value, "message": str(exc)},
    )


def create_app(registry: Optional[TrackerRegistry] = None) -> FastAPI:
    trackers = registry if registry is not None else default_registry
    app = FastAPI(
        title="Amplitude Tracker Relay",
        version="1.0.0",
        description="Queue and forward analytics events for named trackers.",
    )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/instances/{name}", response_model=TrackerStateResponse)
    def get_state(name: str) -> TrackerStateResponse:
        return _state(name, trackers.get(name))

    @app.post("/instances/{name}/init", response_model=TrackerStateResponse)
    def init_tracker(name: str, payload: InitPayload) -> TrackerStateResponse:
        tracker = trackers.get(name).init(payload.api_key, payload.user_id)
        return _state(name, tracker)

    @app.post("/instances/{name}/identity", response_model=TrackerStateResponse)
    def set_identity(name: str, payload: IdentityPayload) -> TrackerStateResponse:
        tracker = trackers.get(name)
        if payload.user_id is not None:
            tracker.set_user_id(payload.user_id)
        if payload.device_id is not None:
            tracker.set_device_id(payload.device_id)
        if payload.user_properties:
            tracker.set_user_properties(payload.user_properties)
        return _state(name, tracker)

    @app.post("/instances/{name}/events", response_model=TrackerStateResponse)
    def record_event(name: str, payload: EventPayload) -> TrackerStateResponse:
        tracker = trackers.get(name)
        try:
            if payload.queue:
                tracker.queue_track(payload.event_type, payload.event_properties)
            else:
                tracker.track(payload.event_type, payload.event_properties)
        except ConfigurationError as exc:
            raise _configuration_failure(exc) from exc
        return _state(name, tracker)

    @app.post("/instances/{name}/flush", response_model=TrackerStateResponse)
    def flush(name: str) -> TrackerStateResponse:
        tracker = trackers.get(name)
        try:
            tracker.log_queued_events()
        except ConfigurationError as exc:
            raise _configuration_failure(exc) from exc
        return _state(name, tracker)

    @app.post("/instances/{name}/opt-out", response_model=TrackerStateResponse)
    def set_opt_out(name: str, payload: OptOutPayload) -> TrackerStateResponse:
        return _state(name, trackers.get(name).set_opt_out(payload.opt_out))

    @app.post("/instances/{name}/reset", response_model=TrackerStateResponse)
    def reset_user(name: str) -> TrackerStateResponse:
        return _state(name, trackers.get(name).reset_user())

    return app


app = create_app()
