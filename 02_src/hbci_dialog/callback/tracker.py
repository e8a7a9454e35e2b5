"""Tracker implementation for recording dialog notifications as TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from ..models import CallbackEvent, MsgStatus, TraceEvent
from .bus import CallbackBus


class ITracker(Protocol):
    """Recording TraceEvents. Two channels: CallbackBus subscription + direct calls."""

    def track(self, event_type: str, actor: str, data: dict) -> TraceEvent:
        """Create and keep a TraceEvent."""
        ...

    def get_events(self, event_type: str | None = None) -> list[TraceEvent]:
        ...


class Tracker:
    """Creates TraceEvents via CallbackBus subscription and direct track() calls."""

    def __init__(self, bus: CallbackBus | None = None):
        self._bus = bus
        self._events: list[TraceEvent] = []

    def start(self) -> None:
        """Subscribe to the callback bus."""
        if self._bus is not None:
            self._bus.subscribe(self._handle_event)

    def stop(self) -> None:
        if self._bus is not None:
            self._bus.unsubscribe(self._handle_event)

    def _handle_event(self, event: CallbackEvent) -> None:
        """Handle a notification from the bus."""
        self.track(
            event_type=event.kind.value,
            actor="dialog",
            data=_summarize(event.data),
        )

    def track(self, event_type: str, actor: str, data: dict) -> TraceEvent:
        """Create TraceEvent and keep it in memory."""
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        self._events.append(trace_event)
        return trace_event

    def get_events(self, event_type: str | None = None) -> list[TraceEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.event_type == event_type]

    def clear(self) -> None:
        self._events.clear()


def _summarize(payload: Any) -> dict:
    """Reduce a notification payload to display data."""
    if payload is None:
        return {}
    if isinstance(payload, MsgStatus):
        return {"ok": payload.is_ok(), "errors": payload.error_string()}
    if isinstance(payload, tuple):
        # DIALOG_INIT_DONE carries (status, dialog_id)
        status, dialog_id = payload
        summary = _summarize(status)
        summary["dialog_id"] = dialog_id
        return summary
    if isinstance(payload, str):
        return {"message": payload[:100]}
    name = getattr(payload, "name", None)
    if name is not None:
        return {"task": name}
    return {"payload_summary": str(payload)[:100]}
