"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single recorded dialog notification."""

    id: str
    event_type: str  # e.g. "dialog_init", "send_task_done"
    actor: str  # who created this event
    data: dict  # self-contained summary for display
    timestamp: datetime
