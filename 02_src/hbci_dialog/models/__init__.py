"""Core data models for the HBCI dialog driver."""

from .events import CallbackEvent, CallbackReason, DialogEvent, StatusEvent
from .institute import InstituteMessage, with_counter
from .messages import Message, MessageQueue
from .status import DialogStatus, MsgStatus, RetVal
from .tracing import TraceEvent

__all__ = [
    # Messages
    "Message",
    "MessageQueue",
    # Status
    "RetVal",
    "MsgStatus",
    "DialogStatus",
    # Events
    "StatusEvent",
    "CallbackReason",
    "DialogEvent",
    "CallbackEvent",
    # Institute
    "InstituteMessage",
    "with_counter",
    # Tracing
    "TraceEvent",
]
