"""Event enums shared by dialog stages and callbacks."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class StatusEvent(str, Enum):
    """Progress notifications emitted during a dialog."""

    DIALOG_INIT = "dialog_init"
    DIALOG_INIT_DONE = "dialog_init_done"
    SEND_TASK = "send_task"
    SEND_TASK_DONE = "send_task_done"
    DIALOG_END = "dialog_end"
    DIALOG_END_DONE = "dialog_end_done"


class CallbackReason(str, Enum):
    """Callbacks that deliver content to the user."""

    HAVE_INST_MSG = "have_inst_msg"


class DialogEvent(str, Enum):
    """Events forwarded to the passport."""

    JOBS_CREATED = "jobs_created"


@dataclass
class CallbackEvent:
    """A notification delivered to callback bus subscribers."""

    kind: StatusEvent | CallbackReason
    passport: Any
    data: Any
    timestamp: datetime
