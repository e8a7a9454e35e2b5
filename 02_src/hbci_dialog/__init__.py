"""HBCI dialog driver."""

from .callback import CallbackBus, ICallback, ITracker, Tracker
from .config import DialogConfig, load_config
from .dialog import Dialog, DialogContext, GVLedger, PackingPolicy
from .exceptions import (
    CannotAddTaskError,
    ConstraintViolation,
    DialogBusyError,
    HBCIError,
    InstituteMessageMissing,
)
from .handler import Handler, IInstitute, IUser
from .kernel import IKernel
from .models import (
    CallbackEvent,
    CallbackReason,
    DialogEvent,
    DialogStatus,
    InstituteMessage,
    Message,
    MessageQueue,
    MsgStatus,
    RetVal,
    StatusEvent,
    TraceEvent,
    with_counter,
)
from .passport import IPassport, PassportList
from .tasks import ITask, Task, TaskResult

__all__ = [
    # Dialog
    "Dialog",
    "DialogContext",
    "GVLedger",
    "PackingPolicy",
    "Handler",
    # Models
    "Message",
    "MessageQueue",
    "MsgStatus",
    "DialogStatus",
    "RetVal",
    "StatusEvent",
    "CallbackReason",
    "DialogEvent",
    "CallbackEvent",
    "InstituteMessage",
    "TraceEvent",
    "with_counter",
    # Interfaces
    "IKernel",
    "IPassport",
    "IInstitute",
    "IUser",
    "ITask",
    "ICallback",
    "ITracker",
    # Components
    "PassportList",
    "Task",
    "TaskResult",
    "CallbackBus",
    "Tracker",
    # Config
    "DialogConfig",
    "load_config",
    # Errors
    "HBCIError",
    "CannotAddTaskError",
    "ConstraintViolation",
    "DialogBusyError",
    "InstituteMessageMissing",
]
