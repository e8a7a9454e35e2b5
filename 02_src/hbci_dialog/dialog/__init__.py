"""Dialog module."""

from .context import DialogContext
from .dialog import Dialog
from .end import EndStage
from .init import DialogInit, InitStage, iter_institute_messages
from .jobs import JobsStage
from .packing import GVLedger, PackingPolicy

__all__ = [
    "Dialog",
    "DialogContext",
    "DialogInit",
    "InitStage",
    "JobsStage",
    "EndStage",
    "GVLedger",
    "PackingPolicy",
    "iter_institute_messages",
]
