"""Dialog context shared between a stage and the kernel."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..kernel import IKernel
from ..passport import IPassport

if TYPE_CHECKING:
    from .dialog import Dialog


@dataclass
class DialogContext:
    """Short-lived per-stage record; holds no state beyond the stage run."""

    dialog: "Dialog"
    kernel: IKernel
    passport: IPassport
    anonymous: bool = False
    msg_num: int = 1
    dialog_id: str | None = None

    @classmethod
    def create(cls, dialog: "Dialog") -> "DialogContext":
        handler = dialog.handler
        return cls(
            dialog=dialog,
            kernel=handler.kernel,
            passport=handler.passport,
            anonymous=dialog.is_anonymous,
            msg_num=dialog.msg_num,
            dialog_id=dialog.dialog_id,
        )
