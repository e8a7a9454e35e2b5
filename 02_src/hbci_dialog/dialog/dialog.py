"""Dialog controller: one complete HBCI dialog from init to end."""

from ..exceptions import CannotAddTaskError, DialogBusyError
from ..handler import Handler
from ..logging_config import get_logger
from ..models import DialogStatus, Message, MessageQueue
from ..tasks import ITask
from .context import DialogContext
from .end import EndStage
from .init import InitStage
from .jobs import JobsStage
from .packing import GVLedger, PackingPolicy

logger = get_logger(__name__)


class Dialog:
    """Manages exactly one HBCI dialog.

    A dialog is a DialogInit message, one or more messages carrying the
    added tasks (plus follow-up messages for tasks that ask to be repeated)
    and a DialogEnd message, sent one after the other.

    Usage:
        dialog = Dialog(handler)
        dialog.add_task(task)
        status = dialog.do_it()

    After do_it() the dialog is reset and can be filled again.
    """

    def __init__(self, handler: Handler):
        logger.debug("creating new dialog")

        self._handler = handler
        self._is_anonymous = handler.passport.is_anonymous()
        self._packing = PackingPolicy(handler.passport)

        self._init_stage = InitStage(handler)
        self._jobs_stage = JobsStage(handler)
        self._end_stage = EndStage(handler)

        self._dialog_id: str | None = None
        self._msg_num = 1
        self._queue = MessageQueue()
        self._ledger = GVLedger()
        self._running = False

        self.reset()

    @property
    def handler(self) -> Handler:
        return self._handler

    @property
    def is_anonymous(self) -> bool:
        return self._is_anonymous

    @property
    def anon_suffix(self) -> str:
        return "Anon" if self._is_anonymous else ""

    @property
    def dialog_id(self) -> str | None:
        return self._dialog_id

    @property
    def msg_num(self) -> int:
        return self._msg_num

    @property
    def msg_num_str(self) -> str:
        """Message number as sent on the wire."""
        return str(self._msg_num)

    @property
    def gv_ledger(self) -> dict[str, int]:
        return self._ledger.as_dict()

    def next_msg_num(self) -> None:
        self._msg_num += 1

    def set_session(self, dialog_id: str | None, msg_num: int) -> None:
        """Take over dialog id and next message number after DialogInit."""
        self._dialog_id = dialog_id
        self._msg_num = msg_num

    def message_queue(self) -> MessageQueue:
        return self._queue

    def new_msg(self) -> None:
        """Start a new tail message; later tasks are packed into it."""
        logger.debug("starting new message")
        self._queue.append(Message())
        self._ledger.clear()

    def add_task(self, task: ITask) -> None:
        """Pack task into the tail message, opening a new one if limits require.

        Raises CannotAddTaskError unless ignore_add_job_errors is configured,
        in which case the task is dropped.
        """
        try:
            logger.debug("adding task %s", task.name)
            task.verify_constraints()

            if self._packing.needs_new_message(self._ledger, task):
                self.new_msg()

            hbci_code = task.hbci_code
            self._ledger.set(hbci_code, self._ledger.count(hbci_code) + 1)
            self._queue.last().append(task)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            if not self._handler.config.ignore_add_job_errors:
                raise CannotAddTaskError(task.name, reason) from e

            logger.error(
                "task %s will not be executed in current dialog (%s)",
                task.name,
                reason,
            )

    def do_it(self) -> DialogStatus:
        """Run init, jobs and end; return the status of every part.

        Jobs and end only run if init succeeded. The dialog is reset on
        every exit path.
        """
        if self._running:
            raise DialogBusyError("dialog is already running")

        self._running = True
        try:
            logger.debug("executing dialog")
            status = DialogStatus()

            status.init = self._init_stage.run(DialogContext.create(self))

            if status.init.is_ok():
                status.messages = self._jobs_stage.run(DialogContext.create(self))
                status.end = self._end_stage.run(DialogContext.create(self))

            return status
        finally:
            self.reset()
            self._running = False

    def reset(self) -> None:
        self._dialog_id = None
        self._msg_num = 1
        self._queue = MessageQueue()
        self._ledger.clear()
