"""Jobs stage: sends the queued messages between DialogInit and DialogEnd."""

from ..handler import Handler
from ..kernel import CRYPTIT, NEED_CRYPT, SIGNIT
from ..logging_config import dialog_context, get_logger
from ..models import DialogEvent, Message, MessageQueue, MsgStatus, StatusEvent, with_counter
from ..passport import PassportList
from ..tasks import ITask
from .context import DialogContext

logger = get_logger(__name__)

TASK_SEGMENT_PREFIX = "CustomMsg.GV"


class JobsStage:
    """Drains the dialog's message queue, one wire message at a time.

    The first message whose status carries exceptions ends the stage; any
    messages still queued at that point are dropped.
    """

    def __init__(self, handler: Handler):
        self._handler = handler

    def run(self, ctx: DialogContext) -> list[MsgStatus]:
        logger.info("processing jobs")

        dialog = ctx.dialog
        passport = self._handler.passport
        queue = dialog.message_queue()

        statuses: list[MsgStatus] = []
        msg_count = 0

        while True:
            try:
                passport.on_dialog_event(DialogEvent.JOBS_CREATED, ctx)
            except Exception as e:
                logger.error("passport rejected jobs: %s", e, exc_info=True)
                statuses.append(MsgStatus(exceptions=[e]))
                break

            msg = queue.poll()
            if msg is None:
                logger.debug("dialog completed after %s messages", msg_count)
                break

            tasks = msg.tasks
            if not tasks:
                logger.warning("no tasks in message #%s, skipping", msg_count)
                continue

            msg_count += 1
            status: MsgStatus | None = None

            try:
                status = self._send(ctx, tasks, msg_count)
                if status is None:
                    continue

                self._distribute(status, tasks)

                if status.has_exceptions():
                    logger.error("aborting current loop because of errors")
                    break

                self._schedule_redos(queue, tasks)
            except Exception as e:
                logger.error("message #%s failed: %s", msg_count, e, exc_info=True)
                if status is None:
                    status = MsgStatus()
                status.add_exception(e)
                break
            finally:
                if status is not None:
                    statuses.append(status)

        return statuses

    def _send(
        self, ctx: DialogContext, tasks: list[ITask], msg_count: int
    ) -> MsgStatus | None:
        """Build and send one message. Returns None if every task was skipped."""
        dialog = ctx.dialog
        kernel = ctx.kernel
        passport = self._handler.passport
        callback = self._handler.callback

        msg_passports = PassportList()
        logger.debug("generating msg #%s", msg_count)

        kernel.raw_new_msg("CustomMsg")
        kernel.raw_set("MsgHead.dialogid", dialog.dialog_id)
        kernel.raw_set("MsgHead.msgnum", dialog.msg_num_str)
        kernel.raw_set("MsgTail.msgnum", dialog.msg_num_str)

        task_num = 0
        for task in tasks:
            if task.skipped:
                logger.debug("skipping task %s", task.name)
                continue

            logger.debug("adding task %s", task.name)
            callback.status(passport, StatusEvent.SEND_TASK, task)

            task.apply_offset()
            task.set_index(task_num)

            header = with_counter("GV", task_num)
            for key, value in task.lowlevel_params.items():
                kernel.raw_set(f"{header}.{key}", value)

            msg_passports.add_all(task.signature_passports)
            task_num += 1

        # Happens when the message only held an HKTAN#2 placeholder that a
        # 3076 SCA exemption made unnecessary
        if task_num == 0:
            logger.debug("no tasks in message #%s, skipping", msg_count)
            return None

        logger.info(
            "sending msg #%s with %s tasks",
            msg_count,
            task_num,
            extra=dialog_context(dialog.dialog_id, dialog.msg_num),
        )
        status = kernel.raw_do_it(msg_passports, SIGNIT, CRYPTIT, NEED_CRYPT)
        dialog.next_msg_num()
        return status

    def _distribute(self, status: MsgStatus, tasks: list[ITask]) -> None:
        """Hand the response to every task that was sent."""
        passport = self._handler.passport
        callback = self._handler.callback

        segnum = self.find_task_segment(status)
        # find_task_segment() reports "not found" as -1, so only 0 skips
        if segnum == 0:
            return

        for task in tasks:
            if task.skipped:
                logger.debug("skipping results for task %s", task.name)
                continue

            try:
                logger.debug("filling results for task %s", task.name)
                task.fill_result(status, segnum)
                callback.status(passport, StatusEvent.SEND_TASK_DONE, task)
            except Exception as e:
                logger.error("filling results for task %s failed: %s", task.name, e)
                status.add_exception(e)

    def find_task_segment(self, status: MsgStatus) -> int:
        """Number of the first response segment belonging to a task, -1 if none.

        Response data maps segment numbers ("1", "2", ...) to segment paths.
        """
        data = status.get_data()
        max_scan = self._handler.config.max_segment_scan

        segnum = 1
        while segnum < max_scan:
            path = data.get(str(segnum))
            if path is None:
                return -1
            if path.startswith(TASK_SEGMENT_PREFIX):
                return segnum
            segnum += 1

        return -1

    def _schedule_redos(self, queue: MessageQueue, tasks: list[ITask]) -> None:
        """Collect all follow-up tasks of a sent message into one new message."""
        new_msg: Message | None = None

        for task in tasks:
            if task.skipped:
                logger.debug("skipping repeat for task %s", task.name)
                continue

            redo = task.redo()
            if redo is None:
                continue

            if new_msg is None:
                new_msg = Message()
                queue.append(new_msg)

            logger.debug("repeat task %s", redo.name)
            new_msg.append(redo)
