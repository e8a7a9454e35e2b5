"""Dialog termination stage."""

from ..handler import Handler
from ..kernel import CRYPTIT, NEED_CRYPT, SIGNIT
from ..logging_config import dialog_context, get_logger
from ..models import MsgStatus, StatusEvent
from .context import DialogContext

logger = get_logger(__name__)


class EndStage:
    """Sends DialogEnd (DialogEndAnon for anonymous passports).

    Failures only end up in the returned status.
    """

    def __init__(self, handler: Handler):
        self._handler = handler

    def run(self, ctx: DialogContext) -> MsgStatus:
        status = MsgStatus()

        dialog = ctx.dialog
        kernel = ctx.kernel
        passport = self._handler.passport
        callback = self._handler.callback
        anon = dialog.is_anonymous

        try:
            logger.info(
                "closing dialog",
                extra=dialog_context(dialog.dialog_id, dialog.msg_num),
            )
            callback.status(passport, StatusEvent.DIALOG_END)

            kernel.raw_new_msg("DialogEnd" + dialog.anon_suffix)
            kernel.raw_set("DialogEndS.dialogid", dialog.dialog_id)
            kernel.raw_set("MsgHead.dialogid", dialog.dialog_id)
            kernel.raw_set("MsgHead.msgnum", dialog.msg_num_str)
            kernel.raw_set("MsgTail.msgnum", dialog.msg_num_str)
            dialog.next_msg_num()

            status = kernel.raw_do_it(
                None,
                not anon and SIGNIT,
                not anon and CRYPTIT,
                not anon and NEED_CRYPT,
            )

            callback.status(passport, StatusEvent.DIALOG_END_DONE, status)
        except Exception as e:
            logger.error("closing dialog failed: %s", e, exc_info=True)
            status.add_exception(e)

        return status
