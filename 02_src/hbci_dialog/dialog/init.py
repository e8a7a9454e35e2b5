"""Dialog initialization stage."""

from ..exceptions import HBCIError, InstituteMessageMissing
from ..handler import Handler
from ..kernel import CRYPTIT, NEED_CRYPT, SIGNIT
from ..logging_config import dialog_context, get_logger
from ..models import CallbackReason, InstituteMessage, MsgStatus, StatusEvent, with_counter
from .context import DialogContext

logger = get_logger(__name__)


class DialogInit:
    """The DialogInit message exchange.

    Sends message number 1 without a dialog id and, on success, stores the
    server-assigned dialog id and the next message number in the context.
    """

    def execute(self, ctx: DialogContext) -> MsgStatus:
        kernel = ctx.kernel
        passport = ctx.passport
        anon = ctx.anonymous

        kernel.raw_new_msg("DialogInit" + ("Anon" if anon else ""))
        kernel.raw_set("MsgHead.dialogid", ctx.dialog_id or "0")
        kernel.raw_set("MsgHead.msgnum", str(ctx.msg_num))
        kernel.raw_set("MsgTail.msgnum", str(ctx.msg_num))

        kernel.raw_set("Idn.KIK.country", passport.country)
        kernel.raw_set("Idn.KIK.blz", passport.blz)
        if not anon:
            kernel.raw_set("Idn.customerid", passport.customer_id)
            kernel.raw_set("Idn.sysid", passport.sys_id)

        config = ctx.dialog.handler.config
        kernel.raw_set("ProcPrep.BPD", passport.bpd_version)
        kernel.raw_set("ProcPrep.UPD", passport.upd_version)
        kernel.raw_set("ProcPrep.lang", passport.lang)
        kernel.raw_set("ProcPrep.prodName", config.product_name)
        kernel.raw_set("ProcPrep.prodVersion", config.product_version)

        status = kernel.raw_do_it(
            None,
            not anon and SIGNIT,
            not anon and CRYPTIT,
            not anon and NEED_CRYPT,
        )

        if status.is_ok():
            dialog_id = status.get_data().get("MsgHead.dialogid")
            if not dialog_id:
                # keep the bank's response; the exception marks it as failed
                status.add_exception(HBCIError("DialogInit response carries no dialog id"))
                return status
            ctx.dialog_id = dialog_id
            ctx.msg_num += 1

        return status


class InitStage:
    """Runs DialogInit and takes over BPD, UPD, keys and institute messages."""

    def __init__(self, handler: Handler):
        self._handler = handler

    def run(self, ctx: DialogContext) -> MsgStatus:
        status: MsgStatus | None = None
        passport = self._handler.passport
        callback = self._handler.callback

        try:
            logger.debug("checking whether passport is supported (but ignoring result)")
            supported = passport.is_supported()
            logger.debug("passport supported: %s", supported)

            logger.info("initializing dialog")
            callback.status(passport, StatusEvent.DIALOG_INIT)

            status = DialogInit().execute(ctx)

            if status.is_ok():
                data = status.get_data()
                self._handler.institute.update_bpd(data)
                self._handler.institute.extract_keys(data)
                self._handler.user.update_upd(data)
                passport.save_changes()

                ctx.dialog.set_session(ctx.dialog_id, ctx.msg_num)
                logger.info(
                    "dialog initialized",
                    extra=dialog_context(ctx.dialog_id, ctx.msg_num),
                )

                for msg in iter_institute_messages(data):
                    callback.callback(passport, CallbackReason.HAVE_INST_MSG, str(msg))

            callback.status(
                passport,
                StatusEvent.DIALOG_INIT_DONE,
                (status, ctx.dialog.dialog_id),
            )
        except Exception as e:
            logger.error("dialog initialization failed: %s", e, exc_info=True)
            if status is None:
                status = MsgStatus()
            status.add_exception(e)

        return status


def iter_institute_messages(data: dict[str, str]):
    """Yield KIMsg, KIMsg_2, ... until the first one that is missing."""
    i = 0
    while True:
        try:
            msg = InstituteMessage.from_data(data, with_counter("KIMsg", i))
        except InstituteMessageMissing:
            return
        yield msg
        i += 1
