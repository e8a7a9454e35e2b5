"""Tests for InitStage."""

import logging

from hbci_dialog.dialog import Dialog, DialogContext, InitStage, iter_institute_messages
from hbci_dialog.exceptions import HBCIError
from hbci_dialog.handler import Handler
from hbci_dialog.models import CallbackReason, MsgStatus, RetVal, StatusEvent

from conftest import DEFAULT_DIALOG_ID, FakePassport


def run_init(dialog, handler):
    return InitStage(handler).run(DialogContext.create(dialog))


class TestInitMessage:
    """Tests for the DialogInit message contents."""

    def test_message_fields(self, dialog, handler, kernel):
        run_init(dialog, handler)

        msg = kernel.sent[0]
        assert msg.template == "DialogInit"
        assert msg.fields["MsgHead.dialogid"] == "0"
        assert msg.fields["MsgHead.msgnum"] == "1"
        assert msg.fields["MsgTail.msgnum"] == "1"
        assert msg.fields["Idn.KIK.blz"] == "12030000"
        assert msg.fields["Idn.KIK.country"] == "DE"
        assert msg.fields["Idn.customerid"] == "customer1"
        assert msg.fields["Idn.sysid"] == "sys-1"
        assert msg.fields["ProcPrep.BPD"] == "12"
        assert msg.fields["ProcPrep.UPD"] == "3"
        assert msg.fields["ProcPrep.prodName"] == "hbci-dialog"
        assert (msg.sign, msg.encrypt, msg.need_crypt) == (True, True, True)
        assert msg.passports is None

    def test_anonymous_message(self, kernel, institute, user, callback_bus, config):
        handler = Handler(kernel, FakePassport(anonymous=True), institute, user, callback_bus, config)
        dialog = Dialog(handler)

        run_init(dialog, handler)

        msg = kernel.sent[0]
        assert msg.template == "DialogInitAnon"
        assert "Idn.customerid" not in msg.fields
        assert "Idn.sysid" not in msg.fields
        assert (msg.sign, msg.encrypt, msg.need_crypt) == (False, False, False)


class TestInitSuccess:
    """Tests for a successful DialogInit."""

    def test_session_taken_over(self, dialog, handler):
        status = run_init(dialog, handler)

        assert status.is_ok()
        assert dialog.dialog_id == DEFAULT_DIALOG_ID
        assert dialog.msg_num == 2

    def test_updates_bpd_upd_and_saves(self, dialog, handler, institute, user, passport):
        status = run_init(dialog, handler)

        data = status.get_data()
        institute.update_bpd.assert_called_once_with(data)
        institute.extract_keys.assert_called_once_with(data)
        user.update_upd.assert_called_once_with(data)
        assert passport.saved == 1

    def test_institute_messages_delivered(self, dialog, handler, kernel, tracker):
        kernel.respond(
            "DialogInit",
            MsgStatus(
                data={
                    "MsgHead.dialogid": "D1",
                    "KIMsg.betreff": "Wartung",
                    "KIMsg.text": "Sonntag 2-4 Uhr",
                    "KIMsg_2.betreff": "Neue AGB",
                    "KIMsg_2.text": "ab 1.1.",
                    "KIMsg_4.betreff": "nicht erreichbar",
                }
            ),
        )

        run_init(dialog, handler)

        events = tracker.get_events(CallbackReason.HAVE_INST_MSG.value)
        assert [e.data["message"] for e in events] == [
            "Wartung: Sonntag 2-4 Uhr",
            "Neue AGB: ab 1.1.",
        ]

    def test_notifications(self, dialog, handler, tracker):
        run_init(dialog, handler)

        types = [e.event_type for e in tracker.get_events()]
        assert types == [StatusEvent.DIALOG_INIT.value, StatusEvent.DIALOG_INIT_DONE.value]
        done = tracker.get_events(StatusEvent.DIALOG_INIT_DONE.value)[0]
        assert done.data["dialog_id"] == DEFAULT_DIALOG_ID
        assert done.data["ok"] is True


class TestInitFailure:
    """Tests for failing DialogInit exchanges."""

    def test_error_response(self, dialog, handler, kernel, institute):
        kernel.respond("DialogInit", MsgStatus(global_status=[RetVal("9800", "Dialog abgebrochen")]))

        status = run_init(dialog, handler)

        assert not status.is_ok()
        assert dialog.dialog_id is None
        assert dialog.msg_num == 1
        institute.update_bpd.assert_not_called()

    def test_transport_error(self, dialog, handler, kernel):
        kernel.respond("DialogInit", ConnectionError("connection refused"))

        status = run_init(dialog, handler)

        assert not status.is_ok()
        assert isinstance(status.exceptions[0], ConnectionError)

    def test_missing_dialog_id(self, dialog, handler, kernel):
        response = MsgStatus(
            data={"KIMsg.betreff": "Wartung"},
            global_status=[RetVal("0010", "Nachricht entgegengenommen")],
        )
        kernel.respond("DialogInit", response)

        status = run_init(dialog, handler)

        assert status is response
        assert status.get_data() == {"KIMsg.betreff": "Wartung"}
        assert status.global_status[0].code == "0010"
        assert isinstance(status.exceptions[0], HBCIError)
        assert not status.is_ok()
        assert dialog.dialog_id is None

    def test_missing_dialog_id_skips_updaters(self, dialog, handler, kernel, institute, user):
        kernel.respond("DialogInit", MsgStatus(data={}))

        run_init(dialog, handler)

        institute.update_bpd.assert_not_called()
        user.update_upd.assert_not_called()

    def test_updater_failure_attached_to_status(self, dialog, handler, user):
        user.update_upd.side_effect = KeyError("UPD.version")

        status = run_init(dialog, handler)

        assert status.has_exceptions()
        assert not status.is_ok()
        assert status.get_data()["MsgHead.dialogid"] == DEFAULT_DIALOG_ID


class TestInstituteMessageIteration:
    """Tests for iter_institute_messages()."""

    def test_stops_at_first_gap(self):
        data = {"KIMsg.betreff": "a", "KIMsg_3.betreff": "c"}
        assert [m.subject for m in iter_institute_messages(data)] == ["a"]

    def test_no_messages(self):
        assert list(iter_institute_messages({})) == []


class TestInitLogging:
    """Tests for the dialog fields attached to init log records."""

    def test_initialized_record_carries_dialog_id(self, dialog, handler, caplog):
        caplog.set_level(logging.INFO, logger="hbci_dialog")

        run_init(dialog, handler)

        record = next(r for r in caplog.records if r.getMessage() == "dialog initialized")
        assert record.context == {"dialog_id": DEFAULT_DIALOG_ID, "msg_num": "2"}
