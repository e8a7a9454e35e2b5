"""Pytest configuration and fixtures."""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from hbci_dialog.models import MsgStatus  # noqa: E402
from hbci_dialog.tasks import Task  # noqa: E402

DEFAULT_DIALOG_ID = "DLG-4711"


@dataclass
class SentMessage:
    """A message as it left the fake kernel."""

    template: str
    fields: dict[str, str] = field(default_factory=dict)
    passports: list | None = None
    sign: bool = False
    encrypt: bool = False
    need_crypt: bool = False


def default_response(template: str) -> MsgStatus:
    if template.startswith("DialogInit"):
        return MsgStatus(data={"MsgHead.dialogid": DEFAULT_DIALOG_ID})
    if template == "CustomMsg":
        return MsgStatus(
            data={
                "1": "CustomMsg.MsgHead",
                "2": "CustomMsg.RetGlob",
                "3": "CustomMsg.GVSal",
                "CustomMsg.GVSal.saldo": "100,00",
            }
        )
    return MsgStatus()


class FakeKernel:
    """Records every built message and replays scripted responses.

    Scripted entries are MsgStatus objects, exceptions (raised from
    raw_do_it) or callables returning either.
    """

    def __init__(self):
        self.opened: list[str] = []
        self.sent: list[SentMessage] = []
        self._current: SentMessage | None = None
        self._responses: dict[str, list] = {}

    def respond(self, template: str, *results) -> None:
        self._responses.setdefault(template, []).extend(results)

    def raw_new_msg(self, template_name: str) -> None:
        self.opened.append(template_name)
        self._current = SentMessage(template_name)

    def raw_set(self, key: str, value: str) -> None:
        assert self._current is not None, "raw_set() without raw_new_msg()"
        self._current.fields[key] = value

    def raw_do_it(self, passports, sign, encrypt, need_crypt) -> MsgStatus:
        msg = self._current
        msg.passports = list(passports) if passports is not None else None
        msg.sign, msg.encrypt, msg.need_crypt = sign, encrypt, need_crypt
        self.sent.append(msg)
        self._current = None

        scripted = self._responses.get(msg.template)
        result = scripted.pop(0) if scripted else default_response(msg.template)
        if callable(result):
            result = result()
        if isinstance(result, Exception):
            raise result
        return result

    def sent_templates(self) -> list[str]:
        return [m.template for m in self.sent]

    def sent_of(self, template: str) -> list[SentMessage]:
        return [m for m in self.sent if m.template == template]


class FakePassport:
    """In-memory passport with configurable limits."""

    def __init__(
        self,
        anonymous: bool = False,
        max_gv_per_msg: int = 0,
        max_gv_segs_per_msg: int = 0,
    ):
        self.country = "DE"
        self.blz = "12030000"
        self.customer_id = "customer1"
        self.sys_id = "sys-1"
        self.bpd_version = "12"
        self.upd_version = "3"
        self.lang = "0"
        self.anonymous = anonymous
        self.max_gv = max_gv_per_msg
        self.max_segs = max_gv_segs_per_msg
        self.saved = 0
        self.events: list = []

    def is_anonymous(self) -> bool:
        return self.anonymous

    def is_supported(self) -> bool:
        return True

    def max_gv_per_msg(self) -> int:
        return self.max_gv

    def max_gv_segs_per_msg(self) -> int:
        return self.max_segs

    def save_changes(self) -> None:
        self.saved += 1

    def on_dialog_event(self, event, ctx) -> None:
        self.events.append((event, ctx))


class RecordingTask(Task):
    """Task that records the calls it receives.

    redos: how many times redo() hands the task back for another message.
    fail_fill: raise from fill_result().
    """

    def __init__(self, *args, redos: int = 0, fail_fill: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.redos_left = redos
        self.fail_fill = fail_fill
        self.fills: list[int] = []
        self.indices: list[int] = []
        self.offsets = 0

    def apply_offset(self) -> None:
        self.offsets += 1
        self.set_param("offset", self.offsets)

    def set_index(self, idx: int) -> None:
        super().set_index(idx)
        self.indices.append(idx)

    def fill_result(self, status, segnum: int) -> None:
        self.fills.append(segnum)
        if self.fail_fill:
            raise ValueError(f"cannot parse response for {self.name}")
        super().fill_result(status, segnum)

    def redo(self):
        if self.redos_left > 0:
            self.redos_left -= 1
            return self
        return None


@pytest.fixture
def task_cls():
    """The recording task class."""
    return RecordingTask


@pytest.fixture
def kernel():
    """Create a scripted kernel."""
    return FakeKernel()


@pytest.fixture
def passport():
    """Create a non-anonymous passport without limits."""
    return FakePassport()


@pytest.fixture
def institute():
    """Create mock institute updater."""
    return Mock()


@pytest.fixture
def user():
    """Create mock user updater."""
    return Mock()


@pytest.fixture
def config():
    from hbci_dialog.config import DialogConfig

    return DialogConfig()


@pytest.fixture
def callback_bus():
    from hbci_dialog.callback import CallbackBus

    return CallbackBus()


@pytest.fixture
def tracker(callback_bus):
    """Create Tracker subscribed to the callback bus."""
    from hbci_dialog.callback import Tracker

    tr = Tracker(callback_bus)
    tr.start()
    return tr


@pytest.fixture
def handler(kernel, passport, institute, user, callback_bus, config):
    from hbci_dialog.handler import Handler

    return Handler(
        kernel=kernel,
        passport=passport,
        institute=institute,
        user=user,
        callback=callback_bus,
        config=config,
    )


@pytest.fixture
def dialog(handler):
    """Create a Dialog bound to the fake handler."""
    from hbci_dialog.dialog import Dialog

    return Dialog(handler)
