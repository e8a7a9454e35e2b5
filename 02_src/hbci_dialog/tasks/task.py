"""Task contract and a reusable base implementation."""

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from ..exceptions import ConstraintViolation
from ..logging_config import get_logger
from ..models import MsgStatus
from ..passport import IPassport

logger = get_logger(__name__)


class ITask(Protocol):
    """One business transaction (Geschaeftsvorfall) as seen by the dialog."""

    @property
    def name(self) -> str:
        ...

    @property
    def hbci_code(self) -> str:
        """Transaction code, e.g. HKSAL."""
        ...

    @property
    def max_number_per_msg(self) -> int:
        """How many segments of this kind one message may hold, 0 = unlimited."""
        ...

    @property
    def lowlevel_params(self) -> dict[str, str]:
        """Parameters written below the task's segment header."""
        ...

    @property
    def skipped(self) -> bool:
        ...

    @property
    def signature_passports(self) -> Iterable[IPassport]:
        ...

    def apply_offset(self) -> None:
        """Copy the current loop state (e.g. a pagination offset) into the params."""
        ...

    def set_index(self, idx: int) -> None:
        """Receive the zero-based position of the task inside its message."""
        ...

    def verify_constraints(self) -> None:
        """Raise if the task cannot be sent as configured."""
        ...

    def fill_result(self, status: MsgStatus, segnum: int) -> None:
        """Consume the response; segnum is the first task segment of the reply."""
        ...

    def redo(self) -> "ITask | None":
        """Return a follow-up task to run in a later message, or None."""
        ...


@dataclass
class TaskResult:
    """Response data collected for one task."""

    segnum: int | None = None
    path: str | None = None
    data: dict[str, str] = field(default_factory=dict)


class Task:
    """Base class for business transactions.

    Subclasses set the class attributes and usually override fill_result()
    or redo(). Parameters named in required_params must be set before the
    task is added to a dialog.
    """

    hbci_code: str = ""
    max_number_per_msg: int = 0
    required_params: tuple[str, ...] = ()

    def __init__(
        self,
        name: str | None = None,
        params: dict[str, str] | None = None,
        signature_passports: Iterable[IPassport] | None = None,
        hbci_code: str | None = None,
        max_number_per_msg: int | None = None,
    ):
        if hbci_code is not None:
            self.hbci_code = hbci_code
        if max_number_per_msg is not None:
            self.max_number_per_msg = max_number_per_msg
        self._name = name or self.hbci_code
        self._params: dict[str, str] = dict(params) if params else {}
        self._signature_passports: list[IPassport] = list(signature_passports or [])
        self._skipped = False
        self.index: int | None = None
        self.result = TaskResult()

    @property
    def name(self) -> str:
        return self._name

    @property
    def lowlevel_params(self) -> dict[str, str]:
        return self._params

    @property
    def skipped(self) -> bool:
        return self._skipped

    @property
    def signature_passports(self) -> list[IPassport]:
        return self._signature_passports

    def set_param(self, key: str, value: str | int) -> None:
        self._params[key] = str(value)

    def add_signature_passport(self, passport: IPassport) -> None:
        self._signature_passports.append(passport)

    def skip(self) -> None:
        """Exclude the task from sending and from result distribution."""
        logger.debug("marking task %s as skipped", self._name)
        self._skipped = True

    def apply_offset(self) -> None:
        pass

    def set_index(self, idx: int) -> None:
        self.index = idx

    def verify_constraints(self) -> None:
        missing = [p for p in self.required_params if p not in self._params]
        if missing:
            raise ConstraintViolation(
                f"task {self._name} is missing parameters: {', '.join(missing)}"
            )

    def fill_result(self, status: MsgStatus, segnum: int) -> None:
        """Copy the data of this task's response segment into self.result.

        The task's reply is expected at segnum + index; keys below that
        segment's path are stored without the path prefix.
        """
        own_segnum = segnum + (self.index or 0)
        data = status.get_data()
        path = data.get(str(own_segnum))

        self.result = TaskResult(segnum=own_segnum, path=path)
        if path is None:
            logger.debug("no response segment %s for task %s", own_segnum, self._name)
            return

        prefix = path + "."
        self.result.data = {
            key[len(prefix):]: value
            for key, value in data.items()
            if key.startswith(prefix)
        }

    def redo(self) -> "Task | None":
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"
