"""Handler: the collaborators a dialog works with."""

from typing import Protocol

from .callback import CallbackBus, ICallback
from .config import DialogConfig, load_config
from .kernel import IKernel
from .passport import IPassport


class IInstitute(Protocol):
    """Keeps the bank parameter data (BPD) and institute keys current."""

    def update_bpd(self, data: dict[str, str]) -> None:
        """Refresh BPD from a DialogInit response."""
        ...

    def extract_keys(self, data: dict[str, str]) -> None:
        """Take over server keys contained in a DialogInit response."""
        ...


class IUser(Protocol):
    """Keeps the user parameter data (UPD) current."""

    def update_upd(self, data: dict[str, str]) -> None:
        """Refresh UPD from a DialogInit response."""
        ...


class Handler:
    """Owner of kernel, passport and updaters shared by successive dialogs."""

    def __init__(
        self,
        kernel: IKernel,
        passport: IPassport,
        institute: IInstitute,
        user: IUser,
        callback: ICallback | None = None,
        config: DialogConfig | None = None,
    ):
        self._kernel = kernel
        self._passport = passport
        self._institute = institute
        self._user = user
        self._callback = callback if callback is not None else CallbackBus()
        self._config = config if config is not None else load_config()

    @property
    def kernel(self) -> IKernel:
        return self._kernel

    @property
    def passport(self) -> IPassport:
        return self._passport

    @property
    def institute(self) -> IInstitute:
        return self._institute

    @property
    def user(self) -> IUser:
        return self._user

    @property
    def callback(self) -> ICallback:
        return self._callback

    @property
    def config(self) -> DialogConfig:
        return self._config
