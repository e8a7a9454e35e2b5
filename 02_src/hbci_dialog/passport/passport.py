"""Passport interface and the signing passport collection."""

from typing import Any, Iterable, Iterator, Protocol

from ..models import DialogEvent


class IPassport(Protocol):
    """Credential and BPD/UPD store for one user at one institute."""

    country: str
    blz: str
    customer_id: str
    sys_id: str
    bpd_version: str
    upd_version: str
    lang: str

    def is_anonymous(self) -> bool:
        ...

    def is_supported(self) -> bool:
        """Whether the institute supports this passport's security method."""
        ...

    def max_gv_per_msg(self) -> int:
        """BPD limit on distinct transaction types per message, 0 = unlimited."""
        ...

    def max_gv_segs_per_msg(self) -> int:
        """Passport limit on transaction segments per message, 0 = unlimited."""
        ...

    def save_changes(self) -> None:
        ...

    def on_dialog_event(self, event: DialogEvent, ctx: Any) -> None:
        ...


class PassportList:
    """Ordered collection of passports that rejects repeats by identity."""

    def __init__(self, passports: Iterable[IPassport] | None = None):
        self._items: list[IPassport] = []
        if passports:
            self.add_all(passports)

    def add(self, passport: IPassport) -> bool:
        """Add passport unless the same object is already present."""
        if any(p is passport for p in self._items):
            return False
        self._items.append(passport)
        return True

    def add_all(self, passports: Iterable[IPassport]) -> None:
        for p in passports:
            self.add(p)

    def __contains__(self, passport: object) -> bool:
        return any(p is passport for p in self._items)

    def __iter__(self) -> Iterator[IPassport]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
