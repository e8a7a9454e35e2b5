"""Kernel interface: raw message building, signing, transport and parsing."""

from typing import Iterable, Protocol

from ..models import MsgStatus
from ..passport import IPassport

# Flag values for raw_do_it(), named after the operations they enable
SIGNIT = True
CRYPTIT = True
NEED_CRYPT = True


class IKernel(Protocol):
    """Codec and transport layer consumed by the dialog.

    A kernel holds a single build slot: raw_new_msg() opens it, raw_set()
    fills it and raw_do_it() signs, encrypts, sends and parses the reply.
    Calls must not be interleaved.
    """

    def raw_new_msg(self, template_name: str) -> None:
        """Open a new message built from the named template."""
        ...

    def raw_set(self, key: str, value: str) -> None:
        """Set a field of the open message. Values are always strings."""
        ...

    def raw_do_it(
        self,
        passports: Iterable[IPassport] | None,
        sign: bool,
        encrypt: bool,
        need_crypt: bool,
    ) -> MsgStatus:
        """Send the open message and return the parsed response.

        passports is None when the kernel should sign with its main passport.
        """
        ...
