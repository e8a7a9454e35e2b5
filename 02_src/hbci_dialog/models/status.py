"""Message and dialog status models."""

from dataclasses import dataclass, field


@dataclass
class RetVal:
    """A single HBCI return value (Rueckmeldung)."""

    code: str  # four digits, e.g. "0010", "3076", "9050"
    text: str = ""
    segref: str | None = None  # referenced request segment, None for global values

    def is_success(self) -> bool:
        return self.code.startswith("0")

    def is_warning(self) -> bool:
        return self.code.startswith("3")

    def is_error(self) -> bool:
        return self.code.startswith("9")

    def __str__(self) -> str:
        ref = f" ({self.segref})" if self.segref else ""
        return f"{self.code}{ref}: {self.text}"


@dataclass
class MsgStatus:
    """Outcome of a single wire message."""

    data: dict[str, str] = field(default_factory=dict)
    exceptions: list[Exception] = field(default_factory=list)
    global_status: list[RetVal] = field(default_factory=list)
    segment_status: list[RetVal] = field(default_factory=list)

    def add_exception(self, e: Exception) -> None:
        self.exceptions.append(e)

    def has_exceptions(self) -> bool:
        return len(self.exceptions) > 0

    def get_data(self) -> dict[str, str]:
        return self.data

    def has_errors(self) -> bool:
        """True if the server reported any 9xxx return value."""
        return any(r.is_error() for r in self.global_status + self.segment_status)

    def is_ok(self) -> bool:
        return not self.has_exceptions() and not self.has_errors()

    def error_string(self) -> str:
        lines = [str(e) for e in self.exceptions]
        lines.extend(
            str(r) for r in self.global_status + self.segment_status if r.is_error()
        )
        return "\n".join(lines)


@dataclass
class DialogStatus:
    """Composite result of Dialog.do_it().

    Each part carries its own success or exceptions; a failed init leaves
    messages empty and end unset.
    """

    init: MsgStatus | None = None
    messages: list[MsgStatus] = field(default_factory=list)
    end: MsgStatus | None = None

    def is_ok(self) -> bool:
        if self.init is None or not self.init.is_ok():
            return False
        if any(not m.is_ok() for m in self.messages):
            return False
        return self.end is not None and self.end.is_ok()

    def error_string(self) -> str:
        parts = []
        if self.init is not None and not self.init.is_ok():
            parts.append(f"init: {self.init.error_string()}")
        for i, m in enumerate(self.messages, start=1):
            if not m.is_ok():
                parts.append(f"message {i}: {m.error_string()}")
        if self.end is not None and not self.end.is_ok():
            parts.append(f"end: {self.end.error_string()}")
        return "\n".join(parts)
