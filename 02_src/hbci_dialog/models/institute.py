"""Institute message model and segment counter helper."""

from dataclasses import dataclass

from ..exceptions import InstituteMessageMissing


def with_counter(prefix: str, idx: int) -> str:
    """Name of the idx-th (zero-based) repetition of a segment or group.

    The first occurrence carries no suffix, later ones are numbered from 2:
    GV, GV_2, GV_3, ...
    """
    if idx == 0:
        return prefix
    return f"{prefix}_{idx + 1}"


@dataclass
class InstituteMessage:
    """Free-text message from the bank delivered with the init response."""

    subject: str
    text: str

    @classmethod
    def from_data(cls, data: dict[str, str], header: str) -> "InstituteMessage":
        """Read the message stored under header.

        Raises InstituteMessageMissing if there is none.
        """
        subject = data.get(f"{header}.betreff")
        if subject is None:
            raise InstituteMessageMissing(header)
        return cls(subject=subject, text=data.get(f"{header}.text", ""))

    def __str__(self) -> str:
        return f"{self.subject}: {self.text}"
