"""Message and MessageQueue models."""

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..tasks import ITask


class Message:
    """Ordered list of tasks destined for a single wire message."""

    def __init__(self, tasks: list["ITask"] | None = None):
        self._tasks: list["ITask"] = list(tasks) if tasks else []

    def append(self, task: "ITask") -> None:
        self._tasks.append(task)

    @property
    def tasks(self) -> list["ITask"]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __repr__(self) -> str:
        names = ", ".join(t.name for t in self._tasks)
        return f"Message([{names}])"


class MessageQueue:
    """FIFO of messages to be sent in the jobs stage.

    A fresh queue already holds one empty message, so there is always a tail
    for add_task() to pack into.
    """

    def __init__(self):
        self._messages: deque[Message] = deque([Message()])

    def append(self, message: Message) -> None:
        """Append a message at the tail."""
        self._messages.append(message)

    def last(self) -> Message | None:
        """Peek at the tail message."""
        return self._messages[-1] if self._messages else None

    def poll(self) -> Message | None:
        """Remove and return the head message, None when empty."""
        return self._messages.popleft() if self._messages else None

    def messages(self) -> list[Message]:
        return list(self._messages)

    def task_count(self) -> int:
        return sum(len(m) for m in self._messages)

    def __len__(self) -> int:
        return len(self._messages)
