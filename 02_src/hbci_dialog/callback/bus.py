"""CallbackBus implementation for dialog progress notifications."""

from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from ..logging_config import get_logger
from ..models import CallbackEvent, CallbackReason, StatusEvent

logger = get_logger(__name__)


CallbackHandler = Callable[[CallbackEvent], None]


class ICallback(Protocol):
    """Notification surface the dialog reports progress to."""

    def status(self, passport: Any, event: StatusEvent, data: Any = None) -> None:
        """Report a progress notification."""
        ...

    def callback(self, passport: Any, reason: CallbackReason, message: str) -> None:
        """Deliver content (e.g. an institute message) to the user."""
        ...


class CallbackBus:
    """In-process fan-out of dialog notifications to subscribed handlers."""

    def __init__(self):
        self._subscribers: list[CallbackHandler] = []

    def subscribe(self, handler: CallbackHandler) -> None:
        """Subscribe a handler to all notifications."""
        self._subscribers.append(handler)

    def unsubscribe(self, handler: CallbackHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def status(self, passport: Any, event: StatusEvent, data: Any = None) -> None:
        """Publish a status notification."""
        self._publish(CallbackEvent(event, passport, data, datetime.now(timezone.utc)))

    def callback(self, passport: Any, reason: CallbackReason, message: str) -> None:
        """Publish a user callback."""
        self._publish(
            CallbackEvent(reason, passport, message, datetime.now(timezone.utc))
        )

    def _publish(self, event: CallbackEvent) -> None:
        logger.debug("callback %s", event.kind.value)

        for i, handler in enumerate(list(self._subscribers)):
            try:
                handler(event)
            except Exception as e:
                # Handler failures must not disturb the running dialog
                logger.error("Error in callback handler %s: %s", i, e, exc_info=True)
