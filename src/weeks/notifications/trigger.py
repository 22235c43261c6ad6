"""One-shot signal that opens the reflection entry after a notification tap."""

import logging
from typing import Any

from .schedule import DAILY_REFLECTION_TYPE, NOTIFICATION_TYPE_KEY

logger = logging.getLogger(__name__)


class NavigationTrigger:
    """Raised by a notification tap, consumed once by the front end."""

    def __init__(self) -> None:
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def handle_notification_tap(self, user_info: dict[str, Any]) -> bool:
        """Raise the trigger if the tapped notification asks for a reflection.

        Returns:
            True if the trigger was raised.
        """
        if user_info.get(NOTIFICATION_TYPE_KEY) != DAILY_REFLECTION_TYPE:
            return False

        logger.debug("Reflection entry requested by notification tap")
        self._pending = True
        return True

    def consume(self) -> bool:
        """Return whether the trigger was raised, and reset it."""
        pending = self._pending
        self._pending = False
        return pending
