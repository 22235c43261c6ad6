"""Data models for daily reflections."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ReflectionType(Enum):
    """How the day was spent. Values are the labels written to storage."""

    SPENT_WELL = "Spent Well"
    WASTED = "Wasted"

    @property
    def label(self) -> str:
        return self.value


# Stored rows may carry labels from older releases.
_LABELS: dict[str, ReflectionType] = {
    "Meaningful": ReflectionType.SPENT_WELL,
    "Spent Well": ReflectionType.SPENT_WELL,
    "Wasted": ReflectionType.WASTED,
}

# Accepted from people typing on the CLI or in chat.
_USER_ALIASES: dict[str, ReflectionType] = {
    "spent well": ReflectionType.SPENT_WELL,
    "spent-well": ReflectionType.SPENT_WELL,
    "spent_well": ReflectionType.SPENT_WELL,
    "spent": ReflectionType.SPENT_WELL,
    "good": ReflectionType.SPENT_WELL,
    "meaningful": ReflectionType.SPENT_WELL,
    "wasted": ReflectionType.WASTED,
}


def decode_reflection_type(label: str | None) -> ReflectionType:
    """Map a stored label to a ReflectionType.

    Unknown labels fall back to SPENT_WELL instead of failing, so rows written
    by any release stay readable.
    """
    if label is None:
        return ReflectionType.SPENT_WELL
    return _LABELS.get(label, ReflectionType.SPENT_WELL)


def parse_reflection_type(text: str) -> ReflectionType:
    """Parse a reflection type typed by a user.

    Raises:
        ValueError: If the text names no known type.
    """
    key = " ".join(text.strip().lower().split())
    try:
        return _USER_ALIASES[key]
    except KeyError:
        raise ValueError(
            f"Unknown reflection type '{text}'. Use 'spent-well' or 'wasted'."
        ) from None


@dataclass(frozen=True)
class Reflection:
    """A short note about how a day went.

    Attributes:
        type: Whether the day was spent well or wasted.
        explanation: Free text written by the user.
        date: When the reflection was written.
        id: Database ID, None for reflections not yet stored.
    """

    type: ReflectionType = ReflectionType.SPENT_WELL
    explanation: str = ""
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None
