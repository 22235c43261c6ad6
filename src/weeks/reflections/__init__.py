"""Daily reflections and their storage."""

from .models import (
    Reflection,
    ReflectionType,
    decode_reflection_type,
    parse_reflection_type,
)
from .store import ReflectionStore

__all__ = [
    "Reflection",
    "ReflectionStore",
    "ReflectionType",
    "decode_reflection_type",
    "parse_reflection_type",
]
