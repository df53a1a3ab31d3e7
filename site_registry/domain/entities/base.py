"""
Base helpers for domain entities.
These are pure Python with no external dependencies.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Return current UTC timestamp."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive timestamps (e.g. read back from SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Accepts plain dates ("2024-03-01") and a trailing "Z".

    Raises:
        ValueError: if the value is not a timestamp
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        return ensure_utc(datetime.fromisoformat(text))
    raise ValueError(f"Not a timestamp: {value!r}")


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class Specification(ABC):
    """
    Base class for specifications (predicate pattern).

    Specifications encapsulate business rules that can be combined
    and reused for filtering and validation.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: Any) -> bool:
        """Check if candidate satisfies this specification."""
        pass
