"""Helpers shared by the CRUD modules."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models import MAX_ID

# Payload keys whose ORM attribute has a different name
_COLUMN_RENAMES = {"metadata": "meta"}


def to_column_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Map schema field names onto ORM attribute names."""
    return {_COLUMN_RENAMES.get(key, key): value for key, value in values.items()}


def apply_updates(obj: Any, updates: Dict[str, Any]) -> Any:
    for key, value in to_column_values(updates).items():
        setattr(obj, key, value)
    return obj


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to UTC; naive values are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_valid_id(value: Any) -> bool:
    """True if ``value`` can be a primary key; anything else matches no row."""
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= MAX_ID
