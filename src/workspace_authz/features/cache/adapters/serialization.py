"""JSON serialization shared by the cache adapters."""

import json
from datetime import date, datetime
from typing import Any
from uuid import UUID

from ....core.exceptions import CacheSerializationError


def _default(obj: Any) -> Any:
    """Handle non-standard JSON types."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    """Serialize a cache value to one JSON document."""
    try:
        return json.dumps(value, default=_default, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(f"Failed to serialize cache value: {e}")


def loads(payload: Any) -> Any:
    """Deserialize a JSON document read from the cache."""
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    try:
        return json.loads(payload)
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(f"Failed to deserialize cache value: {e}")
