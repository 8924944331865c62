"""Cache value encoding: the boundary between Python values and stored strings.

Values are stored as JSON. Pydantic models are dumped in JSON mode, so a
cached model comes back as a plain dict; callers that want the model again
validate it themselves (Model.model_validate(value)).
"""

import json
from datetime import date, datetime, time
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from project_cache.domain.exceptions import CacheSerializationError


def _default(obj: Any) -> Any:
    """json.dumps hook for the non-native types the cache accepts."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not cacheable")


def encode(value: Any) -> str:
    """Encode a value for storage.

    Raises:
        CacheSerializationError: If the value (or a nested value) is not encodable.
    """
    try:
        return json.dumps(value, default=_default, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(f"Cannot encode value for cache: {e}") from e


def decode(raw: str | bytes) -> Any:
    """Decode a stored payload.

    Raises:
        CacheSerializationError: If the payload is not valid JSON.
    """
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CacheSerializationError(f"Cannot decode cached payload: {e}") from e
