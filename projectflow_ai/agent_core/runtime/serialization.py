"""JSON-safe conversion of event payloads.

Agents log arbitrary dicts; the event store persists them as JSON text.
``to_json_safe`` downgrades every value JSON (and JavaScript consumers)
cannot represent faithfully, so persisting an event never fails on its
payload:

- ints beyond +/-(2**53 - 1) become decimal strings,
- dates, datetimes and times become ISO-8601 strings,
- ``Decimal`` and ``UUID`` become strings, enums their value,
- pydantic models become (camelCase) dicts, sets and tuples become lists,
- non-finite floats and any other object become ``str(value)``.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

MAX_SAFE_INTEGER = 2**53 - 1


def to_json_safe(value: Any) -> Any:
    """Recursively convert ``value`` into plain JSON-compatible data."""
    if isinstance(value, Enum):
        return to_json_safe(value.value)
    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        return value if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER else str(value)
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, BaseModel):
        return to_json_safe(value.model_dump(by_alias=True))
    if isinstance(value, Mapping):
        return {str(key): to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_safe(item) for item in value]
    return str(value)


def safe_json_dumps(value: Any) -> str:
    """Serialize ``value`` to JSON text after ``to_json_safe`` conversion."""
    return json.dumps(to_json_safe(value))
