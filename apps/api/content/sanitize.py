"""Write-payload sanitizer for the remote store."""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from pydantic import BaseModel


def _representable(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return True


def sanitize(value: Any) -> Any:
    """
    Recursively drop values the remote store cannot represent.

    Dict keys whose value is None (or a non-finite float) are removed, list
    entries of the same kind are skipped, and pydantic models are dumped to
    plain dicts first. Everything else is returned unchanged.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, dict):
        return {
            key: sanitize(item)
            for key, item in value.items()
            if _representable(item)
        }
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value if _representable(item)]
    return value


def sanitize_record(record: BaseModel, exclude: Optional[Iterable[str]] = None) -> dict[str, Any]:
    """Sanitize a known record shape, leaving out the excluded top-level fields."""
    payload = record.model_dump(exclude=set(exclude or ()))
    return sanitize(payload)
