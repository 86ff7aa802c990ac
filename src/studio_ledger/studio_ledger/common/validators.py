from __future__ import annotations

from typing import Iterable

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def unique_ids(values: Iterable[str], field_name: str = "ids") -> frozenset[str]:
    """Normalize a list of identifiers, dropping blanks and duplicates.

    A bare string or anything holding non-string items is rejected.
    """
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple, set, frozenset)):
        raise ValidationError(f"{field_name} must be a list of ids")
    if any(not isinstance(v, str) for v in values):
        raise ValidationError(f"{field_name} must contain only string ids")
    return frozenset(v.strip() for v in values if v.strip())
