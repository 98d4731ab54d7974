"""
Cross-field checks over a record (form, dict, dataclass, ORM row, ...).

Values are pulled out with accessor closures supplied by the caller, so
nothing here needs to know what the record is. An accessor returns a string or
None; a missing value is "nothing to check" and passes, except where a rule is
about emptiness itself.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from ..config import NormalizeOptions
from .dispatcher import FamilyLike, Validator

Accessor = Callable[[Any], Optional[str]]
RecordCheck = Callable[[Any], bool]


def field(name: str) -> Accessor:
    """
    Accessor for a mapping key or attribute. Dotted names walk nested values
    ("address.country"); any missing step yields None.
    """
    parts = name.split(".")

    def get(record: Any) -> Optional[str]:
        current = record
        for part in parts:
            if current is None:
                return None
            if isinstance(current, Mapping):
                current = current.get(part)
            else:
                current = getattr(current, part, None)
        return None if current is None else str(current)

    return get


def _value(accessor: Accessor, record: Any) -> Optional[str]:
    v = accessor(record)
    return v if v else None


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


# ---- Comparators -------------------------------------------------------------------------

def equal(first: Accessor, second: Accessor) -> RecordCheck:
    """Both fields hold the same value (two empty fields are equal)."""
    return lambda record: _value(first, record) == _value(second, record)


def not_equal(first: Accessor, second: Accessor) -> RecordCheck:
    def check(record: Any) -> bool:
        a, b = _value(first, record), _value(second, record)
        if a is None or b is None:
            return True
        return a != b

    return check


def empty_if_other_empty(target: Accessor, other: Accessor) -> RecordCheck:
    return lambda record: _value(other, record) is not None or _value(target, record) is None


def empty_if_other_not_empty(target: Accessor, other: Accessor) -> RecordCheck:
    return lambda record: _value(other, record) is None or _value(target, record) is None


def not_empty_if_other_empty(target: Accessor, other: Accessor) -> RecordCheck:
    return lambda record: _value(other, record) is not None or _value(target, record) is not None


def not_empty_if_other_not_empty(target: Accessor, other: Accessor) -> RecordCheck:
    return lambda record: _value(other, record) is None or _value(target, record) is not None


def levenshtein_at_least(first: Accessor, second: Accessor, min_distance: int) -> RecordCheck:
    """The two values differ by at least `min_distance` edits (e.g. old vs. new password)."""

    def check(record: Any) -> bool:
        a, b = _value(first, record), _value(second, record)
        if a is None or b is None:
            return True
        return levenshtein(a, b) >= min_distance

    return check


def country_field_valid(
    family: FamilyLike,
    country: Accessor,
    value: Accessor,
    validator: Optional[Validator] = None,
    options: Optional[NormalizeOptions] = None,
) -> RecordCheck:
    """Validate one field as an identifier of the country held in another field."""
    v = validator or Validator()

    def check(record: Any) -> bool:
        code, raw = _value(country, record), _value(value, record)
        if code is None or raw is None:
            return True
        return v.validate(family, code, raw, options)

    return check
