"""
Separator stripping applied before pattern matching.

Users type identifiers the way they are printed ("DE89 3704 0044 0532 0130 00",
"181/815/08155", "1234-AB"). Rules are written against the canonical form, so
every value passes through `normalize` first. Each enabled option removes one
character class; the classes are disjoint, so the order they are applied in
never changes the result.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from ..config import NormalizeOptions


def strip_whitespace(s: str) -> str:
    """Remove every whitespace character (spaces, tabs, NBSP, ...)."""
    return "".join(ch for ch in s if not ch.isspace())


def strip_minus(s: str) -> str:
    return s.replace("-", "")


def strip_slash(s: str) -> str:
    return s.replace("/", "")


# Map option names (as used in config files) to callables.
_NORMALIZERS: Dict[str, Callable[[str], str]] = {
    "strip_whitespace": strip_whitespace,
    "strip_minus": strip_minus,
    "strip_slash": strip_slash,
}


def enabled(options: NormalizeOptions) -> List[str]:
    """Names of the normalizers switched on in `options`, in a stable order."""
    return [name for name in _NORMALIZERS if getattr(options, name)]


def normalize(raw: str, options: NormalizeOptions) -> str:
    """
    Apply the enabled normalizers to `raw`.

    The result may be empty; an empty value is rejected later by the pattern,
    not here.
    """
    text = raw
    for name in enabled(options):
        text = _NORMALIZERS[name](text)
    return text
