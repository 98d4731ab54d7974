"""Validation engine: the dispatcher and record-level comparators."""

from .dispatcher import Validator, check, validate

__all__ = ["Validator", "check", "validate"]
