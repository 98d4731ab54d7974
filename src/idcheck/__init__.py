"""idcheck: country-aware validation of tax, VAT, bank, trade-item and postal identifiers."""

from .config import IdentifierFamily, IdCheckConfig, NormalizeOptions, ValidatorConfig, load_config
from .engine.dispatcher import Validator, check, validate

__version__ = "0.1.0"

__all__ = [
    "IdentifierFamily",
    "IdCheckConfig",
    "NormalizeOptions",
    "ValidatorConfig",
    "Validator",
    "check",
    "load_config",
    "validate",
]
