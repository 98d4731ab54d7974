from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional
import yaml
from pydantic import BaseModel, Field


# ---- Identifier families backed by a per-country rule table ----
class IdentifierFamily(str, Enum):
    TIN = "tin"
    VAT = "vat"
    IBAN = "iban"
    POSTAL_CODE = "postal_code"


# ---- Separator stripping (which character classes to drop) ----
class NormalizeOptions(BaseModel):
    model_config = {"frozen": True}

    strip_whitespace: bool = False
    strip_minus: bool = False
    strip_slash: bool = False


def _default_normalize() -> Dict[str, NormalizeOptions]:
    ws = NormalizeOptions(strip_whitespace=True)
    ws_minus = NormalizeOptions(strip_whitespace=True, strip_minus=True)
    return {
        # families
        "tin": NormalizeOptions(strip_whitespace=True, strip_slash=True),
        "vat": ws_minus,
        "iban": ws,
        "postal_code": ws_minus,
        # country-less kinds
        "isbn": ws_minus,
        "isbn10": ws_minus,
        "isbn13": ws_minus,
        "isin": ws,
        "gtin8": ws_minus,
        "gtin12": ws_minus,
        "gtin13": ws_minus,
        "gtin14": ws_minus,
        "ean": ws_minus,
        "gln": ws_minus,
        "credit_card": ws_minus,
        "bic": ws,
    }


# ---- Validator behaviour (toggle and tune without code changes) ----
class ValidatorConfig(BaseModel):
    # A lowercase code is only upper-cased when this is on. Otherwise it is
    # looked up as given, finds no rule and passes unconstrained.
    allow_lower_case_country_code: bool = False
    normalize: Dict[str, NormalizeOptions] = Field(default_factory=_default_normalize)

    def options_for(self, name: str) -> NormalizeOptions:
        """Default normalization for a family or kind; nothing stripped if unknown."""
        return self.normalize.get(name, NormalizeOptions())


# ---- Root config ----
class IdCheckConfig(BaseModel):
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)


# ---- Loader ----
def load_config(path: Optional[Path]) -> IdCheckConfig:
    if not path:
        return IdCheckConfig()
    data = yaml.safe_load(Path(path).read_text()) or {}
    validator = data.get("validator") or {}
    # Partial `normalize` sections override the defaults key by key.
    overrides = validator.get("normalize") or {}
    if overrides:
        merged = {k: v.model_dump() for k, v in _default_normalize().items()}
        merged.update(overrides)
        validator = {**validator, "normalize": merged}
    return IdCheckConfig(**{**data, "validator": validator})
