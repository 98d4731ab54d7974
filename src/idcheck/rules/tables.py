"""
Rule tables: per-country format patterns plus an optional checksum tag.

What this does
--------------
- Loads YAML "rule packs" (one per identifier family, plus `standard.yaml` for
  identifiers that carry no country, plus the BIC country list).
- Compiles every pattern once and resolves every checksum tag against the
  closed registry below.
- Freezes the result: tables are read-only mappings of frozen `Rule`s and can
  be shared by any number of callers.

Rule pack shape
---------------
Each entry under `countries:` (or `kinds:`) is one of:
  1) a string        -> a pattern with no checksum
  2) a mapping       -> {regex, checksum?, params?}
  3) a list of 1)/2) -> alternative formats; the value must match one of them

A pattern may contain a named group `id`; the checksum then only sees that
group (used to skip optional country prefixes and fixed suffixes).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple
import re

import yaml

from ..config import IdentifierFamily
from . import checksums, tax


class RuleTableError(ValueError):
    """A rule pack is malformed (bad shape, bad regex or unknown checksum tag)."""


# ---- Closed set of checksum algorithms ---------------------------------------------------

class Checksum(str, Enum):
    LUHN = "luhn"
    GS1 = "gs1"
    ISBN10 = "isbn10"
    ISIN = "isin"
    ISO7064_MOD97_10 = "iso7064_mod97_10"
    ISO7064_MOD11_10 = "iso7064_mod11_10"
    WEIGHTED_SUM = "weighted_sum"
    WEIGHTED_MOD10 = "weighted_mod10"
    WEIGHTED_MOD11 = "weighted_mod11"
    WEIGHTED_REMAINDER = "weighted_remainder"
    TWO_PASS_MOD11 = "two_pass_mod11"
    VERHOEFF = "verhoeff"
    AT_TIN = "at_tin"
    DE_TAX_NUMBER = "de_tax_number"
    ES_NIF = "es_nif"
    LU_MATRICULE = "lu_matricule"
    AT_VAT = "at_vat"
    BE_VAT = "be_vat"
    FR_VAT = "fr_vat"
    LU_VAT = "lu_vat"


# Map checksum tags (as used in YAML) to callables.
ALGORITHMS: Dict[Checksum, Callable[..., bool]] = {
    Checksum.LUHN: checksums.luhn_ok,
    Checksum.GS1: checksums.gs1_ok,
    Checksum.ISBN10: checksums.isbn10_ok,
    Checksum.ISIN: checksums.isin_ok,
    Checksum.ISO7064_MOD97_10: checksums.iso7064_mod97_10_ok,
    Checksum.ISO7064_MOD11_10: checksums.iso7064_mod11_10_ok,
    Checksum.WEIGHTED_SUM: checksums.weighted_sum_ok,
    Checksum.WEIGHTED_MOD10: checksums.weighted_mod10_ok,
    Checksum.WEIGHTED_MOD11: checksums.weighted_mod11_ok,
    Checksum.WEIGHTED_REMAINDER: checksums.weighted_remainder_ok,
    Checksum.TWO_PASS_MOD11: checksums.two_pass_mod11_ok,
    Checksum.VERHOEFF: checksums.verhoeff_ok,
    Checksum.AT_TIN: tax.at_tin_ok,
    Checksum.DE_TAX_NUMBER: tax.de_tax_number_ok,
    Checksum.ES_NIF: tax.es_nif_ok,
    Checksum.LU_MATRICULE: tax.lu_matricule_ok,
    Checksum.AT_VAT: tax.at_vat_ok,
    Checksum.BE_VAT: tax.be_vat_ok,
    Checksum.FR_VAT: tax.fr_vat_ok,
    Checksum.LU_VAT: tax.lu_vat_ok,
}


# ---- Data model --------------------------------------------------------------------------

@dataclass(frozen=True)
class Rule:
    """
    One accepted format for one country (or one country-less kind).

    Attributes:
        pattern:  compiled regex (ASCII classes: `\d` is 0-9), always applied with `fullmatch`.
        checksum: algorithm tag, or None for a pattern-only rule.
        params:   keyword arguments for the algorithm (weights, modulus, ...).
    """
    pattern: re.Pattern
    checksum: Optional[Checksum] = None
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def match(self, value: str) -> Optional[str]:
        """Return the part the checksum should see, or None on a pattern miss."""
        m = self.pattern.fullmatch(value)
        if m is None:
            return None
        if "id" in self.pattern.groupindex:
            return m.group("id")
        return m.group(0)

    def checksum_ok(self, part: str) -> bool:
        if self.checksum is None:
            return True
        return ALGORITHMS[self.checksum](part, **self.params)


RuleTable = Mapping[str, Tuple[Rule, ...]]

_PACKAGE = "idcheck.rules.rulesets"


# ---- Compilation helpers -----------------------------------------------------------------

def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _compile_rule(key: str, spec: Any) -> Rule:
    """Turn one YAML rule into a `Rule`. Shorthand strings are pattern-only rules."""
    if isinstance(spec, str):
        spec = {"regex": spec}
    if not isinstance(spec, dict) or "regex" not in spec:
        raise RuleTableError(f"{key}: rule needs a 'regex' field, got {spec!r}")

    try:
        pattern = re.compile(spec["regex"], re.ASCII)
    except re.error as e:
        raise RuleTableError(f"{key}: invalid regex {spec['regex']!r}: {e}") from e

    checksum = None
    if spec.get("checksum"):
        try:
            checksum = Checksum(spec["checksum"])
        except ValueError as e:
            raise RuleTableError(f"{key}: unknown checksum {spec['checksum']!r}") from e

    params = {k: _freeze(v) for k, v in (spec.get("params") or {}).items()}
    return Rule(pattern=pattern, checksum=checksum, params=MappingProxyType(params))


def compile_table(entries: Mapping[str, Any]) -> RuleTable:
    """Compile a `{key: rule-or-list}` mapping into a frozen table of rule tuples."""
    table: Dict[str, Tuple[Rule, ...]] = {}
    for key, spec in (entries or {}).items():
        specs: List[Any] = spec if isinstance(spec, list) else [spec]
        if not specs:
            raise RuleTableError(f"{key}: empty rule list")
        table[str(key)] = tuple(_compile_rule(str(key), s) for s in specs)
    return MappingProxyType(table)


def _read_pack(fname: str) -> Dict[str, Any]:
    text = resources.files(_PACKAGE).joinpath(fname).read_text()
    return yaml.safe_load(text) or {}


# ---- Public API --------------------------------------------------------------------------

@lru_cache(maxsize=None)
def family_table(family: IdentifierFamily) -> RuleTable:
    """Rule table for a country-keyed family, built once per process."""
    data = _read_pack(f"{IdentifierFamily(family).value}.yaml")
    return compile_table(data.get("countries", {}))


@lru_cache(maxsize=None)
def standard_table() -> RuleTable:
    """Rules for identifiers without a country (ISBN, GTIN, ISIN, BIC, ...)."""
    return compile_table(_read_pack("standard.yaml").get("kinds", {}))


@lru_cache(maxsize=None)
def bic_countries() -> FrozenSet[str]:
    """Country codes allowed at positions 5-6 of a BIC."""
    return frozenset(_read_pack("bic.yaml").get("countries", []))
