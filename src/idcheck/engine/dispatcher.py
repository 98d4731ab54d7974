"""
Normalize, look up the country's rule, match the pattern, verify the checksum.

Order of operations per call:
  1) normalize -> strip the separators enabled for the family (or per call)
  2) lookup    -> country code in the family's rule table; no entry = no constraint
  3) pattern   -> full match against each alternative format
  4) checksum  -> only for formats whose pattern matched

Step 4 never runs on a pattern miss, so checksum code can rely on the exact
length and character class its pattern pinned.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple, Union

import structlog

from ..config import IdentifierFamily, NormalizeOptions, ValidatorConfig
from ..rules.normalize import normalize
from ..rules.tables import Rule, bic_countries, family_table, standard_table

log = structlog.get_logger()

FamilyLike = Union[IdentifierFamily, str]


def _apply(rules: Sequence[Rule], value: str) -> Tuple[bool, str]:
    """Return (verdict, reason) for a value against alternative rules."""
    matched: List[Tuple[Rule, str]] = []
    for rule in rules:
        part = rule.match(value)
        if part is not None:
            matched.append((rule, part))
    if not matched:
        return False, "pattern"
    if any(rule.checksum_ok(part) for rule, part in matched):
        return True, "ok"
    return False, "checksum"


class Validator:
    """
    Single-value validation against the static rule tables.

    The validator holds configuration only; rule tables are process-wide,
    read-only and shared, so one instance can serve any number of callers.
    """

    def __init__(self, cfg: Optional[ValidatorConfig] = None) -> None:
        self.cfg = cfg or ValidatorConfig()

    # -- Country-keyed families -------------------------------------------------------------

    def validate(
        self,
        family: FamilyLike,
        country: str,
        value: str,
        options: Optional[NormalizeOptions] = None,
        allow_lower_case_country_code: Optional[bool] = None,
    ) -> bool:
        """
        Validate `value` as an identifier of `family` issued in `country`.

        Countries without an entry in the family's table are unconstrained and
        pass. `options` replaces the family's default normalization for this
        call; `allow_lower_case_country_code` overrides the configured flag.
        """
        family = IdentifierFamily(family)
        opts = options if options is not None else self.cfg.options_for(family.value)
        lower_ok = (
            self.cfg.allow_lower_case_country_code
            if allow_lower_case_country_code is None
            else allow_lower_case_country_code
        )

        code = country.upper() if lower_ok else country
        rules = family_table(family).get(code)
        if rules is None:
            if code != code.upper():
                # A lowercase code never finds a rule and so disables the check.
                log.warning("lowercase_country_code_unconstrained", family=family.value, country=code)
            log.debug("verdict", family=family.value, country=code, verdict=True, reason="unconstrained")
            return True

        verdict, reason = _apply(rules, normalize(value, opts))
        log.debug("verdict", family=family.value, country=code, verdict=verdict, reason=reason)
        return verdict

    def countries(self, family: FamilyLike) -> List[str]:
        """Country codes that have at least one rule for `family`."""
        return sorted(family_table(IdentifierFamily(family)))

    # -- Identifiers without a country field ------------------------------------------------

    @staticmethod
    def kinds() -> List[str]:
        return sorted(standard_table())

    def check(self, kind: str, value: str, options: Optional[NormalizeOptions] = None) -> bool:
        """
        Validate a country-less identifier (ISBN, GTIN, GLN, ISIN, BIC, IBAN, ...).

        Raises:
            ValueError: `kind` is not a known identifier kind.
        """
        rules = standard_table().get(kind)
        if rules is None:
            raise ValueError(f"unknown identifier kind: {kind!r}")
        opts = options if options is not None else self.cfg.options_for(kind)
        norm = normalize(value, opts).upper()

        if kind == "iban":
            # Prefer the issuing country's exact format when we know it.
            rules = family_table(IdentifierFamily.IBAN).get(norm[:2], rules)

        verdict, reason = _apply(rules, norm)
        if verdict and kind == "bic" and norm[4:6] not in bic_countries():
            verdict, reason = False, "country"
        log.debug("verdict", kind=kind, verdict=verdict, reason=reason)
        return verdict


_default = Validator()


def validate(
    family: FamilyLike,
    country: str,
    value: str,
    options: Optional[NormalizeOptions] = None,
    allow_lower_case_country_code: bool = False,
) -> bool:
    """Module-level shortcut using the default configuration."""
    return _default.validate(family, country, value, options, allow_lower_case_country_code)


def check(kind: str, value: str, options: Optional[NormalizeOptions] = None) -> bool:
    return _default.check(kind, value, options)
