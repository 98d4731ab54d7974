"""
Country-specific tax and VAT number schemes.

Each function checks one national format whose arithmetic does not fit the
parameterised families in `checksums`. Like those, they expect a value that has
already passed the country's full-length pattern.
"""

from __future__ import annotations

from typing import Callable, Dict

from .checksums import _digit, cross_sum, luhn_ok, verhoeff_ok, weighted_mod11_ok


def at_tin_ok(s: str) -> bool:
    """
    Austrian tax number (9 digits).

    Odd positions among the first eight are doubled and reduced to their cross
    sum, even positions count as they are; the ninth digit is (80 - sum) mod 10.
    """
    total = 0
    for i, ch in enumerate(s[:8]):
        d = _digit(ch)
        total += cross_sum(2 * d) if i % 2 == 1 else d
    return (80 - total) % 10 == _digit(s[8])


# ---- Germany: 13-digit unified tax number (Steuernummer) --------------------------------
#
# Layout: state/office prefix, a fixed 0 at position 4, district and serial
# number, check digit. The check digit is computed on the state's own short
# form, with the method the state's tax administration uses.

def _de_2er(form: str) -> bool:
    """Summands n..1 and factors 2^n..2 over all but the last digit, mod 9 per digit."""
    n = len(form) - 1
    total = 0
    for i, ch in enumerate(form[:-1]):
        z = (_digit(ch) + n - i) % 10
        p = (z * 2 ** (n - i)) % 9
        if p == 0 and z != 0:
            p = 9
        total += p
    return (10 - total % 10) % 10 == _digit(form[-1])


def _de_11er(form: str) -> bool:
    weights = (5, 4, 3, 2, 7, 6, 5, 4, 3, 2)[-(len(form) - 1):]
    return weighted_mod11_ok(form, weights, on_ten="reject", on_eleven="zero")


def _de_alternating(form: str) -> bool:
    """Weights 1,2,1,2... from the left, products reduced to their cross sum."""
    total = 0
    for i, ch in enumerate(form[:-1]):
        total += cross_sum(_digit(ch) * (1 if i % 2 == 0 else 2))
    return (10 - total % 10) % 10 == _digit(form[-1])


def _long_form(s: str) -> str:
    # 11 digits: office number with three digits (e.g. Bavaria "181/815/08155")
    return s[1:4] + s[5:]


def _short_form(s: str) -> str:
    # 10 digits: office number with two digits (e.g. Berlin "21/815/08150")
    return s[2:4] + s[5:]


# state prefix -> (form, method)
_DE_STATES: Dict[str, tuple[Callable[[str], str], Callable[[str], bool]]] = {
    "10": (_long_form, _de_11er),          # Saarland
    "11": (_short_form, _de_2er),          # Berlin
    "21": (_short_form, _de_2er),          # Schleswig-Holstein
    "22": (_short_form, _de_11er),         # Hamburg
    "23": (_short_form, _de_2er),          # Niedersachsen
    "24": (_short_form, _de_11er),         # Bremen
    "26": (_short_form, _de_2er),          # Hessen
    "27": (_short_form, _de_alternating),  # Rheinland-Pfalz
    "28": (_short_form, _de_2er),          # Baden-Wuerttemberg
    "30": (_long_form, _de_11er),          # Brandenburg
    "31": (_long_form, _de_11er),          # Sachsen-Anhalt
    "32": (_long_form, _de_11er),          # Sachsen
    "40": (_long_form, _de_11er),          # Mecklenburg-Vorpommern
    "41": (_long_form, _de_11er),          # Thueringen
    "5": (_long_form, _de_2er),            # Nordrhein-Westfalen
    "9": (_long_form, _de_11er),           # Bayern
}


def de_tax_number_ok(s: str) -> bool:
    """German 13-digit tax number; unknown state prefixes fail."""
    entry = _DE_STATES.get(s[0]) if s[0] in "59" else _DE_STATES.get(s[:2])
    if entry is None:
        return False
    form, method = entry
    return method(form(s))


# ---- Spain --------------------------------------------------------------------------------

_NIF_LETTERS = "TRWAGMYFPDXBNJZSQVHLCKE"
_CIF_LETTERS = "JABCDEFGHI"


def es_nif_ok(s: str) -> bool:
    """
    Spanish DNI, NIE (X/Y/Z prefix) and CIF (company, letter prefix).

    DNI/NIE: the trailing letter is the number mod 23 looked up in a fixed
    alphabet. CIF: Luhn-like control over the seven digits, written as a digit
    or a letter depending on the organisation type.
    """
    first = s[0]
    if first.isdigit() or first in "XYZ":
        number = str("XYZ".index(first)) + s[1:8] if first in "XYZ" else s[:8]
        return _NIF_LETTERS[int(number) % 23] == s[8]

    total = 0
    for i, ch in enumerate(s[1:8]):
        d = _digit(ch)
        total += cross_sum(2 * d) if i % 2 == 0 else d
    control = (10 - total % 10) % 10
    if first in "KPQS":
        return s[8] == _CIF_LETTERS[control]
    if first in "ABEH":
        return s[8] == str(control)
    return s[8] in (str(control), _CIF_LETTERS[control])


def lu_matricule_ok(s: str) -> bool:
    """Luxembourg national number: Luhn check at 12, Verhoeff check at 13."""
    return luhn_ok(s[:12]) and verhoeff_ok(s[:11] + s[12])


# ---- VAT ----------------------------------------------------------------------------------

def at_vat_ok(s: str) -> bool:
    """Austrian UID digits (after the "U"): weights 1,2 with cross sum, offset 4."""
    total = sum(cross_sum(_digit(ch) * (1 if i % 2 == 0 else 2)) for i, ch in enumerate(s[:7]))
    return (10 - (total + 4) % 10) % 10 == _digit(s[7])


def be_vat_ok(s: str) -> bool:
    return 97 - int(s[:8]) % 97 == int(s[8:])


def fr_vat_ok(s: str) -> bool:
    """Numeric key: (12 + 3 * (SIREN mod 97)) mod 97."""
    return int(s[:2]) == (12 + 3 * (int(s[2:]) % 97)) % 97


def lu_vat_ok(s: str) -> bool:
    return int(s[:6]) % 89 == int(s[6:])
