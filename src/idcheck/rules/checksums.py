"""
Check-digit algorithms shared by many identifier types.

Why this file exists
--------------------
A format pattern only says a value *looks* right. The check digit catches the
typos people actually make (a wrong digit, two swapped digits). Every function
here takes a value that has already passed a full-length pattern match and
returns True or False.

Design principles
-----------------
- **Pure functions**: no state, no I/O; easy to test in isolation.
- **Fixed shape input**: positions are read directly. Calling a function on a
  value of the wrong length is a bug in the caller and may raise.
- **Parameterised families**: weighted sums take their weight vector from the
  rule data, so a new country is a data entry, not new code.
"""

from __future__ import annotations

from typing import Sequence


def _digit(ch: str) -> int:
    return ord(ch) - 48  # '0' -> 48


def letters_to_digits(s: str) -> str:
    """Replace letters A..Z with 10..35 and keep digits as they are."""
    out = []
    for ch in s:
        if ch.isdigit():
            out.append(ch)
        else:
            out.append(str(ord(ch) - 55))  # ord('A') == 65 -> 10
    return "".join(out)


def cross_sum(n: int) -> int:
    """Sum of the decimal digits of `n` (16 -> 7)."""
    total = 0
    while n:
        total += n % 10
        n //= 10
    return total


# ---- mod 10 family -----------------------------------------------------------------------

def luhn_ok(s: str) -> bool:
    """
    Validate a digit string using the Luhn checksum (a.k.a. "mod 10").

    Luhn is used by payment card numbers, Italian and Swedish VAT numbers and,
    after letter expansion, ISINs.
    """
    total = 0
    # Process digits from right to left; double every second digit.
    for i, ch in enumerate(reversed(s)):
        d = _digit(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9  # sum of digits for doubled value (e.g., 8*2 -> 16 -> 1+6 -> 7)
        total += d
    return (total % 10) == 0


def gs1_ok(s: str) -> bool:
    """
    GS1 check digit (GTIN-8/12/13/14, EAN, GLN, ISBN-13).

    Weights alternate 3,1,3,1... starting from the digit left of the check
    digit, so the same code covers every length.
    """
    total = 0
    for i, ch in enumerate(reversed(s[:-1])):
        total += _digit(ch) * (3 if i % 2 == 0 else 1)
    return (10 - total % 10) % 10 == _digit(s[-1])


def isin_ok(s: str) -> bool:
    """ISIN: expand letters to two-digit numbers, then run Luhn over the result."""
    return luhn_ok(letters_to_digits(s))


def weighted_mod10_ok(s: str, weights: Sequence[int]) -> bool:
    """check = (10 - sum(w*d) mod 10) mod 10, check digit right after the weighted run."""
    total = sum(w * _digit(ch) for w, ch in zip(weights, s))
    return (10 - total % 10) % 10 == _digit(s[len(weights)])


# ---- mod 11 family -----------------------------------------------------------------------

def isbn10_ok(s: str) -> bool:
    """Weights 10..1 over all ten characters, X standing for 10; total mod 11 == 0."""
    total = 0
    for i, ch in enumerate(s):
        value = 10 if ch == "X" else _digit(ch)
        total += (10 - i) * value
    return total % 11 == 0


def iso7064_mod11_10_ok(s: str) -> bool:
    """
    ISO 7064 MOD 11,10 (German tax identification number, German and Croatian VAT).

    Start with 10. For each digit except the last: add it, reduce mod 10
    (0 counts as 10), double, reduce mod 11. The check digit is 11 minus the
    result, where 10 maps to 0.
    """
    product = 10
    for ch in s[:-1]:
        total = (_digit(ch) + product) % 10
        if total == 0:
            total = 10
        product = (total * 2) % 11
    check = 11 - product
    if check == 10:
        check = 0
    return check == _digit(s[-1])


def weighted_sum_ok(s: str, weights: Sequence[int], modulus: int = 11) -> bool:
    """Weights cover the check digit too; the weighted total must be divisible by `modulus`."""
    total = sum(w * _digit(ch) for w, ch in zip(weights, s))
    return total % modulus == 0


def weighted_mod11_ok(
    s: str,
    weights: Sequence[int],
    on_ten: str = "reject",
    on_eleven: str = "zero",
) -> bool:
    """
    check = 11 - (sum(w*d) mod 11).

    The two out-of-range results are mapped per scheme: `"zero"` turns them
    into check digit 0, `"reject"` makes every value with that sum invalid.
    """
    total = sum(w * _digit(ch) for w, ch in zip(weights, s))
    check = 11 - total % 11
    if check == 10:
        if on_ten == "reject":
            return False
        check = 0
    elif check == 11:
        if on_eleven == "reject":
            return False
        check = 0
    return check == _digit(s[len(weights)])


def weighted_remainder_ok(
    s: str,
    weights: Sequence[int],
    modulus: int = 11,
    mod10: bool = False,
) -> bool:
    """check = sum(w*d) mod `modulus` (then mod 10 when `mod10` is set)."""
    total = sum(w * _digit(ch) for w, ch in zip(weights, s))
    check = total % modulus
    if mod10:
        check %= 10
    return check == _digit(s[len(weights)])


def two_pass_mod11_ok(s: str) -> bool:
    """
    Estonian and Lithuanian personal codes, Lithuanian VAT numbers.

    First pass weights 1,2,...,9,1,2...; if the remainder is 10, a second pass
    with weights 3,4,...,9,1,2... is used, and a second 10 becomes 0.
    """
    body = s[:-1]
    total = sum((i % 9 + 1) * _digit(ch) for i, ch in enumerate(body))
    check = total % 11
    if check == 10:
        total = sum(((i + 2) % 9 + 1) * _digit(ch) for i, ch in enumerate(body))
        check = total % 11
        if check == 10:
            check = 0
    return check == _digit(s[-1])


# ---- mod 97 ------------------------------------------------------------------------------

def mod97(num: str) -> int:
    """
    Remainder of a decimal digit string modulo 97.

    Computed in manageable chunks so the full number never exists as one
    integer. We carry the remainder forward in decimal string form.
    """
    rem = 0
    for i in range(0, len(num), 9):
        rem = int(str(rem) + num[i : i + 9]) % 97
    return rem


def iso7064_mod97_10_ok(s: str) -> bool:
    """
    Validate an IBAN using the official mod-97 algorithm.

    Steps:
      1) Move the first 4 chars to the end.
      2) Replace letters A..Z with 10..35.
      3) Reduce the resulting digit string mod 97.
      4) A valid IBAN yields remainder 1.
    """
    # Rotate first four characters to the end per ISO 13616.
    rearr = s[4:] + s[:4]
    return mod97(letters_to_digits(rearr)) == 1


# ---- Verhoeff ----------------------------------------------------------------------------

# Multiplication table of the dihedral group D5
_VERHOEFF_D = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 2, 3, 4, 0, 6, 7, 8, 9, 5),
    (2, 3, 4, 0, 1, 7, 8, 9, 5, 6),
    (3, 4, 0, 1, 2, 8, 9, 5, 6, 7),
    (4, 0, 1, 2, 3, 9, 5, 6, 7, 8),
    (5, 9, 8, 7, 6, 0, 4, 3, 2, 1),
    (6, 5, 9, 8, 7, 1, 0, 4, 3, 2),
    (7, 6, 5, 9, 8, 2, 1, 0, 4, 3),
    (8, 7, 6, 5, 9, 3, 2, 1, 0, 4),
    (9, 8, 7, 6, 5, 4, 3, 2, 1, 0),
)

# Permutation table
_VERHOEFF_P = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 5, 7, 6, 2, 8, 3, 0, 9, 4),
    (5, 8, 0, 3, 7, 9, 6, 1, 4, 2),
    (8, 9, 1, 6, 0, 4, 3, 5, 2, 7),
    (9, 4, 5, 3, 1, 2, 6, 8, 7, 0),
    (4, 2, 8, 6, 5, 7, 3, 9, 0, 1),
    (2, 7, 9, 3, 8, 0, 6, 4, 1, 5),
    (7, 0, 4, 6, 9, 1, 3, 2, 5, 8),
)


def verhoeff_ok(s: str) -> bool:
    """Verhoeff check; the check digit is the last character."""
    c = 0
    for i, ch in enumerate(reversed(s)):
        c = _VERHOEFF_D[c][_VERHOEFF_P[i % 8][_digit(ch)]]
    return c == 0
