import pytest

from idcheck import IdentifierFamily, NormalizeOptions, Validator, ValidatorConfig, check, validate
from idcheck.rules import tables
from idcheck.rules.tables import Checksum


@pytest.fixture
def validator():
    return Validator()


def _boom(*args, **kwargs):
    raise RuntimeError("checksum must not run")


# ---- Dispatch order ----------------------------------------------------------------------

def test_checksum_never_runs_on_pattern_miss(validator, monkeypatch):
    monkeypatch.setitem(tables.ALGORITHMS, Checksum.AT_TIN, _boom)
    assert not validator.validate("tin", "AT", "90999990")      # 8 digits
    assert not validator.validate("tin", "AT", "9099999061")    # 10 digits
    assert not validator.validate("tin", "AT", "")
    # a value that matches does reach the algorithm
    with pytest.raises(RuntimeError):
        validator.validate("tin", "AT", "909999906")


def test_wrong_length_iban_never_reaches_mod97(validator, monkeypatch):
    monkeypatch.setitem(tables.ALGORITHMS, Checksum.ISO7064_MOD97_10, _boom)
    assert not validator.validate("iban", "DE", "DE8937040044053201300")


def test_cross_family_mismatch():
    assert validate("tin", "DE", "2893081508152")
    assert not validate("tin", "AT", "2893081508152")


# ---- Unconstrained countries and country code case -------------------------------------

@pytest.mark.parametrize("family", list(IdentifierFamily))
def test_unknown_country_is_unconstrained(family):
    assert validate(family, "ZZ", "anything at all")


def test_lowercase_country_without_tolerance_is_unconstrained():
    # Kept as observed: the lookup misses and the value passes unchecked.
    assert validate("tin", "at", "909999907")


def test_lowercase_country_with_tolerance_is_checked():
    assert not validate("tin", "at", "909999907", allow_lower_case_country_code=True)
    assert validate("tin", "at", "909999906", allow_lower_case_country_code=True)


def test_lowercase_tolerance_from_config():
    v = Validator(ValidatorConfig(allow_lower_case_country_code=True))
    assert not v.validate("tin", "at", "909999907")
    # an explicit per-call flag wins over the configuration
    assert v.validate("tin", "at", "909999907", allow_lower_case_country_code=False)


# ---- Normalization ------------------------------------------------------------------------

def test_family_default_normalization():
    assert validate("tin", "AT", "909 999 906")
    assert validate("iban", "DE", "DE89 3704 0044 0532 0130 00")


def test_explicit_options_replace_defaults():
    bare = NormalizeOptions()
    assert not validate("tin", "AT", "909 999 906", options=bare)
    assert validate("tin", "AT", "909-999-906", options=NormalizeOptions(strip_minus=True))


# ---- Alternatives -------------------------------------------------------------------------

@pytest.mark.parametrize("country,value", [
    ("GB", "SW1A 1AA"),
    ("GB", "M1 1AE"),
    ("GB", "GIR 0AA"),
    ("US", "12345"),
    ("US", "12345-6789"),
    ("NL", "1234 AB"),
    ("CA", "K1A 0B1"),
    ("DE", "80331"),
    ("PL", "00-950"),
    ("LU", "L-1234"),
])
def test_postal_codes(country, value):
    assert validate("postal_code", country, value)


@pytest.mark.parametrize("country,value", [
    ("US", "1234"),
    ("US", "123456"),
    ("NL", "0123 AB"),
    ("DE", "8033"),
    ("GB", "12345"),
])
def test_bad_postal_codes(country, value):
    assert not validate("postal_code", country, value)


def test_any_matching_alternative_is_enough():
    # DE accepts both the 11-digit IdNr and the 13-digit tax number
    assert validate("tin", "DE", "86095742719")
    assert validate("tin", "DE", "9181081508155")


# ---- IBAN ---------------------------------------------------------------------------------

def test_iban_family_is_country_bound():
    assert validate("iban", "DE", "DE89370400440532013000")
    assert not validate("iban", "AT", "DE89370400440532013000")
    assert not validate("iban", "DE", "DE89370400440532013001")
    assert not validate("iban", "DE", "DE8937040044053201300")


def test_iban_check_uses_country_of_the_value():
    assert check("iban", "GB82 WEST 1234 5698 7654 32")
    assert check("iban", "gb82west12345698765432")
    # right checksum, wrong length for DE
    assert not check("iban", "DE89370400440532013000" + "0")


# ---- Country-less kinds -------------------------------------------------------------------

@pytest.mark.parametrize("kind,value", [
    ("isbn13", "978-3-16-148410-0"),
    ("isbn10", "0-306-40615-2"),
    ("isbn10", "0-8044-2957-x"),
    ("isbn", "9783161484100"),
    ("isbn", "0306406152"),
    ("isin", "US0378331005"),
    ("gtin8", "9638-5074"),
    ("gtin12", "036000291452"),
    ("gtin13", "4006381333931"),
    ("gtin14", "10614141000415"),
    ("ean", "96385074"),
    ("ean", "4006381333931"),
    ("gln", "0614141000012"),
    ("credit_card", "4111 1111 1111 1111"),
    ("bic", "DEUTDEFF"),
    ("bic", "DEUT DE FF 500"),
])
def test_valid_kinds(kind, value):
    assert check(kind, value)


@pytest.mark.parametrize("kind,value", [
    ("isbn13", "978-3-16-148410-1"),
    ("isbn13", "4006381333931"),      # valid GTIN, not a Bookland prefix
    ("isbn10", "0306406153"),
    ("isin", "US0378331006"),
    ("gtin13", "4006381333932"),
    ("credit_card", "4111111111111112"),
    ("credit_card", "411111111111"),   # too short
    ("bic", "DEUTQQFF"),               # QQ is not a country
    ("bic", "DEUTDEF"),
])
def test_invalid_kinds(kind, value):
    assert not check(kind, value)


def test_unknown_kind_raises(validator):
    with pytest.raises(ValueError):
        validator.check("passport", "X123")


def test_unknown_family_raises(validator):
    with pytest.raises(ValueError):
        validator.validate("passport", "DE", "X123")


def test_countries_listing(validator):
    countries = validator.countries("vat")
    assert "NL" in countries
    assert "NO" in countries
    assert countries == sorted(countries)


# ---- Non-ASCII digits ----------------------------------------------------------------------

FULLWIDTH = str.maketrans("0123456789", "０１２３４５６７８９")
ARABIC_INDIC = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")

# One valid value per checksum-backed country rule.
CHECKED = [
    ("tin", "AT", "909999906"),
    ("tin", "DE", "1121081508150"),
    ("tin", "DE", "86095742719"),
    ("tin", "DK", "1111111118"),
    ("tin", "EE", "21107190012"),
    ("tin", "ES", "A58818501"),
    ("tin", "HR", "94577403194"),
    ("tin", "LT", "33309240064"),
    ("tin", "LU", "1893120105732"),
    ("tin", "NL", "123456782"),
    ("tin", "PL", "44051401359"),
    ("tin", "PL", "1234563218"),
    ("vat", "AT", "ATU13585627"),
    ("vat", "BE", "BE0403019261"),
    ("vat", "DE", "DE136695976"),
    ("vat", "DK", "DK13585628"),
    ("vat", "EE", "EE100931558"),
    ("vat", "EL", "EL094259216"),
    ("vat", "ES", "ESA13585625"),
    ("vat", "FI", "FI20774740"),
    ("vat", "FR", "FR40303265045"),
    ("vat", "HR", "HR33392005961"),
    ("vat", "IT", "IT00743110157"),
    ("vat", "LT", "LT119511515"),
    ("vat", "LU", "LU15027442"),
    ("vat", "NL", "NL004495445B01"),
    ("vat", "PL", "PL8567346215"),
    ("vat", "PT", "PT501964843"),
    ("vat", "SE", "SE123456789701"),
    ("vat", "SI", "SI50223054"),
    ("iban", "DE", "DE89370400440532013000"),
    ("iban", "GB", "GB82WEST12345698765432"),
]

CHECKED_KINDS = [
    ("isbn13", "9783161484100"),
    ("isbn10", "0306406152"),
    ("isbn", "9783161484100"),
    ("isin", "US0378331005"),
    ("gtin8", "96385074"),
    ("gtin12", "036000291452"),
    ("gtin13", "4006381333931"),
    ("gtin14", "10614141000415"),
    ("ean", "4006381333931"),
    ("gln", "0614141000012"),
    ("credit_card", "4111111111111111"),
    ("iban", "DE89370400440532013000"),
]


@pytest.mark.parametrize("table", [FULLWIDTH, ARABIC_INDIC], ids=["fullwidth", "arabic-indic"])
@pytest.mark.parametrize("family,country,value", CHECKED)
def test_non_ascii_digits_fail_country_rules(validator, family, country, value, table):
    assert validator.validate(family, country, value)
    assert not validator.validate(family, country, value.translate(table))
    # only the check digit replaced
    assert not validator.validate(family, country, value[:-1] + value[-1].translate(table))


@pytest.mark.parametrize("table", [FULLWIDTH, ARABIC_INDIC], ids=["fullwidth", "arabic-indic"])
@pytest.mark.parametrize("kind,value", CHECKED_KINDS)
def test_non_ascii_digits_fail_kinds(validator, kind, value, table):
    assert validator.check(kind, value)
    assert not validator.check(kind, value.translate(table))
    assert not validator.check(kind, value[:-1] + value[-1].translate(table))


def test_arabic_indic_check_digit_on_luxembourg_tin(validator):
    assert not validator.validate("tin", "LU", "189312010573" + "٢")


def test_arabic_indic_iban_is_rejected(validator):
    assert not validator.validate("iban", "DE", "DE" + "٨٩٣٧٠٤٠٠٤٤٠٥٣٢٠١٣٠٠٠")
