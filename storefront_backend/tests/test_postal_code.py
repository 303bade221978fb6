import pytest

from app.core.exceptions import InvalidPostalCodeError
from app.modules.shipping.postal_code import (
    BRAZILIAN_STATES,
    clean_postal_code,
    format_postal_code,
    is_valid_postal_code,
    normalize_postal_code,
)


@pytest.mark.parametrize("value", ["89010100", "89010-100", "89.010-100", " 89010 100 ", 89010100])
def test_normalize_accepts_common_formats(value):
    assert normalize_postal_code(value) == "89010100"


@pytest.mark.parametrize("value", ["", None, "8901010", "890101000", "CEP", "12345-67"])
def test_normalize_rejects_wrong_length(value):
    with pytest.raises(InvalidPostalCodeError) as exc_info:
        normalize_postal_code(value)

    assert exc_info.value.code == "INVALID_POSTAL_CODE"
    assert exc_info.value.error == "CEP inválido"
    assert exc_info.value.calls_carrier is False


def test_clean_and_validate():
    assert clean_postal_code(None) == ""
    assert clean_postal_code("01310-100") == "01310100"
    assert is_valid_postal_code("01310-100")
    assert not is_valid_postal_code("01310-10")


@pytest.mark.parametrize("value,expected", [
    ("", ""),
    ("013", "013"),
    ("01310", "01310"),
    ("013101", "01310-1"),
    ("01310100", "01310-100"),
    ("0131010099", "01310-100"),
])
def test_format_postal_code(value, expected):
    assert format_postal_code(value) == expected


def test_brazilian_states():
    assert len(BRAZILIAN_STATES) == 27
    assert BRAZILIAN_STATES["SC"] == "Santa Catarina"
    assert BRAZILIAN_STATES["DF"] == "Distrito Federal"


@pytest.mark.parametrize("value", [
    "８９０１０１００",  # fullwidth
    "٨٩٠١٠١٠٠",  # Arabic-Indic
])
def test_non_ascii_digits_are_not_cep_digits(value):
    assert clean_postal_code(value) == ""
    assert not is_valid_postal_code(value)
    with pytest.raises(InvalidPostalCodeError):
        normalize_postal_code(value)


def test_mixed_digits_keep_only_ascii():
    assert clean_postal_code("8901010０") == "8901010"
