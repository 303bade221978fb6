"""
Brazilian postal code (CEP) helpers.
"""
import re
from typing import Any, Dict

from app.core.exceptions import InvalidPostalCodeError

CEP_LENGTH = 8

# ASCII digits only; fullwidth and other Unicode digits are not CEP digits
_NON_DIGITS = re.compile(r"[^0-9]")

BRAZILIAN_STATES: Dict[str, str] = {
    "AC": "Acre",
    "AL": "Alagoas",
    "AP": "Amapá",
    "AM": "Amazonas",
    "BA": "Bahia",
    "CE": "Ceará",
    "DF": "Distrito Federal",
    "ES": "Espírito Santo",
    "GO": "Goiás",
    "MA": "Maranhão",
    "MT": "Mato Grosso",
    "MS": "Mato Grosso do Sul",
    "MG": "Minas Gerais",
    "PA": "Pará",
    "PB": "Paraíba",
    "PR": "Paraná",
    "PE": "Pernambuco",
    "PI": "Piauí",
    "RJ": "Rio de Janeiro",
    "RN": "Rio Grande do Norte",
    "RS": "Rio Grande do Sul",
    "RO": "Rondônia",
    "RR": "Roraima",
    "SC": "Santa Catarina",
    "SP": "São Paulo",
    "SE": "Sergipe",
    "TO": "Tocantins",
}


def clean_postal_code(value: Any) -> str:
    """Strip everything but digits. None becomes an empty string."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def is_valid_postal_code(value: Any) -> bool:
    return len(clean_postal_code(value)) == CEP_LENGTH


def normalize_postal_code(value: Any) -> str:
    """
    Return the 8-digit form of a CEP in any formatting ("89010-100", "89.010-100").

    Raises:
        InvalidPostalCodeError: fewer or more than 8 digits
    """
    digits = clean_postal_code(value)
    if len(digits) != CEP_LENGTH:
        raise InvalidPostalCodeError(postal_code=digits)
    return digits


def format_postal_code(value: Any) -> str:
    """Display format 12345-678. Partial input (5 digits or fewer) passes through."""
    digits = clean_postal_code(value)
    if len(digits) <= 5:
        return digits
    return f"{digits[:5]}-{digits[5:CEP_LENGTH]}"
