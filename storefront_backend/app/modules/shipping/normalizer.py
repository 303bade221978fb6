"""
Quote Normalizer & Selector

Turns an untrusted carrier response body into a QuoteResult.

The carrier answers in several envelopes depending on API version and error
state:
    [ {...}, {...} ]                         bare list
    {"data": [ ... ]}                        wrapped, possibly next to an error
    {"shipping_options": [ ... ]}            wrapped, possibly next to an error
    {"id": ..., "price": ..., ...}           single option without a list
    {"error" | "message" | "errors": ...}    error envelope

Each envelope has its own extractor. Extractors run in EXTRACTORS order and
the first one yielding at least one valid option wins. Nothing in this
module raises on bad input; an empty extraction is reported as
NoOptionsAvailable.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from app.modules.shipping.carriers.base import NormalizedOption, QuoteResult

logger = logging.getLogger(__name__)

ERROR_INDICATOR_KEYS = ("error", "message", "errors")

# ASCII digits, decimal point only: "32.50", "32", ".5", "32."
_PRICE_PATTERN = re.compile(r"^(?:[0-9]+\.?[0-9]*|\.[0-9]+)$")


@dataclass(frozen=True)
class NoOptionsAvailable:
    """Normalization found no usable option."""
    upstream_error: Optional[str] = None


# =============================================================================
# Field parsing
# =============================================================================

def _present(value: Any) -> bool:
    return value is not None and value != ""


def parse_price(value: Any) -> Optional[float]:
    """Parse a carrier price into a finite, non-negative float."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _PRICE_PATTERN.match(text):
            return None
        price = float(text)
    else:
        return None

    if not math.isfinite(price) or price < 0:
        return None
    return price


def parse_delivery_time(value: Any) -> Optional[int]:
    """Parse a delivery time into non-negative whole business days."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        return None
    if value < 0:
        return None
    return int(value)


def is_valid_option_id(value: Any) -> bool:
    """Service ids are integers or non-empty strings."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, str) and value != "")


def normalize_option(entry: Any) -> Optional[NormalizedOption]:
    """Convert one raw carrier option, or return None when it is unusable."""
    if not isinstance(entry, dict):
        return None

    if not all(_present(entry.get(key)) for key in ("id", "price", "name")):
        return None

    if not is_valid_option_id(entry["id"]):
        return None

    company = entry.get("company")
    if not isinstance(company, dict) or not _present(company.get("name")):
        return None

    delivery_time = parse_delivery_time(entry.get("delivery_time"))
    if delivery_time is None:
        return None

    price = parse_price(entry.get("price"))
    if price is None:
        return None

    return NormalizedOption(
        id=entry["id"],
        name=str(entry["name"]),
        company=str(company["name"]),
        price=price,
        delivery_time=delivery_time,
    )


def filter_valid_options(entries: Sequence[Any]) -> List[NormalizedOption]:
    """Normalize entries, dropping invalid ones while keeping discovery order."""
    options = []
    for entry in entries:
        option = normalize_option(entry)
        if option is not None:
            options.append(option)
    return options


# =============================================================================
# Envelope extractors
# =============================================================================

def has_error_indicator(raw: Any) -> bool:
    return isinstance(raw, dict) and any(raw.get(key) is not None for key in ERROR_INDICATOR_KEYS)


def upstream_error_of(raw: Any) -> Optional[str]:
    """Text of the first error indicator in the body, if any."""
    if not isinstance(raw, dict):
        return None
    for key in ERROR_INDICATOR_KEYS:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            return value or key
        return json.dumps(value, ensure_ascii=False, default=str)
    return None


def extract_bare_list(raw: Any) -> Optional[List[NormalizedOption]]:
    if isinstance(raw, list):
        return filter_valid_options(raw)
    return None


def _extract_envelope(raw: Any, key: str) -> Optional[List[NormalizedOption]]:
    if isinstance(raw, dict) and isinstance(raw.get(key), list):
        return filter_valid_options(raw[key])
    return None


def extract_data_envelope(raw: Any) -> Optional[List[NormalizedOption]]:
    return _extract_envelope(raw, "data")


def extract_shipping_options_envelope(raw: Any) -> Optional[List[NormalizedOption]]:
    return _extract_envelope(raw, "shipping_options")


def extract_single_option(raw: Any) -> Optional[List[NormalizedOption]]:
    """A bare object that looks like one option (has id and price)."""
    if (
        isinstance(raw, dict)
        and not has_error_indicator(raw)
        and _present(raw.get("id"))
        and _present(raw.get("price"))
    ):
        return filter_valid_options([raw])
    return None


Extractor = Callable[[Any], Optional[List[NormalizedOption]]]

EXTRACTORS: Tuple[Extractor, ...] = (
    extract_bare_list,
    extract_data_envelope,
    extract_shipping_options_envelope,
    extract_single_option,
)


def extract_options(raw: Any) -> List[NormalizedOption]:
    """Run extractors in priority order and return the first non-empty result."""
    for extractor in EXTRACTORS:
        options = extractor(raw)
        if options:
            logger.debug(f"{extractor.__name__} found {len(options)} shipping option(s)")
            return options
    return []


# =============================================================================
# Selection
# =============================================================================

def select_options(options: Sequence[NormalizedOption]) -> QuoteResult:
    """
    Pick cheapest and fastest from a non-empty option list.

    min() returns the first minimal element, so ties go to the option seen first.
    """
    cheapest = min(options, key=lambda option: option.price)
    fastest = min(options, key=lambda option: option.delivery_time)

    return QuoteResult(
        cheapest=cheapest,
        fastest=None if fastest.id == cheapest.id else fastest,
        all_options=list(options),
    )


def normalize_quotes(raw: Any) -> Union[QuoteResult, NoOptionsAvailable]:
    """Normalize a raw carrier body into a QuoteResult or NoOptionsAvailable."""
    options = extract_options(raw)

    if not options:
        upstream_error = upstream_error_of(raw)
        if upstream_error:
            logger.warning(f"Carrier returned error object without options: {upstream_error[:500]}")
        elif isinstance(raw, dict):
            logger.warning(f"Unexpected carrier response structure: {sorted(raw.keys())}")
        else:
            logger.info(f"No valid shipping options in {type(raw).__name__} response")
        return NoOptionsAvailable(upstream_error=upstream_error)

    logger.info(f"Final shipping options count: {len(options)}")
    return select_options(options)
