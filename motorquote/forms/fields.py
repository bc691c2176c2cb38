"""Form field names and the mapping from the raw field map to a QuoteRequest."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from motorquote.models.enums import CoverageTier, UsageClass
from motorquote.schemas.quote import QuoteRequest

# Step 1: personal info
FULL_NAME = "full_name"
EMAIL = "email"
PHONE = "phone"
NRC = "nrc"

# Step 2: vehicle info
VEHICLE_MAKE = "vehicle_make"
VEHICLE_MODEL = "vehicle_model"
VEHICLE_YEAR = "vehicle_year"
VEHICLE_VALUE = "vehicle_value"
NUMBER_PLATE = "number_plate"
WHITE_BOOK = "white_book"
USAGE = "usage"

# Chosen on the pricing page or the form itself; defaults to standard
COVERAGE_TIER = "coverage_tier"

STEP1_FIELDS: tuple[str, ...] = (NRC, FULL_NAME, EMAIL, PHONE)

# Declared order: the first invalid field here gets focus on a failed submit
STEP2_FIELDS: tuple[str, ...] = (
    VEHICLE_MAKE,
    VEHICLE_MODEL,
    VEHICLE_YEAR,
    VEHICLE_VALUE,
    NUMBER_PLATE,
    WHITE_BOOK,
    USAGE,
)

ALL_FIELDS: frozenset[str] = frozenset((*STEP1_FIELDS, *STEP2_FIELDS, COVERAGE_TIER))


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def non_empty(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None and blank-string values."""
    return {k: v for k, v in data.items() if not is_empty(v)}


def _decimal_or_none(value: Any) -> Decimal | None:
    if is_empty(value) or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return None


def _int_or_none(value: Any) -> int | None:
    if is_empty(value) or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _enum_or_none(enum_cls: type[CoverageTier] | type[UsageClass], value: Any) -> Any:
    if is_empty(value):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def to_quote_request(data: Mapping[str, Any]) -> QuoteRequest:
    """Build a (possibly partial) QuoteRequest from the raw field map.

    Values that cannot be parsed are treated as absent, which is what the
    live preview wants while the user is still typing.
    """
    make = data.get(VEHICLE_MAKE)
    model = data.get(VEHICLE_MODEL)
    return QuoteRequest(
        vehicle_value=_decimal_or_none(data.get(VEHICLE_VALUE)),
        vehicle_year=_int_or_none(data.get(VEHICLE_YEAR)),
        usage=_enum_or_none(UsageClass, data.get(USAGE)),
        coverage_tier=_enum_or_none(CoverageTier, data.get(COVERAGE_TIER)),
        vehicle_make=None if is_empty(make) else str(make).strip(),
        vehicle_model=None if is_empty(model) else str(model).strip(),
    )
