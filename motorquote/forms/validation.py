"""Deterministic field validation for the two form steps.

Synchronous, no I/O. Each validator returns an ordered {field: message} map
with one entry per invalid field; an empty map means the step is valid.
Step 2 is validated all at once and its errors follow STEP2_FIELDS order,
so the first key is the field that should receive focus.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from motorquote.forms.fields import (
    COVERAGE_TIER,
    EMAIL,
    FULL_NAME,
    NRC,
    NUMBER_PLATE,
    PHONE,
    STEP1_FIELDS,
    STEP2_FIELDS,
    USAGE,
    VEHICLE_MAKE,
    VEHICLE_MODEL,
    VEHICLE_VALUE,
    VEHICLE_YEAR,
    WHITE_BOOK,
    is_empty,
)
from motorquote.models.enums import CoverageTier, UsageClass
from motorquote.pricing.calculator import MIN_VEHICLE_YEAR
from motorquote.schemas.form import DocumentReference

NAME_RE = re.compile(r"^[a-zA-Z\s]+$")
EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
PHONE_RE = re.compile(r"^(\+260|0)?[97][0-9]{8}$")   # Zambian mobile
NRC_RE = re.compile(r"^[0-9A-Za-z/-]+$")

NRC_MIN_LENGTH = 6
NRC_MAX_LENGTH = 20
MIN_VEHICLE_VALUE = Decimal("1000")

DOCUMENT_CONTENT_TYPES = frozenset({"application/pdf", "image/jpeg", "image/png"})
MAX_DOCUMENT_BYTES = 5 * 1024 * 1024


def validate_zambian_phone(phone: str) -> bool:
    """Accept +260 / 0 prefixed or bare 9-digit numbers starting with 9 or 7."""
    return bool(PHONE_RE.match(re.sub(r"\s", "", phone)))


# ── Step 1 ───────────────────────────────────────────────────────────


def _check_nrc(value: Any) -> str | None:
    if is_empty(value):
        return "NRC is required"
    nrc = str(value).strip()
    if len(nrc) < NRC_MIN_LENGTH:
        return f"NRC must be at least {NRC_MIN_LENGTH} characters"
    if len(nrc) > NRC_MAX_LENGTH:
        return f"NRC must be at most {NRC_MAX_LENGTH} characters"
    if not NRC_RE.match(nrc):
        return "NRC should only contain numbers, letters, / and -"
    return None


def _check_full_name(value: Any) -> str | None:
    if is_empty(value):
        return "Full name is required"
    name = str(value).strip()
    if len(name) < 2:
        return "Name must be at least 2 characters"
    if not NAME_RE.match(name):
        return "Name should only contain letters and spaces"
    return None


def _check_email(value: Any) -> str | None:
    if is_empty(value):
        return "Email is required"
    if not EMAIL_RE.match(str(value).strip()):
        return "Please enter a valid email address"
    return None


def _check_phone(value: Any) -> str | None:
    if is_empty(value):
        return "Phone number is required"
    if not validate_zambian_phone(str(value)):
        return "Please enter a valid Zambian phone number"
    return None


_STEP1_CHECKS = {
    NRC: _check_nrc,
    FULL_NAME: _check_full_name,
    EMAIL: _check_email,
    PHONE: _check_phone,
}


def validate_step1(data: Mapping[str, Any]) -> dict[str, str]:
    """Validate personal info (NRC, full name, email, phone)."""
    errors: dict[str, str] = {}
    for name in STEP1_FIELDS:
        message = _STEP1_CHECKS[name](data.get(name))
        if message:
            errors[name] = message
    return errors


# ── Step 2 ───────────────────────────────────────────────────────────


def _check_year(value: Any, current_year: int) -> str | None:
    if is_empty(value):
        return "Please select the year of manufacture."
    try:
        year = int(str(value).strip())
    except ValueError:
        return "Please select a valid year of manufacture."
    if not MIN_VEHICLE_YEAR <= year <= current_year + 1:
        return "Please select a valid year of manufacture."
    return None


def _check_value(value: Any) -> str | None:
    message = "Enter a valid vehicle value (min ZMW 1,000)."
    if is_empty(value) or isinstance(value, bool):
        return message
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return message
    if not amount.is_finite() or amount < MIN_VEHICLE_VALUE:
        return message
    return None


def _check_document(value: Any) -> str | None:
    if is_empty(value):
        return "Please upload your White Book."
    if isinstance(value, str):
        # Opaque upload reference; type and size were checked at upload time
        return None
    try:
        doc = value if isinstance(value, DocumentReference) else DocumentReference.model_validate(value)
    except ValidationError:
        return "Please upload your White Book."
    if doc.content_type not in DOCUMENT_CONTENT_TYPES:
        return "White Book must be a PDF, JPG or PNG file."
    if doc.size_bytes > MAX_DOCUMENT_BYTES:
        return "White Book must be 5MB or smaller."
    return None


def _check_usage(value: Any) -> str | None:
    if is_empty(value):
        return "Please select the primary usage."
    try:
        UsageClass(value)
    except ValueError:
        return "Please select the primary usage."
    return None


def _check_tier(value: Any) -> str | None:
    if is_empty(value):
        return "Please select a coverage option."
    try:
        CoverageTier(value)
    except ValueError:
        return "Please select a coverage option."
    return None


def validate_step2(data: Mapping[str, Any], current_year: int) -> dict[str, str]:
    """Validate vehicle info, all fields at once, in declared order."""
    checks = {
        VEHICLE_MAKE: lambda v: "Please select a vehicle make." if is_empty(v) else None,
        VEHICLE_MODEL: lambda v: "Please select a vehicle model." if is_empty(v) else None,
        VEHICLE_YEAR: lambda v: _check_year(v, current_year),
        VEHICLE_VALUE: _check_value,
        NUMBER_PLATE: lambda v: "Please enter your number plate." if is_empty(v) else None,
        WHITE_BOOK: _check_document,
        USAGE: _check_usage,
    }
    errors: dict[str, str] = {}
    for name in STEP2_FIELDS:
        message = checks[name](data.get(name))
        if message:
            errors[name] = message
    # The tier is chosen outside the vehicle fields, so it is checked last
    tier_message = _check_tier(data.get(COVERAGE_TIER))
    if tier_message:
        errors[COVERAGE_TIER] = tier_message
    return errors
