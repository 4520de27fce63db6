"""Reusable Pydantic validators and annotated field types.

Input is cleaned before it is checked:
- phone:   everything but digits and a leading "+" is dropped, then 10-15 characters
- pincode: everything but digits is dropped, then exactly 6 digits
- GST:     whitespace trimmed and upper-cased, then the 15-character pattern
- string sets: items trimmed, blanks dropped, duplicates removed in order

Usage in Pydantic models:

    class LoginRequest(BaseModel):
        phone: Phone
        password: str
"""

import re
from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field

PHONE_STRIP_REGEX = re.compile(r"[^0-9+]")
PINCODE_STRIP_REGEX = re.compile(r"[^0-9]")
PINCODE_REGEX = re.compile(r"^[0-9]{6}$")
GST_REGEX = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
IFSC_REGEX = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")

PHONE_MIN_LENGTH = 10
PHONE_MAX_LENGTH = 15


def _as_text(value: Any, label: str) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"{label} must be a string.")
    return str(value)


def validate_phone(value: Any) -> str:
    """Clean and length-check a phone number.

    Raises:
        ValueError: If the cleaned number is not 10-15 characters long
    """
    value = PHONE_STRIP_REGEX.sub("", _as_text(value, "Phone number"))
    # Only a leading "+" survives
    value = value[:1] + value[1:].replace("+", "")

    if len(value) < PHONE_MIN_LENGTH:
        raise ValueError("Phone number must be at least 10 digits.")
    if len(value) > PHONE_MAX_LENGTH:
        raise ValueError("Phone number cannot exceed 15 digits.")

    return value


def validate_pincode(value: Any) -> str:
    value = PINCODE_STRIP_REGEX.sub("", _as_text(value, "Pincode"))
    if not PINCODE_REGEX.match(value):
        raise ValueError("Pincode must be exactly 6 digits.")
    return value


def validate_gst_number(value: Any) -> str | None:
    if value is None:
        return None
    value = _as_text(value, "GST number").strip().upper()
    if not value:
        return None
    if not GST_REGEX.match(value):
        raise ValueError("Please enter a valid GST number.")
    return value


def validate_ifsc_code(value: Any) -> str | None:
    if value is None:
        return None
    value = _as_text(value, "IFSC code").strip().upper()
    if not value:
        return None
    if not IFSC_REGEX.match(value):
        raise ValueError("Please enter a valid IFSC code.")
    return value


def unique_strings(values: list[str] | None) -> list[str] | None:
    """Treat a list of names as a set while keeping the caller's order."""
    if values is None:
        return None
    seen: list[str] = []
    for item in values:
        item = item.strip()
        if item and item not in seen:
            seen.append(item)
    return seen


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ── Annotated field types ───────────────────────────────────

Phone = Annotated[str, BeforeValidator(validate_phone)]
Pincode = Annotated[str, BeforeValidator(validate_pincode)]
GSTNumber = Annotated[str | None, BeforeValidator(validate_gst_number)]
IFSCCode = Annotated[str | None, BeforeValidator(validate_ifsc_code)]

ShortName = Annotated[str, Field(min_length=1, max_length=50)]
DistrictName = Annotated[str, Field(min_length=1, max_length=100)]
NameSet = Annotated[list[ShortName], AfterValidator(unique_strings)]
DistrictSet = Annotated[list[DistrictName], AfterValidator(unique_strings)]
