# -*- coding: utf-8 -*-
"""
Value normalization helpers shared by the duplicate checker and the
data hygiene sanitizer.

All helpers are pure and deterministic: the same input always produces
the same output, and every helper is idempotent on its own output.

Phone handling targets Brazilian numbers (country code 55): a two digit
area code followed by an 8 digit landline or 9 digit mobile number.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

__all__ = [
    "only_digits",
    "normalize_spaces",
    "phone_comparison_key",
    "format_phone",
    "normalize_email",
    "normalize_name",
    "normalize_dob",
    "DEFAULT_COUNTRY_CODE",
]

#: Country calling code stripped from phone numbers before comparison.
DEFAULT_COUNTRY_CODE: str = "55"

_RE_NON_DIGIT = re.compile(r"\D+")
_RE_WHITESPACE = re.compile(r"\s+")
_RE_PHONE_10 = re.compile(r"^(\d{2})(\d{4})(\d{0,4})$")
_RE_PHONE_11 = re.compile(r"^(\d{2})(\d{5})(\d{0,4})$")


def only_digits(value: Optional[str]) -> str:
    """Strip every non-digit character."""
    if not value:
        return ""
    return _RE_NON_DIGIT.sub("", str(value))


def normalize_spaces(value: Optional[str]) -> str:
    """Trim and collapse every whitespace run to a single space."""
    if not value:
        return ""
    return _RE_WHITESPACE.sub(" ", str(value).strip())


def phone_comparison_key(
    value: Optional[str],
    country_code: str = DEFAULT_COUNTRY_CODE,
) -> str:
    """Reduce a phone number to its national significant digits.

    Strips formatting, an international ``00`` prefix, the country code
    and the domestic trunk ``0`` so that ``+55 (11) 98765-4321``,
    ``011 98765-4321`` and ``11987654321`` all share one key.

    Args:
        value: Raw phone number in any format.
        country_code: Country calling code to strip.

    Returns:
        Digit string, or empty string when no digits remain.
    """
    digits = only_digits(value)
    if digits.startswith("00"):
        digits = digits[2:]
    if country_code and digits.startswith(country_code) and len(digits) in (12, 13):
        digits = digits[len(country_code):]
    if digits.startswith("0") and len(digits) in (11, 12):
        digits = digits[1:]
    return digits


def format_phone(value: Optional[str], country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Format a phone number as ``(DD) DDDD-DDDD`` or ``(DD) DDDDD-DDDD``.

    Input is reduced with :func:`phone_comparison_key` and clamped to
    11 digits first. Inputs too short to hold an area code and a prefix
    are returned as bare digits.
    """
    digits = phone_comparison_key(value, country_code)[:11]
    pattern = _RE_PHONE_10 if len(digits) <= 10 else _RE_PHONE_11
    match = pattern.match(digits)
    if not match:
        return digits
    area, prefix, line = match.groups()
    if not line:
        return f"({area}) {prefix}"
    return f"({area}) {prefix}-{line}"


def normalize_email(value: Optional[str], case: str = "lower") -> str:
    """Bring an email address to the store's case convention."""
    if not value:
        return ""
    email = str(value).strip()
    if case == "lower":
        return email.lower()
    if case == "upper":
        return email.upper()
    return email


def normalize_name(value: Optional[str]) -> str:
    """Case-insensitive comparison form of a full name."""
    return normalize_spaces(value).casefold()


def normalize_dob(value: Optional[str]) -> str:
    """Reduce a date of birth to its ``YYYY-MM-DD`` calendar date.

    Values that do not start with an ISO calendar date are returned
    trimmed but otherwise untouched, so they still compare by equality.
    """
    if not value:
        return ""
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        return text
