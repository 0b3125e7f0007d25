# -*- coding: utf-8 -*-
"""
Sanitizer primitives

Field-level building blocks of the hygiene validator. Each primitive is
pure and idempotent: applying it to its own output changes nothing.

    - sanitize_text: trim and clamp free text
    - normalize_spaces: collapse whitespace runs
    - validate_and_sanitize_phone: format a Brazilian phone number
    - validate_date: apply a context policy (due, publish, event) to a date
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from klase.data_hygiene.config import get_config
from klase.data_hygiene.models import DateCheck, DateContext, PhoneCheck
from klase.normalization import DEFAULT_COUNTRY_CODE, format_phone, normalize_spaces, only_digits

logger = logging.getLogger(__name__)

__all__ = [
    "sanitize_text",
    "normalize_spaces",
    "validate_and_sanitize_phone",
    "validate_date",
    "parse_datetime",
    "format_datetime",
    "INVALID_DATE",
    "PAST_DEADLINE",
    "END_BEFORE_START",
]

INVALID_DATE = "Invalid date"
PAST_DEADLINE = "Deadline cannot be in the past"
END_BEFORE_START = "End date must be after the start date"

#: Default clamp for free text when no field-specific limit applies.
DEFAULT_MAX_LENGTH = 2000


def sanitize_text(text: Optional[str], max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Trim ``text`` and clamp it to ``max_length`` characters.

    Clamping never adds an ellipsis. Whitespace exposed at the end by the
    clamp is stripped as well, which keeps the function idempotent.
    """
    if not text:
        return ""
    return str(text).strip()[:max_length].rstrip()


def validate_and_sanitize_phone(
    phone: Optional[str],
    country_code: str = DEFAULT_COUNTRY_CODE,
) -> PhoneCheck:
    """Format ``phone`` and check it is a plausible Brazilian number.

    A number is plausible with 10 (landline) or 11 (mobile) national
    digits and an area code that does not start with 0.

    Example:
        >>> validate_and_sanitize_phone("11987654321").phone
        '(11) 98765-4321'
    """
    raw = "" if phone is None else str(phone)
    normalized = format_phone(raw, country_code)
    digits = only_digits(normalized)
    is_valid = len(digits) in (10, 11) and not digits.startswith("0")
    return PhoneCheck(
        phone=normalized,
        is_valid=is_valid,
        was_normalized=raw != normalized,
    )


def parse_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime; naive values are taken as UTC.

    Returns:
        Timezone-aware datetime, or None when ``value`` is not ISO-8601.
    """
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(value: datetime) -> str:
    """ISO-8601 UTC text with a ``Z`` suffix."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def validate_date(
    date_str: Optional[str],
    context: Union[DateContext, str],
    compare_date: Optional[str] = None,
    allow_past_override: bool = False,
    *,
    now: Optional[datetime] = None,
    grace_seconds: Optional[int] = None,
) -> DateCheck:
    """Validate a date under the policy of ``context``.

    Args:
        date_str: Date text to check; empty means "not set" and is valid.
        context: due, publish, event_start or event_end.
        compare_date: Start date an ``event_end`` must not precede.
        allow_past_override: Accept past due dates and keep past publish
            dates as they are (historical data).
        now: Reference time; defaults to the current UTC time.
        grace_seconds: Publish dates within this many seconds before
            ``now`` are left alone. Defaults to the configured value.

    Returns:
        DateCheck with the (possibly adjusted) date text.
    """
    context = DateContext(context)
    if not date_str:
        return DateCheck(is_valid=True, date="", was_adjusted=False)

    text = str(date_str)
    parsed = parse_datetime(text)
    if parsed is None:
        return DateCheck(is_valid=False, date=text, error=INVALID_DATE)

    if now is None:
        now = datetime.now(timezone.utc)
    if grace_seconds is None:
        grace_seconds = get_config().publish_grace_seconds

    if context is DateContext.DUE and parsed < now and not allow_past_override:
        return DateCheck(is_valid=False, date=text, error=PAST_DEADLINE)

    if context is DateContext.PUBLISH and not allow_past_override:
        if parsed < now - timedelta(seconds=grace_seconds):
            adjusted = format_datetime(now)
            logger.debug("Publish date %s is in the past; moved to %s", text, adjusted)
            return DateCheck(is_valid=True, date=adjusted, was_adjusted=True)

    if context is DateContext.EVENT_END and compare_date:
        start = parse_datetime(str(compare_date))
        if start is not None and parsed < start:
            return DateCheck(is_valid=False, date=text, error=END_BEFORE_START)

    return DateCheck(is_valid=True, date=text, was_adjusted=False)
