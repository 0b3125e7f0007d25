# -*- coding: utf-8 -*-
"""Tests for the sanitizer primitives."""

from datetime import datetime, timedelta, timezone

import pytest

from klase.data_hygiene.models import DateContext
from klase.data_hygiene.sanitizer import (
    END_BEFORE_START,
    INVALID_DATE,
    PAST_DEADLINE,
    format_datetime,
    parse_datetime,
    sanitize_text,
    validate_and_sanitize_phone,
    validate_date,
)

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class TestSanitizeText:
    """Tests for sanitize_text."""

    def test_trims(self):
        assert sanitize_text("  Field trip  ") == "Field trip"

    def test_clamps_without_ellipsis(self):
        assert sanitize_text("abcdef", 3) == "abc"

    def test_clamp_exposing_space_is_stripped(self):
        assert sanitize_text("abc def", 4) == "abc"

    def test_idempotent(self):
        once = sanitize_text("  a  b  c  ", 4)
        assert sanitize_text(once, 4) == once

    def test_empty(self):
        assert sanitize_text(None) == ""


class TestValidateAndSanitizePhone:
    """Tests for validate_and_sanitize_phone."""

    def test_mobile_formatted(self):
        check = validate_and_sanitize_phone("11987654321")
        assert check.phone == "(11) 98765-4321"
        assert check.is_valid is True
        assert check.was_normalized is True

    def test_already_formatted(self):
        check = validate_and_sanitize_phone("(11) 3333-4444")
        assert check.is_valid is True
        assert check.was_normalized is False

    def test_country_code_removed(self):
        check = validate_and_sanitize_phone("+55 21 99876-5432")
        assert check.phone == "(21) 99876-5432"
        assert check.is_valid is True

    @pytest.mark.parametrize("raw", ["123", "", None, "abc", "(01) 2345-6789"])
    def test_invalid(self, raw):
        assert validate_and_sanitize_phone(raw).is_valid is False

    def test_idempotent(self):
        first = validate_and_sanitize_phone("0055 (11) 98765 4321")
        second = validate_and_sanitize_phone(first.phone)
        assert second.phone == first.phone
        assert second.was_normalized is False

    def test_wire_aliases(self):
        dumped = validate_and_sanitize_phone("11987654321").model_dump(by_alias=True)
        assert set(dumped) == {"phone", "isValid", "wasNormalized"}


class TestDatetimeHelpers:
    """Tests for parse_datetime and format_datetime."""

    def test_z_suffix(self):
        assert parse_datetime("2026-01-01T10:00:00Z") == datetime(
            2026, 1, 1, 10, tzinfo=timezone.utc,
        )

    def test_naive_is_utc(self):
        assert parse_datetime("2026-01-01").tzinfo is timezone.utc

    def test_garbage(self):
        assert parse_datetime("next tuesday") is None

    def test_format(self):
        assert format_datetime(NOW) == "2026-10-19T12:00:00Z"


class TestValidateDate:
    """Context policies of validate_date."""

    def test_empty_is_valid(self):
        check = validate_date("", DateContext.DUE, now=NOW)
        assert check.is_valid is True
        assert check.date == ""

    def test_invalid(self):
        check = validate_date("31/12/2026", DateContext.EVENT_START, now=NOW)
        assert check.is_valid is False
        assert check.error == INVALID_DATE

    def test_due_in_past(self):
        check = validate_date("2026-10-18T12:00:00Z", "due", now=NOW)
        assert check.is_valid is False
        assert check.error == PAST_DEADLINE

    def test_due_in_past_overridden(self):
        check = validate_date("2026-10-18T12:00:00Z", "due", allow_past_override=True, now=NOW)
        assert check.is_valid is True
        assert check.date == "2026-10-18T12:00:00Z"

    def test_due_in_future(self):
        assert validate_date("2026-12-01", DateContext.DUE, now=NOW).is_valid is True

    def test_publish_in_past_moved_to_now(self):
        check = validate_date("2026-01-01T00:00:00Z", DateContext.PUBLISH, now=NOW)
        assert check.is_valid is True
        assert check.was_adjusted is True
        assert check.date == "2026-10-19T12:00:00Z"

    def test_publish_adjustment_is_stable(self):
        first = validate_date("2026-01-01T00:00:00Z", DateContext.PUBLISH, now=NOW)
        later = NOW + timedelta(seconds=5)
        second = validate_date(first.date, DateContext.PUBLISH, now=later)
        assert second.was_adjusted is False
        assert second.date == first.date

    def test_publish_outside_grace_window(self):
        old = format_datetime(NOW - timedelta(seconds=61))
        check = validate_date(old, DateContext.PUBLISH, now=NOW, grace_seconds=60)
        assert check.was_adjusted is True

    def test_publish_in_past_overridden(self):
        check = validate_date(
            "2026-01-01T00:00:00Z", DateContext.PUBLISH, allow_past_override=True, now=NOW,
        )
        assert check.was_adjusted is False
        assert check.date == "2026-01-01T00:00:00Z"

    def test_event_end_before_start(self):
        check = validate_date(
            "2026-11-01T10:00:00Z", DateContext.EVENT_END, "2026-11-01T12:00:00Z", now=NOW,
        )
        assert check.is_valid is False
        assert check.error == END_BEFORE_START

    def test_event_end_equal_to_start(self):
        check = validate_date(
            "2026-11-01T12:00:00Z", DateContext.EVENT_END, "2026-11-01T12:00:00Z", now=NOW,
        )
        assert check.is_valid is True

    def test_event_end_with_unparsable_start(self):
        check = validate_date("2026-11-01", DateContext.EVENT_END, "soon", now=NOW)
        assert check.is_valid is True

    def test_event_dates_may_be_past(self):
        assert validate_date("2020-01-01", DateContext.EVENT_START, now=NOW).is_valid is True

    def test_unknown_context(self):
        with pytest.raises(ValueError):
            validate_date("2026-01-01", "someday", now=NOW)
