# -*- coding: utf-8 -*-
"""Tests for the shared value normalization helpers."""

import pytest

from klase.normalization import (
    format_phone,
    normalize_dob,
    normalize_email,
    normalize_name,
    normalize_spaces,
    only_digits,
    phone_comparison_key,
)


class TestOnlyDigits:
    """Tests for only_digits."""

    def test_strips_formatting(self):
        assert only_digits("123.456.789-00") == "12345678900"

    @pytest.mark.parametrize("value", [None, "", "abc"])
    def test_no_digits(self, value):
        assert only_digits(value) == ""


class TestNormalizeSpaces:
    """Tests for normalize_spaces."""

    def test_collapses_runs(self):
        assert normalize_spaces("  a \t b\n\nc  ") == "a b c"

    def test_none(self):
        assert normalize_spaces(None) == ""


class TestPhoneComparisonKey:
    """Phone numbers written different ways share one key."""

    @pytest.mark.parametrize("raw", [
        "11987654321",
        "(11) 98765-4321",
        "+55 (11) 98765-4321",
        "55 11 98765 4321",
        "0055 11 98765-4321",
        "011 98765-4321",
    ])
    def test_mobile_variants(self, raw):
        assert phone_comparison_key(raw) == "11987654321"

    def test_landline_with_country_code(self):
        assert phone_comparison_key("+55 11 3333-4444") == "1133334444"

    def test_short_numbers_untouched(self):
        """A number starting with 55 is only stripped at full length."""
        assert phone_comparison_key("5599") == "5599"

    def test_other_country_code(self):
        assert phone_comparison_key("+351 912 345 678", country_code="351") == "912345678"

    def test_empty(self):
        assert phone_comparison_key(None) == ""


class TestFormatPhone:
    """Tests for format_phone."""

    def test_mobile(self):
        assert format_phone("11987654321") == "(11) 98765-4321"

    def test_landline(self):
        assert format_phone("1133334444") == "(11) 3333-4444"

    def test_idempotent(self):
        once = format_phone("+55 11 98765-4321")
        assert format_phone(once) == once

    def test_clamps_to_eleven_digits(self):
        assert format_phone("119876543210000") == "(11) 98765-4321"

    def test_too_short_returns_digits(self):
        assert format_phone("12-34") == "1234"

    def test_partial_number_has_no_dangling_dash(self):
        assert format_phone("119876") == "(11) 9876"


class TestNormalizeEmail:
    """Tests for normalize_email."""

    def test_lower(self):
        assert normalize_email("  Maria@Example.COM ") == "maria@example.com"

    def test_upper(self):
        assert normalize_email("maria@example.com", "upper") == "MARIA@EXAMPLE.COM"

    def test_preserve(self):
        assert normalize_email(" Maria@Example.com ", "preserve") == "Maria@Example.com"

    def test_empty(self):
        assert normalize_email(None) == ""


class TestNormalizeNameAndDob:
    """Tests for normalize_name and normalize_dob."""

    def test_name_casefold(self):
        assert normalize_name("  MARIA   Silva ") == "maria silva"

    def test_dob_datetime_reduced_to_date(self):
        assert normalize_dob("2015-03-10T00:00:00Z") == "2015-03-10"

    def test_dob_non_iso_kept(self):
        assert normalize_dob(" 10/03/2015 ") == "10/03/2015"

    def test_dob_empty(self):
        assert normalize_dob(None) == ""
