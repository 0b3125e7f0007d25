# -*- coding: utf-8 -*-
"""Tests for the Klase Exception Hierarchy.

Covers:
- Base exception functionality
- DataException hierarchy
- Exception serialization
- Exception chain formatting
"""

import json
from datetime import datetime

import pytest

from klase.exceptions import (
    ConfigurationError,
    CorruptedData,
    DataAccessError,
    DataException,
    KlaseException,
    format_exception_chain,
)


# ==============================================================================
# Base Exception Tests
# ==============================================================================

class TestKlaseException:
    """Tests for base KlaseException."""

    def test_create_basic_exception(self):
        """Can create basic exception with message."""
        exc = KlaseException("Something went wrong")

        assert exc.message == "Something went wrong"
        assert exc.error_code == "KL_KLASE_EXCEPTION"
        assert exc.context == {}
        assert isinstance(exc.timestamp, datetime)

    def test_custom_error_code(self):
        """Explicit error code wins over the generated one."""
        exc = KlaseException("boom", error_code="CUSTOM")
        assert exc.error_code == "CUSTOM"
        assert str(exc) == "[CUSTOM] - boom"

    def test_to_dict_and_json(self):
        """Exception serializes with its context."""
        exc = ConfigurationError("bad config", context={"key": "value"})

        data = exc.to_dict()
        assert data["error_type"] == "ConfigurationError"
        assert data["error_code"] == "KL_CONFIGURATION_ERROR"
        assert data["context"] == {"key": "value"}
        assert json.loads(exc.to_json())["message"] == "bad config"

    def test_repr(self):
        exc = ConfigurationError("bad")
        assert repr(exc) == "ConfigurationError(message='bad', error_code='KL_CONFIGURATION_ERROR')"


# ==============================================================================
# Data Exception Tests
# ==============================================================================

class TestDataExceptions:
    """Tests for the DataException hierarchy."""

    def test_corrupted_data(self):
        exc = CorruptedData(
            "Collection is not a list",
            data_source="posts",
            corruption_details={"type": "dict"},
        )
        assert isinstance(exc, DataException)
        assert exc.error_code == "KL_DATA_CORRUPTED_DATA"
        assert exc.context == {"data_source": "posts", "corruption_details": {"type": "dict"}}

    def test_data_access_error_with_cause(self):
        cause = OSError("disk full")
        exc = DataAccessError(
            "Cannot write store", data_source="store.json", operation="write", cause=cause,
        )
        assert exc.context["operation"] == "write"
        assert exc.context["cause"] == "disk full"
        assert exc.context["cause_type"] == "OSError"

    def test_catchable_as_base(self):
        with pytest.raises(KlaseException):
            raise DataAccessError("nope")


# ==============================================================================
# Utility Tests
# ==============================================================================

class TestFormatExceptionChain:
    """Tests for format_exception_chain."""

    def test_chain(self):
        try:
            try:
                raise ValueError("low level")
            except ValueError as inner:
                raise DataAccessError("lookup failed", operation="find") from inner
        except DataAccessError as exc:
            formatted = format_exception_chain(exc)

        lines = formatted.splitlines()
        assert lines[0] == "[KL_DATA_DATA_ACCESS_ERROR] - lookup failed"
        assert lines[1] == "  Context: {'operation': 'find'}"
        assert lines[2] == "ValueError: low level"

    def test_plain_exception(self):
        assert format_exception_chain(RuntimeError("x")) == "RuntimeError: x"
