# -*- coding: utf-8 -*-
"""Tests for the profile notes parser."""

import json

import pytest

from klase.records.notes import parse_notes


class TestParseNotes:
    """Best-effort extraction of document and address."""

    def test_document_and_nested_address(self):
        blob = json.dumps({
            "document": "123.456.789-00",
            "additionalInfo": json.dumps({
                "address": {"street": "Rua A", "number": 12, "city": "Recife"},
            }),
        })
        parsed = parse_notes(blob)

        assert parsed.document == "123.456.789-00"
        assert parsed.address.street == "Rua A"
        assert parsed.address.number == "12"
        assert parsed.address.city == "Recife"

    def test_additional_info_as_object(self):
        parsed = parse_notes({"additionalInfo": {"address": {"street": "Rua B"}}})
        assert parsed.address.street == "Rua B"
        assert parsed.document is None

    def test_top_level_address_fallback(self):
        parsed = parse_notes({"address": {"street": "Rua C", "number": "3", "city": "Natal"}})
        assert parsed.address.city == "Natal"

    def test_numeric_document(self):
        assert parse_notes({"document": 12345678900}).document == "12345678900"

    @pytest.mark.parametrize("blob", [
        None,
        "",
        "   ",
        "not json",
        "[1, 2, 3]",
        42,
        json.dumps({"additionalInfo": "{broken"}),
        json.dumps({"address": "Rua D, 4"}),
        json.dumps({"document": {"nested": True}}),
        json.dumps({"document": True}),
    ])
    def test_malformed_yields_empty(self, blob):
        parsed = parse_notes(blob)
        assert parsed.is_empty

    def test_malformed_address_part_ignored(self):
        parsed = parse_notes({"document": "1", "address": {"street": ["x"]}})
        assert parsed.document == "1"
        assert parsed.address is None
