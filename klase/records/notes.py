# -*- coding: utf-8 -*-
"""
Profile notes parser.

Student profiles carry a free-form ``notes`` blob, normally a JSON object
written by the enrollment form and the spreadsheet importer::

    {
        "document": "123.456.789-00",
        "additionalInfo": "{\\"address\\": {\\"street\\": \\"Rua A\\", ...}}",
        "familyRelationships": [...]
    }

``additionalInfo`` is itself JSON text (older rows store it as an
object). Some rows put ``address`` at the top level instead.

Parsing is best effort: malformed or absent data yields an empty
:class:`ParsedNotes`, never an exception.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from klase.records.models import Address, ParsedNotes

logger = logging.getLogger(__name__)

__all__ = ["parse_notes"]


def _as_mapping(value: Any) -> Optional[Mapping[str, Any]]:
    """Decode JSON text into a mapping; pass mappings through."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (str, bytes, bytearray)):
        if not value.strip():
            return None
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            return None
        return decoded if isinstance(decoded, Mapping) else None
    return None


def _extract_document(notes: Mapping[str, Any]) -> Optional[str]:
    document = notes.get("document")
    if isinstance(document, bool) or document is None:
        return None
    if isinstance(document, (int, str)):
        text = str(document).strip()
        return text or None
    return None


def _extract_address(notes: Mapping[str, Any]) -> Optional[Address]:
    raw: Any = None
    extra = _as_mapping(notes.get("additionalInfo"))
    if extra is not None:
        raw = extra.get("address")
    if raw is None:
        raw = notes.get("address")
    raw = _as_mapping(raw)
    if raw is None:
        return None
    try:
        return Address.model_validate(dict(raw))
    except ValidationError:
        logger.debug("Ignoring malformed address in profile notes")
        return None


def parse_notes(blob: Any) -> ParsedNotes:
    """Extract the identity document and address from a notes blob.

    Args:
        blob: Raw notes value; JSON text, a mapping, or None.

    Returns:
        ParsedNotes with whatever could be recovered.
    """
    notes = _as_mapping(blob)
    if notes is None:
        return ParsedNotes()
    return ParsedNotes(
        document=_extract_document(notes),
        address=_extract_address(notes),
    )
