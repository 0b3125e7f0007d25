# -*- coding: utf-8 -*-
"""
Record store access for the Klase hygiene subsystem.

Key Components:
    - models: Address, Guardian, ProfileRecord, ParsedNotes
    - notes: best-effort parser for the profile notes blob
    - repository: async RecordRepository interface used by the
      duplicate checker
    - memory: InMemoryRecordRepository (tests, CLI snapshots)
    - store: HygieneStore collections used by the bulk hygiene pass
"""

from klase.records.models import Address, Guardian, ParsedNotes, ProfileRecord
from klase.records.notes import parse_notes
from klase.records.repository import RecordRepository
from klase.records.memory import InMemoryRecordRepository
from klase.records.store import (
    DEFAULT_REPORT_KEY,
    HygieneStore,
    InMemoryHygieneStore,
    JsonFileHygieneStore,
)

__all__ = [
    "Address",
    "Guardian",
    "ParsedNotes",
    "ProfileRecord",
    "parse_notes",
    "RecordRepository",
    "InMemoryRecordRepository",
    "HygieneStore",
    "InMemoryHygieneStore",
    "JsonFileHygieneStore",
    "DEFAULT_REPORT_KEY",
]
