# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Dict

import pytest

from klase.data_hygiene import config as hygiene_config_module
from klase.data_hygiene.config import DataHygieneConfig
from klase.duplicate_checker import config as checker_config_module
from klase.duplicate_checker.config import DuplicateCheckerConfig
from klase.records.memory import InMemoryRecordRepository

TENANT = "school-1"
OTHER_TENANT = "school-2"


def _notes(document=None, address=None) -> str:
    notes: Dict[str, Any] = {}
    if document is not None:
        notes["document"] = document
    if address is not None:
        notes["additionalInfo"] = json.dumps({"address": address})
    return json.dumps(notes)


SNAPSHOT = {
    "profiles": [
        {
            "id": "p1",
            "tenantId": TENANT,
            "name": "Maria Silva",
            "email": "maria@example.com",
            "dob": "2015-03-10",
            "enrollmentNumber": "2024-001",
            "phone": "(11) 98765-4321",
            "notes": _notes(
                document="123.456.789-00",
                address={"street": "Rua das Flores", "number": "12", "city": "São Paulo"},
            ),
        },
        {
            "id": "p2",
            "tenantId": TENANT,
            "name": "Maria Silva",
            "email": "maria.s@example.com",
            "dob": "2016-07-01",
        },
        {
            "id": "p3",
            "tenantId": TENANT,
            "name": "João Souza",
            "email": "joao@example.com",
            "dob": "2014-01-20",
            "notes": "not json at all",
        },
        {"id": "p4", "tenantId": TENANT, "name": "Ana Lima", "email": "ana@example.com"},
        {"id": "p5", "tenantId": TENANT, "name": "Ana Lima Costa", "email": "ana@example.com"},
        {
            "id": "q1",
            "tenantId": OTHER_TENANT,
            "name": "Maria Silva",
            "email": "maria@example.com",
            "dob": "2015-03-10",
            "enrollmentNumber": "2024-001",
            "notes": {"document": "12345678900"},
        },
    ],
    "guardians": [
        {
            "id": "g1",
            "studentId": "p3",
            "name": "Rita Souza",
            "relation": "mother",
            "phone": "+55 (11) 91234-5678",
            "isPrimary": True,
        },
        {
            "id": "g2",
            "studentId": "p1",
            "name": "Carlos Silva",
            "relation": "father",
            "phone": "11 3333-4444",
        },
    ],
}


@pytest.fixture(autouse=True)
def reset_configs():
    """Drop config singletons so env changes never leak between tests."""
    checker_config_module.reset_config()
    hygiene_config_module.reset_config()
    yield
    checker_config_module.reset_config()
    hygiene_config_module.reset_config()


@pytest.fixture
def snapshot() -> Dict[str, Any]:
    """A decoded record store snapshot (fresh copy per test)."""
    return json.loads(json.dumps(SNAPSHOT))


@pytest.fixture
def repository(snapshot) -> InMemoryRecordRepository:
    """In-memory repository loaded with the sample snapshot."""
    return InMemoryRecordRepository.from_snapshot(snapshot)


@pytest.fixture
def checker_config() -> DuplicateCheckerConfig:
    """Checker config with metrics off."""
    return DuplicateCheckerConfig(enable_metrics=False)


@pytest.fixture
def hygiene_config() -> DataHygieneConfig:
    """Hygiene config with metrics off."""
    return DataHygieneConfig(enable_metrics=False)


@pytest.fixture
def snapshot_file(tmp_path, snapshot):
    """The sample snapshot written to disk."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot), encoding="utf-8")
    return path
