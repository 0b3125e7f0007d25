# -*- coding: utf-8 -*-
"""Tests for record store models, repositories and hygiene stores."""

import json

import pytest

from klase.exceptions import CorruptedData, DataAccessError
from klase.records.memory import InMemoryRecordRepository
from klase.records.models import Address, Guardian, ProfileRecord
from klase.records.store import InMemoryHygieneStore, JsonFileHygieneStore


class TestModels:
    """Tests for record models."""

    def test_profile_accepts_camel_case(self):
        profile = ProfileRecord.model_validate(
            {"id": "p1", "tenantId": "s1", "enrollmentNumber": "E1"}
        )
        assert profile.tenant_id == "s1"
        assert profile.enrollment_number == "E1"

    def test_guardian_null_primary(self):
        guardian = Guardian.model_validate({"id": "g", "name": "R", "isPrimary": None})
        assert guardian.is_primary is False

    def test_address_completeness(self):
        assert Address(street="Rua A", number="1", city="Recife").is_complete_for_matching()
        assert not Address(street="Rua A", number=" ", city="Recife").is_complete_for_matching()
        assert not Address(street="Rua A").is_complete_for_matching()


@pytest.mark.asyncio
class TestInMemoryRecordRepository:
    """Tests for the list-backed repository."""

    async def test_tenant_scoping_and_exclusion(self, repository):
        profiles = await repository.find_all_in_tenant("school-1", exclude_id="p2")
        ids = {p.id for p in profiles}
        assert "p2" not in ids
        assert "q1" not in ids
        assert "p1" in ids

    async def test_find_by_name_ignores_case(self, repository):
        profiles = await repository.find_by_name_ci("school-1", "MARIA SILVA")
        assert [p.id for p in profiles] == ["p1", "p2"]

    async def test_find_by_email_is_exact(self, repository):
        assert await repository.find_by_email("school-1", "MARIA@example.com") == []
        assert len(await repository.find_by_email("school-1", "ana@example.com")) == 2

    async def test_find_by_digit_document(self, repository):
        profiles = await repository.find_by_digit_document("school-1", "12345678900")
        assert [p.id for p in profiles] == ["p1"]

    async def test_find_by_digit_document_empty(self, repository):
        assert await repository.find_by_digit_document("school-1", "") == []

    async def test_guardians_grouped(self, repository):
        grouped = await repository.find_guardians_by_student_ids(["p1", "p3", "p2"])
        assert [g.id for g in grouped["p3"]] == ["g1"]
        assert [g.id for g in grouped["p1"]] == ["g2"]
        assert "p2" not in grouped

    async def test_returns_copies(self, repository):
        first = await repository.find_all_in_tenant("school-1")
        first[0].name = "Changed"
        second = await repository.find_all_in_tenant("school-1")
        assert second[0].name == "Maria Silva"


class TestSnapshotLoading:
    """Tests for building repositories from snapshots."""

    def test_from_file(self, snapshot_file):
        repo = InMemoryRecordRepository.from_file(snapshot_file)
        assert isinstance(repo, InMemoryRecordRepository)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataAccessError) as exc_info:
            InMemoryRecordRepository.from_file(tmp_path / "nope.json")
        assert exc_info.value.context["operation"] == "read"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(CorruptedData):
            InMemoryRecordRepository.from_file(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(CorruptedData):
            InMemoryRecordRepository.from_file(path)

    def test_guardian_without_student(self):
        with pytest.raises(CorruptedData):
            InMemoryRecordRepository.from_snapshot(
                {"guardians": [{"id": "g", "name": "R"}]}
            )

    def test_profile_without_id(self):
        with pytest.raises(CorruptedData):
            InMemoryRecordRepository.from_snapshot({"profiles": [{"tenantId": "s1"}]})


class TestInMemoryHygieneStore:
    """Tests for the dict-backed hygiene store."""

    def test_missing_collection(self):
        assert InMemoryHygieneStore().load_collection("posts") is None

    def test_load_returns_copy(self):
        store = InMemoryHygieneStore({"posts": [{"title": "a"}]})
        loaded = store.load_collection("posts")
        loaded[0]["title"] = "b"
        assert store.load_collection("posts") == [{"title": "a"}]

    def test_rejects_non_list(self):
        store = InMemoryHygieneStore({"posts": {"title": "a"}})
        with pytest.raises(CorruptedData):
            store.load_collection("posts")

    def test_report_round_trip(self):
        store = InMemoryHygieneStore(report_key="last")
        assert store.load_report() is None
        store.save_report({"totalErrors": 0})
        assert store.load_report() == {"totalErrors": 0}


class TestJsonFileHygieneStore:
    """Tests for the JSON file hygiene store."""

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileHygieneStore(tmp_path / "store.json")
        assert store.load_collection("people") is None
        assert store.load_report() is None

    def test_save_keeps_other_keys(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"classes": [{"name": "5A"}]}), encoding="utf-8")
        store = JsonFileHygieneStore(path)

        store.save_collection("posts", [{"title": "Olá"}])
        store.save_report({"totalErrors": 0})

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["classes"] == [{"name": "5A"}]
        assert document["posts"] == [{"title": "Olá"}]
        assert document["hygiene_report"] == {"totalErrors": 0}

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileHygieneStore(tmp_path / "store.json")
        store.save_collection("posts", [])
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    def test_corrupted_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(CorruptedData):
            JsonFileHygieneStore(path).load_collection("posts")

    def test_blank_file_is_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("  \n", encoding="utf-8")
        assert JsonFileHygieneStore(path).load_collection("posts") is None
