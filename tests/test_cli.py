# -*- coding: utf-8 -*-
"""Tests for the klase command line interface."""

import json

import pytest
from typer.testing import CliRunner

from klase import __version__
from klase.cli.main import app

runner = CliRunner()


@pytest.fixture
def store_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text(json.dumps({
        "people": [{"id": "u1", "name": " Ana ", "student": {"phones": ["11987654321"]}}],
        "posts": [{"id": "t1", "title": "Trip"}],
    }), encoding="utf-8")
    return path


class TestRootCommands:
    """Tests for version and help."""

    def test_version_command(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"Klase v{__version__}" in result.stdout


class TestHygieneCommands:
    """Tests for klase hygiene."""

    def test_run_then_report(self, store_file):
        result = runner.invoke(app, ["hygiene", "run", str(store_file)])
        assert result.exit_code == 0
        assert "Hygiene run complete" in result.stdout

        document = json.loads(store_file.read_text(encoding="utf-8"))
        assert document["people"][0]["name"] == "Ana"
        assert document["people"][0]["student"]["phones"] == ["(11) 98765-4321"]

        result = runner.invoke(app, ["hygiene", "report", str(store_file), "--json"])
        assert result.exit_code == 0
        assert '"phonesFixed": 1' in result.stdout

    def test_run_on_corrupted_store(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[]", encoding="utf-8")
        result = runner.invoke(app, ["hygiene", "run", str(path)])
        assert result.exit_code == 1
        assert "hygiene run failed" in result.stdout

    def test_report_missing(self, tmp_path):
        result = runner.invoke(app, ["hygiene", "report", str(tmp_path / "none.json")])
        assert result.exit_code == 1
        assert "No hygiene report found" in result.stdout


class TestDedupCommands:
    """Tests for klase dedup."""

    def test_blocking_exit_code(self, snapshot_file):
        result = runner.invoke(app, [
            "dedup", "check", str(snapshot_file), "--tenant", "school-1",
            "--cpf", "123.456.789-00",
        ])
        assert result.exit_code == 2
        assert "CPF already registered" in result.stdout

    def test_similar_records(self, snapshot_file):
        result = runner.invoke(app, [
            "dedup", "check", str(snapshot_file), "-t", "school-1",
            "--name", "Maria Silva", "--dob", "2015-03-10", "--json",
        ])
        assert result.exit_code == 0
        assert '"hasSimilarities": true' in result.stdout
        assert '"hasBlocking": false' in result.stdout

    def test_clean(self, snapshot_file):
        result = runner.invoke(app, [
            "dedup", "check", str(snapshot_file), "-t", "school-1", "--name", "Lia Santos",
        ])
        assert result.exit_code == 0
        assert "No duplicates found" in result.stdout

    def test_unreadable_snapshot(self, tmp_path):
        result = runner.invoke(app, [
            "dedup", "check", str(tmp_path / "missing.json"), "-t", "school-1",
        ])
        assert result.exit_code == 1
        assert "Cannot read snapshot" in result.stdout
