# -*- coding: utf-8 -*-
"""Tests for configuration loading and singleton accessors."""

from klase.data_hygiene import config as hygiene_config
from klase.data_hygiene.config import DataHygieneConfig
from klase.duplicate_checker import config as checker_config
from klase.duplicate_checker.config import DuplicateCheckerConfig


class TestDuplicateCheckerConfig:
    """Tests for DuplicateCheckerConfig.from_env."""

    def test_defaults(self):
        config = DuplicateCheckerConfig.from_env()
        assert config.email_case == "lower"
        assert config.phone_country_code == "55"
        assert config.max_concurrent_queries == 6
        assert config.enrich_with_guardians is True

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KLASE_DC_EMAIL_CASE", "PRESERVE")
        monkeypatch.setenv("KLASE_DC_MAX_CONCURRENT_QUERIES", "2")
        monkeypatch.setenv("KLASE_DC_ENRICH_WITH_GUARDIANS", "no")
        monkeypatch.setenv("KLASE_DC_ENABLE_METRICS", "0")

        config = DuplicateCheckerConfig.from_env()

        assert config.email_case == "preserve"
        assert config.max_concurrent_queries == 2
        assert config.enrich_with_guardians is False
        assert config.enable_metrics is False

    def test_invalid_values_fall_back(self, monkeypatch, caplog):
        monkeypatch.setenv("KLASE_DC_EMAIL_CASE", "title")
        monkeypatch.setenv("KLASE_DC_MAX_CONCURRENT_QUERIES", "many")

        config = DuplicateCheckerConfig.from_env()

        assert config.email_case == "lower"
        assert config.max_concurrent_queries == 6
        assert "Invalid integer" in caplog.text

    def test_non_positive_concurrency(self, monkeypatch):
        monkeypatch.setenv("KLASE_DC_MAX_CONCURRENT_QUERIES", "0")
        assert DuplicateCheckerConfig.from_env().max_concurrent_queries == 1

    def test_singleton(self, monkeypatch):
        first = checker_config.get_config()
        assert checker_config.get_config() is first

        replacement = DuplicateCheckerConfig(email_case="upper")
        checker_config.set_config(replacement)
        assert checker_config.get_config() is replacement

        checker_config.reset_config()
        monkeypatch.setenv("KLASE_DC_EMAIL_CASE", "upper")
        assert checker_config.get_config() is not replacement
        assert checker_config.get_config().email_case == "upper"


class TestDataHygieneConfig:
    """Tests for DataHygieneConfig.from_env."""

    def test_defaults(self):
        config = DataHygieneConfig.from_env()
        assert config.max_title_length == 120
        assert config.publish_grace_seconds == 60
        assert config.report_key == "hygiene_report"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KLASE_DH_MAX_BODY_LENGTH", "500")
        monkeypatch.setenv("KLASE_DH_PUBLISH_GRACE_SECONDS", "0")
        monkeypatch.setenv("KLASE_DH_STORE_PATH", "/tmp/klase.json")

        config = DataHygieneConfig.from_env()

        assert config.max_body_length == 500
        assert config.publish_grace_seconds == 0
        assert config.store_path == "/tmp/klase.json"

    def test_rejected_limits_fall_back(self, monkeypatch):
        monkeypatch.setenv("KLASE_DH_MAX_TITLE_LENGTH", "0")
        monkeypatch.setenv("KLASE_DH_MAX_NAME_LENGTH", "abc")
        monkeypatch.setenv("KLASE_DH_PUBLISH_GRACE_SECONDS", "-5")
        monkeypatch.setenv("KLASE_DH_REPORT_KEY", "  ")

        config = DataHygieneConfig.from_env()

        assert config.max_title_length == 120
        assert config.max_name_length == 120
        assert config.publish_grace_seconds == 60
        assert config.report_key == "hygiene_report"

    def test_singleton(self):
        first = hygiene_config.get_config()
        assert hygiene_config.get_config() is first
        hygiene_config.reset_config()
        assert hygiene_config.get_config() is not first
