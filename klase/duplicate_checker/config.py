# -*- coding: utf-8 -*-
"""
Duplicate Checker Configuration

Centralized configuration for the duplicate checker covering:
- Value normalization conventions (email case, phone country code)
- Store fan-out limits
- Guardian enrichment toggle
- Logging and metrics settings

All settings can be overridden via environment variables with the
``KLASE_DC_`` prefix (e.g. ``KLASE_DC_MAX_CONCURRENT_QUERIES``).

Example:
    >>> from klase.duplicate_checker.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.email_case, cfg.max_concurrent_queries)

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

_ENV_PREFIX = "KLASE_DC_"

_EMAIL_CASES = ("lower", "upper", "preserve")


@dataclass
class DuplicateCheckerConfig:
    """Configuration for the duplicate checker.

    Attributes:
        email_case: Case convention of stored emails; candidate emails are
            brought to it before the equality lookup (lower, upper,
            preserve).
        phone_country_code: Country calling code stripped from phone
            numbers before comparison.
        max_concurrent_queries: Upper bound on store queries in flight
            for a single duplicate check.
        enrich_with_guardians: Whether phone and address matches carry
            the matched students' guardians.
        log_level: Logging level for the duplicate checker.
        enable_metrics: Whether Prometheus metrics are recorded.
    """

    email_case: str = "lower"
    phone_country_code: str = "55"
    max_concurrent_queries: int = 6
    enrich_with_guardians: bool = True
    log_level: str = "INFO"
    enable_metrics: bool = True

    @classmethod
    def from_env(cls) -> DuplicateCheckerConfig:
        """Build a DuplicateCheckerConfig from environment variables.

        Every field can be overridden via ``KLASE_DC_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).

        Returns:
            Populated DuplicateCheckerConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        email_case = _str("EMAIL_CASE", cls.email_case).lower()
        if email_case not in _EMAIL_CASES:
            logger.warning(
                "Invalid %sEMAIL_CASE=%s, using default %s",
                prefix, email_case, cls.email_case,
            )
            email_case = cls.email_case

        max_queries = _int("MAX_CONCURRENT_QUERIES", cls.max_concurrent_queries)
        if max_queries < 1:
            logger.warning(
                "%sMAX_CONCURRENT_QUERIES must be >= 1, got %d; using 1",
                prefix, max_queries,
            )
            max_queries = 1

        config = cls(
            email_case=email_case,
            phone_country_code=_str("PHONE_COUNTRY_CODE", cls.phone_country_code),
            max_concurrent_queries=max_queries,
            enrich_with_guardians=_bool(
                "ENRICH_WITH_GUARDIANS", cls.enrich_with_guardians,
            ),
            log_level=_str("LOG_LEVEL", cls.log_level),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
        )

        logger.info(
            "DuplicateCheckerConfig loaded: email_case=%s, country_code=%s, "
            "max_queries=%d, guardians=%s, metrics=%s",
            config.email_case,
            config.phone_country_code,
            config.max_concurrent_queries,
            config.enrich_with_guardians,
            config.enable_metrics,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[DuplicateCheckerConfig] = None
_config_lock = threading.Lock()


def get_config() -> DuplicateCheckerConfig:
    """Return the singleton DuplicateCheckerConfig, creating from env if needed.

    Uses double-checked locking for thread safety with minimal
    contention on the hot path.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = DuplicateCheckerConfig.from_env()
    return _config_instance


def set_config(config: DuplicateCheckerConfig) -> None:
    """Replace the singleton DuplicateCheckerConfig (useful for testing)."""
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("DuplicateCheckerConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "DuplicateCheckerConfig",
    "get_config",
    "set_config",
    "reset_config",
]
