# -*- coding: utf-8 -*-
"""
Data Hygiene Configuration

Centralized configuration for the data hygiene validator covering:
- Text length limits per entity field
- Publish date grace window
- Bulk pass store location, collection names and report key
- Logging and metrics settings

All settings can be overridden via environment variables with the
``KLASE_DH_`` prefix (e.g. ``KLASE_DH_MAX_BODY_LENGTH``).

Example:
    >>> from klase.data_hygiene.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.max_title_length, cfg.publish_grace_seconds)

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

_ENV_PREFIX = "KLASE_DH_"


@dataclass
class DataHygieneConfig:
    """Configuration for the data hygiene validator and bulk pass.

    Attributes:
        max_name_length: Person full name limit.
        max_title_length: Post title limit.
        max_body_length: Post body limit (after whitespace normalization).
        max_event_location_length: Post event location limit.
        max_class_name_length: Class name limit.
        max_class_code_length: Class code limit.
        publish_grace_seconds: Publish dates this close to now are
            treated as now and never moved.
        store_path: JSON store used by the bulk pass when no store is given.
        people_collection: Collection holding person records.
        posts_collection: Collection holding posts.
        classes_collection: Collection holding classes.
        report_key: Key under which the last hygiene report is stored.
        log_level: Logging level for data hygiene.
        enable_metrics: Whether Prometheus metrics are recorded.
    """

    max_name_length: int = 120
    max_title_length: int = 120
    max_body_length: int = 1000
    max_event_location_length: int = 200
    max_class_name_length: int = 120
    max_class_code_length: int = 20
    publish_grace_seconds: int = 60
    store_path: str = "klase-store.json"
    people_collection: str = "people"
    posts_collection: str = "posts"
    classes_collection: str = "classes"
    report_key: str = "hygiene_report"
    log_level: str = "INFO"
    enable_metrics: bool = True

    @classmethod
    def from_env(cls) -> DataHygieneConfig:
        """Build a DataHygieneConfig from environment variables.

        Every field can be overridden via ``KLASE_DH_<FIELD_UPPER>``.
        Non-positive length limits are rejected and fall back to the
        default.

        Returns:
            Populated DataHygieneConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int, minimum: int = 1) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                parsed = int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default
            if parsed < minimum:
                logger.warning(
                    "%s%s must be >= %d, got %d; using default %d",
                    prefix, name, minimum, parsed, default,
                )
                return default
            return parsed

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None or not val.strip():
                return default
            return val

        config = cls(
            max_name_length=_int("MAX_NAME_LENGTH", cls.max_name_length),
            max_title_length=_int("MAX_TITLE_LENGTH", cls.max_title_length),
            max_body_length=_int("MAX_BODY_LENGTH", cls.max_body_length),
            max_event_location_length=_int(
                "MAX_EVENT_LOCATION_LENGTH", cls.max_event_location_length,
            ),
            max_class_name_length=_int(
                "MAX_CLASS_NAME_LENGTH", cls.max_class_name_length,
            ),
            max_class_code_length=_int(
                "MAX_CLASS_CODE_LENGTH", cls.max_class_code_length,
            ),
            publish_grace_seconds=_int(
                "PUBLISH_GRACE_SECONDS", cls.publish_grace_seconds, minimum=0,
            ),
            store_path=_str("STORE_PATH", cls.store_path),
            people_collection=_str("PEOPLE_COLLECTION", cls.people_collection),
            posts_collection=_str("POSTS_COLLECTION", cls.posts_collection),
            classes_collection=_str("CLASSES_COLLECTION", cls.classes_collection),
            report_key=_str("REPORT_KEY", cls.report_key),
            log_level=_str("LOG_LEVEL", cls.log_level),
            enable_metrics=_bool("ENABLE_METRICS", cls.enable_metrics),
        )

        logger.info(
            "DataHygieneConfig loaded: name=%d, title=%d, body=%d, "
            "grace=%ds, store=%s, metrics=%s",
            config.max_name_length,
            config.max_title_length,
            config.max_body_length,
            config.publish_grace_seconds,
            config.store_path,
            config.enable_metrics,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[DataHygieneConfig] = None
_config_lock = threading.Lock()


def get_config() -> DataHygieneConfig:
    """Return the singleton DataHygieneConfig, creating from env if needed."""
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = DataHygieneConfig.from_env()
    return _config_instance


def set_config(config: DataHygieneConfig) -> None:
    """Replace the singleton DataHygieneConfig (useful for testing)."""
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("DataHygieneConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "DataHygieneConfig",
    "get_config",
    "set_config",
    "reset_config",
]
