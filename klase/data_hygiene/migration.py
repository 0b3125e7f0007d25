# -*- coding: utf-8 -*-
"""
Bulk hygiene pass

One-shot migration that runs every stored person, post and class
through the per-entity validators, writes the cleaned collections back
and stores a timestamped :class:`HygieneReport`.

Posts are validated with ``allow_past_override`` so historical due and
publish dates are kept. With that, the pass is idempotent: a second run
on cleaned data reports no further adjustments.

The pass is not safe to run concurrently with itself; callers serialize
it (an administrative action).

Example:
    >>> store = JsonFileHygieneStore("klase-store.json")
    >>> report = run_data_hygiene(store)
    >>> report.phones_fixed, report.total_errors

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from klase.data_hygiene.config import DataHygieneConfig, get_config
from klase.data_hygiene.metrics import inc_runs, observe_run_duration
from klase.data_hygiene.models import EntityKind, HygieneReport, ValidationErr, ValidationOk
from klase.data_hygiene.sanitizer import format_datetime
from klase.data_hygiene.validators import (
    validate_class_data,
    validate_person_data,
    validate_post_data,
)
from klase.exceptions import KlaseException
from klase.provenance import ProvenanceTracker
from klase.records.store import HygieneStore, JsonFileHygieneStore

logger = logging.getLogger(__name__)

__all__ = [
    "run_data_hygiene",
    "get_last_hygiene_report",
]

Result = Union[ValidationOk, ValidationErr]

_TEXT_FIELDS = ("body", "eventLocation", "code")
_TITLE_FIELDS = ("name", "title")


def _default_store(config: DataHygieneConfig) -> HygieneStore:
    return JsonFileHygieneStore(config.store_path, report_key=config.report_key)


def _passes(
    config: DataHygieneConfig,
    now: datetime,
) -> List[Tuple[EntityKind, str, Callable[[Dict[str, Any]], Result]]]:
    return [
        (
            EntityKind.PERSON,
            config.people_collection,
            lambda record: validate_person_data(record, config=config),
        ),
        (
            EntityKind.POST,
            config.posts_collection,
            lambda record: validate_post_data(record, True, config=config, now=now),
        ),
        (
            EntityKind.CLASS,
            config.classes_collection,
            lambda record: validate_class_data(record, config=config),
        ),
    ]


def _tally(report: HygieneReport, result: Result) -> None:
    for adjustment in result.adjustments:
        field = adjustment.field
        if field.startswith("phone_"):
            report.phones_fixed += 1
        elif field.endswith("At"):
            report.dates_adjusted += 1
        elif field in _TITLE_FIELDS:
            report.titles_trimmed += 1
        elif field in _TEXT_FIELDS:
            report.texts_clipped += 1
    for error in result.errors:
        if error.field.startswith("phone_"):
            report.phones_invalid += 1
    report.total_errors += len(result.errors)


def run_data_hygiene(
    store: Optional[HygieneStore] = None,
    config: Optional[DataHygieneConfig] = None,
) -> HygieneReport:
    """Sanitize every stored person, post and class.

    Args:
        store: Store to clean; defaults to the configured JSON file.
        config: Limits, collection names and report key.

    Returns:
        HygieneReport of this run. When the run fails part-way, the error
        is logged and the report comes back with ``total_errors == -1``;
        collections already written stay written.
    """
    cfg = config or get_config()
    store = store or _default_store(cfg)
    now = datetime.now(timezone.utc)
    report = HygieneReport(timestamp=format_datetime(now))
    tracker = ProvenanceTracker()
    start_time = time.monotonic()

    try:
        for kind, collection, validate_record in _passes(cfg, now):
            records = store.load_collection(collection)
            if records is None:
                logger.debug("Collection %s not present; skipping", collection)
                continue

            cleaned: List[Dict[str, Any]] = []
            for index, record in enumerate(records):
                result = validate_record(record)
                _tally(report, result)
                tracker.record(
                    kind.value, str(record.get("id", index)), "sanitize", result.data,
                )
                cleaned.append(result.data)

            store.save_collection(collection, cleaned)
            logger.info("Cleaned %d %s record(s)", len(cleaned), kind.value)

        report.provenance_hash = tracker.chain_hash
        store.save_report(report.to_store())
    except Exception:
        logger.exception("Data hygiene run failed")
        if cfg.enable_metrics:
            inc_runs("failed")
        return report.model_copy(update={"total_errors": -1})

    elapsed = time.monotonic() - start_time
    if cfg.enable_metrics:
        inc_runs("completed")
        observe_run_duration(elapsed)
    logger.info(
        "Data hygiene run finished in %.2fs: phones fixed=%d invalid=%d, "
        "dates adjusted=%d, titles trimmed=%d, texts clipped=%d, errors=%d",
        elapsed,
        report.phones_fixed,
        report.phones_invalid,
        report.dates_adjusted,
        report.titles_trimmed,
        report.texts_clipped,
        report.total_errors,
    )
    return report


def get_last_hygiene_report(
    store: Optional[HygieneStore] = None,
    config: Optional[DataHygieneConfig] = None,
) -> Optional[HygieneReport]:
    """Return the report stored by the last run, or None.

    An unreadable store or a malformed report also yields None.
    """
    store = store or _default_store(config or get_config())
    try:
        stored = store.load_report()
    except KlaseException as exc:
        logger.warning("Could not read the last hygiene report: %s", exc)
        return None
    if stored is None:
        return None
    try:
        return HygieneReport.model_validate(stored)
    except ValidationError:
        logger.warning("Stored hygiene report is malformed; ignoring it")
        return None
