# -*- coding: utf-8 -*-
"""
Klase Data Hygiene

Validation and sanitization of draft persons, posts and classes, used
per record on submit and in bulk as a one-shot migration pass.

Key Components:
    - sanitizer: text, phone and date primitives
    - validators: per-entity rules and the ``validate`` dispatcher
    - migration: run_data_hygiene / get_last_hygiene_report
    - models: drafts, ValidationOk / ValidationErr, HygieneReport
    - config: DataHygieneConfig with KLASE_DH_ env overrides
    - metrics: Prometheus counters and histograms
"""

from klase.data_hygiene.config import (
    DataHygieneConfig,
    get_config,
    reset_config,
    set_config,
)
from klase.data_hygiene.migration import get_last_hygiene_report, run_data_hygiene
from klase.data_hygiene.models import (
    Adjustment,
    ClassDraft,
    DateCheck,
    DateContext,
    DraftEntity,
    EntityKind,
    FieldError,
    HygieneReport,
    PersonDraft,
    PhoneCheck,
    PostDraft,
    ValidationErr,
    ValidationOk,
    ValidationResult,
)
from klase.data_hygiene.sanitizer import (
    normalize_spaces,
    sanitize_text,
    validate_and_sanitize_phone,
    validate_date,
)
from klase.data_hygiene.validators import (
    validate,
    validate_class_data,
    validate_person_data,
    validate_post_data,
)

__all__ = [
    "DataHygieneConfig",
    "get_config",
    "set_config",
    "reset_config",
    "run_data_hygiene",
    "get_last_hygiene_report",
    "Adjustment",
    "ClassDraft",
    "DateCheck",
    "DateContext",
    "DraftEntity",
    "EntityKind",
    "FieldError",
    "HygieneReport",
    "PersonDraft",
    "PhoneCheck",
    "PostDraft",
    "ValidationErr",
    "ValidationOk",
    "ValidationResult",
    "normalize_spaces",
    "sanitize_text",
    "validate_and_sanitize_phone",
    "validate_date",
    "validate",
    "validate_class_data",
    "validate_person_data",
    "validate_post_data",
]
