# -*- coding: utf-8 -*-
"""
Klase Duplicate Checker

Rule-based, tenant-scoped detection of duplicate and similar person
records, run before a student or guardian record is written.

Key Components:
    - checker: DuplicateChecker (concurrent, per-check failure isolation)
    - models: CandidateRecord, BlockingIssue, Similarity, DuplicateCheckResult
    - config: DuplicateCheckerConfig with KLASE_DC_ env overrides
    - metrics: Prometheus counters and histograms
"""

from klase.duplicate_checker.checker import DuplicateChecker
from klase.duplicate_checker.config import (
    DuplicateCheckerConfig,
    get_config,
    reset_config,
    set_config,
)
from klase.duplicate_checker.models import (
    BlockingField,
    BlockingIssue,
    CandidateRecord,
    DuplicateCheckResult,
    ExistingUser,
    IntegrityWarning,
    Similarity,
    SimilaritySeverity,
    SimilarityType,
)

__all__ = [
    "DuplicateChecker",
    "DuplicateCheckerConfig",
    "get_config",
    "set_config",
    "reset_config",
    "BlockingField",
    "BlockingIssue",
    "CandidateRecord",
    "DuplicateCheckResult",
    "ExistingUser",
    "IntegrityWarning",
    "Similarity",
    "SimilaritySeverity",
    "SimilarityType",
]
