# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Duplicate Checker

Metrics:
    1. klase_dc_checks_total (Counter, labels: outcome)
    2. klase_dc_blocking_issues_total (Counter, labels: field)
    3. klase_dc_similarities_total (Counter, labels: type)
    4. klase_dc_check_failures_total (Counter, labels: check)
    5. klase_dc_integrity_warnings_total (Counter, labels: kind)
    6. klase_dc_check_duration_seconds (Histogram)

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

# 1. Duplicate checks run, by outcome (blocking, similar, clean)
dc_checks_total = Counter(
    "klase_dc_checks_total",
    "Total duplicate checks run",
    labelnames=["outcome"],
)

# 2. Blocking issues found by field
dc_blocking_issues_total = Counter(
    "klase_dc_blocking_issues_total",
    "Total blocking duplicate issues found",
    labelnames=["field"],
)

# 3. Similarity warnings by type
dc_similarities_total = Counter(
    "klase_dc_similarities_total",
    "Total similarity warnings raised",
    labelnames=["type"],
)

# 4. Individual checks that failed and were skipped
dc_check_failures_total = Counter(
    "klase_dc_check_failures_total",
    "Total duplicate sub-checks that failed and were skipped",
    labelnames=["check"],
)

# 5. Store-level anomalies noticed while checking
dc_integrity_warnings_total = Counter(
    "klase_dc_integrity_warnings_total",
    "Total record store integrity anomalies observed",
    labelnames=["kind"],
)

# 6. Wall time of a full duplicate check
dc_check_duration_seconds = Histogram(
    "klase_dc_check_duration_seconds",
    "Duplicate check duration in seconds",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def inc_checks(outcome: str) -> None:
    """Record a completed duplicate check.

    Args:
        outcome: blocking, similar or clean.
    """
    dc_checks_total.labels(outcome=outcome).inc()


def inc_blocking(field: str, count: int = 1) -> None:
    """Record blocking issues for a field (cpf, enrollment_number, email)."""
    dc_blocking_issues_total.labels(field=field).inc(count)


def inc_similarities(similarity_type: str, count: int = 1) -> None:
    """Record similarity warnings of a type (name, name_dob, phone, address)."""
    dc_similarities_total.labels(type=similarity_type).inc(count)


def inc_check_failures(check: str) -> None:
    """Record a sub-check that raised and was made inconclusive."""
    dc_check_failures_total.labels(check=check).inc()


def inc_integrity_warnings(kind: str) -> None:
    """Record a store integrity anomaly (e.g. duplicate_email_rows)."""
    dc_integrity_warnings_total.labels(kind=kind).inc()


def observe_duration(seconds: float) -> None:
    """Record the duration of one duplicate check."""
    dc_check_duration_seconds.observe(seconds)


__all__ = [
    "dc_checks_total",
    "dc_blocking_issues_total",
    "dc_similarities_total",
    "dc_check_failures_total",
    "dc_integrity_warnings_total",
    "dc_check_duration_seconds",
    "inc_checks",
    "inc_blocking",
    "inc_similarities",
    "inc_check_failures",
    "inc_integrity_warnings",
    "observe_duration",
]
