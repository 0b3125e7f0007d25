# -*- coding: utf-8 -*-
"""
Prometheus Metrics - Data Hygiene

Metrics:
    1. klase_dh_entities_validated_total (Counter, labels: kind, outcome)
    2. klase_dh_adjustments_total (Counter, labels: field)
    3. klase_dh_runs_total (Counter, labels: status)
    4. klase_dh_run_duration_seconds (Histogram)

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

# 1. Entities validated by kind (person, post, class) and outcome
dh_entities_validated_total = Counter(
    "klase_dh_entities_validated_total",
    "Total draft entities validated",
    labelnames=["kind", "outcome"],
)

# 2. Silent adjustments by field family
dh_adjustments_total = Counter(
    "klase_dh_adjustments_total",
    "Total silent adjustments applied",
    labelnames=["field"],
)

# 3. Bulk hygiene runs by status (completed, failed)
dh_runs_total = Counter(
    "klase_dh_runs_total",
    "Total bulk hygiene runs",
    labelnames=["status"],
)

# 4. Bulk hygiene run duration
dh_run_duration_seconds = Histogram(
    "klase_dh_run_duration_seconds",
    "Bulk hygiene run duration in seconds",
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _field_family(field: str) -> str:
    # phone_0, phone_1, ... share one label value
    if field.startswith("phone_"):
        return "phone"
    return field


def inc_entities(kind: str, outcome: str) -> None:
    """Record a validated entity.

    Args:
        kind: person, post or class.
        outcome: valid or invalid.
    """
    dh_entities_validated_total.labels(kind=kind, outcome=outcome).inc()


def inc_adjustments(field: str, count: int = 1) -> None:
    """Record adjustments applied to a field."""
    dh_adjustments_total.labels(field=_field_family(field)).inc(count)


def inc_runs(status: str) -> None:
    """Record a finished bulk run (completed or failed)."""
    dh_runs_total.labels(status=status).inc()


def observe_run_duration(seconds: float) -> None:
    """Record the duration of one bulk run."""
    dh_run_duration_seconds.observe(seconds)


__all__ = [
    "dh_entities_validated_total",
    "dh_adjustments_total",
    "dh_runs_total",
    "dh_run_duration_seconds",
    "inc_entities",
    "inc_adjustments",
    "inc_runs",
    "observe_run_duration",
]
