"""
Klase: Record Deduplication & Data Hygiene
==========================================

Guards the school record store against duplicate people and messy data.

- klase.duplicate_checker: tenant-scoped duplicate and similarity checks
- klase.data_hygiene: per-record validation/sanitization and the bulk pass
- klase.intake: the submit flow composing both
- klase.records: record store interfaces and implementations
"""

__version__ = "0.4.0"

__author__ = "Klase Team"
__license__ = "MIT"

__all__ = ["__version__"]
