# -*- coding: utf-8 -*-
"""
Hygiene stores.

The bulk hygiene pass works on whole collections (people, posts,
classes) and writes back a summary report. A :class:`HygieneStore`
exposes exactly that: named collections of JSON-shaped records plus a
single report slot.

Implementations:
    - InMemoryHygieneStore: dict-backed, for tests and embedding
    - JsonFileHygieneStore: one JSON document on disk keyed by
      collection name; writes go through a temp file and an atomic
      rename so a crash never leaves a half-written store
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from klase.exceptions import CorruptedData, DataAccessError

logger = logging.getLogger(__name__)

__all__ = [
    "HygieneStore",
    "InMemoryHygieneStore",
    "JsonFileHygieneStore",
    "DEFAULT_REPORT_KEY",
]

#: Key under which the last hygiene report is kept.
DEFAULT_REPORT_KEY: str = "hygiene_report"

Record = Dict[str, Any]


class HygieneStore(ABC):
    """Collection-level access used by the bulk hygiene pass."""

    @abstractmethod
    def load_collection(self, name: str) -> Optional[List[Record]]:
        """Return a snapshot of the collection, or None if it does not exist."""

    @abstractmethod
    def save_collection(self, name: str, records: List[Record]) -> None:
        """Replace the collection with ``records``."""

    @abstractmethod
    def save_report(self, report: Record) -> None:
        """Persist the latest hygiene report."""

    @abstractmethod
    def load_report(self) -> Optional[Record]:
        """Return the latest hygiene report, or None."""


def _check_collection(name: str, value: Any) -> List[Record]:
    if not isinstance(value, list) or not all(isinstance(r, dict) for r in value):
        raise CorruptedData(
            f"Collection '{name}' must be a list of objects",
            data_source=name,
            corruption_details={"type": type(value).__name__},
        )
    return value


class InMemoryHygieneStore(HygieneStore):
    """Dict-backed hygiene store. Loads return deep copies."""

    def __init__(
        self,
        collections: Optional[Dict[str, List[Record]]] = None,
        report_key: str = DEFAULT_REPORT_KEY,
    ) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(collections or {})
        self._report_key = report_key

    def load_collection(self, name: str) -> Optional[List[Record]]:
        if name not in self._data:
            return None
        return copy.deepcopy(_check_collection(name, self._data[name]))

    def save_collection(self, name: str, records: List[Record]) -> None:
        self._data[name] = copy.deepcopy(_check_collection(name, records))

    def save_report(self, report: Record) -> None:
        self._data[self._report_key] = copy.deepcopy(report)

    def load_report(self) -> Optional[Record]:
        report = self._data.get(self._report_key)
        return copy.deepcopy(report) if isinstance(report, dict) else None


class JsonFileHygieneStore(HygieneStore):
    """Hygiene store persisted as a single JSON document.

    Example:
        >>> store = JsonFileHygieneStore("/var/lib/klase/store.json")
        >>> people = store.load_collection("people")
    """

    def __init__(
        self,
        path: Union[str, Path],
        report_key: str = DEFAULT_REPORT_KEY,
    ) -> None:
        self.path = Path(path)
        self._report_key = report_key

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataAccessError(
                f"Cannot read hygiene store {self.path}",
                data_source=str(self.path),
                operation="read",
                cause=exc,
            ) from exc
        if not text.strip():
            return {}
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise CorruptedData(
                f"Hygiene store {self.path} is not valid JSON",
                data_source=str(self.path),
            ) from exc
        if not isinstance(document, dict):
            raise CorruptedData(
                f"Hygiene store {self.path} must be a JSON object",
                data_source=str(self.path),
                corruption_details={"type": type(document).__name__},
            )
        return document

    def _write(self, document: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", dir=str(self.path.parent),
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise DataAccessError(
                f"Cannot write hygiene store {self.path}",
                data_source=str(self.path),
                operation="write",
                cause=exc,
            ) from exc

    def load_collection(self, name: str) -> Optional[List[Record]]:
        document = self._read()
        if name not in document:
            return None
        return _check_collection(name, document[name])

    def save_collection(self, name: str, records: List[Record]) -> None:
        document = self._read()
        document[name] = _check_collection(name, records)
        self._write(document)
        logger.debug("Saved %d record(s) to collection %s", len(records), name)

    def save_report(self, report: Record) -> None:
        document = self._read()
        document[self._report_key] = report
        self._write(document)

    def load_report(self) -> Optional[Record]:
        report = self._read().get(self._report_key)
        return report if isinstance(report, dict) else None
