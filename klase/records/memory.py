# -*- coding: utf-8 -*-
"""
In-memory record repository.

Holds profiles and guardians in plain lists and answers the
:class:`RecordRepository` queries by scanning them. Used by the test
suite and by the CLI, which loads a JSON snapshot exported from the
production store::

    {
        "profiles": [{"id": "p1", "tenantId": "school-1", "name": "..."}],
        "guardians": [{"id": "g1", "studentId": "p1", "name": "...", ...}]
    }

Returned models are copies, so callers cannot mutate stored rows.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from klase.exceptions import CorruptedData, DataAccessError
from klase.records.models import Guardian, ProfileRecord
from klase.records.repository import RecordRepository

logger = logging.getLogger(__name__)

__all__ = ["InMemoryRecordRepository"]


class InMemoryRecordRepository(RecordRepository):
    """List-backed :class:`RecordRepository`.

    Example:
        >>> repo = InMemoryRecordRepository()
        >>> repo.add_profile(ProfileRecord(id="p1", tenant_id="s1", name="Ana"))
        >>> repo.add_guardian("p1", Guardian(id="g1", name="Rita", relation="mother"))
    """

    def __init__(
        self,
        profiles: Optional[Iterable[ProfileRecord]] = None,
        guardians: Optional[Iterable[Tuple[str, Guardian]]] = None,
    ) -> None:
        self._profiles: List[ProfileRecord] = list(profiles or [])
        self._guardians: List[Tuple[str, Guardian]] = list(guardians or [])

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_profile(self, profile: ProfileRecord) -> None:
        self._profiles.append(profile)

    def add_guardian(self, student_id: str, guardian: Guardian) -> None:
        self._guardians.append((student_id, guardian))

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> InMemoryRecordRepository:
        """Build a repository from a decoded snapshot document.

        Raises:
            CorruptedData: If a profile or guardian row is malformed.
        """
        repo = cls()
        try:
            for row in snapshot.get("profiles") or []:
                repo.add_profile(ProfileRecord.model_validate(row))
            for row in snapshot.get("guardians") or []:
                student_id = row.get("studentId") or row.get("student_id")
                if not student_id:
                    raise CorruptedData(
                        "Guardian row has no student id",
                        data_source="guardians",
                        corruption_details={"id": row.get("id")},
                    )
                repo.add_guardian(str(student_id), Guardian.model_validate(row))
        except (ValidationError, AttributeError) as exc:
            raise CorruptedData(
                f"Malformed snapshot row: {exc}",
                data_source="snapshot",
            ) from exc
        logger.info(
            "Loaded snapshot with %d profiles and %d guardians",
            len(repo._profiles), len(repo._guardians),
        )
        return repo

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> InMemoryRecordRepository:
        """Build a repository from a JSON snapshot file.

        Raises:
            DataAccessError: If the file cannot be read.
            CorruptedData: If the file is not a valid snapshot.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataAccessError(
                f"Cannot read snapshot {path}",
                data_source=str(path),
                operation="read",
                cause=exc,
            ) from exc
        try:
            snapshot = json.loads(text)
        except ValueError as exc:
            raise CorruptedData(
                f"Snapshot {path} is not valid JSON",
                data_source=str(path),
            ) from exc
        if not isinstance(snapshot, dict):
            raise CorruptedData(
                f"Snapshot {path} must be a JSON object",
                data_source=str(path),
                corruption_details={"type": type(snapshot).__name__},
            )
        return cls.from_snapshot(snapshot)

    # ------------------------------------------------------------------
    # RecordRepository
    # ------------------------------------------------------------------

    def _scan(self, tenant_id: str, exclude_id: Optional[str]) -> List[ProfileRecord]:
        return [
            profile.model_copy(deep=True)
            for profile in self._profiles
            if profile.tenant_id == tenant_id and profile.id != exclude_id
        ]

    async def find_all_in_tenant(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        return self._scan(tenant_id, exclude_id)

    async def find_by_enrollment(
        self,
        tenant_id: str,
        enrollment_number: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        return [
            p for p in self._scan(tenant_id, exclude_id)
            if p.enrollment_number is not None and p.enrollment_number == enrollment_number
        ]

    async def find_by_email(
        self,
        tenant_id: str,
        email: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        return [p for p in self._scan(tenant_id, exclude_id) if p.email == email]

    async def find_by_name_ci(
        self,
        tenant_id: str,
        name: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        wanted = name.casefold()
        return [
            p for p in self._scan(tenant_id, exclude_id)
            if p.name.casefold() == wanted
        ]

    async def find_guardians_by_student_ids(
        self,
        student_ids: Sequence[str],
    ) -> Dict[str, List[Guardian]]:
        wanted = set(student_ids)
        grouped: Dict[str, List[Guardian]] = {}
        for student_id, guardian in self._guardians:
            if student_id in wanted:
                grouped.setdefault(student_id, []).append(guardian.model_copy())
        return grouped
