# -*- coding: utf-8 -*-
"""
Record repository interface.

The duplicate checker reads the school record store only through this
narrow async interface. Every profile lookup is scoped to one tenant and
skips ``exclude_id`` (the record being edited) so a record is never
reported as a duplicate of itself.

Implementations raise :class:`klase.exceptions.DataAccessError` when the
backing store fails; callers decide whether to degrade.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

from klase.normalization import only_digits
from klase.records.models import Guardian, ProfileRecord
from klase.records.notes import parse_notes

logger = logging.getLogger(__name__)

__all__ = ["RecordRepository"]


class RecordRepository(ABC):
    """Read-only access to profiles and guardians of one record store."""

    @abstractmethod
    async def find_all_in_tenant(
        self,
        tenant_id: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        """Return every profile of the tenant."""

    @abstractmethod
    async def find_by_enrollment(
        self,
        tenant_id: str,
        enrollment_number: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        """Return profiles whose enrollment number equals ``enrollment_number``."""

    @abstractmethod
    async def find_by_email(
        self,
        tenant_id: str,
        email: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        """Return profiles whose stored email equals ``email`` exactly."""

    @abstractmethod
    async def find_by_name_ci(
        self,
        tenant_id: str,
        name: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        """Return profiles whose full name equals ``name`` ignoring case."""

    @abstractmethod
    async def find_guardians_by_student_ids(
        self,
        student_ids: Sequence[str],
    ) -> Dict[str, List[Guardian]]:
        """Return guardians grouped by student id.

        Students without guardians may be absent from the mapping.
        """

    async def find_by_digit_document(
        self,
        tenant_id: str,
        digits: str,
        exclude_id: Optional[str] = None,
    ) -> List[ProfileRecord]:
        """Return profiles whose notes document matches ``digits``.

        The document lives inside the notes blob, so the default
        implementation scans the tenant. Stores that index the document
        should override this.
        """
        if not digits:
            return []
        profiles = await self.find_all_in_tenant(tenant_id, exclude_id)
        matches = [
            profile for profile in profiles
            if only_digits(parse_notes(profile.notes).document) == digits
        ]
        logger.debug(
            "Document scan over %d profiles in tenant %s found %d match(es)",
            len(profiles), tenant_id, len(matches),
        )
        return matches
