# -*- coding: utf-8 -*-
"""
Duplicate Checker - rule-based duplicate detection for person records

Classifies a candidate person record against the existing records of one
tenant (school) into blocking issues (true duplicates, the write must
not happen) and similarities (possible duplicates that need a human to
confirm).

Checks:
    1. cpf (blocking): digits of the candidate cpf against the document
       stored in each profile's notes
    2. enrollment_number (blocking): exact match after trimming
    3. email (blocking): first match after case normalization
    4. name / name_dob (similarity): case-insensitive full-name match,
       escalated to high when the date of birth also matches
    5. phone (similarity): comparison key against the profile phone and
       every guardian phone
    6. address (similarity): street, number and city against the
       address stored in each profile's notes

Deterministic Guarantees:
    - Exact, rule-based comparisons only (no fuzzy or phonetic matching)
    - Every lookup is scoped to one tenant and skips the excluded record
    - Output order is fixed regardless of which lookup finishes first
    - A failing lookup skips its own check and never the others

Example:
    >>> checker = DuplicateChecker(repository, tenant_id="school-1")
    >>> result = await checker.check_duplicates(
    ...     CandidateRecord(name="Maria Silva", dob="2015-03-10"),
    ... )
    >>> result.has_similarities

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from klase.duplicate_checker.config import DuplicateCheckerConfig, get_config
from klase.duplicate_checker.metrics import (
    inc_blocking,
    inc_check_failures,
    inc_checks,
    inc_integrity_warnings,
    inc_similarities,
    observe_duration,
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
from klase.exceptions import ConfigurationError, format_exception_chain
from klase.normalization import (
    normalize_dob,
    normalize_email,
    only_digits,
    phone_comparison_key,
)
from klase.records.models import Address, Guardian, ProfileRecord
from klase.records.notes import parse_notes
from klase.records.repository import RecordRepository

logger = logging.getLogger(__name__)

__all__ = [
    "DuplicateChecker",
]

T = TypeVar("T")

#: Check names, in the order their findings appear in the result.
CHECK_ORDER = ("cpf", "enrollment_number", "email", "name", "phone", "address")


@dataclass
class _Findings:
    """Partial result produced by a single check."""

    blocking: List[BlockingIssue] = field(default_factory=list)
    similarities: List[Similarity] = field(default_factory=list)
    warnings: List[IntegrityWarning] = field(default_factory=list)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _same_text(a: Optional[str], b: Optional[str]) -> bool:
    return _clean(a).casefold() == _clean(b).casefold()


def _address_matches(candidate: Address, stored: Optional[Address]) -> bool:
    if stored is None:
        return False
    return (
        _same_text(candidate.street, stored.street)
        and _clean(candidate.number) == _clean(stored.number)
        and _same_text(candidate.city, stored.city)
    )


class DuplicateChecker:
    """Duplicate checker for one tenant of the record store.

    The checker holds no mutable state: every call builds its own result
    and its own concurrency limit, so one instance can serve concurrent
    requests.

    Attributes:
        repository: Record store access.
        tenant_id: School whose records are searched.
        config: Checker configuration.
    """

    def __init__(
        self,
        repository: RecordRepository,
        tenant_id: Optional[str],
        config: Optional[DuplicateCheckerConfig] = None,
    ) -> None:
        self.repository = repository
        self.tenant_id = tenant_id
        self.config = config or get_config()
        if self.config.max_concurrent_queries < 1:
            raise ConfigurationError(
                "max_concurrent_queries must be >= 1",
                context={"max_concurrent_queries": self.config.max_concurrent_queries},
            )
        if self.config.email_case not in ("lower", "upper", "preserve"):
            raise ConfigurationError(
                f"Unsupported email_case '{self.config.email_case}'",
                context={"email_case": self.config.email_case},
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def check_duplicates(
        self,
        candidate: Union[CandidateRecord, Mapping[str, Any]],
        exclude_id: Optional[str] = None,
    ) -> DuplicateCheckResult:
        """Classify ``candidate`` against the tenant's existing records.

        Args:
            candidate: Record about to be written. A mapping is validated
                into a :class:`CandidateRecord`.
            exclude_id: Id of the record being edited, never reported as
                its own duplicate.

        Returns:
            DuplicateCheckResult. Lookups that fail are logged and
            skipped, so a result is always returned.

        Raises:
            pydantic.ValidationError: If ``candidate`` is a mapping that is
                not a valid candidate record.
        """
        if not isinstance(candidate, CandidateRecord):
            candidate = CandidateRecord.model_validate(candidate)

        if not self.tenant_id:
            logger.debug("No tenant selected; skipping duplicate check")
            return DuplicateCheckResult()

        start_time = time.monotonic()
        semaphore = asyncio.Semaphore(self.config.max_concurrent_queries)

        checks = (
            self._check_cpf(candidate, exclude_id, semaphore),
            self._check_enrollment(candidate, exclude_id, semaphore),
            self._check_email(candidate, exclude_id, semaphore),
            self._check_name(candidate, exclude_id, semaphore),
            self._check_phone(candidate, exclude_id, semaphore),
            self._check_address(candidate, exclude_id, semaphore),
        )
        findings = await asyncio.gather(
            *(self._guarded(name, coro) for name, coro in zip(CHECK_ORDER, checks))
        )

        result = DuplicateCheckResult()
        for part in findings:
            result.blocking_issues.extend(part.blocking)
            result.similarities.extend(part.similarities)
            result.integrity_warnings.extend(part.warnings)

        # Name findings are produced name_dob first, so gather order
        # already yields name_dob -> name -> phone -> address.
        elapsed = time.monotonic() - start_time
        self._record_metrics(result, elapsed)
        logger.info(
            "Duplicate check for tenant %s: %d blocking, %d similar, "
            "%d integrity warning(s) in %.1f ms",
            self.tenant_id,
            len(result.blocking_issues),
            len(result.similarities),
            len(result.integrity_warnings),
            elapsed * 1000.0,
        )
        return result

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _guarded(self, check: str, coro: Awaitable[_Findings]) -> _Findings:
        try:
            return await coro
        except Exception as exc:
            logger.warning(
                "Duplicate check '%s' failed for tenant %s; treating it as "
                "inconclusive: %s",
                check, self.tenant_id, format_exception_chain(exc),
            )
            logger.debug("Traceback of failed check '%s'", check, exc_info=True)
            if self.config.enable_metrics:
                inc_check_failures(check)
            return _Findings()

    @staticmethod
    async def _limited(semaphore: asyncio.Semaphore, query: Awaitable[T]) -> T:
        async with semaphore:
            return await query

    async def _guardians_for(
        self,
        profiles: Sequence[ProfileRecord],
        semaphore: asyncio.Semaphore,
    ) -> Dict[str, List[Guardian]]:
        if not profiles:
            return {}
        return await self._limited(
            semaphore,
            self.repository.find_guardians_by_student_ids([p.id for p in profiles]),
        )

    def _enriched(
        self,
        profiles: Sequence[ProfileRecord],
        guardians: Dict[str, List[Guardian]],
    ) -> List[ExistingUser]:
        if not self.config.enrich_with_guardians:
            return [ExistingUser.from_profile(p) for p in profiles]
        return [ExistingUser.from_profile(p, guardians.get(p.id, [])) for p in profiles]

    def _record_metrics(self, result: DuplicateCheckResult, elapsed: float) -> None:
        if not self.config.enable_metrics:
            return
        inc_checks(result.outcome)
        observe_duration(elapsed)
        for issue in result.blocking_issues:
            inc_blocking(issue.field.value)
        for similarity in result.similarities:
            inc_similarities(similarity.type.value)

    # ------------------------------------------------------------------
    # Blocking checks
    # ------------------------------------------------------------------

    async def _check_cpf(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        digits = only_digits(candidate.cpf)
        if not digits:
            return _Findings()
        matches = await self._limited(
            semaphore,
            self.repository.find_by_digit_document(self.tenant_id, digits, exclude_id),
        )
        return _Findings(blocking=[
            BlockingIssue(
                field=BlockingField.CPF,
                message="CPF already registered",
                existing_user=ExistingUser.from_profile(profile),
            )
            for profile in matches
        ])

    async def _check_enrollment(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        enrollment = _clean(candidate.enrollment_number)
        if not enrollment:
            return _Findings()
        matches = await self._limited(
            semaphore,
            self.repository.find_by_enrollment(self.tenant_id, enrollment, exclude_id),
        )
        return _Findings(blocking=[
            BlockingIssue(
                field=BlockingField.ENROLLMENT_NUMBER,
                message="Enrollment number already registered",
                existing_user=ExistingUser.from_profile(profile),
            )
            for profile in matches
        ])

    async def _check_email(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        email = normalize_email(candidate.email, self.config.email_case)
        if not email:
            return _Findings()
        matches = await self._limited(
            semaphore,
            self.repository.find_by_email(self.tenant_id, email, exclude_id),
        )
        if not matches:
            return _Findings()

        findings = _Findings(blocking=[
            BlockingIssue(
                field=BlockingField.EMAIL,
                message="Email already registered for another user",
                existing_user=ExistingUser.from_profile(matches[0]),
            )
        ])
        if len(matches) > 1:
            ids = [profile.id for profile in matches]
            logger.warning(
                "Tenant %s has %d profiles sharing one email: %s",
                self.tenant_id, len(matches), ", ".join(ids),
            )
            if self.config.enable_metrics:
                inc_integrity_warnings("duplicate_email_rows")
            findings.warnings.append(IntegrityWarning(
                kind="duplicate_email_rows",
                message=f"{len(matches)} existing profiles share this email",
                record_ids=ids,
            ))
        return findings

    # ------------------------------------------------------------------
    # Similarity checks
    # ------------------------------------------------------------------

    async def _check_name(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        name = _clean(candidate.name)
        if not name:
            return _Findings()
        matches = await self._limited(
            semaphore,
            self.repository.find_by_name_ci(self.tenant_id, name, exclude_id),
        )
        if not matches:
            return _Findings()

        dob = normalize_dob(candidate.dob)
        if dob:
            same_dob = [p for p in matches if normalize_dob(p.dob) == dob]
            name_only = [p for p in matches if normalize_dob(p.dob) != dob]
        else:
            same_dob, name_only = [], list(matches)

        findings = _Findings()
        if same_dob:
            findings.similarities.append(Similarity(
                type=SimilarityType.NAME_DOB,
                severity=SimilaritySeverity.HIGH,
                message=(
                    f"Found {len(same_dob)} student(s) with identical name "
                    "and date of birth"
                ),
                existing_users=[ExistingUser.from_profile(p) for p in same_dob],
            ))
        if name_only:
            findings.similarities.append(Similarity(
                type=SimilarityType.NAME,
                severity=SimilaritySeverity.LOW,
                message=f"Found {len(name_only)} student(s) with the same name",
                existing_users=[ExistingUser.from_profile(p) for p in name_only],
            ))
        return findings

    async def _check_phone(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        country_code = self.config.phone_country_code
        key = phone_comparison_key(candidate.phone, country_code)
        if not key:
            return _Findings()

        profiles = await self._limited(
            semaphore,
            self.repository.find_all_in_tenant(self.tenant_id, exclude_id),
        )
        guardians = await self._guardians_for(profiles, semaphore)

        def _matches(profile: ProfileRecord) -> bool:
            if phone_comparison_key(profile.phone, country_code) == key:
                return True
            return any(
                phone_comparison_key(g.phone, country_code) == key
                for g in guardians.get(profile.id, [])
            )

        matched = [p for p in profiles if _matches(p)]
        if not matched:
            return _Findings()
        return _Findings(similarities=[
            Similarity(
                type=SimilarityType.PHONE,
                severity=SimilaritySeverity.MEDIUM,
                message=f"Found {len(matched)} student(s) with the same phone",
                existing_users=self._enriched(matched, guardians),
            )
        ])

    async def _check_address(
        self,
        candidate: CandidateRecord,
        exclude_id: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> _Findings:
        address = candidate.address
        if address is None or not address.is_complete_for_matching():
            return _Findings()

        profiles = await self._limited(
            semaphore,
            self.repository.find_all_in_tenant(self.tenant_id, exclude_id),
        )
        matched = [
            p for p in profiles
            if _address_matches(address, parse_notes(p.notes).address)
        ]
        if not matched:
            return _Findings()

        guardians: Dict[str, List[Guardian]] = {}
        if self.config.enrich_with_guardians:
            guardians = await self._guardians_for(matched, semaphore)
        return _Findings(similarities=[
            Similarity(
                type=SimilarityType.ADDRESS,
                severity=SimilaritySeverity.MEDIUM,
                message=f"Found {len(matched)} student(s) at the same address",
                existing_users=self._enriched(matched, guardians),
            )
        ])
