# -*- coding: utf-8 -*-
"""
Duplicate Checker Data Models

Pydantic v2 models for the rule-based duplicate checker: the candidate
record under review, the projection of existing users reported back,
and the blocking issues and similarity warnings that make up a
:class:`DuplicateCheckResult`.

Enumerations:
    - BlockingField, SimilarityType, SimilaritySeverity

Models:
    - CandidateRecord, ExistingUser, BlockingIssue, Similarity,
      IntegrityWarning, DuplicateCheckResult

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from klase.records.models import Address, Guardian, ProfileRecord

__all__ = [
    "BlockingField",
    "SimilarityType",
    "SimilaritySeverity",
    "CandidateRecord",
    "ExistingUser",
    "BlockingIssue",
    "Similarity",
    "IntegrityWarning",
    "DuplicateCheckResult",
]


# =============================================================================
# Enumerations
# =============================================================================


class BlockingField(str, Enum):
    """Field whose exact match makes a candidate a true duplicate.

    PHONE is part of the wire vocabulary but phone matches are only ever
    reported as similarities.
    """

    CPF = "cpf"
    ENROLLMENT_NUMBER = "enrollment_number"
    EMAIL = "email"
    PHONE = "phone"


class SimilarityType(str, Enum):
    """Rule that produced a similarity warning."""

    NAME = "name"
    NAME_DOB = "name_dob"
    PHONE = "phone"
    ADDRESS = "address"


class SimilaritySeverity(str, Enum):
    """How strongly a similarity suggests the same person.

    LOW: same full name only.
    MEDIUM: shared phone or address (often siblings).
    HIGH: same full name and date of birth.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# Models
# =============================================================================


class CandidateRecord(BaseModel):
    """Person record about to be created or updated.

    Every attribute is optional. An absent attribute skips the matching
    check; it does not mean the value is empty.

    Attributes:
        cpf: National taxpayer id, any formatting.
        enrollment_number: School-issued enrollment number.
        name: Full name.
        dob: Date of birth (ISO date or datetime).
        phone: Phone number, any formatting.
        address: Postal address; matched only when street, number and
            city are all present.
        email: Login email.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    cpf: Optional[str] = None
    enrollment_number: Optional[str] = Field(default=None, alias="enrollmentNumber")
    name: Optional[str] = None
    dob: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    email: Optional[str] = None


class ExistingUser(BaseModel):
    """Existing record reported back to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Profile identifier")
    name: str = Field(default="", description="Full name")
    email: str = Field(default="", description="Login email")
    dob: Optional[str] = Field(default=None, description="Date of birth")
    enrollment_number: Optional[str] = Field(
        default=None,
        alias="enrollmentNumber",
        description="School-issued enrollment number",
    )
    guardians: Optional[List[Guardian]] = Field(
        default=None,
        description="Guardians of the matched student, when enriched",
    )

    @classmethod
    def from_profile(
        cls,
        profile: ProfileRecord,
        guardians: Optional[Iterable[Guardian]] = None,
    ) -> ExistingUser:
        return cls(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            dob=profile.dob,
            enrollment_number=profile.enrollment_number,
            guardians=list(guardians) if guardians is not None else None,
        )


class BlockingIssue(BaseModel):
    """A true duplicate. The write must not go ahead."""

    model_config = ConfigDict(populate_by_name=True)

    field: BlockingField = Field(..., description="Field that matched exactly")
    message: str = Field(..., description="Human-readable explanation")
    existing_user: ExistingUser = Field(
        ...,
        alias="existingUser",
        description="Record the candidate duplicates",
    )


class Similarity(BaseModel):
    """A possible duplicate that needs human confirmation."""

    model_config = ConfigDict(populate_by_name=True)

    type: SimilarityType = Field(..., description="Matching rule")
    severity: SimilaritySeverity = Field(..., description="Match strength")
    message: str = Field(..., description="Human-readable explanation")
    existing_users: List[ExistingUser] = Field(
        default_factory=list,
        alias="existingUsers",
        description="Every record matched by the rule",
    )


class IntegrityWarning(BaseModel):
    """Store-level anomaly noticed while checking (not about the candidate)."""

    model_config = ConfigDict(populate_by_name=True)

    kind: str = Field(..., description="Anomaly kind, e.g. duplicate_email_rows")
    message: str = Field(..., description="Human-readable explanation")
    record_ids: List[str] = Field(
        default_factory=list,
        alias="recordIds",
        description="Records involved in the anomaly",
    )


class DuplicateCheckResult(BaseModel):
    """Outcome of one duplicate check.

    ``has_blocking`` and ``has_similarities`` are derived from the lists,
    so they can never disagree with them.
    """

    model_config = ConfigDict(populate_by_name=True)

    blocking_issues: List[BlockingIssue] = Field(
        default_factory=list, alias="blockingIssues",
    )
    similarities: List[Similarity] = Field(default_factory=list)
    integrity_warnings: List[IntegrityWarning] = Field(
        default_factory=list, alias="integrityWarnings",
    )

    @computed_field(alias="hasBlocking")  # type: ignore[prop-decorator]
    @property
    def has_blocking(self) -> bool:
        return len(self.blocking_issues) > 0

    @computed_field(alias="hasSimilarities")  # type: ignore[prop-decorator]
    @property
    def has_similarities(self) -> bool:
        return len(self.similarities) > 0

    @property
    def outcome(self) -> str:
        """blocking, similar or clean."""
        if self.has_blocking:
            return "blocking"
        if self.has_similarities:
            return "similar"
        return "clean"
