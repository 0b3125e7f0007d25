# -*- coding: utf-8 -*-
"""
Data Hygiene Data Models

Pydantic v2 models for draft entities entering the hygiene validator and
for everything it reports back.

Enumerations:
    - EntityKind, DateContext

Draft entities (discriminated by ``kind``):
    - PersonDraft, PostDraft, ClassDraft -> DraftEntity

Results:
    - Adjustment, FieldError, ValidationOk, ValidationErr -> ValidationResult
    - PhoneCheck, DateCheck (primitive outcomes)
    - HygieneReport (bulk pass summary)

Drafts keep unknown keys (``extra="allow"``) so a sanitized record is
written back with every attribute it was read with.

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

__all__ = [
    "EntityKind",
    "DateContext",
    "Adjustment",
    "FieldError",
    "ValidationOk",
    "ValidationErr",
    "ValidationResult",
    "build_result",
    "PhoneCheck",
    "DateCheck",
    "RoleDetails",
    "PersonDraft",
    "PostDraft",
    "ClassDraft",
    "DraftEntity",
    "HygieneReport",
]


# =============================================================================
# Enumerations
# =============================================================================


class EntityKind(str, Enum):
    """Kinds of draft entity the validator understands."""

    PERSON = "person"
    POST = "post"
    CLASS = "class"


class DateContext(str, Enum):
    """Policy applied to a date field.

    DUE: past dates are rejected unless explicitly overridden.
    PUBLISH: past dates are moved forward to now.
    EVENT_START: parse check only.
    EVENT_END: must not precede the paired start date.
    """

    DUE = "due"
    PUBLISH = "publish"
    EVENT_START = "event_start"
    EVENT_END = "event_end"


# =============================================================================
# Validation results
# =============================================================================


class Adjustment(BaseModel):
    """A silent, acceptable correction applied to a field."""

    field: str = Field(..., description="Adjusted field, e.g. title or phone_0")
    reason: str = Field(..., description="Human-readable reason")
    old: Any = Field(default=None, description="Value before the correction")
    new: Any = Field(default=None, description="Value after the correction")


class FieldError(BaseModel):
    """A problem that could not be corrected automatically.

    Blocks persistence of the entity until the field is fixed.
    """

    field: str = Field(..., description="Offending field")
    message: str = Field(..., description="Human-readable message")
    value: Any = Field(default=None, description="Value as submitted")


class _ValidationResultBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Sanitized entity; present even when invalid",
    )
    adjustments: List[Adjustment] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(
        default_factory=dict,
        description="Side channel for UI hints such as publishAtAdjusted",
    )


class ValidationOk(_ValidationResultBase):
    """Validation passed; ``data`` may be persisted."""

    status: Literal["ok"] = "ok"

    @computed_field(alias="isValid")  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return True

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> List[FieldError]:
        return []


class ValidationErr(_ValidationResultBase):
    """Validation failed; at least one field error is present."""

    status: Literal["error"] = "error"
    errors: List[FieldError] = Field(..., min_length=1)

    @computed_field(alias="isValid")  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return False


ValidationResult = Annotated[
    Union[ValidationOk, ValidationErr],
    Field(discriminator="status"),
]


def build_result(
    data: Dict[str, Any],
    errors: Sequence[FieldError],
    adjustments: Sequence[Adjustment],
    meta: Optional[Dict[str, Any]] = None,
) -> Union[ValidationOk, ValidationErr]:
    """Pick the result variant from the presence of errors."""
    if errors:
        return ValidationErr(
            data=data,
            errors=list(errors),
            adjustments=list(adjustments),
            meta=meta or {},
        )
    return ValidationOk(data=data, adjustments=list(adjustments), meta=meta or {})


class PhoneCheck(BaseModel):
    """Outcome of validating one phone number."""

    model_config = ConfigDict(populate_by_name=True)

    phone: str = Field(..., description="Normalized phone")
    is_valid: bool = Field(..., alias="isValid")
    was_normalized: bool = Field(..., alias="wasNormalized")


class DateCheck(BaseModel):
    """Outcome of validating one date under a context policy."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid")
    date: str = Field(default="", description="Resulting date text")
    was_adjusted: bool = Field(default=False, alias="wasAdjusted")
    error: Optional[str] = Field(default=None)


# =============================================================================
# Draft entities
# =============================================================================


class RoleDetails(BaseModel):
    """Student or teacher sub-record of a person."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    phones: Optional[List[str]] = None

    @field_validator("phones", mode="before")
    @classmethod
    def phones_as_text(cls, v: Any) -> Any:
        """Numbers are accepted as phones; missing entries become blank."""
        if isinstance(v, list):
            return ["" if p is None else str(p) for p in v]
        return v


class _Draft(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PersonDraft(_Draft):
    """Person (student, guardian, teacher or staff) about to be saved."""

    kind: Literal["person"] = "person"
    name: Optional[str] = None
    email: Optional[str] = None
    student: Optional[RoleDetails] = None
    teacher: Optional[RoleDetails] = None


class PostDraft(_Draft):
    """Post (announcement, activity or event) about to be saved."""

    kind: Literal["post"] = "post"
    title: Optional[str] = None
    body: Optional[str] = None
    due_at: Optional[str] = Field(default=None, alias="dueAt")
    publish_at: Optional[str] = Field(default=None, alias="publishAt")
    event_start_at: Optional[str] = Field(default=None, alias="eventStartAt")
    event_end_at: Optional[str] = Field(default=None, alias="eventEndAt")
    event_location: Optional[str] = Field(default=None, alias="eventLocation")


class ClassDraft(_Draft):
    """School class about to be saved."""

    kind: Literal["class"] = "class"
    name: Optional[str] = None
    code: Optional[str] = None


DraftEntity = Annotated[
    Union[PersonDraft, PostDraft, ClassDraft],
    Field(discriminator="kind"),
]


# =============================================================================
# Bulk pass report
# =============================================================================


class HygieneReport(BaseModel):
    """Summary of one bulk hygiene pass.

    ``total_errors`` is -1 when the pass failed before finishing.
    """

    model_config = ConfigDict(populate_by_name=True)

    phones_fixed: int = Field(default=0, alias="phonesFixed")
    phones_invalid: int = Field(default=0, alias="phonesInvalid")
    dates_adjusted: int = Field(default=0, alias="datesAdjusted")
    titles_trimmed: int = Field(default=0, alias="titlesTrimmed")
    texts_clipped: int = Field(default=0, alias="textsClipped")
    total_errors: int = Field(default=0, alias="totalErrors")
    timestamp: str = Field(..., description="ISO-8601 UTC time the pass started")
    provenance_hash: Optional[str] = Field(default=None, alias="provenanceHash")

    @property
    def failed(self) -> bool:
        return self.total_errors == -1

    def to_store(self) -> Dict[str, Any]:
        """Wire form written to the store (camelCase keys)."""
        return self.model_dump(by_alias=True, exclude_none=True)
