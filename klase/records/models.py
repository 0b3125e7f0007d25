# -*- coding: utf-8 -*-
"""
Record Store Data Models

Pydantic v2 models for rows read from the school record store: person
profiles, their guardians, and the values opportunistically parsed out
of the free-form profile notes blob.

Models:
    - Address: Postal address (every part optional)
    - Guardian: Parent or legal guardian attached to a student
    - ProfileRecord: Person profile row scoped to a tenant (school)
    - ParsedNotes: Identity document and address extracted from notes

Field names are snake_case; the camelCase names used by the stored
JSON are accepted and emitted through aliases.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "Address",
    "Guardian",
    "ProfileRecord",
    "ParsedNotes",
]


class Address(BaseModel):
    """Postal address as captured on the enrollment form.

    Attributes:
        street: Street name.
        number: House or building number (kept as text, e.g. "12A").
        district: Neighbourhood.
        city: City name.
        state: State abbreviation.
        zip: Postal code.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    street: Optional[str] = None
    number: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    @field_validator("street", "number", "district", "city", "state", "zip", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        """Accept numbers for text parts (house numbers often arrive as int)."""
        if v is None:
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    def is_complete_for_matching(self) -> bool:
        """Return True when street, number and city are all non-blank."""
        return all(
            (part or "").strip() for part in (self.street, self.number, self.city)
        )


class Guardian(BaseModel):
    """Guardian of a student.

    A student may have several guardians; at most one is expected to be
    flagged primary, but this is reported as stored, never enforced.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    relation: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    is_primary: bool = Field(default=False, alias="isPrimary")

    @field_validator("is_primary", mode="before")
    @classmethod
    def null_is_not_primary(cls, v: Any) -> bool:
        return bool(v)


class ProfileRecord(BaseModel):
    """Existing person profile as read from the store.

    Attributes:
        id: Profile identifier.
        tenant_id: School the profile currently belongs to.
        name: Full name.
        email: Login email (stored lowercase).
        dob: Date of birth, ISO ``YYYY-MM-DD`` when known.
        enrollment_number: School-issued enrollment number.
        phone: Primary phone in whatever format it was saved with.
        notes: Raw semi-structured notes blob (JSON text or mapping).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    tenant_id: str = Field(alias="tenantId")
    name: str = ""
    email: str = ""
    dob: Optional[str] = None
    enrollment_number: Optional[str] = Field(default=None, alias="enrollmentNumber")
    phone: Optional[str] = None
    notes: Optional[Any] = None


class ParsedNotes(BaseModel):
    """Values extracted from a profile notes blob.

    Both attributes are None when the blob is absent or malformed.
    """

    document: Optional[str] = None
    address: Optional[Address] = None

    @property
    def is_empty(self) -> bool:
        return self.document is None and self.address is None
