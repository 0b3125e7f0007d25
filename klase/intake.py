# -*- coding: utf-8 -*-
"""
Record Intake Service

Facade for the person submit flow: hygiene validation first, then the
duplicate check on the sanitized values, then a single decision the
caller acts on.

Decisions:
    reject: the draft has field errors; nothing was checked for duplicates
    block: a true duplicate exists; the write must not happen
    confirm: similar records exist; ask the user before writing
    proceed: safe to write

Example:
    >>> service = RecordIntakeService(repository, tenant_id="school-1")
    >>> decision = await service.review_person(
    ...     {"name": "Ana Lima", "student": {"phones": ["11987654321"]}},
    ...     candidate_extras={"cpf": "123.456.789-00"},
    ... )
    >>> decision.outcome

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from klase.data_hygiene.config import DataHygieneConfig
from klase.data_hygiene.config import get_config as get_hygiene_config
from klase.data_hygiene.models import PersonDraft, ValidationResult
from klase.data_hygiene.validators import validate_person_data
from klase.duplicate_checker.checker import DuplicateChecker
from klase.duplicate_checker.config import DuplicateCheckerConfig
from klase.duplicate_checker.config import get_config as get_checker_config
from klase.duplicate_checker.models import CandidateRecord, DuplicateCheckResult
from klase.records.repository import RecordRepository

logger = logging.getLogger(__name__)

__all__ = [
    "IntakeOutcome",
    "IntakeDecision",
    "RecordIntakeService",
]


class IntakeOutcome(str, Enum):
    """What the caller should do with a reviewed draft."""

    REJECT = "reject"
    BLOCK = "block"
    CONFIRM = "confirm"
    PROCEED = "proceed"


class IntakeDecision(BaseModel):
    """Outcome of reviewing one person draft.

    Attributes:
        outcome: reject, block, confirm or proceed.
        validation: Hygiene result; ``validation.data`` is what to persist.
        duplicates: Duplicate check result, None when the draft was
            rejected before the check.
    """

    model_config = ConfigDict(populate_by_name=True)

    outcome: IntakeOutcome
    validation: ValidationResult
    duplicates: Optional[DuplicateCheckResult] = Field(default=None)

    @property
    def can_persist(self) -> bool:
        return self.outcome is IntakeOutcome.PROCEED


def _role(data: Mapping[str, Any]) -> Dict[str, Any]:
    for key in ("student", "teacher"):
        value = data.get(key)
        if isinstance(value, Mapping):
            return dict(value)
    return {}


def candidate_from_person(
    data: Mapping[str, Any],
    extras: Optional[Mapping[str, Any]] = None,
) -> CandidateRecord:
    """Project sanitized person data onto a duplicate-check candidate.

    Args:
        data: Sanitized person (``ValidationResult.data``).
        extras: Values the person record does not carry (cpf, address);
            they take precedence over projected values.
    """
    role = _role(data)
    phones = role.get("phones") or []
    candidate: Dict[str, Any] = {
        "name": data.get("name"),
        "email": data.get("email"),
        "phone": phones[0] if phones else data.get("phone"),
        "dob": role.get("dob") or data.get("dob"),
        "enrollment_number": role.get("enrollmentNumber") or data.get("enrollmentNumber"),
    }
    candidate = {key: value for key, value in candidate.items() if value}
    candidate.update(extras or {})
    return CandidateRecord.model_validate(candidate)


class RecordIntakeService:
    """Unified facade over hygiene validation and duplicate checking.

    Attributes:
        checker: DuplicateChecker bound to the tenant.
        hygiene_config: Limits used by the person validator.
    """

    def __init__(
        self,
        repository: RecordRepository,
        tenant_id: Optional[str],
        checker_config: Optional[DuplicateCheckerConfig] = None,
        hygiene_config: Optional[DataHygieneConfig] = None,
    ) -> None:
        self.checker = DuplicateChecker(
            repository, tenant_id, checker_config or get_checker_config(),
        )
        self.hygiene_config = hygiene_config or get_hygiene_config()
        logger.info("RecordIntakeService created for tenant %s", tenant_id)

    async def review_person(
        self,
        draft: Union[PersonDraft, Mapping[str, Any]],
        candidate_extras: Optional[Mapping[str, Any]] = None,
        exclude_id: Optional[str] = None,
    ) -> IntakeDecision:
        """Validate a person draft and check it for duplicates.

        Args:
            draft: Person about to be created or updated.
            candidate_extras: Extra duplicate-check fields such as cpf or
                address, in CandidateRecord form.
            exclude_id: Id of the person being edited.

        Returns:
            IntakeDecision for the caller to act on.
        """
        validation = validate_person_data(draft, config=self.hygiene_config)
        if not validation.is_valid:
            logger.info(
                "Person draft rejected with %d field error(s)", len(validation.errors),
            )
            return IntakeDecision(outcome=IntakeOutcome.REJECT, validation=validation)

        candidate = candidate_from_person(validation.data, candidate_extras)
        duplicates = await self.checker.check_duplicates(candidate, exclude_id=exclude_id)

        if duplicates.has_blocking:
            outcome = IntakeOutcome.BLOCK
        elif duplicates.has_similarities:
            outcome = IntakeOutcome.CONFIRM
        else:
            outcome = IntakeOutcome.PROCEED
        logger.debug("Person draft reviewed: %s", outcome.value)
        return IntakeDecision(outcome=outcome, validation=validation, duplicates=duplicates)
