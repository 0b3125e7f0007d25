# -*- coding: utf-8 -*-
"""
Data Hygiene Validators

Per-entity validation and sanitization for draft persons, posts and
classes. Every validator returns a result carrying the sanitized entity
(always, even when invalid), the silent adjustments it made and the
field errors it could not fix. Validators never raise: payloads that do
not even fit the draft shape come back as field errors.

Rules:
    Person: required name (clamped), email shape, student/teacher phones
    Post: required title (clamped), body (whitespace normalized, clamped),
        dueAt / publishAt / eventStartAt / eventEndAt date policies,
        eventLocation (clamped)
    Class: required name (clamped), code (clamped)

Example:
    >>> result = validate_post_data({"title": "  Field trip  "})
    >>> result.data["title"], result.adjustments[0].field
    ('Field trip', 'title')

Author: Klase Platform Team
Date: October 2026
Status: Production Ready
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from klase.data_hygiene.config import DataHygieneConfig, get_config
from klase.data_hygiene.metrics import inc_adjustments, inc_entities
from klase.data_hygiene.models import (
    Adjustment,
    ClassDraft,
    DateContext,
    DraftEntity,
    EntityKind,
    FieldError,
    PersonDraft,
    PostDraft,
    ValidationErr,
    ValidationOk,
    build_result,
)
from klase.data_hygiene.sanitizer import (
    normalize_spaces,
    sanitize_text,
    validate_and_sanitize_phone,
    validate_date,
)

logger = logging.getLogger(__name__)

__all__ = [
    "validate_person_data",
    "validate_post_data",
    "validate_class_data",
    "validate",
    "EMAIL_PATTERN",
]

Result = Union[ValidationOk, ValidationErr]
DraftT = TypeVar("DraftT", bound=BaseModel)

#: Basic ``local@domain.tld`` shape.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _errors_from(exc: ValidationError) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "entity"
        errors.append(FieldError(field=field, message="Invalid value", value=err.get("input")))
    return errors


def _coerce(
    model_cls: Type[DraftT],
    draft: Any,
) -> Tuple[Optional[DraftT], Dict[str, Any], List[FieldError]]:
    """Turn ``draft`` into ``model_cls`` plus its wire-form copy."""
    if isinstance(draft, model_cls):
        return draft, draft.model_dump(by_alias=True, exclude_unset=True), []
    if isinstance(draft, BaseModel):
        draft = draft.model_dump(by_alias=True, exclude_unset=True)
    if not isinstance(draft, Mapping):
        return None, {}, [FieldError(field="entity", message="Expected an object", value=draft)]
    raw = dict(draft)
    try:
        model = model_cls.model_validate(raw)
    except ValidationError as exc:
        logger.debug("Draft does not fit %s: %d error(s)", model_cls.__name__, exc.error_count())
        return None, raw, _errors_from(exc)
    return model, model.model_dump(by_alias=True, exclude_unset=True), []


def _clamp(
    field: str,
    value: str,
    limit: int,
    reason: str,
    data: Dict[str, Any],
    adjustments: List[Adjustment],
) -> None:
    clamped = sanitize_text(value, limit)
    if clamped != value:
        adjustments.append(Adjustment(field=field, reason=reason, old=value, new=clamped))
        data[field] = clamped


def _required_text(
    field: str,
    value: Optional[str],
    limit: int,
    label: str,
    data: Dict[str, Any],
    errors: List[FieldError],
    adjustments: List[Adjustment],
) -> None:
    if not (value or "").strip():
        errors.append(FieldError(field=field, message=f"{label} is required", value=value))
        return
    _clamp(field, value, limit, f"{label} trimmed to {limit} characters", data, adjustments)


def _finish(
    kind: EntityKind,
    data: Dict[str, Any],
    errors: List[FieldError],
    adjustments: List[Adjustment],
    config: DataHygieneConfig,
    meta: Optional[Dict[str, Any]] = None,
) -> Result:
    result = build_result(data, errors, adjustments, meta)
    if config.enable_metrics:
        inc_entities(kind.value, "valid" if result.is_valid else "invalid")
        for adjustment in adjustments:
            inc_adjustments(adjustment.field)
    return result


# ---------------------------------------------------------------------------
# Entity validators
# ---------------------------------------------------------------------------


def validate_person_data(
    draft: Union[PersonDraft, Mapping[str, Any]],
    *,
    config: Optional[DataHygieneConfig] = None,
) -> Result:
    """Validate and sanitize a person draft.

    Phones are taken from ``student.phones``, or from ``teacher.phones``
    when the person has no student phone list. The list written back
    keeps only the valid, formatted numbers.
    """
    cfg = config or get_config()
    person, data, errors = _coerce(PersonDraft, draft)
    adjustments: List[Adjustment] = []
    if person is None:
        return _finish(EntityKind.PERSON, data, errors, adjustments, cfg)

    _required_text(
        "name", person.name, cfg.max_name_length, "Name", data, errors, adjustments,
    )

    if person.email and not EMAIL_PATTERN.match(person.email):
        errors.append(FieldError(field="email", message="Invalid email", value=person.email))

    role, phones = None, None
    if person.student is not None and person.student.phones is not None:
        role, phones = "student", person.student.phones
    elif person.teacher is not None and person.teacher.phones is not None:
        role, phones = "teacher", person.teacher.phones

    if role is not None:
        kept: List[str] = []
        for index, phone in enumerate(phones):
            field = f"phone_{index}"
            check = validate_and_sanitize_phone(phone)
            if not check.is_valid:
                errors.append(FieldError(field=field, message="Invalid phone", value=phone))
                continue
            kept.append(check.phone)
            if check.was_normalized:
                adjustments.append(Adjustment(
                    field=field, reason="Phone normalized", old=phone, new=check.phone,
                ))
        data[role] = {**data.get(role, {}), "phones": kept}

    return _finish(EntityKind.PERSON, data, errors, adjustments, cfg)


def validate_post_data(
    draft: Union[PostDraft, Mapping[str, Any]],
    allow_past_override: bool = False,
    *,
    config: Optional[DataHygieneConfig] = None,
    now: Optional[datetime] = None,
) -> Result:
    """Validate and sanitize a post draft.

    Args:
        draft: Post to check.
        allow_past_override: Accept past due dates and keep past publish
            dates (historical data in the bulk pass).
        config: Limits and publish grace window.
        now: Reference time for every date rule of this call.

    Returns:
        Validation result. ``meta["publishAtAdjusted"]`` is True when the
        publish date was moved to now.
    """
    cfg = config or get_config()
    post, data, errors = _coerce(PostDraft, draft)
    adjustments: List[Adjustment] = []
    meta: Dict[str, Any] = {}
    if post is None:
        return _finish(EntityKind.POST, data, errors, adjustments, cfg)

    now = now or datetime.now(timezone.utc)
    grace = cfg.publish_grace_seconds

    _required_text(
        "title", post.title, cfg.max_title_length, "Title", data, errors, adjustments,
    )

    if post.body:
        limit = cfg.max_body_length
        clipped = sanitize_text(normalize_spaces(post.body), limit)
        if clipped != post.body:
            adjustments.append(Adjustment(
                field="body",
                reason=f"Body whitespace normalized and clamped to {limit} characters",
                old=post.body,
                new=clipped,
            ))
            data["body"] = clipped

    if post.due_at:
        check = validate_date(
            post.due_at, DateContext.DUE, None, allow_past_override,
            now=now, grace_seconds=grace,
        )
        if check.is_valid:
            data["dueAt"] = check.date
        else:
            errors.append(FieldError(field="dueAt", message=check.error, value=post.due_at))

    if post.publish_at:
        check = validate_date(
            post.publish_at, DateContext.PUBLISH, None, allow_past_override,
            now=now, grace_seconds=grace,
        )
        if not check.is_valid:
            errors.append(FieldError(field="publishAt", message=check.error, value=post.publish_at))
        else:
            data["publishAt"] = check.date
            if check.was_adjusted:
                adjustments.append(Adjustment(
                    field="publishAt",
                    reason="Publish date was in the past; moved to now",
                    old=post.publish_at,
                    new=check.date,
                ))
                meta["publishAtAdjusted"] = True

    if post.event_start_at:
        check = validate_date(post.event_start_at, DateContext.EVENT_START, now=now)
        if not check.is_valid:
            errors.append(FieldError(
                field="eventStartAt", message=check.error, value=post.event_start_at,
            ))

    if post.event_end_at:
        check = validate_date(
            post.event_end_at, DateContext.EVENT_END, post.event_start_at, now=now,
        )
        if not check.is_valid:
            errors.append(FieldError(
                field="eventEndAt", message=check.error, value=post.event_end_at,
            ))

    if post.event_location:
        limit = cfg.max_event_location_length
        _clamp(
            "eventLocation", post.event_location, limit,
            f"Event location trimmed to {limit} characters", data, adjustments,
        )

    return _finish(EntityKind.POST, data, errors, adjustments, cfg, meta)


def validate_class_data(
    draft: Union[ClassDraft, Mapping[str, Any]],
    *,
    config: Optional[DataHygieneConfig] = None,
) -> Result:
    """Validate and sanitize a class draft."""
    cfg = config or get_config()
    school_class, data, errors = _coerce(ClassDraft, draft)
    adjustments: List[Adjustment] = []
    if school_class is None:
        return _finish(EntityKind.CLASS, data, errors, adjustments, cfg)

    _required_text(
        "name", school_class.name, cfg.max_class_name_length, "Class name",
        data, errors, adjustments,
    )
    if school_class.code:
        limit = cfg.max_class_code_length
        _clamp(
            "code", school_class.code, limit,
            f"Code trimmed to {limit} characters", data, adjustments,
        )

    return _finish(EntityKind.CLASS, data, errors, adjustments, cfg)


# ---------------------------------------------------------------------------
# Dispatch over DraftEntity
# ---------------------------------------------------------------------------

_VALIDATORS: Dict[EntityKind, Callable[[Any, bool, DataHygieneConfig], Result]] = {
    EntityKind.PERSON: lambda e, allow, cfg: validate_person_data(e, config=cfg),
    EntityKind.POST: lambda e, allow, cfg: validate_post_data(e, allow, config=cfg),
    EntityKind.CLASS: lambda e, allow, cfg: validate_class_data(e, config=cfg),
}


def validate(
    entity: Union[DraftEntity, Mapping[str, Any]],
    allow_past_override: bool = False,
    *,
    config: Optional[DataHygieneConfig] = None,
) -> Result:
    """Validate any draft entity, dispatching on its ``kind``.

    Mappings must carry ``kind`` (person, post or class); a missing or
    unknown kind comes back as a field error on ``kind``.
    """
    cfg = config or get_config()
    is_mapping = isinstance(entity, Mapping)
    raw_kind = entity.get("kind") if is_mapping else getattr(entity, "kind", None)
    try:
        kind = EntityKind(raw_kind)
    except ValueError:
        return build_result(
            dict(entity) if is_mapping else {},
            [FieldError(field="kind", message="Unknown entity kind", value=raw_kind)],
            [],
        )
    return _VALIDATORS[kind](entity, allow_past_override, cfg)
