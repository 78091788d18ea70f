"""Validation of raw member form submissions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from neighbors.core.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhotoUpload:
    """An uploaded photo held in memory for the duration of one request."""

    content: bytes
    content_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class MemberSubmission:
    """A validated form submission.

    ``name`` is always set: either the legacy single field or
    ``"{firstname} {lastname}"``.  Optional fields are ``None``, never ``""``.
    """

    name: str
    email: str
    firstname: str | None = None
    lastname: str | None = None
    location: str | None = None
    activity: str | None = None
    photo: PhotoUpload | None = None

    @property
    def name_parts(self) -> tuple[str, ...]:
        """Identifying name fields, used to build storage slugs."""
        if self.firstname and self.lastname:
            return (self.firstname, self.lastname)
        return (self.name,)


def _clean(value: str | None) -> str | None:
    """Trim a form value, mapping absent or blank input to ``None``."""
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


def validate_submission(
    fields: Mapping[str, str | None],
    photo: PhotoUpload | None = None,
) -> MemberSubmission:
    """Validate and normalise raw submission fields.

    Accepts either the ``firstname`` + ``lastname`` schema or the legacy
    single ``name`` field.  When both are present the split fields win and
    ``name`` is derived from them.

    Args:
        fields: Raw form values keyed by field name.
        photo: Optional uploaded photo.  Empty uploads are dropped.

    Returns:
        A :class:`MemberSubmission` with every string trimmed.

    Raises:
        ValidationError: If email is missing, or neither ``name`` nor both
            ``firstname`` and ``lastname`` are present after trimming.
    """
    firstname = _clean(fields.get("firstname"))
    lastname = _clean(fields.get("lastname"))
    name = _clean(fields.get("name"))
    email = _clean(fields.get("email"))

    missing: list[str] = []
    if firstname and lastname:
        name = f"{firstname} {lastname}"
    elif not name:
        if firstname or lastname:
            missing.append("lastname" if firstname else "firstname")
        else:
            missing.append("name")
    if not email:
        missing.append("email")

    if missing:
        logger.info(f"Rejected submission, missing: {', '.join(missing)}")
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")

    if photo is not None and photo.size == 0:
        photo = None

    return MemberSubmission(
        name=name,
        email=email,
        firstname=firstname,
        lastname=lastname,
        location=_clean(fields.get("location")),
        activity=_clean(fields.get("activity")),
        photo=photo,
    )
