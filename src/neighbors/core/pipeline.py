"""Submission pipeline for community member sign-ups.

:class:`SubmissionPipeline` runs one validated submission through its stages,
strictly in sequence:

1. **Store original** (photo with an image media type): unmodified upload
   under ``originals/``.
2. **Transform** (photo only): image-editing API call with the built prompt.
3. **Store generated** (transform succeeded): PNG under ``community/``.
4. **Write record**: one row with whatever URLs resolved.

Stages 1–3 are optional: a ``Degraded`` outcome leaves the related URL as
``None`` and the pipeline moves on.  Stage 4 is the only fatal stage; its
``PersistenceError`` is raised to the caller.

If the insert fails after images were stored, those objects remain in the
bucket unreferenced.  The pipeline logs the orphaned paths and does not try
to delete them.

Usage
-----
::

    pipeline = SubmissionPipeline(services)
    result = pipeline.submit(validate_submission(form_fields, photo))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from neighbors.core.image_client import DEFAULT_BACKGROUND, DEFAULT_SIZE, transform_photo
from neighbors.core.outcome import Fatal, Ok
from neighbors.core.records import MemberRecord, write_record
from neighbors.core.services import Services
from neighbors.core.storage import (
    GENERATED_CONTENT_TYPE,
    GENERATED_PREFIX,
    ORIGINAL_PREFIX,
    build_object_path,
    extension_for,
    is_storable_image,
    store_image,
)
from neighbors.core.validation import MemberSubmission

logger = logging.getLogger(__name__)

STATUS_GENERATED = "generated"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class ImageOutcome:
    """What happened to the generated image of a submission with a photo."""

    status: str
    url: str | None = None


@dataclass(frozen=True)
class SubmissionResult:
    """Result of a successful submission.

    Attributes:
        record: The stored member record.
        image: ``None`` when no photo was attached, otherwise the outcome of
            the generated image.
    """

    record: MemberRecord
    image: ImageOutcome | None = None


class SubmissionPipeline:
    """Sequences the image and record stages for one submission.

    Args:
        services: Process-wide collaborator handles.
        image_size: Target resolution for generated images.
        image_background: Background mode for generated images.
    """

    def __init__(
        self,
        services: Services,
        *,
        image_size: str = DEFAULT_SIZE,
        image_background: str = DEFAULT_BACKGROUND,
    ) -> None:
        self._services = services
        self._image_size = image_size
        self._image_background = image_background

    def submit(self, submission: MemberSubmission) -> SubmissionResult:
        """Run every stage for *submission* and return the stored result.

        Raises:
            PersistenceError: If the record could not be written.
        """
        photo = submission.photo
        logger.info(
            f"Processing submission for {submission.name!r} <{submission.email}> "
            + (
                f"with photo {photo.filename!r} ({photo.content_type}, {photo.size} bytes)"
                if photo
                else "without photo"
            )
        )

        original_url: str | None = None
        generated_url: str | None = None
        image: ImageOutcome | None = None
        stored_paths: list[str] = []

        if photo is not None:
            # --- Store original ------------------------------------------------
            # Only image media types are kept; anything else is never made public.
            if is_storable_image(photo.content_type):
                original_path = build_object_path(
                    ORIGINAL_PREFIX,
                    submission.name_parts,
                    extension_for(photo.content_type, photo.filename),
                )
                original = store_image(
                    self._services.objects, original_path, photo.content, photo.content_type
                )
                if isinstance(original, Ok):
                    original_url = original.value
                    stored_paths.append(original_path)
                else:
                    logger.warning(f"Original image not stored: {original.reason}")
            else:
                logger.warning(
                    f"Original image not stored: unsupported content type {photo.content_type!r}"
                )

            # --- Transform -----------------------------------------------------
            generated = transform_photo(
                self._services.images,
                photo,
                submission.activity,
                size=self._image_size,
                background=self._image_background,
            )

            # --- Store generated -----------------------------------------------
            if isinstance(generated, Ok):
                generated_path = build_object_path(GENERATED_PREFIX, submission.name_parts, "png")
                stored = store_image(
                    self._services.objects,
                    generated_path,
                    generated.value,
                    GENERATED_CONTENT_TYPE,
                )
                if isinstance(stored, Ok):
                    generated_url = stored.value
                    stored_paths.append(generated_path)
                else:
                    logger.warning(f"Generated image not stored: {stored.reason}")
            else:
                logger.warning(f"Image generation degraded: {generated.reason}")

            image = ImageOutcome(
                status=STATUS_GENERATED if generated_url else STATUS_FAILED,
                url=generated_url,
            )

        # --- Write record ------------------------------------------------------
        record = MemberRecord(
            name=submission.name,
            email=submission.email,
            firstname=submission.firstname,
            lastname=submission.lastname,
            location=submission.location,
            activity=submission.activity,
            image_url=generated_url,
            original_image_url=original_url,
        )
        written = write_record(self._services.records, record)

        if isinstance(written, Fatal):
            if stored_paths:
                logger.error(
                    f"Record insert failed after storing objects; orphaned: {', '.join(stored_paths)}"
                )
            raise written.error

        return SubmissionResult(record=written.value, image=image)

