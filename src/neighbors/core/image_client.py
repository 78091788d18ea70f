"""Image transformation through the external image-editing API.

This module owns the request shaping around the image model, not the model
itself:

- :class:`ImageGenerator` is the collaborator interface the pipeline depends
  on.  Tests substitute a fake; production uses :class:`OpenAIImageGenerator`.
- :func:`transform_photo` builds the prompt, invokes the collaborator and
  classifies every failure as a :class:`~neighbors.core.outcome.Degraded`
  outcome so a slow or broken image API never costs the member their record.

The OpenAI endpoint returns generated images base64 encoded
(``data[0].b64_json``); :meth:`OpenAIImageGenerator.edit` decodes them to raw
PNG bytes.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Protocol

import openai

from neighbors.core.errors import ImageGenerationError
from neighbors.core.outcome import Degraded, Ok
from neighbors.core.prompt_builder import build_prompt
from neighbors.core.validation import PhotoUpload

logger = logging.getLogger(__name__)

DEFAULT_SIZE = "1024x1024"
DEFAULT_BACKGROUND = "transparent"


class ImageGenerator(Protocol):
    """Collaborator that turns a photo plus prompt into a new image."""

    def edit(
        self,
        image: bytes,
        filename: str,
        content_type: str,
        prompt: str,
        size: str,
        background: str,
    ) -> bytes:
        """Return the generated image bytes or raise ``ImageGenerationError``."""
        ...


class OpenAIImageGenerator:
    """:class:`ImageGenerator` backed by the OpenAI ``images.edit`` endpoint.

    The client is created once at startup and shared by every request.

    Args:
        client: A configured ``openai.OpenAI`` instance.
        model: Image model identifier (e.g. ``"gpt-image-1"``).
    """

    def __init__(self, client: openai.OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def edit(
        self,
        image: bytes,
        filename: str,
        content_type: str,
        prompt: str,
        size: str,
        background: str,
    ) -> bytes:
        try:
            result = self._client.images.edit(
                model=self._model,
                image=(filename, image, content_type),
                prompt=prompt,
                size=size,
                background=background,
            )
        except openai.OpenAIError as e:
            raise ImageGenerationError(f"Image API request failed: {e}") from e

        data = getattr(result, "data", None) or []
        encoded = data[0].b64_json if data else None
        if not encoded:
            raise ImageGenerationError("Image API returned no image data")

        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageGenerationError(f"Image API returned invalid base64: {e}") from e


def transform_photo(
    generator: ImageGenerator,
    photo: PhotoUpload,
    activity: str | None = None,
    *,
    size: str = DEFAULT_SIZE,
    background: str = DEFAULT_BACKGROUND,
) -> Ok[bytes] | Degraded:
    """Generate the transformed member image from the uploaded photo.

    Args:
        generator: Image-editing collaborator.
        photo: The uploaded photo.
        activity: Optional activity interpolated into the prompt.
        size: Target resolution passed to the collaborator.
        background: Background mode passed to the collaborator.

    Returns:
        ``Ok(image_bytes)`` on success, ``Degraded`` on any collaborator
        failure.  Never raises for collaborator errors.
    """
    prompt = build_prompt(activity)
    filename = photo.filename or "upload.png"
    logger.info(
        f"Requesting image generation for {filename} "
        f"({photo.content_type}, {photo.size} bytes, activity={activity!r})"
    )

    try:
        image = generator.edit(
            image=photo.content,
            filename=filename,
            content_type=photo.content_type,
            prompt=prompt,
            size=size,
            background=background,
        )
    except ImageGenerationError as e:
        logger.warning(f"Image generation failed for {filename}: {e}")
        return Degraded(reason=str(e), error=e)
    except Exception as e:
        error = ImageGenerationError(f"Unexpected image generation failure: {e}")
        logger.warning(f"Image generation failed for {filename}: {e}", exc_info=True)
        return Degraded(reason=str(error), error=error)

    if not image:
        error = ImageGenerationError("Image generation returned an empty payload")
        logger.warning(f"Image generation failed for {filename}: {error}")
        return Degraded(reason=str(error), error=error)

    logger.info(f"Image generated for {filename} ({len(image)} bytes)")
    return Ok(image)
