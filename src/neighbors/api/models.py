"""Pydantic response models for the Neighbors API.

These models define the JSON schema for every API endpoint.  FastAPI uses
them for serialisation and OpenAPI documentation generation.  Request bodies
are multipart forms and are read with ``Form``/``File`` parameters instead.

Models
------
ImageStatus
    Outcome of the generated image for a submission with a photo.
SubmitResponse
    Body of a successful ``POST /submitMember``.
MemberOut
    One entry of ``GET /community``.
ErrorResponse
    Body of every 4xx/5xx response.
HealthResponse
    Body of ``GET /health``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImageStatus(BaseModel):
    """Generated image outcome.

    Attributes:
        status: ``"generated"`` when the image was generated and stored,
            ``"failed"`` when either step degraded.
        url: Public URL of the generated image, or ``None``.
    """

    status: str = Field(..., description="'generated' or 'failed'.")
    url: str | None = Field(default=None, description="Public URL of the generated image.")


class SubmitResponse(BaseModel):
    """Response body for ``POST /submitMember``.

    ``image`` is omitted entirely when no photo was submitted.
    """

    ok: bool = Field(default=True)
    image: ImageStatus | None = Field(
        default=None,
        description="Generated image outcome (only when a photo was attached).",
    )


class MemberOut(BaseModel):
    """Listing projection of a stored member record."""

    name: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    email: str | None = None
    location: str | None = None
    activity: str | None = None
    image_url: str | None = None
    original_image_url: str | None = None
    created_at: str | None = None


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
