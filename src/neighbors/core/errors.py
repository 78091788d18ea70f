"""Error taxonomy for the submission pipeline.

Every error carries the HTTP status the API layer answers with and a
``public_message`` that is safe to put in a response body.  The full message
(``str(error)``) may contain collaborator detail and is only logged.

========================  ======  =========================================
Error                     Status  Pipeline behaviour
========================  ======  =========================================
``ValidationError``       400     Short-circuits before any side effect
``ImageGenerationError``  --      Degraded: image fields left ``None``
``BlobStorageError``      --      Degraded: that object's URL left ``None``
``PersistenceError``      500     Fatal: request fails
``QueryError``            500     Fatal: listing fails
========================  ======  =========================================
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all errors raised by the relay."""

    status_code: int = 500
    public_message: str = "Internal server error"


class ConfigurationError(RelayError):
    """Required configuration is missing or invalid at process start."""


class ValidationError(RelayError):
    """User-facing validation error.

    The message is intended to be returned directly to the caller.
    """

    status_code = 400

    @property
    def public_message(self) -> str:  # type: ignore[override]
        return str(self)


class ImageGenerationError(RelayError):
    """The image-editing collaborator failed or returned no usable image."""


class BlobStorageError(RelayError):
    """An object could not be written to (or resolved in) the object store."""


class PersistenceError(RelayError):
    """The member record insert was rejected."""


class QueryError(RelayError):
    """The member listing query failed."""
