"""Object storage for original and generated member images.

Objects are written under per-call unique paths::

    {prefix}/{epoch_ms}-{slug}-{token}.{ext}

- ``prefix`` is :data:`ORIGINAL_PREFIX` for unmodified uploads and
  :data:`GENERATED_PREFIX` for transformed images.
- ``slug`` is derived from the member's name fields (see :func:`slugify`).
- ``token`` is a short random hex string, so two members with identical
  names submitting in the same millisecond still get distinct paths.

Overwrites are never requested (``upsert`` is off); a path collision surfaces
as a storage error like any other.

Failures never propagate out of :func:`store_image`.  Each object write
resolves to ``Ok(public_url)`` or ``Degraded``, and the original and
generated writes are independent of each other.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from pathlib import PurePosixPath
from typing import Protocol

from supabase import Client

from neighbors.core.errors import BlobStorageError
from neighbors.core.outcome import Degraded, Ok

logger = logging.getLogger(__name__)

GENERATED_PREFIX = "community"
ORIGINAL_PREFIX = "originals"
GENERATED_CONTENT_TYPE = "image/png"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}


def slugify(*parts: str | None) -> str:
    """Derive a URL-safe slug from name fields.

    Non-empty parts are joined, lowercased, and every run of characters
    outside ``[a-z0-9]`` collapses to a single ``-``.  Leading and trailing
    separators are dropped.  Input with no usable characters yields
    ``"member"``.
    """
    joined = " ".join(p for p in parts if p)
    slug = _NON_ALNUM.sub("-", joined.lower()).strip("-")
    return slug or "member"


def _base_type(content_type: str | None) -> str:
    return (content_type or "").split(";")[0].strip().lower()


def is_storable_image(content_type: str | None) -> bool:
    """Whether uploads of *content_type* may be kept as original images."""
    return _base_type(content_type) in _EXTENSIONS


def extension_for(content_type: str | None, filename: str | None = None) -> str:
    """Pick a file extension from the media type, then the filename."""
    if content_type:
        ext = _EXTENSIONS.get(_base_type(content_type))
        if ext:
            return ext
    if filename:
        suffix = PurePosixPath(filename).suffix.lstrip(".").lower()
        if suffix and suffix.isalnum():
            return suffix
    return "bin"


def build_object_path(
    prefix: str,
    name_parts: tuple[str, ...],
    extension: str,
    *,
    now: float | None = None,
    token: str | None = None,
) -> str:
    """Build a unique object path for one stored image.

    Args:
        prefix: Logical folder (:data:`ORIGINAL_PREFIX` or
            :data:`GENERATED_PREFIX`).
        name_parts: Identifying name fields of the member.
        extension: File extension without the dot.
        now: Timestamp in seconds; defaults to ``time.time()``.
        token: Uniqueness token; defaults to 8 random hex characters.

    Returns:
        The object path, e.g. ``"community/1718000000000-ada-lovelace-1f2e3d4c.png"``.
    """
    millis = int((time.time() if now is None else now) * 1000)
    token = token or uuid.uuid4().hex[:8]
    return f"{prefix}/{millis}-{slugify(*name_parts)}-{token}.{extension}"


class ObjectStore(Protocol):
    """Collaborator storing bytes under a path and resolving public URLs."""

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        """Store *data* at *path* or raise ``BlobStorageError``."""
        ...

    def public_url(self, path: str) -> str:
        """Return the public URL for a stored *path*."""
        ...


class SupabaseObjectStore:
    """:class:`ObjectStore` backed by a Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self.bucket = bucket

    def upload(self, path: str, data: bytes, content_type: str) -> None:
        try:
            self._client.storage.from_(self.bucket).upload(
                path,
                data,
                {"content-type": content_type, "upsert": "false"},
            )
        except Exception as e:
            raise BlobStorageError(f"Upload to {self.bucket}/{path} failed: {e}") from e

    def public_url(self, path: str) -> str:
        try:
            url = self._client.storage.from_(self.bucket).get_public_url(path)
        except Exception as e:
            raise BlobStorageError(f"Public URL lookup for {self.bucket}/{path} failed: {e}") from e
        # Older clients append a bare "?" to public URLs.
        return url.rstrip("?")


def store_image(
    store: ObjectStore,
    path: str,
    data: bytes,
    content_type: str,
) -> Ok[str] | Degraded:
    """Write one image and resolve its public URL.

    Args:
        store: Object store collaborator.
        path: Unique object path from :func:`build_object_path`.
        data: Image bytes.
        content_type: Media type stored with the object.

    Returns:
        ``Ok(public_url)`` when both the write and the URL lookup succeed,
        otherwise ``Degraded``.
    """
    logger.info(f"Storing {len(data)} bytes ({content_type}) at {path}")
    try:
        store.upload(path, data, content_type)
        url = store.public_url(path)
    except BlobStorageError as e:
        logger.warning(f"Storage failed for {path}: {e}")
        return Degraded(reason=str(e), error=e)
    except Exception as e:
        error = BlobStorageError(f"Unexpected storage failure for {path}: {e}")
        logger.warning(f"Storage failed for {path}: {e}", exc_info=True)
        return Degraded(reason=str(error), error=error)

    if not url:
        error = BlobStorageError(f"No public URL resolved for {path}")
        logger.warning(str(error))
        return Degraded(reason=str(error), error=error)

    logger.info(f"Stored {path} -> {url}")
    return Ok(url)
