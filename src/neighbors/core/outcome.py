"""Explicit per-stage result types for the submission pipeline.

Each stage returns one of three outcomes instead of raising:

- :class:`Ok`: the stage produced its value.
- :class:`Degraded`: an optional stage failed; the pipeline continues with
  the related output left empty.
- :class:`Fatal`: the request cannot succeed; the pipeline raises the
  wrapped error to the API layer.

The pipeline branches on these with ``isinstance`` checks, so the control
flow for partial failures reads top to bottom.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from neighbors.core.errors import RelayError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Degraded:
    """Non-fatal stage failure.

    Attributes:
        reason: Short human-readable description for logs.
        error: The classified error that caused the degradation.
    """

    reason: str
    error: RelayError | None = None


@dataclass(frozen=True)
class Fatal:
    error: RelayError

