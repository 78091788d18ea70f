"""Neighbors relay - community member sign-ups with generated portraits."""

__version__ = "0.3.0"

from neighbors.core.config import NeighborsConfig, load_config
from neighbors.core.pipeline import SubmissionPipeline

__all__ = [
    "NeighborsConfig",
    "SubmissionPipeline",
    "load_config",
]
