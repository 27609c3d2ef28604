"""Utility functions package."""

from .chunking import BATCH_SIZE, chunk_list
from .logging_utils import EntityLogger, configure_logging

__all__ = [
    "BATCH_SIZE",
    "chunk_list",
    "EntityLogger",
    "configure_logging",
]
