"""Splitting record lists into insert batches."""

from typing import List, Sequence, TypeVar

T = TypeVar("T")

# Records per insert statement / insert_many call
BATCH_SIZE = 50


def chunk_list(items: Sequence[T], size: int = BATCH_SIZE) -> List[List[T]]:
    """
    Split a sequence into contiguous chunks of ``size`` items.

    The last chunk may be shorter. Concatenating the chunks in order gives
    back the original sequence.

    Args:
        items: Sequence to split
        size: Maximum chunk length

    Returns:
        List of chunks (empty if ``items`` is empty)
    """
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
