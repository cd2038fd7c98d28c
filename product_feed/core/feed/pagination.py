"""
Batch pagination over the catalog.
"""

import math
from typing import Iterator, Optional

from .models import BatchDescriptor


DEFAULT_BATCH_SIZE = 50


def effective_batch_size(batch_size: int = DEFAULT_BATCH_SIZE, page_size: Optional[int] = None) -> int:
    """An explicit page size overrides the batch size; never below 1."""
    return max(1, page_size or batch_size)


def batch_count(total_count: int, size: int) -> int:
    return math.ceil(max(0, total_count) / size)


def paginate(total_count: int, batch_size: int, page: Optional[int] = None) -> Iterator[BatchDescriptor]:
    """
    Yield fetch descriptors for the catalog.

    With a 1-based ``page`` exactly that batch is yielded, whether or not it
    lies within the catalog. Otherwise every batch is yielded in order.
    """
    size = max(1, batch_size)

    if page is not None and page > 0:
        index = page - 1
        yield BatchDescriptor(index=index, offset=index * size, take=size)
        return

    for index in range(batch_count(total_count, size)):
        yield BatchDescriptor(index=index, offset=index * size, take=size)
