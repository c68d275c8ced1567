"""Total-count extraction for paged responses."""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Paginable(Protocol):
    """A response body item that reports the total number of results."""

    total_count: Optional[int]


class BodyShape(str, Enum):
    """How a paged response body is laid out."""

    SINGLE = "single"  # One paginable object
    COLLECTION = "collection"  # A list of paginable items


_TOTAL_COUNT_KEYS = ("total_count", "totalCount")


def item_total_count(item: Any) -> int:
    """Total count reported by one item, 0 if it has none."""
    if item is None:
        return 0
    if isinstance(item, Mapping):
        value = next((item[key] for key in _TOTAL_COUNT_KEYS if key in item), None)
    else:
        value = getattr(item, "total_count", None)
    try:
        return max(int(value), 0) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def read_total_count(body: Any, shape: BodyShape = BodyShape.COLLECTION) -> int:
    """Read the total result count from a successfully parsed body.

    For collections the first item carries the count.
    """
    if shape == BodyShape.SINGLE:
        return item_total_count(body)
    if not body:
        return 0
    first = next(iter(body), None)
    return item_total_count(first)
