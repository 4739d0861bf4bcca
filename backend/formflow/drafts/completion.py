"""Completion scoring for form drafts."""

import math
from collections.abc import Iterable, Mapping
from typing import Any


def is_filled(value: Any) -> bool:
    """A value counts as filled unless it is None or an empty string."""
    return value is not None and value != ""


def score(data: Mapping[str, Any], completed_field_ids: Iterable[str]) -> int:
    """Compute the 0-100 completion score of a draft.

    The denominator is the number of keys present in ``data``, not the number
    of fields in the form definition, so a draft that omits optional fields
    entirely can still read 100.

    Args:
        data: Field id to value mapping
        completed_field_ids: Field ids the user has marked or touched

    Returns:
        Integer percentage, 0 when ``data`` is empty
    """
    total = len(data)
    if total == 0:
        return 0

    filled = sum(
        1 for field_id in set(completed_field_ids) if field_id in data and is_filled(data[field_id])
    )

    # Half rounds up
    return int(math.floor(100 * filled / total + 0.5))
