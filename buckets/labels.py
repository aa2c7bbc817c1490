from __future__ import annotations

from typing import Sequence, Tuple

from buckets.config import TOTAL_LABEL
from buckets.results import BucketLevel


def derive_labels(levels: Sequence[BucketLevel], *, total_label: str = TOTAL_LABEL) -> Tuple[str, ...]:
    """Ordered labels of the first bucket level; a single total label without levels."""
    if not levels:
        return (total_label,)
    return tuple(item.label for item in levels[0].items)
