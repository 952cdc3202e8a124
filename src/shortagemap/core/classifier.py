"""
Five-class ordinal classification.

Boundaries ``[b1, b2, b3, b4]`` split the value domain into the classes
``[.., b1], (b1, b2], (b2, b3], (b3, b4], (b4, ..)``: comparisons are strictly
greater-than, so a value equal to a boundary lands in the class below it.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

CLASS_COUNT = 5
BOUNDARY_COUNT = CLASS_COUNT - 1
MAX_CLASS_INDEX = CLASS_COUNT - 1


@dataclass(frozen=True)
class Boundaries:
    """
    Ordered class boundaries for one lens evaluation.

    Holds either exactly four non-decreasing values or nothing at all; the
    empty form is the "no data" sentinel produced by an empty value set.
    """

    values: Tuple[float, ...] = ()

    def __post_init__(self):
        if self.values and len(self.values) != BOUNDARY_COUNT:
            raise ValueError(
                f"Boundaries need exactly {BOUNDARY_COUNT} values, got {len(self.values)}"
            )
        if any(later < earlier for earlier, later in zip(self.values, self.values[1:])):
            raise ValueError(f"Boundaries must be non-decreasing: {self.values}")

    @classmethod
    def empty(cls) -> "Boundaries":
        return cls(())

    @classmethod
    def from_breaks(cls, breaks: Sequence[float]) -> "Boundaries":
        return cls(pad_breaks(breaks))

    @property
    def has_data(self) -> bool:
        return bool(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self):
        return iter(self.values)

    def __getitem__(self, index):
        return self.values[index]

    def ranges(self) -> List[Tuple[float, Optional[float]]]:
        """The five ``(low, high)`` class ranges; the top one is open (``None``)."""
        if not self.values:
            return []
        b1, b2, b3, b4 = self.values
        return [(0.0, b1), (b1, b2), (b2, b3), (b3, b4), (b4, None)]


def pad_breaks(breaks: Sequence[float]) -> Tuple[float, ...]:
    """
    Pad 1-4 breaks to exactly four, repeating the last known value.

    An empty input stays empty.
    """
    values = tuple(float(b) for b in breaks)
    if not values:
        return ()
    if len(values) > BOUNDARY_COUNT:
        raise ValueError(f"At most {BOUNDARY_COUNT} breaks are supported, got {len(values)}")
    return values + (values[-1],) * (BOUNDARY_COUNT - len(values))


def clamp_class_index(class_index: int) -> int:
    return max(0, min(int(class_index), MAX_CLASS_INDEX))


def classify_value(value: Optional[float], boundaries: Sequence[float]) -> int:
    """
    Assign ``value`` to a class index in ``0..4``.

    Missing or non-finite values, and empty boundaries, always give 0.
    """
    if value is None or not boundaries:
        return 0
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(v):
        return 0

    b1, b2, b3, b4 = pad_breaks(list(boundaries))
    if v > b4:
        return 4
    if v > b3:
        return 3
    if v > b2:
        return 2
    if v > b1:
        return 1
    return 0


def quantile_probabilities(count: int) -> Tuple[float, ...]:
    """Equal-count cut points, ``(0.2, 0.4, 0.6, 0.8)`` for four boundaries."""
    return tuple(i / (count + 1) for i in range(1, count + 1))


def quantile_boundaries(values: Iterable[Optional[float]], count: int = BOUNDARY_COUNT) -> Boundaries:
    """
    Compute quantile boundaries from a live value set.

    Missing and non-finite values are dropped. The boundary for probability
    ``p`` is the sorted element at ``floor(p * (n - 1))``. Duplicates are kept
    as-is; an empty set gives empty boundaries.
    """
    finite = sorted(
        float(v) for v in values if v is not None and math.isfinite(float(v))
    )
    n = len(finite)
    if n == 0:
        logger.debug("Quantile classification over an empty value set")
        return Boundaries.empty()

    breaks = [finite[math.floor(p * (n - 1))] for p in quantile_probabilities(count)]
    return Boundaries.from_breaks(breaks)


def compute_boundaries(lens, values: Iterable[Optional[float]]) -> Boundaries:
    """
    Boundaries for ``lens`` over ``values`` (already in the lens's value space).

    Fixed lenses ignore ``values``; quantile lenses derive them from it.
    """
    return lens.classification.boundaries(values)
