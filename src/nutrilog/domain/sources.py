"""Source payload variants accepted by the nutrient extractor.

Each variant wraps an untyped payload from one origin. Callers pick the
variant because they know where the payload came from; the extractor never
guesses a shape from the keys it finds.
"""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class BrandedFood:
    """Food from the government food database (search or detail shape)."""

    payload: Mapping[str, object]


@dataclass(frozen=True)
class ProductPayload:
    """Product from the open product database."""

    product: Mapping[str, object]


@dataclass(frozen=True)
class ManualEntry:
    """Values typed in by the user, keyed by canonical field name."""

    fields: Mapping[str, object]


@dataclass(frozen=True)
class RecipeTotals:
    """A stored recipe row with pre-computed totals."""

    row: Mapping[str, object]


@dataclass(frozen=True)
class HistoryEntry:
    """A recent-food row carrying its own serving multiplier."""

    row: Mapping[str, object]


FoodSource = BrandedFood | ProductPayload | ManualEntry | RecipeTotals | HistoryEntry
