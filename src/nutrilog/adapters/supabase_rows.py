"""Row helpers shared by the Supabase repositories."""

from nutrilog.domain.nutrition import STORAGE_COLUMNS
from nutrilog.services.rounding import round_whole, to_float


def nutrients_from_row(row: dict[str, object], prefix: str = "") -> dict[str, float]:
    """Read the nine nutrient columns (optionally prefixed) from a row."""
    values = {
        field: to_float(row.get(f"{prefix}{column}"))
        for field, column in STORAGE_COLUMNS.items()
    }
    values["calories"] = round_whole(values["calories"])
    return values
