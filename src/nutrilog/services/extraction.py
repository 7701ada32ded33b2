"""Nutrient extraction into canonical base records."""

from collections.abc import Mapping

from nutrilog.domain.nutrition import (
    NUTRIENT_FIELDS,
    STORAGE_COLUMNS,
    UNKNOWN_FOOD,
    UNKNOWN_PRODUCT,
    NutritionRecord,
)
from nutrilog.domain.sources import (
    BrandedFood,
    FoodSource,
    HistoryEntry,
    ManualEntry,
    ProductPayload,
    RecipeTotals,
)
from nutrilog.services.rounding import (
    normalize_multiplier,
    round_nutrients,
    to_float,
    to_number,
)

_FDC_NUTRIENT_IDS = {
    "calories": 1008,
    "protein_g": 1003,
    "carbs_g": 1005,
    "fiber_g": 1079,
    "sugars_g": 2000,
    "total_fat_g": 1004,
    "saturated_fat_g": 1258,
    "trans_fat_g": 1257,
}
_FDC_MONOUNSATURATED_ID = 1292
_FDC_POLYUNSATURATED_ID = 1293

_PRODUCT_NUTRIENT_KEYS = {
    "protein_g": "proteins",
    "carbs_g": "carbohydrates",
    "fiber_g": "fiber",
    "sugars_g": "sugars",
    "total_fat_g": "fat",
    "saturated_fat_g": "saturated-fat",
    "trans_fat_g": "trans-fat",
}

KJ_PER_KCAL = 4.184
DEFAULT_SERVING_GRAMS = 100.0
UPC_A_LENGTH = 12
EAN_13_LENGTH = 13


def extract(source: FoodSource) -> NutritionRecord:
    """Extract a base record from a tagged source payload."""
    if isinstance(source, BrandedFood):
        return extract_branded_food(source.payload)
    if isinstance(source, ProductPayload):
        return extract_product(source.product)
    if isinstance(source, ManualEntry):
        return extract_manual(source.fields)
    if isinstance(source, RecipeTotals):
        return extract_recipe(source.row)
    if isinstance(source, HistoryEntry):
        return extract_history(source.row)
    raise TypeError(f"Unsupported food source: {type(source).__name__}")


def extract_branded_food(payload: Mapping[str, object]) -> NutritionRecord:
    """Map a government food database record onto a base record."""
    raw_nutrients = payload.get("foodNutrients")
    entries = raw_nutrients if isinstance(raw_nutrients, list) else []
    values = {
        field: _fdc_amount(entries, nutrient_id)
        for field, nutrient_id in _FDC_NUTRIENT_IDS.items()
    }
    values["unsaturated_fat_g"] = _fdc_amount(
        entries, _FDC_MONOUNSATURATED_ID
    ) + _fdc_amount(entries, _FDC_POLYUNSATURATED_ID)
    serving_size, gram_weight = _fdc_serving(payload)
    return _build_record(
        _text(payload.get("description")) or UNKNOWN_FOOD,
        values,
        serving_size=serving_size,
        gram_weight=gram_weight,
    )


def extract_product(product: Mapping[str, object]) -> NutritionRecord:
    """Map an open product database product onto a base record.

    Per-serving values win over per-100g values, key by key. Energy falls
    back from kilocalories to kilojoules within each basis before the basis
    itself falls back.
    """
    raw_nutriments = product.get("nutriments")
    nutriments = raw_nutriments if isinstance(raw_nutriments, Mapping) else {}
    values = {
        field: _per_serving(nutriments, key)
        for field, key in _PRODUCT_NUTRIENT_KEYS.items()
    }
    values["unsaturated_fat_g"] = _per_serving(
        nutriments, "monounsaturated-fat"
    ) + _per_serving(nutriments, "polyunsaturated-fat")

    energy = _energy_kcal(nutriments, "serving")
    if energy is None:
        energy = _energy_kcal(nutriments, "100g")
    values["calories"] = energy if energy is not None else 0.0

    return _build_record(
        _product_name(product),
        values,
        serving_size=_text(product.get("serving_size")) or None,
        gram_weight=to_number(product.get("serving_quantity")) or None,
    )


def extract_manual(fields: Mapping[str, object]) -> NutritionRecord:
    """Coerce and round a manually entered record."""
    values = {field: to_float(fields.get(field)) for field in NUTRIENT_FIELDS}
    return _build_record(
        _text(fields.get("name")) or UNKNOWN_FOOD,
        values,
        serving_size=_text(fields.get("serving_size")) or None,
        gram_weight=to_number(fields.get("gram_weight")) or None,
    )


def extract_recipe(row: Mapping[str, object]) -> NutritionRecord:
    """Treat a stored recipe's totals as one serving of a single food."""
    values = {
        field: to_float(row.get(column)) for field, column in STORAGE_COLUMNS.items()
    }
    return _build_record(_text(row.get("name")) or UNKNOWN_FOOD, values)


def extract_history(row: Mapping[str, object]) -> NutritionRecord:
    """Recover the per-serving record from a previously logged food."""
    multiplier = normalize_multiplier(row.get("serving_multiplier"))
    values = {
        field: to_float(row.get(column)) / multiplier
        for field, column in STORAGE_COLUMNS.items()
    }
    return _build_record(_text(row.get("name")) or UNKNOWN_FOOD, values)


def barcode_candidates(code: str | None) -> list[str]:
    """Return the barcodes to try, in order, for a scanned code.

    A 12-digit UPC-A code is also tried as EAN-13 with a leading zero; a
    13-digit code starting with zero is also tried without it.
    """
    digits = "".join(char for char in code or "" if "0" <= char <= "9")
    if not digits:
        return []
    candidates = [digits]
    if len(digits) == UPC_A_LENGTH:
        candidates.append(f"0{digits}")
    elif len(digits) == EAN_13_LENGTH and digits.startswith("0"):
        candidates.append(digits[1:])
    return candidates


def _build_record(
    name: str,
    values: dict[str, float],
    serving_size: str | None = None,
    gram_weight: float | None = None,
) -> NutritionRecord:
    return NutritionRecord(
        name=name,
        serving_size=serving_size,
        gram_weight=gram_weight,
        **round_nutrients(values),
    )


def _fdc_amount(entries: list[object], nutrient_id: int) -> float:
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        entry_id = entry.get("nutrientId")
        info = entry.get("nutrient")
        if entry_id is None and isinstance(info, Mapping):
            entry_id = info.get("id")
        if to_number(entry_id) != nutrient_id:
            continue
        amount = entry.get("value")
        if amount is None:
            amount = entry.get("amount")
        return to_float(amount)
    return 0.0


def _fdc_serving(payload: Mapping[str, object]) -> tuple[str, float]:
    raw_size = payload.get("servingSize")
    unit = _text(payload.get("servingSizeUnit"))
    if raw_size:
        size = to_number(raw_size) or DEFAULT_SERVING_GRAMS
        return f"{_format_amount(raw_size)}{unit or 'g'}", size

    portions = payload.get("foodPortions")
    if isinstance(portions, list) and portions and isinstance(portions[0], Mapping):
        portion = portions[0]
        gram_weight = to_number(portion.get("gramWeight"))
        if gram_weight:
            label = f"{_format_amount(gram_weight)}g"
            modifier = _text(portion.get("modifier"))
            if modifier:
                label = f"{label} ({modifier})"
            return label, gram_weight

    return f"{_format_amount(DEFAULT_SERVING_GRAMS)}g", DEFAULT_SERVING_GRAMS


def _per_serving(nutriments: Mapping[str, object], key: str) -> float:
    value = nutriments.get(f"{key}_serving")
    if value is None:
        value = nutriments.get(f"{key}_100g")
    return to_float(value)


def _energy_kcal(nutriments: Mapping[str, object], basis: str) -> float | None:
    kcal = to_number(nutriments.get(f"energy-kcal_{basis}"))
    if kcal is not None:
        return kcal
    kilojoules = to_number(nutriments.get(f"energy_{basis}"))
    if kilojoules:
        return kilojoules / KJ_PER_KCAL
    return None


def _product_name(product: Mapping[str, object]) -> str:
    for key in ("product_name", "generic_name"):
        name = _text(product.get(key))
        if name:
            return name
    brand = _text(product.get("brands"))
    if brand:
        return f"{brand} ({UNKNOWN_PRODUCT})"
    return UNKNOWN_PRODUCT


def _format_amount(value: object) -> str:
    number = to_number(value)
    if number is None:
        return str(value).strip()
    if number.is_integer():
        return str(int(number))
    return str(number)


def _text(value: object) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""
