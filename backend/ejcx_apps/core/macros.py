"""Macro Calculations - Pure functions for nutrition math.

All functions are pure: same input always produces same output, no side effects.
"""

from typing import Optional

from .models import DailyTotals, EntryDraft, FoodEntry


MACRO_FIELDS = ("fat", "carbs", "protein")
DRAFT_FIELDS = ("food", "calories") + MACRO_FIELDS


def calculate_calories_from_macros(
    fat: Optional[float], carbs: Optional[float], protein: Optional[float]
) -> Optional[float]:
    """Calculate calories from macronutrients.

    Uses standard conversion: 9 cal/g fat, 4 cal/g carbs, 4 cal/g protein.

    Args:
        fat: Grams of fat
        carbs: Grams of carbohydrates
        protein: Grams of protein

    Returns:
        Calories, or None when any macro is unset
    """
    if fat is None or carbs is None or protein is None:
        return None
    return fat * 9 + carbs * 4 + protein * 4


def apply_draft_change(draft: EntryDraft, field: str, value: object) -> EntryDraft:
    """Return a copy of the draft with one field changed.

    Changing fat, carbs or protein recomputes calories once all three are
    set, replacing whatever was typed into calories.

    Args:
        draft: The current form contents
        field: One of food, calories, fat, carbs, protein
        value: The new value as typed

    Returns:
        The updated draft

    Raises:
        KeyError: If the field is not part of the draft
    """
    if field not in DRAFT_FIELDS:
        raise KeyError(field)

    data = draft.model_dump()
    data[field] = "" if field == "food" and value is None else value
    updated = EntryDraft(**data)

    if field in MACRO_FIELDS:
        calories = calculate_calories_from_macros(updated.fat, updated.carbs, updated.protein)
        if calories is not None:
            updated = updated.model_copy(update={"calories": calories})

    return updated


def build_draft(**fields: object) -> EntryDraft:
    """Fill a blank draft field by field, in form order.

    Macros are applied after calories, so a complete macro triple always
    wins over a calories value given alongside it.
    """
    draft = EntryDraft()
    for name in DRAFT_FIELDS:
        if name in fields:
            draft = apply_draft_change(draft, name, fields[name])
    return draft


def calculate_daily_totals(entries: list[FoodEntry]) -> DailyTotals:
    """Calculate total macros from a list of food entries.

    Unset values count as zero.

    Args:
        entries: List of food entries for a day

    Returns:
        DailyTotals rounded to one decimal
    """
    total_calories = sum(e.calories or 0 for e in entries)
    total_fat = sum(e.fat or 0 for e in entries)
    total_carbs = sum(e.carbs or 0 for e in entries)
    total_protein = sum(e.protein or 0 for e in entries)

    return DailyTotals(
        calories=round(total_calories, 1),
        fat=round(total_fat, 1),
        carbs=round(total_carbs, 1),
        protein=round(total_protein, 1),
    )
