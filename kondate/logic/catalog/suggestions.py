"""Input suggestions for the plan form, built from the meal catalog."""
from typing import Dict, Iterable, List

from kondate.domain.Meal import Meal
from kondate.utilities.constants import SLOTS


def suggestions_by_category(meals: Iterable[Meal]) -> Dict[str, List[str]]:
    """Group meal names by the slot categories they belong to.

    Names are unique per slot and keep the order in which they were first seen.
    """
    grouped: Dict[str, Dict[str, None]] = {slot: {} for slot in SLOTS}
    for meal in meals:
        if not meal.name:
            continue
        for category in meal.categories:
            if category in grouped:
                grouped[category].setdefault(meal.name, None)
    return {slot: list(names) for slot, names in grouped.items()}
