from typing import Final

ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"
WINDOW_DAYS: Final[int] = 3
SLOTS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")
LEGACY_DAY_LABELS: Final[tuple[str, ...]] = ("day1", "day2", "day3")
PLAN_ID_ALPHABET: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"

# Document store collections
PLANS_COLLECTION: Final[str] = "mealPlans"
HISTORY_COLLECTION: Final[str] = "dailyMealHistory"
MEALS_COLLECTION: Final[str] = "meals"
LAST_UPDATED_FIELD: Final[str] = "lastUpdated"

SLOT_LABELS: Final[dict[str, str]] = {
    "breakfast": "Breakfast",
    "lunch": "Lunch",
    "dinner": "Dinner",
}
WEEKDAY_LABELS: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
EMPTY_SLOT_LABEL: Final[str] = "none"

NOTICE_MESSAGES: Final[dict[str, tuple[str, str]]] = {
    "saved": ("Meal plan saved.", "success"),
    "loaded": ("Meal plan loaded.", "success"),
    "not_found": ("No saved plan was found. Start a new one.", "info"),
    "cleared": ("Meal plan cleared.", "success"),
    "created": ("New meal plan created.", "success"),
    "shifted": ("Dates moved forward. Past meals were saved to history.", "info"),
    "meal_added": ("Meal added.", "success"),
    "meal_updated": ("Meal updated.", "success"),
    "meal_deleted": ("Meal deleted.", "success"),
    "meal_invalid": ("Enter a name and choose at least one category.", "error"),
    "save_failed": ("Saving failed. Please try again.", "error"),
    "load_failed": ("Loading failed. Please try again.", "error"),
}
