"""Meal catalog persistence (``meals`` collection)."""
import logging
from typing import List, Optional

from kondate.domain.Meal import Meal
from kondate.infra.Document_Store import DocumentStore, DocumentNotFound, SERVER_TIMESTAMP
from kondate.utilities.constants import MEALS_COLLECTION

logger = logging.getLogger(__name__)


class CatalogValidationError(ValueError):
    """A meal is missing its name or categories."""


def check_meal(meal: Meal) -> None:
    if not meal.name:
        raise CatalogValidationError("Meal name is required")
    if not meal.categories:
        raise CatalogValidationError("Choose at least one category")


class MealRepository:
    def __init__(self, store: Optional[DocumentStore] = None):
        self.store = store or DocumentStore()

    def list_for_user(self, user_id: str) -> List[Meal]:
        return [Meal.from_dict(doc, id=doc_id)
                for doc_id, doc in self.store.list(MEALS_COLLECTION)
                if doc.get("userId") == user_id]

    def get(self, meal_id: str) -> Meal:
        doc = self.store.get(MEALS_COLLECTION, meal_id)
        if doc is None:
            raise DocumentNotFound(MEALS_COLLECTION, meal_id)
        return Meal.from_dict(doc, id=meal_id)

    def create(self, meal: Meal) -> Meal:
        check_meal(meal)
        doc = meal.to_dict()
        doc["createdAt"] = SERVER_TIMESTAMP
        doc["updatedAt"] = SERVER_TIMESTAMP
        meal_id, saved = self.store.create(MEALS_COLLECTION, doc)
        logger.info("Added meal %s (%s) for %s", meal.name, meal_id, meal.user_id)
        return Meal.from_dict(saved, id=meal_id)

    def update(self, meal_id: str, meal: Meal) -> Meal:
        check_meal(meal)
        changes = {
            "name": meal.name,
            "categories": list(meal.categories),
            "memo": meal.memo,
            "userId": meal.user_id,
            "updatedAt": SERVER_TIMESTAMP,
        }
        # Single-category documents are rewritten in the list form
        saved = self.store.update(MEALS_COLLECTION, meal_id, changes, remove_fields=("category",))
        logger.info("Updated meal %s", meal_id)
        return Meal.from_dict(saved, id=meal_id)

    def delete(self, meal_id: str) -> None:
        if not self.store.delete(MEALS_COLLECTION, meal_id):
            raise DocumentNotFound(MEALS_COLLECTION, meal_id)
        logger.info("Deleted meal %s", meal_id)
