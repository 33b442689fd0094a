from fastapi import APIRouter, HTTPException, Query

from kondate.api import context
from kondate.domain.Meal import Meal
from kondate.events.event_helpers import publish_meal_changed, publish_notice
from kondate.infra.Document_Store import DocumentNotFound, StoreError
from kondate.infra.Meal_Repository import CatalogValidationError
from kondate.logic.catalog.suggestions import suggestions_by_category
from kondate.utilities.validators import MealInput
import logging

router = APIRouter(prefix="/api/meals", tags=["meals"])
logger = logging.getLogger(__name__)


def _meal_json(meal: Meal) -> dict:
    return dict(meal.to_dict(), id=meal.id)


def _meal_from_input(payload: MealInput) -> Meal:
    return Meal(name=payload.name, categories=payload.categories, memo=payload.memo, user_id=payload.user_id)


@router.get("")
def list_meals(user_id: str = Query(..., min_length=1)):
    _, _, meals = context.repositories()
    try:
        items = meals.list_for_user(user_id)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")
    return {"count": len(items), "meals": [_meal_json(m) for m in items]}


@router.get("/suggestions")
def meal_suggestions(user_id: str = Query(..., min_length=1)):
    """Meal names per slot for the plan form's input suggestions."""
    _, _, meals = context.repositories()
    try:
        items = meals.list_for_user(user_id)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")
    return suggestions_by_category(items)


@router.post("", status_code=201)
def add_meal(payload: MealInput):
    _, _, meals = context.repositories()
    try:
        meal = meals.create(_meal_from_input(payload))
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        publish_notice("save_failed", plan_id=payload.user_id)
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")
    publish_meal_changed(payload.user_id, meal.id, "added")
    publish_notice("meal_added", plan_id=payload.user_id)
    return _meal_json(meal)


@router.get("/{meal_id}")
def get_meal(meal_id: str):
    _, _, meals = context.repositories()
    try:
        return _meal_json(meals.get(meal_id))
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Meal not found")
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")


@router.put("/{meal_id}")
def edit_meal(meal_id: str, payload: MealInput):
    _, _, meals = context.repositories()
    try:
        meal = meals.update(meal_id, _meal_from_input(payload))
    except CatalogValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Meal not found")
    except StoreError as e:
        publish_notice("save_failed", plan_id=payload.user_id)
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")
    publish_meal_changed(payload.user_id, meal_id, "updated")
    publish_notice("meal_updated", plan_id=payload.user_id)
    return _meal_json(meal)


@router.delete("/{meal_id}")
def delete_meal(meal_id: str):
    _, _, meals = context.repositories()
    try:
        meal = meals.get(meal_id)
        meals.delete(meal_id)
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Meal not found")
    except StoreError as e:
        raise HTTPException(status_code=503, detail=f"Storage error: {e}")
    publish_meal_changed(meal.user_id, meal_id, "deleted")
    publish_notice("meal_deleted", plan_id=meal.user_id)
    return {"success": True}
