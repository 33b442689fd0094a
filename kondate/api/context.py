"""Shared collaborators for the web layer.

Handlers build repositories per request (they read ``paths.DATA_DIR`` at
call time) and ask ``get_clock()`` for today, so tests can swap both.
"""
from kondate.infra.Archive_Repository import ArchiveRepository
from kondate.infra.Document_Store import DocumentStore
from kondate.infra.Meal_Repository import MealRepository
from kondate.infra.Plan_Repository import PlanRepository
from kondate.logic.window.clock import Clock, SYSTEM_CLOCK

clock: Clock = SYSTEM_CLOCK


def get_clock() -> Clock:
    return clock


def repositories():
    """(plans, archives, meals) sharing one store."""
    store = DocumentStore()
    return PlanRepository(store), ArchiveRepository(store), MealRepository(store)
