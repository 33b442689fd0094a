from fastapi import FastAPI, Request, Query, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from datetime import datetime
from typing import List, Optional
from urllib.parse import urlencode
import logging

from kondate.api import context
from kondate.api.plan_id import generate_plan_id, is_valid_plan_id, resolve_plan_id, share_url
from kondate.api.routes import meals as meals_routes
from kondate.api.routes import plans as plans_routes
from kondate.domain.Meal import Meal
from kondate.domain.Plan import DaySlots, PlanWindow, is_date_key
from kondate.events.event_helpers import (
    publish_meal_changed,
    publish_notice,
    publish_plan_cleared,
    publish_plan_saved,
)
from kondate.events.web_observers import start as start_event_observers, get_events as get_web_events
from kondate.infra.Document_Store import DocumentNotFound, StoreError
from kondate.infra.Meal_Repository import CatalogValidationError
from kondate.logic.catalog.suggestions import suggestions_by_category
from kondate.logic.history.timeline import format_day, history_rows
from kondate.logic.window.service import roll_forward
from kondate.utilities.config import PLAN_ID_COOKIE, STATIC_DIR, TEMPLATES_DIR
from kondate.utilities.constants import NOTICE_MESSAGES, SLOTS, SLOT_LABELS

# Logging
logger = logging.getLogger("kondate_app")

COOKIE_MAX_AGE = 60 * 60 * 24 * 365

# Initialize FastAPI app
app = FastAPI(title="Kondate 3-Day Meal Planner")

# Include routers
app.include_router(plans_routes.router)
app.include_router(meals_routes.router)

# Static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Templates
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# Subscribe status observers once per process (idempotent)
start_event_observers()
logger.debug("Web observers for status notices started")


def _ts() -> int:
    """Cache-busting timestamp for static assets."""
    return int(datetime.now().timestamp())


# -------------------- Helpers --------------------
def _notice(code: Optional[str]) -> Optional[dict]:
    if not code or code not in NOTICE_MESSAGES:
        return None
    message, level = NOTICE_MESSAGES[code]
    return {"code": code, "message": message, "level": level}


def _redirect(path: str, plan_id: str, notice: Optional[str] = None, **extra) -> RedirectResponse:
    params = {"id": plan_id}
    if notice:
        params["notice"] = notice
    params.update({k: v for k, v in extra.items() if v is not None})
    response = RedirectResponse(url=f"{path}?{urlencode(params)}", status_code=303)
    response.set_cookie(PLAN_ID_COOKIE, plan_id, max_age=COOKIE_MAX_AGE, samesite="lax")
    return response


def _page(request: Request, template: str, plan_id: str, ctx: dict) -> HTMLResponse:
    base = str(request.base_url)
    ctx.update({
        "request": request,
        "plan_id": plan_id,
        "share_url": share_url(base, plan_id),
        "slots": SLOTS,
        "slot_labels": SLOT_LABELS,
        "time": _ts(),
    })
    response = templates.TemplateResponse(template, ctx)
    response.set_cookie(PLAN_ID_COOKIE, plan_id, max_age=COOKIE_MAX_AGE, samesite="lax")
    return response


def _form_plan_id(value: str) -> str:
    if not is_valid_plan_id(value):
        raise HTTPException(status_code=400, detail="Invalid plan id")
    return value


def _window_from_form(form) -> PlanWindow:
    """Form fields are named ``<slot>-<YYYY-MM-DD>``; hidden ``day`` fields list the dates."""
    window = PlanWindow()
    for key in form.getlist("day"):
        if not is_date_key(key):
            continue
        values = {slot: (form.get(f"{slot}-{key}") or "").strip() for slot in SLOTS}
        window[key] = DaySlots(**values)
    return window


# -------------------- UI PAGES --------------------
@app.get("/", response_class=HTMLResponse)
def main_page(request: Request, id: Optional[str] = Query(default=None), notice: Optional[str] = Query(default=None)):
    plan_id, generated = resolve_plan_id(id, request.cookies.get(PLAN_ID_COOKIE))
    if generated or id != plan_id:
        # Keep the id in the URL so the page can be bookmarked and shared
        return _redirect("/", plan_id, notice)

    plans, archives, meals = context.repositories()
    notice_code = notice
    try:
        found = plans.read_document(plan_id) is not None
        result = roll_forward(plan_id, plans, archives, context.get_clock())
        window = result.new_plan
        if notice_code is None:
            if not found:
                notice_code = "not_found"
            elif result.shifted:
                notice_code = "shifted"
            else:
                notice_code = "loaded"
        suggestions = suggestions_by_category(meals.list_for_user(plan_id))
    except StoreError as e:
        logger.error("Loading plan %s failed: %s", plan_id, e)
        window = PlanWindow()
        suggestions = {slot: [] for slot in SLOTS}
        notice_code = "load_failed"

    days = [{"key": key, "label": format_day(key), "meals": slots.to_dict()} for key, slots in window.items()]
    return _page(request, "index.html", plan_id, {
        "days": days,
        "suggestions": suggestions,
        "notice": _notice(notice_code),
        "active": "main",
    })


@app.post("/save")
async def save_page(request: Request):
    form = await request.form()
    plan_id = _form_plan_id(form.get("plan_id", ""))
    window = _window_from_form(form)
    plans, archives, _ = context.repositories()
    try:
        plans.write(plan_id, window)
        roll_forward(plan_id, plans, archives, context.get_clock())
    except StoreError as e:
        logger.error("Saving plan %s failed: %s", plan_id, e)
        publish_notice("save_failed", plan_id=plan_id)
        return _redirect("/", plan_id, "save_failed")
    publish_plan_saved(plan_id, window.keys())
    return _redirect("/", plan_id, "saved")


@app.post("/clear")
def clear_page(plan_id: str = Form(...)):
    plan_id = _form_plan_id(plan_id)
    plans, _, _ = context.repositories()
    try:
        plans.delete(plan_id)
    except StoreError as e:
        logger.error("Clearing plan %s failed: %s", plan_id, e)
        return _redirect("/", plan_id, "save_failed")
    publish_plan_cleared(plan_id)
    return _redirect("/", plan_id, "cleared")


@app.post("/new")
def new_plan_page():
    return _redirect("/", generate_plan_id(), "created")


@app.get("/history", response_class=HTMLResponse)
def history_page(request: Request, id: Optional[str] = Query(default=None)):
    plan_id, generated = resolve_plan_id(id, request.cookies.get(PLAN_ID_COOKIE))
    if generated or id != plan_id:
        return _redirect("/history", plan_id)
    _, archives, _ = context.repositories()
    try:
        rows = history_rows(archives.list_for_plan(plan_id))
        notice = None
    except StoreError as e:
        logger.error("Loading history for %s failed: %s", plan_id, e)
        rows, notice = [], _notice("load_failed")
    return _page(request, "history.html", plan_id, {"rows": rows, "notice": notice, "active": "history"})


@app.get("/meals", response_class=HTMLResponse)
def meals_page(request: Request, id: Optional[str] = Query(default=None),
               edit: Optional[str] = Query(default=None), notice: Optional[str] = Query(default=None)):
    plan_id, generated = resolve_plan_id(id, request.cookies.get(PLAN_ID_COOKIE))
    if generated or id != plan_id:
        return _redirect("/meals", plan_id, notice)
    _, _, meals = context.repositories()
    editing = None
    try:
        items = meals.list_for_user(plan_id)
        if edit:
            editing = meals.get(edit)
    except DocumentNotFound:
        editing = None
    except StoreError as e:
        logger.error("Loading meals for %s failed: %s", plan_id, e)
        items, notice = [], "load_failed"
    return _page(request, "meals.html", plan_id, {
        "meals": items,
        "editing": editing,
        "notice": _notice(notice),
        "active": "meals",
    })


@app.post("/meals/save")
def save_meal_page(plan_id: str = Form(...), name: str = Form(""), memo: str = Form(""),
                   categories: List[str] = Form(default=[]), meal_id: Optional[str] = Form(default=None)):
    plan_id = _form_plan_id(plan_id)
    meal = Meal(name=name, categories=categories, memo=memo, user_id=plan_id)
    _, _, meals = context.repositories()
    try:
        if meal_id:
            meals.update(meal_id, meal)
            publish_meal_changed(plan_id, meal_id, "updated")
            return _redirect("/meals", plan_id, "meal_updated")
        saved = meals.create(meal)
        publish_meal_changed(plan_id, saved.id, "added")
        return _redirect("/meals", plan_id, "meal_added")
    except CatalogValidationError:
        return _redirect("/meals", plan_id, "meal_invalid", edit=meal_id)
    except StoreError as e:
        logger.error("Saving meal for %s failed: %s", plan_id, e)
        return _redirect("/meals", plan_id, "save_failed")


@app.post("/meals/{meal_id}/delete")
def delete_meal_page(meal_id: str, plan_id: str = Form(...)):
    plan_id = _form_plan_id(plan_id)
    _, _, meals = context.repositories()
    try:
        meals.delete(meal_id)
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Meal not found")
    except StoreError as e:
        logger.error("Deleting meal %s failed: %s", meal_id, e)
        return _redirect("/meals", plan_id, "save_failed")
    publish_meal_changed(plan_id, meal_id, "deleted")
    return _redirect("/meals", plan_id, "meal_deleted")


# -------------------- API: Status notices (polled by frontend) --------------------
@app.get("/api/status")
def api_status(
    since: Optional[int] = Query(default=None, description="Return entries with id greater than this value"),
    plan_id: Optional[str] = Query(default=None),
):
    """
    Recent status notices (saves, failures, date shifts).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from the response.
        3. Subsequent polls: /api/status?since=<next_cursor>&plan_id=<id>
    """
    return get_web_events(since, plan_id=plan_id)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
