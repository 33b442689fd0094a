import pytest
from httpx import ASGITransport, AsyncClient

from kondate.api import context
from kondate.api.api_run import app
from kondate.infra import paths
from kondate.logic.window.clock import FixedClock


@pytest.mark.asyncio
async def test_days_pass_while_page_is_open(tmp_path, monkeypatch):
    """A plan saved on one day is shifted on a later focus check."""

    # Use a temporary data directory (don't alter the real one)
    monkeypatch.setattr(paths, "DATA_DIR", tmp_path)
    monkeypatch.setattr(context, "clock", FixedClock("2024-06-11"))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        # === 1. Save on 6/11 ===
        resp = await ac.put("/api/plans/tab1", json={"days": {
            "2024-06-11": {"breakfast": "toast"},
            "2024-06-12": {"lunch": "udon"},
            "2024-06-13": {"dinner": "curry"},
        }})
        assert resp.status_code == 200, resp.text
        assert resp.json()["archived"] == []

        # === 2. Two days later the page regains focus ===
        monkeypatch.setattr(context, "clock", FixedClock("2024-06-13"))
        resp = await ac.post("/api/plans/tab1/shift")
        data = resp.json()
        assert data["shifted"] is True
        assert data["window"] == ["2024-06-13", "2024-06-14", "2024-06-15"]
        assert data["days"]["2024-06-13"]["dinner"] == "curry"

        # === 3. History holds the two past days, newest first ===
        history = (await ac.get("/api/plans/tab1/history")).json()
        assert [e["date"] for e in history["entries"]] == ["2024-06-12", "2024-06-11"]
        assert history["entries"][1]["meals"]["breakfast"] == "toast"

    # The data directory only holds the three collections the planner writes
    assert {p.name for p in tmp_path.iterdir()} <= {"mealPlans.json", "dailyMealHistory.json", "meals.json"}
