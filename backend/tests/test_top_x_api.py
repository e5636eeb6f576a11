"""Tests for top X leaderboard endpoints."""

import asyncio
import json

import pytest
from httpx import AsyncClient

from app.api.deps import get_top_x_engine
from app.config import get_settings
from app.main import app
from app.services.top_x_service import TopXEngine


SCREEN = {
    "mciMap": {
        "VM1": {"type": "userProp", "propName": "score"},
        "2": {"type": "userEventLog", "logName": "post"},
    },
    "regions": [
        {"slotId": 1, "height": 2},
        {"slotId": 2, "height": 5},
    ],
}


@pytest.mark.asyncio
async def test_render_screen(client: AsyncClient, seed, sample_users):
    """Test POST /v1/top-x/render returns every slot in declaration order."""
    await seed(
        users=sample_users,
        props={(1, "score"): 50, (2, "score"): 80, (3, "score"): 30, (2, "real_name"): "Bob B."},
        events=[(3, "post", "msg", None), (3, "post", "msg", None), (1, "post", "msg", None)],
    )

    response = await client.post("/v1/top-x/render", json=SCREEN)

    assert response.status_code == 200
    data = response.json()
    assert [s["slot_id"] for s in data["slots"]] == [1, 2]
    assert [s["region"] for s in data["slots"]] == ["VM1", "VM2"]

    scores = data["slots"][0]["entries"]
    assert [(e["user_name"], e["value"]) for e in scores] == [("bob", 80), ("alice", 50)]
    assert scores[0]["real_name"] == "Bob B."
    assert scores[1]["real_name"] == ""

    posts = data["slots"][1]["entries"]
    assert [(e["user_name"], e["value"]) for e in posts] == [("carol", 2), ("alice", 1)]
    assert all(s["error"] is None for s in data["slots"])


@pytest.mark.asyncio
async def test_render_invalid_configuration(client: AsyncClient):
    body = {
        "mciMap": {"1": {"type": "userProp", "propName": "NOT_A_REAL_PROP"}},
        "regions": [{"slotId": 1, "height": 5}],
    }

    response = await client.post("/v1/top-x/render", json=body)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "InvalidConfiguration"
    assert detail["slot_id"] == "1"
    assert detail["field"] == "propName"


@pytest.mark.asyncio
async def test_render_missing_region(client: AsyncClient):
    body = {
        "mciMap": {"4": {"type": "userProp", "propName": "score"}},
        "regions": [{"slotId": 1, "height": 5}],
    }

    response = await client.post("/v1/top-x/render", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "SlotNotFound"


@pytest.mark.asyncio
async def test_failed_slot_renders_empty(client: AsyncClient, seed):
    await seed(users={1: "alice"}, props={(1, "score"): 1, (2, "score"): 2})

    response = await client.post(
        "/v1/top-x/render",
        json={
            "mciMap": {"1": {"type": "userProp", "propName": "score"}},
            "regions": [{"slotId": 1, "height": 5}],
        },
    )

    assert response.status_code == 200
    slot = response.json()["slots"][0]
    assert slot["entries"] == []
    assert slot["error"] == "UserResolutionFailed"


@pytest.mark.asyncio
async def test_list_sources(client: AsyncClient):
    response = await client.get("/v1/top-x/sources")

    assert response.status_code == 200
    data = response.json()
    assert "score" in data["properties"]
    assert "login" in data["log_names"]


@pytest.mark.asyncio
async def test_default_screen_not_configured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(get_settings(), "top_x_config_file", None)

    response = await client.get("/v1/top-x/screen")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_default_screen_from_file(client: AsyncClient, seed, sample_users, tmp_path, monkeypatch):
    await seed(users=sample_users, props={(1, "score"): 7})
    config_file = tmp_path / "top_x.json"
    config_file.write_text(json.dumps(SCREEN))
    monkeypatch.setattr(get_settings(), "top_x_config_file", str(config_file))

    response = await client.get("/v1/top-x/screen")

    assert response.status_code == 200
    slots = response.json()["slots"]
    assert [(e["user_name"], e["value"]) for e in slots[0]["entries"]] == [("alice", 7)]
    assert slots[1]["entries"] == []


@pytest.mark.asyncio
async def test_default_screen_malformed_file(client: AsyncClient, tmp_path, monkeypatch):
    config_file = tmp_path / "top_x.json"
    config_file.write_text(json.dumps({"mciMap": SCREEN["mciMap"]}))
    monkeypatch.setattr(get_settings(), "top_x_config_file", str(config_file))

    response = await client.get("/v1/top-x/screen")

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["error"] == "InvalidConfiguration"
    assert detail["field"] == "configFile"


@pytest.mark.asyncio
async def test_render_timeout(client: AsyncClient, session_maker, seed, sample_users):
    """Test POST /v1/top-x/render returns 504 when the render runs too long."""
    await seed(users=sample_users, props={(1, "score"): 10})

    class SlowDirectory:
        async def get_display_name(self, user_id):
            await asyncio.sleep(5)
            return "slow"

        async def get_properties(self, user_id, names):
            return {}

    app.dependency_overrides[get_top_x_engine] = lambda: TopXEngine(
        session_maker, directory=SlowDirectory(), render_timeout=0.05
    )

    response = await client.post(
        "/v1/top-x/render",
        json={
            "mciMap": {"1": {"type": "userProp", "propName": "score"}},
            "regions": [{"slotId": 1, "height": 5}],
        },
    )

    assert response.status_code == 504
