from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from handrecorder.features.session import RecorderSessionManager
from handrecorder.features.session.router import create_session_routers

SETUP = {"gameStyle": "Cash", "blinds": "1/2", "playerCount": "6", "position": "btn", "stackSize": 200}


def _client(*, legacy: bool = False) -> tuple[TestClient, RecorderSessionManager]:
    manager = RecorderSessionManager()
    router_v1, router_legacy = create_session_routers(manager)

    app = FastAPI()
    app.include_router(router_v1)
    if legacy:
        app.include_router(router_legacy)
    return TestClient(app), manager


def test_create_hand_normalizes_setup() -> None:
    client, manager = _client()
    response = client.post("/api/v1/hand", json=SETUP)
    assert response.status_code == 200
    data = response.json()
    sid = data["session"]

    state = manager._sessions[sid]
    assert state.config.game_style == "cash"
    assert state.config.hero_seat == "BTN"
    assert data["state"]["view"]["hero_seat"] == "BTN"
    assert data["state"]["street"] == "preflop"


def test_invalid_setup_is_400() -> None:
    client, _ = _client()
    response = client.post("/api/v1/hand", json={**SETUP, "position": "UTG+2"})
    assert response.status_code == 400
    assert "position" in response.json()["detail"]


def test_card_action_and_raise_endpoints() -> None:
    client, _ = _client()
    sid = client.post("/api/v1/hand", json=SETUP).json()["session"]
    base = f"/api/v1/hand/{sid}"

    assert client.post(f"{base}/card", json={"card": "A♠"}).json()["accepted"] is True
    body = client.post(f"{base}/card", json={"card": "Kd"}).json()
    assert body["state"]["view"]["step_kind"] == "action"

    assert client.post(f"{base}/card", json={"card": "??"}).status_code == 400

    pending = client.post(f"{base}/action", json={"action": "raise"}).json()
    assert pending["state"]["view"]["pending_raise_seat"] == "UTG"
    rejected = client.post(f"{base}/raise", json={"amount": -1}).json()
    assert rejected["accepted"] is False
    assert rejected["reason"]
    accepted = client.post(f"{base}/raise", json={"amount": 6}).json()
    assert accepted["accepted"] is True
    assert accepted["state"]["view"]["acting_seat"] == "HJ"

    folded = client.post(f"{base}/action", json={"action": " fold "}).json()
    assert folded["state"]["view"]["actions"][1] == {"position": "HJ", "action": "Fold"}

    back = client.post(f"{base}/retreat").json()
    assert back["discarded"] == ["HJ Fold"]
    assert back["state"]["view"]["acting_seat"] == "HJ"


def test_non_finite_raise_is_rejected_and_session_stays_usable() -> None:
    client, _ = _client()
    sid = client.post("/api/v1/hand", json=SETUP).json()["session"]
    base = f"/api/v1/hand/{sid}"
    for card in ("As", "Kd"):
        client.post(f"{base}/card", json={"card": card})
    client.post(f"{base}/action", json={"action": "raise"})

    # JSON has no Infinity literal, but the parser behind the request body accepts it.
    response = client.post(f"{base}/raise", content=b'{"amount": Infinity}', headers={"content-type": "application/json"})
    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] is False
    assert body["state"]["view"]["highest_bet"] == 2
    assert body["state"]["view"]["actions"][0] == {"position": "UTG"}

    assert client.get(base).status_code == 200
    assert client.post(f"{base}/raise", json={"amount": 6}).json()["accepted"] is True


def test_observations_and_advance() -> None:
    client, _ = _client()
    sid = client.post("/api/v1/hand", json={**SETUP, "playerCount": 2, "position": "BB"}).json()["session"]
    base = f"/api/v1/hand/{sid}"
    for card in ("As", "Kd"):
        client.post(f"{base}/card", json={"card": card})
    client.post(f"{base}/action", json={"action": "call"})
    client.post(f"{base}/action", json={"action": "check"})
    client.post(f"{base}/observations", json={"text": "limped"})
    done = client.post(f"{base}/advance").json()
    assert done["street_completed"] == "preflop"
    assert done["state"]["street"] == "flop"

    reopened = client.post(f"{base}/reopen", json={"street": "Preflop"}).json()
    assert reopened["state"]["street"] == "preflop"
    assert reopened["state"]["view"]["observations"] == "limped"
    assert client.post(f"{base}/reopen", json={"street": "showdown"}).status_code == 400


def test_unknown_session_is_404_and_legacy_prefix_works() -> None:
    client, _ = _client(legacy=True)
    assert client.get("/api/v1/hand/nope").status_code == 404
    assert client.post("/api/hand/nope/advance").status_code == 404

    sid = client.post("/api/hand", json=SETUP).json()["session"]
    state = client.get(f"/api/hand/{sid}").json()
    assert state["session"] == sid
    finalize = client.post(f"/api/hand/{sid}/finalize").json()
    assert finalize["ok"] is False
    assert "holeCards" in finalize["missing"]
