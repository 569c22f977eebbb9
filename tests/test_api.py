"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

import time

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.COMPUTER_MOVE_DELAY = 0.0


def test_create_game_and_first_move():
    response = client.post("/api/game", json={"difficulty": "easy"})
    assert response.status_code == 200
    payload = response.json()
    assert payload["currentPlayer"] == "X"
    assert payload["board"] == [""] * 9
    assert payload["moveLog"] == []
    assert payload["status"] == "Your turn (X)"

    game_id = payload["id"]
    move_response = client.post(f"/api/game/{game_id}/move", json={"index": 4})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["accepted"] is True
    assert state["board"][4] == "X"
    assert state["moveLog"][0] == {"player": "X", "index": 4}
    assert state["currentPlayer"] == "O"
    assert state["computerPending"] is True

    time.sleep(0.01)
    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["currentPlayer"] == "X"
    assert final_state["computerPending"] is False
    assert final_state["moveLog"][-1]["player"] == "O"
    assert final_state["lastMove"] == final_state["moveLog"][-1]["index"]


def test_hard_game_answers_corner_with_center():
    game_id = client.post("/api/game", json={"difficulty": "hard"}).json()["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 0})

    time.sleep(0.01)
    state = client.get(f"/api/game/{game_id}").json()
    assert state["difficulty"] == "hard"
    assert state["board"][4] == "O"


def test_occupied_cell_is_silently_rejected():
    game_id = client.post("/api/game", json={}).json()["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 0})

    time.sleep(0.01)
    before = client.get(f"/api/game/{game_id}").json()
    duplicate = client.post(f"/api/game/{game_id}/move", json={"index": 0})
    assert duplicate.status_code == 200
    state = duplicate.json()
    assert state["accepted"] is False
    assert state["board"] == before["board"]
    assert state["moveLog"] == before["moveLog"]


def test_reset_and_difficulty_change():
    game_id = client.post("/api/game", json={"difficulty": "easy"}).json()["id"]
    client.post(f"/api/game/{game_id}/move", json={"index": 4})

    reset = client.post(f"/api/game/{game_id}/reset")
    assert reset.status_code == 200
    state = reset.json()
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["outcome"] == "ongoing"
    assert state["lastMove"] is None

    client.post(f"/api/game/{game_id}/move", json={"index": 8})
    changed = client.put(f"/api/game/{game_id}/difficulty", json={"difficulty": "hard"})
    assert changed.status_code == 200
    state = changed.json()
    assert state["difficulty"] == "hard"
    assert state["board"] == [""] * 9
    assert state["computerPending"] is False


def test_rejects_malformed_payloads():
    game_id = client.post("/api/game", json={}).json()["id"]
    assert client.post(f"/api/game/{game_id}/move", json={"index": 9}).status_code == 422
    assert client.post("/api/game", json={"difficulty": "expert"}).status_code == 422


def test_missing_game_returns_404():
    assert client.get("/api/game/missing").status_code == 404
    assert client.post("/api/game/missing/move", json={"index": 0}).status_code == 404


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic Tac Toe" in response.text
