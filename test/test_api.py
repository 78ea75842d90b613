"""
HTTP API: a game played end to end through FastAPI's TestClient.
"""

import json
import random

import pytest
from fastapi.testclient import TestClient

from city_clicker.api import main as api_main
from city_clicker.api.main import app, city_sets, games
from city_clicker.engine import definitions
from city_clicker.engine.geo import Coordinate, exponential_decay_score, haversine_distance


@pytest.fixture()
def client():
    games.clear()
    city_sets.clear()
    with TestClient(app) as c:
        yield c
    games.clear()


def create_game(client, **body):
    res = client.post("/games", json=body)
    assert res.status_code == 201
    return res.json()


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["message"] == "City Clicker API"


def test_city_sets(client):
    ids = [s["id"] for s in client.get("/city-sets").json()["city_sets"]]
    assert "uk" in ids


def test_create_game(client):
    data = create_game(client)
    state = data["state"]
    assert data["game_id"] in games
    assert state["target_city_name"]
    assert state["phase"] == "awaiting_guess"
    assert state["rounds_played"] == 0
    assert state["total_score"] == 0
    assert state["history"] == [None] * 10
    assert state["reveal"] is None
    assert state["city_set_id"] == "uk"
    assert [e["type"] for e in data["events"]] == ["game_started", "round_started"]


def test_create_game_without_body(client):
    res = client.post("/games")
    assert res.status_code == 201


def test_create_game_unknown_city_set(client):
    res = client.post("/games", json={"city_set_id": "atlantis"})
    assert res.status_code == 400


def test_unknown_game(client):
    assert client.get("/games/nope").status_code == 404
    assert client.post("/games/nope/lock-in").status_code == 404


def test_guess_lock_in_and_reveal(client):
    game_id = create_game(client)["game_id"]
    guess = {"latitude": 53.48, "longitude": -2.24}

    res = client.post(f"/games/{game_id}/guess", json=guess)
    assert res.status_code == 200
    assert res.json()["state"]["pending_guess"] == guess

    res = client.post(f"/games/{game_id}/lock-in")
    assert res.status_code == 200
    state = res.json()["state"]
    reveal = state["reveal"]
    target = Coordinate(**reveal["target"])
    expected_distance = haversine_distance(Coordinate(**guess), target)
    assert reveal["distance_km"] == pytest.approx(expected_distance)
    assert reveal["points"] == exponential_decay_score(expected_distance)
    assert state["total_score"] == reveal["points"]
    assert state["rounds_played"] == 1
    assert state["history"][0]["points"] == reveal["points"]
    assert state["history"][0]["city_name"] == state["target_city_name"]


def test_invalid_operations_return_400(client):
    game_id = create_game(client)["game_id"]
    assert client.post(f"/games/{game_id}/lock-in").status_code == 400
    assert client.post(f"/games/{game_id}/next-round").status_code == 400

    client.post(f"/games/{game_id}/guess", json={"latitude": 52.0, "longitude": -1.0})
    client.post(f"/games/{game_id}/lock-in")
    res = client.post(f"/games/{game_id}/lock-in")
    assert res.status_code == 400
    assert "not allowed" in res.json()["detail"]
    res = client.post(f"/games/{game_id}/guess", json={"latitude": 52.0, "longitude": -1.0})
    assert res.status_code == 400


def test_guess_validation(client):
    game_id = create_game(client)["game_id"]
    res = client.post(f"/games/{game_id}/guess", json={"latitude": "north"})
    assert res.status_code == 422


def test_available_actions(client):
    game_id = create_game(client)["game_id"]
    data = client.get(f"/games/{game_id}/available-actions").json()
    assert data["phase"] == "awaiting_guess"
    assert "lock_in" not in data["actions"]

    client.post(f"/games/{game_id}/guess", json={"latitude": 52.0, "longitude": -1.0})
    data = client.get(f"/games/{game_id}/available-actions").json()
    assert "lock_in" in data["actions"]


def test_full_game_then_new_game(client):
    game_id = create_game(client)["game_id"]
    for i in range(10):
        client.post(f"/games/{game_id}/guess", json={"latitude": 54.0, "longitude": -2.0})
        res = client.post(f"/games/{game_id}/lock-in")
        assert res.status_code == 200
        if i < 9:
            assert client.post(f"/games/{game_id}/next-round").status_code == 200

    state = client.get(f"/games/{game_id}").json()["state"]
    assert state["game_over"]
    assert state["rounds_played"] == 10
    assert state["max_possible_score"] == 5000
    assert all(row is not None for row in state["history"])
    assert state["total_score"] == sum(row["points"] for row in state["history"])
    assert client.post(f"/games/{game_id}/lock-in").status_code == 400

    res = client.post(f"/games/{game_id}/next-round")
    assert res.status_code == 200
    state = res.json()["state"]
    assert not state["game_over"]
    assert state["rounds_played"] == 0


def test_reset(client):
    game_id = create_game(client)["game_id"]
    client.post(f"/games/{game_id}/guess", json={"latitude": 54.0, "longitude": -2.0})
    client.post(f"/games/{game_id}/lock-in")

    res = client.post(f"/games/{game_id}/reset")
    assert res.status_code == 200
    state = res.json()["state"]
    assert state["rounds_played"] == 0
    assert state["total_score"] == 0
    assert state["history"] == [None] * 10
    assert not state["locked"]


def test_delete_game(client):
    game_id = create_game(client)["game_id"]
    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}").status_code == 404


def test_create_game_draws_a_single_target(client, monkeypatch):
    draws = []

    def choice(cities):
        draws.append(cities[0])
        return cities[0]

    monkeypatch.setattr(random, "choice", choice)
    data = create_game(client)
    assert len(draws) == 1
    assert data["state"]["target_city_name"] == draws[0].name
    assert data["events"][1]["payload"]["city_name"] == draws[0].name


def test_city_set_id_outside_data_dir_is_rejected(client, tmp_path):
    outside = tmp_path / "secret.json"
    outside.write_text(json.dumps({"id": "secret", "cities": [{"name": "Secret", "lat": 0, "lon": 0}]}))
    res = client.post("/games", json={"city_set_id": "../" * 20 + str(tmp_path).lstrip("/") + "/secret"})
    assert res.status_code == 400
    assert not games


def test_empty_city_set_is_rejected(client, tmp_path, monkeypatch):
    (tmp_path / "empty.json").write_text(json.dumps({"id": "empty", "display_name": "Empty", "cities": []}))
    monkeypatch.setattr(definitions, "CITIES_DIR", tmp_path)
    res = client.post("/games", json={"city_set_id": "empty"})
    assert res.status_code == 400
    assert "empty" in res.json()["detail"]


@pytest.mark.parametrize("body", [
    '{"latitude": NaN, "longitude": 0}',
    '{"latitude": 51.5, "longitude": Infinity}',
])
def test_non_finite_guess_is_rejected(client, body):
    game_id = create_game(client)["game_id"]
    res = client.post(
        f"/games/{game_id}/guess",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 422

    res = client.get(f"/games/{game_id}")
    assert res.status_code == 200
    assert res.json()["state"]["pending_guess"] is None
    assert client.post(f"/games/{game_id}/lock-in").status_code == 400


def test_registry_evicts_oldest_game(client, monkeypatch):
    monkeypatch.setattr(api_main, "MAX_GAMES", 2)
    first = create_game(client)["game_id"]
    second = create_game(client)["game_id"]
    third = create_game(client)["game_id"]
    assert list(games) == [second, third]
    assert client.get(f"/games/{first}").status_code == 404
    assert client.get(f"/games/{second}").status_code == 200
