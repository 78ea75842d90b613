"""
FastAPI backend for City Clicker.
Maps the map UI's events (click, lock in, new city, reset) onto the round engine
and returns snapshots for rendering. Games live in memory only.
"""

import os
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from city_clicker.config import DEFAULT_CITY_SET_ID
from city_clicker.engine.definitions import City, list_city_sets, load_cities
from city_clicker.engine.events import GameEvent
from city_clicker.engine.geo import Coordinate
from city_clicker.engine.queries import get_available_action_types
from city_clicker.engine.reducer import InvalidOperation
from city_clicker.engine.round_engine import RoundEngine

app = FastAPI(
    title="City Clicker API",
    description="Backend API for City Clicker - guess where a city is on the map",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = [
    o.strip()
    for o in os.environ.get(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:5174,http://localhost:3000"
    ).split(",")
    if o.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    import traceback
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    print(tb, flush=True)
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# In-memory game registry: game_id -> RoundEngine, oldest first.
# Once MAX_GAMES is reached, creating a game evicts the oldest one.
games: dict[str, RoundEngine] = {}
MAX_GAMES = int(os.environ.get("MAX_GAMES", "1000"))

# City lists are read once per process: set_id -> [City]
city_sets: dict[str, list[City]] = {}


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    """City set id from GET /city-sets (e.g. 'uk'). Omitted = default from city_clicker.config.DEFAULT_CITY_SET_ID."""
    city_set_id: str | None = None


class GuessRequest(BaseModel):
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)


# ===== Helpers =====

def get_cities(set_id: str) -> list[City]:
    """Cached reference list for set_id; raise 400 if the set does not exist or is unusable."""
    if set_id not in city_sets:
        if set_id not in {s["id"] for s in list_city_sets()}:
            raise HTTPException(status_code=400, detail=f"City set not found: {set_id}")
        try:
            city_sets[set_id] = load_cities(set_id)
        except (FileNotFoundError, ValueError, KeyError) as e:
            raise HTTPException(status_code=400, detail=f"City set {set_id} cannot be loaded: {e}")
    return city_sets[set_id]


def get_game(game_id: str) -> RoundEngine:
    """Get a game's engine; raise 404 if not found."""
    engine = games.get(game_id)
    if engine is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return engine


def _run(engine: RoundEngine, operation) -> dict[str, Any]:
    """Run an engine operation; 400 if it is not allowed in the current state."""
    try:
        events: list[GameEvent] = operation()
    except InvalidOperation as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "state": engine.snapshot(),
        "events": [e.to_dict() for e in events],
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "City Clicker API", "version": "1.0.0"}


@app.get("/city-sets")
def get_city_sets():
    """List available city sets (id, display_name, city_count). Use id as city_set_id in POST /games."""
    return {"city_sets": list_city_sets()}


@app.post("/games", status_code=201)
def create_game(request: CreateGameRequest | None = None):
    """Start a new game with a random first city. Returns game_id and the initial state."""
    set_id = request.city_set_id if request and request.city_set_id else DEFAULT_CITY_SET_ID
    engine = RoundEngine(get_cities(set_id), city_set_id=set_id)
    events = engine.opening_events()
    while len(games) >= MAX_GAMES:
        del games[next(iter(games))]
    game_id = str(uuid.uuid4())
    games[game_id] = engine
    return {
        "game_id": game_id,
        "state": engine.snapshot(),
        "events": [e.to_dict() for e in events],
    }


@app.get("/games/{game_id}")
def get_game_state(game_id: str):
    """Current snapshot. The target's location stays hidden until the guess is locked in."""
    engine = get_game(game_id)
    return {"game_id": game_id, "state": engine.snapshot()}


@app.get("/games/{game_id}/available-actions")
def get_available_actions(game_id: str):
    """Action types the UI should enable right now."""
    engine = get_game(game_id)
    return {
        "phase": engine.state.phase,
        "actions": get_available_action_types(engine.state),
    }


@app.post("/games/{game_id}/guess")
def do_guess(game_id: str, request: GuessRequest):
    """User clicked the map: place or move the pending guess."""
    engine = get_game(game_id)
    coordinate = Coordinate(request.latitude, request.longitude)
    return _run(engine, lambda: engine.submit_guess(coordinate))


@app.post("/games/{game_id}/lock-in")
def do_lock_in(game_id: str):
    """Finalize the pending guess and score the round."""
    engine = get_game(game_id)
    return _run(engine, engine.lock_in)


@app.post("/games/{game_id}/next-round")
def do_next_round(game_id: str):
    """New city after a lock-in (a new game once all rounds are played)."""
    engine = get_game(game_id)
    return _run(engine, engine.next_round)


@app.post("/games/{game_id}/reset")
def do_reset(game_id: str):
    """Start over from any state."""
    engine = get_game(game_id)
    return _run(engine, engine.reset_game)


@app.delete("/games/{game_id}")
def delete_game(game_id: str):
    get_game(game_id)
    del games[game_id]
    return {"message": f"Game {game_id} deleted"}
