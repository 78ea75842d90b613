"""
Game state representation.
State is only changed by the reducer, which works on copies.
Includes JSON serialization for debugging and UI snapshots.
"""

from collections import deque
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from city_clicker.engine import HISTORY_SIZE, ROUNDS_PER_GAME
from city_clicker.engine.definitions import City
from city_clicker.engine.geo import Coordinate

PHASE_AWAITING_GUESS = "awaiting_guess"
PHASE_LOCKED = "locked"
PHASE_GAME_OVER = "game_over"


@dataclass(frozen=True)
class RoundRecord:
    """One row of the round table, written at lock-in."""
    city_name: str
    distance_km: int  # whole kilometres (round_half_up of the lock-in distance)
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "city_name": self.city_name,
            "distance_km": self.distance_km,
            "points": self.points,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoundRecord":
        return cls(
            city_name=str(data.get("city_name") or ""),
            distance_km=int(data.get("distance_km") or 0),
            points=int(data.get("points") or 0),
        )


@dataclass
class GameState:
    """Complete state of one game."""
    target_city: City
    rounds_per_game: int = ROUNDS_PER_GAME
    history_size: int = HISTORY_SIZE
    city_set_id: str | None = None
    pending_guess: Coordinate | None = None
    locked: bool = False
    current_score: int = 0
    # Exact distance of the locked-in guess (None until locked)
    current_distance_km: float | None = None
    total_score: int = 0
    rounds_played: int = 0
    # Newest first; appendleft on a full deque drops the oldest record
    history: deque = field(default_factory=deque)
    game_over: bool = False

    def __post_init__(self):
        if self.history.maxlen != self.history_size:
            self.history = deque(self.history, maxlen=self.history_size)

    @property
    def phase(self) -> str:
        if self.game_over:
            return PHASE_GAME_OVER
        if self.locked:
            return PHASE_LOCKED
        return PHASE_AWAITING_GUESS

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "target_city": self.target_city.to_dict(),
            "rounds_per_game": self.rounds_per_game,
            "history_size": self.history_size,
            "city_set_id": self.city_set_id,
            "pending_guess": self.pending_guess.to_dict() if self.pending_guess else None,
            "locked": self.locked,
            "current_score": self.current_score,
            "current_distance_km": self.current_distance_km,
            "total_score": self.total_score,
            "rounds_played": self.rounds_played,
            "history": [r.to_dict() for r in self.history],
            "game_over": self.game_over,
            "phase": self.phase,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        """Create GameState from a dictionary (phase is derived, so it is ignored)."""
        guess = data.get("pending_guess")
        history_size = int(data.get("history_size", HISTORY_SIZE))
        records = [RoundRecord.from_dict(r) for r in (data.get("history") or []) if isinstance(r, dict)]
        distance = data.get("current_distance_km")
        return cls(
            target_city=City.from_dict(data["target_city"]),
            rounds_per_game=int(data.get("rounds_per_game", ROUNDS_PER_GAME)),
            history_size=history_size,
            city_set_id=data.get("city_set_id"),
            pending_guess=Coordinate.from_dict(guess) if isinstance(guess, dict) else None,
            locked=bool(data.get("locked", False)),
            current_score=int(data.get("current_score", 0)),
            current_distance_km=float(distance) if distance is not None else None,
            total_score=int(data.get("total_score", 0)),
            rounds_played=int(data.get("rounds_played", 0)),
            history=deque(records, maxlen=history_size),
            game_over=bool(data.get("game_over", False)),
        )
