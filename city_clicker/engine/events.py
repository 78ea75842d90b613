"""
Game events for UI hooks and logging.
Events describe what happened during action processing.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

GAME_STARTED = "game_started"
ROUND_STARTED = "round_started"
GUESS_SUBMITTED = "guess_submitted"
GUESS_LOCKED = "guess_locked"
GAME_OVER = "game_over"


# ===== Event Factory Functions =====

def game_started(rounds_per_game: int, reason: str) -> GameEvent:
    """reason: the action that started the game ("start_game", "reset_game" or "next_round")."""
    return GameEvent(GAME_STARTED, {
        "rounds_per_game": rounds_per_game,
        "reason": reason,
    })


def round_started(round_number: int, city_name: str) -> GameEvent:
    return GameEvent(ROUND_STARTED, {
        "round_number": round_number,
        "city_name": city_name,
    })


def guess_submitted(latitude: float, longitude: float) -> GameEvent:
    return GameEvent(GUESS_SUBMITTED, {
        "latitude": latitude,
        "longitude": longitude,
    })


def guess_locked(
    round_number: int,
    city_name: str,
    distance_km: float,
    points: int,
    total_score: int,
) -> GameEvent:
    """Emitted at lock-in. distance_km is exact; the round table stores it rounded."""
    return GameEvent(GUESS_LOCKED, {
        "round_number": round_number,
        "city_name": city_name,
        "distance_km": distance_km,
        "points": points,
        "total_score": total_score,
    })


def game_over(total_score: int, max_possible_score: int, rounds_played: int) -> GameEvent:
    return GameEvent(GAME_OVER, {
        "total_score": total_score,
        "max_possible_score": max_possible_score,
        "rounds_played": rounds_played,
    })
