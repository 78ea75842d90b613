"""
Query functions for UI integration.
These functions help the UI understand what actions are available
and what to render, without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from city_clicker.engine.actions import Action
from city_clicker.engine.geo import MAX_SCORE
from city_clicker.engine.state import GameState, PHASE_AWAITING_GUESS, PHASE_LOCKED, PHASE_GAME_OVER


# Phase rules: which action types are allowed in which phases
PHASE_ALLOWED_ACTIONS = {
    PHASE_AWAITING_GUESS: ["submit_guess", "lock_in", "start_game", "reset_game"],
    PHASE_LOCKED: ["next_round", "start_game", "reset_game"],
    PHASE_GAME_OVER: ["next_round", "start_game", "reset_game"],
}


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Action Validation =====

def validate_action(state: GameState, action: Action) -> ValidationResult:
    """
    Validate an action without applying it.
    Returns ValidationResult with valid=True or valid=False with error message.
    """
    allowed = PHASE_ALLOWED_ACTIONS.get(state.phase, [])
    if action.type not in allowed:
        return ValidationResult(
            False,
            f"Cannot {action.type} during {state.phase} phase. Allowed: {allowed}"
        )

    if action.type == "lock_in" and state.pending_guess is None:
        return ValidationResult(False, "Cannot lock in: no guess has been submitted")

    if action.type in ("start_game", "next_round", "reset_game"):
        if action.payload.get("target_city") is None:
            return ValidationResult(False, f"{action.type} needs a target city")

    return ValidationResult(True)


def get_available_action_types(state: GameState) -> list[str]:
    """
    Action types the player can take right now (drives enabling/disabling controls).
    lock_in only appears once a guess is pending.
    """
    available = list(PHASE_ALLOWED_ACTIONS.get(state.phase, []))
    if "lock_in" in available and state.pending_guess is None:
        available.remove("lock_in")
    return available


# ===== Rendering Queries =====

def get_max_possible_score(state: GameState) -> int:
    """Best total achievable over the rounds played so far."""
    return MAX_SCORE * state.rounds_played


def get_round_table(state: GameState) -> list[dict[str, Any] | None]:
    """
    Rows for the round table, newest first.
    Always history_size rows long; rows not yet played are None placeholders.
    """
    rows: list[dict[str, Any] | None] = [r.to_dict() for r in state.history]
    rows.extend([None] * (state.history_size - len(rows)))
    return rows


def get_reveal(state: GameState) -> dict[str, Any] | None:
    """Target location and round result, only once the guess is locked in."""
    if not state.locked:
        return None
    return {
        "target": state.target_city.coordinate.to_dict(),
        "distance_km": state.current_distance_km,
        "points": state.current_score,
    }


def get_game_view(state: GameState) -> dict[str, Any]:
    """
    Snapshot for the presentation layer.
    The target's name is always shown (the name is the puzzle); its coordinates only via reveal.
    """
    return {
        "target_city_name": state.target_city.name,
        "phase": state.phase,
        "locked": state.locked,
        "game_over": state.game_over,
        "rounds_played": state.rounds_played,
        "rounds_per_game": state.rounds_per_game,
        "total_score": state.total_score,
        "max_possible_score": get_max_possible_score(state),
        "current_score": state.current_score,
        "pending_guess": state.pending_guess.to_dict() if state.pending_guess else None,
        "history": get_round_table(state),
        "reveal": get_reveal(state),
        "city_set_id": state.city_set_id,
    }
