"""
Main game reducer.
Applies actions to state, enforcing round rules and producing new state.
Returns (new_state, events) where events describe what happened.
"""

from city_clicker.engine.actions import Action
from city_clicker.engine.definitions import City
from city_clicker.engine.events import (
    GameEvent,
    game_started,
    round_started,
    guess_submitted,
    guess_locked,
    game_over,
)
from city_clicker.engine.geo import (
    Coordinate,
    exponential_decay_score,
    haversine_distance,
    round_half_up,
)
from city_clicker.engine.queries import PHASE_ALLOWED_ACTIONS, get_max_possible_score
from city_clicker.engine.state import GameState, RoundRecord
from city_clicker.engine.utils import initialize_game_state


class InvalidOperation(ValueError):
    """Action attempted in a state that forbids it. Recoverable; the state is left untouched."""


def _validate_action_for_phase(action: Action, state: GameState) -> None:
    """
    Validate that an action is allowed in the current phase.

    Special rules: lock_in needs a pending guess; start_game, next_round and
    reset_game need a target city in the payload.
    """
    phase = state.phase
    allowed_actions = PHASE_ALLOWED_ACTIONS.get(phase, [])

    if action.type not in allowed_actions:
        raise InvalidOperation(
            f"Action '{action.type}' is not allowed in phase '{phase}'. "
            f"Allowed actions: {', '.join(allowed_actions)}"
        )

    if action.type == "lock_in" and state.pending_guess is None:
        raise InvalidOperation("Cannot lock in: no guess has been submitted")

    if action.type in ("start_game", "next_round", "reset_game"):
        if action.payload.get("target_city") is None:
            raise InvalidOperation(f"{action.type} needs a target city")


def apply_action(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """
    Apply a single action to the current state, returning new state and events.

    The input state is never mutated. Target cities arrive in the action payload,
    so the same (state, action) always yields the same result.

    Raises:
        InvalidOperation: the action is not allowed in the current phase
        ValueError: unknown action type
    """
    if action.type not in ("start_game", "submit_guess", "lock_in", "next_round", "reset_game"):
        raise ValueError(f"Unknown action type: {action.type}")

    _validate_action_for_phase(action, state)

    new_state = state.copy()
    events: list[GameEvent] = []

    if action.type in ("start_game", "reset_game"):
        new_state, evts = _handle_start_game(new_state, action.payload["target_city"], action.type)
        events.extend(evts)

    elif action.type == "submit_guess":
        new_state, evts = _handle_submit_guess(new_state, action)
        events.extend(evts)

    elif action.type == "lock_in":
        new_state, evts = _handle_lock_in(new_state)
        events.extend(evts)

    elif action.type == "next_round":
        new_state, evts = _handle_next_round(new_state, action.payload["target_city"])
        events.extend(evts)

    return new_state, events


def _handle_start_game(
    state: GameState,
    target_city: City,
    reason: str,
) -> tuple[GameState, list[GameEvent]]:
    """Replace the state with a fresh game. Game settings carry over."""
    new_state = initialize_game_state(
        target_city,
        rounds_per_game=state.rounds_per_game,
        history_size=state.history_size,
        city_set_id=state.city_set_id,
    )
    return new_state, [
        game_started(new_state.rounds_per_game, reason),
        round_started(1, target_city.name),
    ]


def _handle_submit_guess(state: GameState, action: Action) -> tuple[GameState, list[GameEvent]]:
    """Set (or move) the pending guess. Does not change the phase."""
    latitude = float(action.payload["latitude"])
    longitude = float(action.payload["longitude"])
    state.pending_guess = Coordinate(latitude, longitude)
    return state, [guess_submitted(latitude, longitude)]


def _handle_lock_in(state: GameState) -> tuple[GameState, list[GameEvent]]:
    """
    Score the pending guess against the target.
    - current_score/total_score/rounds_played updated
    - RoundRecord pushed to the front of history (oldest dropped when full)
    - game_over set when the last round is locked
    """
    events: list[GameEvent] = []
    distance = haversine_distance(state.pending_guess, state.target_city.coordinate)
    points = exponential_decay_score(distance)

    state.current_score = points
    state.current_distance_km = distance
    state.total_score += points
    state.rounds_played += 1
    state.history.appendleft(RoundRecord(
        city_name=state.target_city.name,
        distance_km=round_half_up(distance),
        points=points,
    ))
    state.locked = True

    events.append(guess_locked(
        state.rounds_played,
        state.target_city.name,
        distance,
        points,
        state.total_score,
    ))

    if state.rounds_played >= state.rounds_per_game:
        state.game_over = True
        events.append(game_over(
            state.total_score,
            get_max_possible_score(state),
            state.rounds_played,
        ))

    return state, events


def _handle_next_round(state: GameState, target_city: City) -> tuple[GameState, list[GameEvent]]:
    """Advance to a new target; after the final round this starts a new game."""
    if state.game_over:
        return _handle_start_game(state, target_city, "next_round")

    state.target_city = target_city
    state.pending_guess = None
    state.current_score = 0
    state.current_distance_km = None
    state.locked = False
    return state, [round_started(state.rounds_played + 1, target_city.name)]
