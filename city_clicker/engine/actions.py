"""
Action definitions for the game.
Actions are immutable, deterministic instructions.
"""

from dataclasses import dataclass

from city_clicker.engine.definitions import City


@dataclass(frozen=True)
class Action:
    """Base action class. All actions have a type and payload."""
    type: str  # e.g., "start_game", "submit_guess", "lock_in", "next_round", "reset_game"
    payload: dict  # Action-specific data


def start_game(target_city: City) -> Action:
    """
    Start a fresh game aimed at target_city.
    The caller picks the city (no RNG in the reducer), the same way for every action that needs a target.
    """
    return Action(type="start_game", payload={"target_city": target_city})


def submit_guess(latitude: float, longitude: float) -> Action:
    """
    Place (or move) the player's pin for the current round.
    Example: submit_guess(51.5074, -0.1278)
    """
    return Action(
        type="submit_guess",
        payload={"latitude": latitude, "longitude": longitude},
    )


def lock_in() -> Action:
    """Finalize the pending guess and score the round."""
    return Action(type="lock_in", payload={})


def next_round(target_city: City) -> Action:
    """
    Move on to the next city after a lock-in.
    Once the last round has been played this starts a new game with target_city instead.
    """
    return Action(type="next_round", payload={"target_city": target_city})


def reset_game(target_city: City) -> Action:
    """Throw the current game away and start over. Valid at any time."""
    return Action(type="reset_game", payload={"target_city": target_city})
