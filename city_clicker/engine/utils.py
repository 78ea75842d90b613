"""
Utility functions for the game engine.
"""

import random
from typing import Callable, Sequence

from city_clicker.engine import HISTORY_SIZE, ROUNDS_PER_GAME
from city_clicker.engine.definitions import City
from city_clicker.engine.geo import MAX_SCORE
from city_clicker.engine.state import GameState

# Picks one element uniformly at random, e.g. random.choice or random.Random(seed).choice
Chooser = Callable[[Sequence[City]], City]


def initialize_game_state(
    target_city: City,
    rounds_per_game: int = ROUNDS_PER_GAME,
    history_size: int = HISTORY_SIZE,
    city_set_id: str | None = None,
) -> GameState:
    """
    Create a fresh game state: first round, no guess, zeroed counters, empty round table.

    Args:
        target_city: City for round 1
        rounds_per_game: Lock-ins before the game is over
        history_size: Rows kept in the round table
        city_set_id: Reference list the targets come from (informational)
    """
    return GameState(
        target_city=target_city,
        rounds_per_game=rounds_per_game,
        history_size=history_size,
        city_set_id=city_set_id,
    )


def choose_target_city(cities: Sequence[City], choose: Chooser | None = None) -> City:
    """
    Pick the next target uniformly from the full list, with replacement.
    Consecutive rounds may repeat a city.
    """
    if not cities:
        raise ValueError("No cities to choose from")
    if choose is None:
        choose = random.choice
    return choose(cities)


def print_game_state(state: GameState, reveal: bool = False) -> None:
    """Print a human-readable game state. reveal=True also shows the target's location."""
    print("\n" + "=" * 60)
    print(f"Guess the location: {state.target_city.name}")
    print(f"Phase: {state.phase}")
    print(f"Score: {state.total_score} / {MAX_SCORE * state.rounds_played}")
    print(f"Rounds Played: {state.rounds_played} / {state.rounds_per_game}")
    if state.pending_guess:
        print(f"Pending guess: ({state.pending_guess.latitude:.4f}, {state.pending_guess.longitude:.4f})")
    if state.locked or reveal:
        c = state.target_city.coordinate
        print(f"Target: ({c.latitude:.4f}, {c.longitude:.4f})")
    if state.locked and state.current_distance_km is not None:
        print(f"Distance: {state.current_distance_km:.0f} km | Score: {state.current_score} points!")
    if state.game_over:
        print(f"Game Over! Final Score: {state.total_score}")
    print("=" * 60)

    print(f"{'City':<24}{'Distance (km)':>15}{'Score':>8}")
    for i in range(state.history_size):
        if i < len(state.history):
            r = state.history[i]
            print(f"{r.city_name:<24}{r.distance_km:>15}{r.points:>8}")
        else:
            print(f"{'-':<24}{'-':>15}{'-':>8}")
