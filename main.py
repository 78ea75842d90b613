"""
Main entry point for the City Clicker round engine.
Demonstrates core functionality with a simulated 10-round game.
"""

import random

from city_clicker.engine.definitions import load_cities
from city_clicker.engine.geo import Coordinate, exponential_decay_score, haversine_distance
from city_clicker.engine.reducer import InvalidOperation
from city_clicker.engine.round_engine import RoundEngine
from city_clicker.engine.utils import print_game_state


def noisy_guess(target: Coordinate, rng: random.Random, spread_deg: float) -> Coordinate:
    """A simulated click somewhere around target."""
    return Coordinate(
        target.latitude + rng.uniform(-spread_deg, spread_deg),
        target.longitude + rng.uniform(-spread_deg, spread_deg),
    )


def main():
    print("City Clicker - Round Engine Demo")
    print("=" * 60)

    cities = load_cities("uk")
    rng = random.Random(42)
    engine = RoundEngine(cities, choose=rng.choice, city_set_id="uk")

    # ===== SCENARIO 1: Scoring =====
    print("\n[SCENARIO 1: Scoring]")
    london = Coordinate(51.5074, -0.1278)
    edinburgh = Coordinate(55.9533, -3.1883)
    d = haversine_distance(edinburgh, london)
    print(f"London -> London: {haversine_distance(london, london):.1f} km, score {exponential_decay_score(0)}")
    print(f"Edinburgh -> London: {d:.0f} km, score {exponential_decay_score(d)}")
    for km in (5, 10, 20, 30, 50, 100):
        print(f"  {km:>4} km -> {exponential_decay_score(km)} points")

    # ===== SCENARIO 2: Invalid operations are rejected =====
    print("\n[SCENARIO 2: Lock in without a guess]")
    try:
        engine.lock_in()
    except InvalidOperation as e:
        print(f"✓ Rejected: {e}")

    # ===== SCENARIO 3: A full game =====
    print("\n[SCENARIO 3: Full game]")
    engine.start_game()
    while True:
        state = engine.state
        target = state.target_city
        guess = noisy_guess(target.coordinate, rng, spread_deg=0.4)
        engine.submit_guess(guess)
        events = engine.lock_in()
        for e in events:
            if e.type == "guess_locked":
                p = e.payload
                print(f"  Round {p['round_number']:>2}: {p['city_name']:<20} {p['distance_km']:>6.1f} km  {p['points']:>3} pts")
            elif e.type == "game_over":
                p = e.payload
                print(f"  Game over: {p['total_score']} / {p['max_possible_score']}")
        if engine.state.game_over:
            break
        engine.next_round()

    print_game_state(engine.state)

    # ===== SCENARIO 4: New city after game over starts a new game =====
    print("\n[SCENARIO 4: New city after the final round]")
    events = engine.next_round()
    print(f"  Events: {[e.type for e in events]}")
    print(f"  Rounds played: {engine.state.rounds_played}, total: {engine.state.total_score}")

    print("\n" + "=" * 60)
    print("✓ Demo complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
