"""
RoundEngine: the controller that owns one game's state.
All mutation goes through the named operations below, which pick targets with the
injected chooser, build an Action and run it through the reducer.
"""

from typing import Any, Sequence

from city_clicker.engine import HISTORY_SIZE, ROUNDS_PER_GAME
from city_clicker.engine.actions import Action, lock_in, next_round, reset_game, start_game, submit_guess
from city_clicker.engine.definitions import City, load_cities
from city_clicker.engine.events import GameEvent, game_started, round_started
from city_clicker.engine.geo import Coordinate
from city_clicker.engine.queries import get_game_view
from city_clicker.engine.reducer import InvalidOperation, apply_action
from city_clicker.engine.state import GameState
from city_clicker.engine.utils import Chooser, choose_target_city, initialize_game_state


class RoundEngine:
    """
    One game of City Clicker.

    Args:
        cities: Reference list targets are drawn from (uniformly, with replacement)
        choose: Picks one element of a sequence; defaults to random.choice.
            Pass random.Random(seed).choice (or any stub) for reproducible games.
        city_set_id: Id of the reference list, carried in the state for display
        rounds_per_game: Lock-ins before the game is over
        history_size: Rows kept in the round table
        ignore_invalid: When True, operations that are not allowed right now are
            silent no-ops returning [] instead of raising InvalidOperation
    """

    def __init__(
        self,
        cities: Sequence[City],
        choose: Chooser | None = None,
        city_set_id: str | None = None,
        rounds_per_game: int = ROUNDS_PER_GAME,
        history_size: int = HISTORY_SIZE,
        ignore_invalid: bool = False,
    ):
        if not cities:
            raise ValueError("RoundEngine needs at least one city")
        self.cities = list(cities)
        self.choose = choose
        self.ignore_invalid = ignore_invalid
        self._state = initialize_game_state(
            self._pick_target(),
            rounds_per_game=rounds_per_game,
            history_size=history_size,
            city_set_id=city_set_id,
        )

    @classmethod
    def from_city_set(cls, set_id: str | None = None, **kwargs) -> "RoundEngine":
        """Build an engine over a bundled city set (default: config.DEFAULT_CITY_SET_ID)."""
        from city_clicker.config import DEFAULT_CITY_SET_ID
        set_id = set_id if set_id is not None else DEFAULT_CITY_SET_ID
        return cls(load_cities(set_id), city_set_id=set_id, **kwargs)

    @property
    def state(self) -> GameState:
        """Current state. Treat as read-only; use snapshot() for rendering."""
        return self._state

    def _pick_target(self) -> City:
        return choose_target_city(self.cities, self.choose)

    def _dispatch(self, action: Action) -> list[GameEvent]:
        try:
            self._state, events = apply_action(self._state, action)
        except InvalidOperation:
            if self.ignore_invalid:
                return []
            raise
        return events

    # ===== Operations =====

    def start_game(self) -> list[GameEvent]:
        """New random target, zeroed counters, empty round table."""
        return self._dispatch(start_game(self._pick_target()))

    def submit_guess(self, coordinate: Coordinate) -> list[GameEvent]:
        """Place or move the pin. Rejected once the round is locked."""
        return self._dispatch(submit_guess(coordinate.latitude, coordinate.longitude))

    def lock_in(self) -> list[GameEvent]:
        """Score the pending guess. Rejected without a guess or when already locked."""
        return self._dispatch(lock_in())

    def next_round(self) -> list[GameEvent]:
        """New target after a lock-in; starts a new game once the last round is done."""
        return self._dispatch(next_round(self._pick_target()))

    def reset_game(self) -> list[GameEvent]:
        """Same as start_game, from any state."""
        return self._dispatch(reset_game(self._pick_target()))

    def opening_events(self) -> list[GameEvent]:
        """Events for the game the constructor set up, without drawing another target."""
        return [
            game_started(self._state.rounds_per_game, "start_game"),
            round_started(self._state.rounds_played + 1, self._state.target_city.name),
        ]

    def snapshot(self) -> dict[str, Any]:
        """Read-only view for the presentation layer."""
        return get_game_view(self._state)
