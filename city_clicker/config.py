"""
Single place for default game configuration.
Change DEFAULT_CITY_SET_ID to switch which city list is used when creating a new game (when no city_set_id is provided).
"""
import os

# City set id from data/cities/<id>.json (e.g. "uk"). This is the default for new games.
DEFAULT_CITY_SET_ID = os.environ.get("CITY_SET_ID", "uk")
