"""
Static reference data: the cities a game can ask about.
Each city set lives in data/cities/<set_id>.json: { id, display_name, cities: [{name, lat, lon}, ...] }.
Loaded once at process start and read-only afterwards.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from city_clicker.engine.geo import Coordinate

DATA_DIR = Path(__file__).parent.parent / "data"
CITIES_DIR = DATA_DIR / "cities"


def _default_city_set_id() -> str:
    """Single place for default: city_clicker.config.DEFAULT_CITY_SET_ID."""
    from city_clicker.config import DEFAULT_CITY_SET_ID
    return DEFAULT_CITY_SET_ID


def _city_set_path(set_id: str) -> Path:
    """Path of a bundled set. Ids that would leave CITIES_DIR are treated as unknown."""
    path = CITIES_DIR / f"{set_id}.json"
    if path.resolve().parent != CITIES_DIR.resolve():
        raise FileNotFoundError(f"City set not found: {set_id}")
    return path


@dataclass(frozen=True)
class City:
    """A named target location."""
    name: str
    coordinate: Coordinate

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, **self.coordinate.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "City":
        """Accepts both the data-file shape {name, lat, lon} and to_dict's {name, latitude, longitude}."""
        lat = data["lat"] if "lat" in data else data["latitude"]
        lon = data["lon"] if "lon" in data else data["longitude"]
        return cls(name=str(data["name"]), coordinate=Coordinate(float(lat), float(lon)))


def list_city_sets() -> list[dict]:
    """Return [{ id, display_name, city_count }, ...] for every data/cities/*.json file."""
    out = []
    if not CITIES_DIR.exists():
        return out
    for path in sorted(CITIES_DIR.glob("*.json")):
        set_id = path.stem
        try:
            with open(path, "r") as f:
                data = json.load(f)
            out.append({
                "id": data.get("id", set_id),
                "display_name": data.get("display_name", set_id),
                "city_count": len(data.get("cities") or []),
            })
        except (json.JSONDecodeError, OSError):
            out.append({"id": set_id, "display_name": set_id, "city_count": 0})
    return out


def load_cities(
    set_id: str | None = None,
    data_path: Path | str | None = None,
) -> list[City]:
    """
    Load the reference city list.

    Args:
        set_id: City set id under data/cities/. Defaults to config.DEFAULT_CITY_SET_ID.
        data_path: Explicit JSON file to read instead (set_id is ignored when given).

    Returns: list of City in file order.
    """
    if data_path is not None:
        path = Path(data_path)
    else:
        path = _city_set_path(set_id if set_id is not None else _default_city_set_id())

    if not path.exists():
        raise FileNotFoundError(f"City set not found: {set_id or path}")

    with open(path, "r") as f:
        data = json.load(f)

    cities = [City.from_dict(c) for c in data.get("cities", [])]
    if not cities:
        raise ValueError(f"City set has no cities: {set_id or path}")
    return cities
