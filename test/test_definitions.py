"""
City reference data loading.
"""

import json
import os

import pytest

from city_clicker.engine.definitions import CITIES_DIR, City, list_city_sets, load_cities
from city_clicker.engine.geo import Coordinate


def test_list_city_sets_includes_uk():
    sets = {s["id"]: s for s in list_city_sets()}
    assert "uk" in sets
    assert sets["uk"]["display_name"] == "United Kingdom"
    assert sets["uk"]["city_count"] > 10


def test_load_uk_cities():
    cities = load_cities("uk")
    by_name = {c.name: c for c in cities}
    assert by_name["London"].coordinate == Coordinate(51.5074, -0.1278)
    assert by_name["Edinburgh"].coordinate == Coordinate(55.9533, -3.1883)
    assert len(by_name) == len(cities)


def test_default_set_is_uk():
    assert load_cities() == load_cities("uk")


def test_unknown_set_raises():
    with pytest.raises(FileNotFoundError):
        load_cities("atlantis")


def test_set_id_cannot_leave_cities_dir(tmp_path):
    outside = tmp_path / "secret.json"
    outside.write_text(json.dumps({"cities": [{"name": "Secret", "lat": 0, "lon": 0}]}))
    relative = os.path.relpath(outside.with_suffix(""), CITIES_DIR)
    assert relative.startswith("..")
    with pytest.raises(FileNotFoundError):
        load_cities(relative)


def test_load_from_explicit_path(tmp_path):
    path = tmp_path / "mini.json"
    path.write_text(json.dumps({
        "id": "mini",
        "display_name": "Mini",
        "cities": [{"name": "Paris", "lat": 48.8566, "lon": 2.3522}],
    }))
    assert load_cities(data_path=path) == [City("Paris", Coordinate(48.8566, 2.3522))]


def test_empty_set_raises(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"id": "empty", "cities": []}))
    with pytest.raises(ValueError):
        load_cities(data_path=path)


def test_city_from_dict_accepts_both_shapes():
    a = City.from_dict({"name": "York", "lat": 53.959, "lon": -1.0815})
    b = City.from_dict({"name": "York", "latitude": 53.959, "longitude": -1.0815})
    assert a == b
    assert City.from_dict(a.to_dict()) == a
