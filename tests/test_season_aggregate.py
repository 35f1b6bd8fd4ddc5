import json
from datetime import datetime, timezone

import pytest

from f1fantasy.config import BUNDLED_FALLBACK
from f1fantasy.ingest import NameResolver, PayloadShape, aggregate_season, detect_shape, split_display_name


def _resolver() -> NameResolver:
    return NameResolver.from_mappings(
        {
            "NOR": {"name": "Lando Norris"},
            "VER": {"name": "Max Verstappen"},
            "ANT": {"name": "Andrea Kimi Antonelli"},
        },
        [{"id": "MCL", "name": "McLaren"}, {"id": "RED", "name": "Red Bull Racing"}],
    )


def _driver(raw_id: str, points, price, *, active: bool = True) -> dict:
    return {
        "id": raw_id,
        "abbreviation": raw_id.split("_")[-1],
        "type": "driver",
        "isActive": active,
        "price": price,
        "totalPoints": points,
    }


def _constructor(raw_id: str, points, price) -> dict:
    return {"id": raw_id, "abbreviation": raw_id, "type": "constructor", "price": price, "totalPoints": points}


def _detailed(rounds: dict, season: int = 2025) -> dict:
    return {"seasonResult": {"season": season, "raceResults": rounds}, "races": []}


def _aggregate(payload):
    return aggregate_season(payload, detect_shape(payload), _resolver(), season=2025)


def _by_id(entities):
    return {entity.id: entity for entity in entities}


def _assert_sum_invariant(snapshot):
    for entity in (*snapshot.drivers, *snapshot.constructors):
        assert int(entity.season_score) == sum(int(v) for v in entity.scores_by_race.values()), entity.id


def test_season_score_matches_round_scores():
    payload = _detailed(
        {
            "1": {
                "drivers": [_driver("MCL_NOR", 59, 29.0), _driver("RED_VER", 43, 28.5)],
                "constructors": [_constructor("MCL", 77, 30.0), _constructor("RED", 40, 27.5)],
            },
            "2": {
                "drivers": [_driver("MCL_NOR", -5, 29.2), _driver("RED_VER", 35, 28.7, active=False)],
                "constructors": [_constructor("MCL", 12, 30.3)],
            },
            "3": {
                "drivers": [_driver("MCL_NOR", 33, 29.5), _driver("RED_VER", 54, 28.9)],
                "constructors": [_constructor("MCL", 81, 30.6), _constructor("RED", 68, 27.6)],
            },
        }
    )

    snapshot = _aggregate(payload)

    _assert_sum_invariant(snapshot)
    drivers = _by_id(snapshot.drivers)
    assert drivers["MCL_NOR"].season_score == "87"
    assert drivers["RED_VER"].season_score == "97"
    assert _by_id(snapshot.constructors)["RED"].scores_by_race == {"1": "40", "3": "68"}


def test_rounds_processed_in_numeric_order():
    payload = _detailed(
        {
            "10": {"drivers": [_driver("MCL_NOR", 10, 31.0)]},
            "2": {"drivers": [_driver("MCL_NOR", 2, 29.5)]},
            "1": {"drivers": [_driver("MCL_NOR", 1, 29.0)]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert list(driver.scores_by_race) == ["1", "2", "10"]
    # Lexical order would have left round 2's price in place.
    assert driver.price == "31"


def test_inactive_round_adds_nothing():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("RED_LAW", -13, 18.0)]},
            "2": {"drivers": [_driver("RED_LAW", 25, 17.8, active=False)]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert "2" not in driver.scores_by_race
    assert driver.season_score == "-13"
    assert driver.price == "18"


def test_driver_inactive_in_every_round_is_absent():
    payload = _detailed({"1": {"drivers": [_driver("RED_LAW", 4, 18.0, active=False)]}})

    assert _aggregate(payload).drivers == ()


def test_price_comes_from_last_round_containing_entity():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("MCL_NOR", 10, 29.0), _driver("RED_VER", 8, 28.5)]},
            "2": {"drivers": [_driver("MCL_NOR", 12, 29.3)]},
            "3": {"drivers": [_driver("MCL_NOR", 14, 29.6), _driver("RED_VER", 9, 28.2, active=False)]},
        }
    )

    drivers = _by_id(_aggregate(payload).drivers)

    assert drivers["MCL_NOR"].price == "29.6"
    assert drivers["RED_VER"].price == "28.5"


def test_display_names_and_name_split():
    payload = _detailed(
        {
            "1": {
                "drivers": [_driver("MER_ANT", 20, 23.2), _driver("HAA_XYZ", 1, 5.0)],
                "constructors": [_constructor("MCL", 30, 30.0), _constructor("WIL", 3, 12.0)],
            }
        }
    )

    snapshot = _aggregate(payload)
    drivers = _by_id(snapshot.drivers)
    constructors = _by_id(snapshot.constructors)

    assert drivers["MER_ANT"].display_name == "Andrea Kimi Antonelli"
    assert drivers["MER_ANT"].first_name == "Andrea"
    assert drivers["MER_ANT"].last_name == "Kimi Antonelli"
    assert drivers["HAA_XYZ"].display_name == "XYZ"
    assert drivers["HAA_XYZ"].first_name == "XYZ"
    assert drivers["HAA_XYZ"].last_name == ""
    assert constructors["MCL"].display_name == "McLaren"
    assert constructors["WIL"].display_name == "WIL"


def test_split_display_name_on_first_whitespace():
    assert split_display_name("Nico Hülkenberg") == ("Nico", "Hülkenberg")
    assert split_display_name("") == ("", "")


def test_missing_points_and_price_count_as_zero():
    entry = _driver("MCL_NOR", None, None)
    del entry["totalPoints"]
    payload = _detailed(
        {
            "1": {"drivers": [entry]},
            "2": {"drivers": [_driver("MCL_NOR", "not-a-number", 29.1)]},
            "3": {"drivers": [_driver("MCL_NOR", 7.0, "29.40")]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert driver.scores_by_race == {"1": "0", "2": "0", "3": "7"}
    assert driver.season_score == "7"
    assert driver.price == "29.4"


def test_fractional_price_is_preserved():
    payload = _detailed({"1": {"constructors": [_constructor("MCL", 10, 30.25)]}})

    assert _aggregate(payload).constructors[0].price == "30.25"


def test_round_without_entity_data_is_skipped():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("MCL_NOR", 10, 29.0)]},
            "2": {"drivers": [], "constructors": []},
            "3": {},
            "sprint": {"drivers": [_driver("MCL_NOR", 99, 40.0)]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert driver.scores_by_race == {"1": "10"}
    assert driver.price == "29"


def test_duplicate_entry_in_round_keeps_sum_invariant():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("MCL_NOR", 10, 29.0), _driver("MCL_NOR", 12, 29.1)]},
            "2": {"drivers": [_driver("MCL_NOR", 5, 29.2)]},
        }
    )

    snapshot = _aggregate(payload)

    _assert_sum_invariant(snapshot)
    assert snapshot.drivers[0].scores_by_race == {"1": "12", "2": "5"}


def test_ids_unique_and_ordered_by_first_appearance():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("RED_VER", 1, 28.0)]},
            "2": {"drivers": [_driver("MCL_NOR", 2, 29.0), _driver("RED_VER", 3, 28.1)]},
        }
    )

    ids = [driver.id for driver in _aggregate(payload).drivers]

    assert ids == ["RED_VER", "MCL_NOR"]


def test_season_taken_from_payload():
    snapshot = aggregate_season(_detailed({}, season=2024), PayloadShape.DETAILED, _resolver(), season=2025)

    assert snapshot.season == 2024
    assert snapshot.is_empty


def test_simple_shape_with_nested_drivers():
    payload = {
        "2": {"drivers": {"NOR": {"fantasy_cost": 29.2, "fantasy_score": 41, "fp1_position": 3}}},
        "1": {
            "drivers": {
                "NOR": {"fantasy_cost": 29.0, "fantasy_score": 59},
                "VER": {"fantasy_cost": 28.5, "fantasy_score": 43},
            },
            "constructors": {"MCL": {"fantasy_cost": 30.0, "fantasy_score": 77}},
        },
    }

    snapshot = _aggregate(payload)
    drivers = _by_id(snapshot.drivers)

    assert snapshot.constructors == ()
    assert drivers["NOR"].display_name == "Lando Norris"
    assert drivers["NOR"].scores_by_race == {"1": "59", "2": "41"}
    assert drivers["NOR"].season_score == "100"
    assert drivers["NOR"].price == "29.2"
    assert drivers["VER"].season_score == "43"
    _assert_sum_invariant(snapshot)


def test_simple_shape_legacy_flat_rounds():
    payload = {
        "1": {"VER": {"fantasy_cost": 28.5, "fantasy_score": 43}, "constructors": {"RED": {"fantasy_score": 40}}},
        "2": {"VER": {"fantasy_cost": 28.7}},
        "3": {"constructors": {"RED": {"fantasy_score": 47}}},
    }

    snapshot = _aggregate(payload)

    assert [driver.id for driver in snapshot.drivers] == ["VER"]
    assert snapshot.drivers[0].scores_by_race == {"1": "43", "2": "0"}
    assert snapshot.drivers[0].price == "28.7"
    assert snapshot.constructors == ()


def test_unrecognized_shape_yields_empty_snapshot():
    now = datetime(2025, 3, 20, tzinfo=timezone.utc)
    snapshot = aggregate_season({"error": "nope"}, PayloadShape.UNRECOGNIZED, _resolver(), season=2025, now=now)

    assert snapshot.is_empty
    assert snapshot.season == 2025
    assert snapshot.last_updated == now


def test_bundled_fallback_aggregates_cleanly():
    payload = json.loads(BUNDLED_FALLBACK.read_text(encoding="utf-8"))

    snapshot = _aggregate(payload)
    drivers = _by_id(snapshot.drivers)

    _assert_sum_invariant(snapshot)
    assert drivers["MCL_NOR"].season_score == "133"
    assert drivers["MCL_NOR"].price == "29.5"
    assert drivers["RED_LAW"].scores_by_race == {"1": "-13"}
    assert _by_id(snapshot.constructors)["MCL"].season_score == "261"


@pytest.mark.parametrize("order", [["1", "2", "3"], ["3", "1", "2"], ["2", "3", "1"]])
def test_key_order_does_not_change_result(order):
    rounds = {
        "1": {"drivers": [_driver("MCL_NOR", 5, 29.0)]},
        "2": {"drivers": [_driver("MCL_NOR", 6, 29.5)]},
        "3": {"drivers": [_driver("MCL_NOR", 7, 30.0)]},
    }
    payload = _detailed({key: rounds[key] for key in order})

    driver = _aggregate(payload).drivers[0]

    assert driver.season_score == "18"
    assert driver.price == "30"


def test_large_integer_points_keep_precision():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("MCL_NOR", 9007199254740993, 29.0)]},
            "2": {"drivers": [_driver("MCL_NOR", 10**400, 29.1)]},
            "3": {"drivers": [_driver("MCL_NOR", "12345678901234567890", 29.2)]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert driver.scores_by_race["1"] == "9007199254740993"
    assert driver.scores_by_race["2"] == str(10**400)
    assert driver.scores_by_race["3"] == "12345678901234567890"
    _assert_sum_invariant(_aggregate(payload))


def test_fractional_point_strings_are_rounded():
    payload = _detailed(
        {
            "1": {"drivers": [_driver("MCL_NOR", "7.6", 29.0)]},
            "2": {"drivers": [_driver("MCL_NOR", "Infinity", 29.0)]},
            "3": {"drivers": [_driver("MCL_NOR", float("inf"), 29.0)]},
        }
    )

    driver = _aggregate(payload).drivers[0]

    assert driver.scores_by_race == {"1": "8", "2": "0", "3": "0"}
