"""
Tests for the save blob codec, offline progress and import validation.
"""

import base64
import json
from decimal import Decimal

import pytest

from scale_idle.formulas import total_distance_multiplier
from scale_idle.persistence import (
    SaveEncodingError, SaveStore, SaveStructureError, apply_offline_progress, decode_save, encode_save,
    import_save, load_game, save_game, state_from_dict, state_to_dict,
)
from scale_idle.state import EconomyState


@pytest.fixture
def store(tmp_path):
    return SaveStore(str(tmp_path / "save.dat"))


def played_state():
    state = EconomyState()
    state.distance = Decimal("123456789.123456789")
    state.distance_per_second = Decimal("42.5")
    state.scale_points = Decimal(7)
    state.scale_upgrades_unlocked = True
    state.velocity_level, state.velocity_cost = 6, Decimal("2441.40625")
    state.accel_level, state.accel_cost, state.accel_unlocked = 2, Decimal(9000), True
    state.mass, state.mass_per_second, state.mass_unlocked = Decimal("1.5e33"), Decimal(1), True
    state.mass_velocity_level, state.mass_velocity_cost = 2, Decimal(900)
    state.mass_generation_unlocked = state.triple_mass_unlocked = True
    state.dimension_collapse_unlocked = state.dimensions_tab_unlocked = True
    state.dimension_points, state.dimension_level, state.dimension_cost = Decimal(1), 1, Decimal(2)
    state.tick_rate, state.auto_save_interval = 30, 10
    return state


class TestRoundTrip:

    def test_save_then_load_is_identical(self, store):
        state = played_state()
        save_game(state, store, now_ms=5000)
        loaded, elapsed = load_game(store, now_ms=5000)
        assert elapsed == 0
        assert loaded == state

    def test_blob_is_base64_json(self, store):
        blob = save_game(played_state(), store, now_ms=0)
        assert not blob.startswith('{')
        data = json.loads(base64.b64decode(blob))
        assert data['distance'] == "123456789.123456789"
        assert data['upgradeLevel'] == 6
        assert data['lastTime'] == 0

    def test_decimals_stored_as_strings(self):
        data = state_to_dict(played_state(), now_ms=0)
        assert isinstance(data['mass'], str)
        assert isinstance(data['tripleMassUnlocked'], bool)
        assert isinstance(data['tickRate'], int)

    def test_no_save_returns_none(self, store):
        assert load_game(store, now_ms=0) is None


class TestLegacyAndDefaults:

    def test_plain_json_save_loads(self, store):
        legacy = {
            "distance": "5000", "distancePerSecond": "3", "scalePoints": "2",
            "scaleUpgradesUnlocked": True, "upgradeLevel": 5, "upgradeCost": "976.5625",
            "accelLevel": 0, "accelCost": "1000", "accelUnlocked": True,
            "massGenerationUnlocked": False, "tickRate": 45, "lastTime": 1000,
        }
        store.write(json.dumps(legacy))
        state, _ = load_game(store, now_ms=1000)
        assert state.distance == 5000
        assert state.velocity_level == 5
        assert state.tick_rate == 45
        # fields the old build never wrote
        assert state.dimension_cost == 1
        assert state.auto_save_interval == 5
        assert state.compression_cost == Decimal("1e7")

    def test_missing_and_null_fields_default(self):
        state = state_from_dict({"distance": "10", "mass": None})
        assert state.distance == 10
        assert state.mass == 0
        assert state.velocity_cost == 10

    def test_settings_are_clamped(self):
        assert state_from_dict({"tickRate": 500}).tick_rate == 60
        assert state_from_dict({"tickRate": 3}).tick_rate == 10
        assert state_from_dict({"tickRate": "fast"}).tick_rate == 60
        assert state_from_dict({"autoSaveInterval": 0.2}).auto_save_interval == 1

    def test_level_gates_restored_from_levels(self):
        state = state_from_dict({"upgradeLevel": 5, "accelLevel": 5})
        assert state.accel_unlocked and state.compression_unlocked


class TestMalformed:

    def test_garbage_is_encoding_error(self, store):
        store.write("this is not a save!")
        with pytest.raises(SaveEncodingError):
            load_game(store, now_ms=0)

    def test_non_object_is_structure_error(self):
        with pytest.raises(SaveStructureError):
            decode_save("[1, 2, 3]")

    @pytest.mark.parametrize("payload", [
        {"distance": "abc"},
        {"distance": "-5"},
        {"upgradeLevel": -1},
        {"upgradeLevel": 2.5},
        {"massUnlocked": "yes"},
        {"scalePoints": "Infinity"},
    ])
    def test_bad_field_rejects_whole_save(self, payload):
        with pytest.raises(SaveStructureError):
            state_from_dict(payload)

    def test_empty_text(self):
        with pytest.raises(SaveEncodingError):
            decode_save("   ")


class TestOfflineProgress:

    def test_stale_timestamp_projects_distance(self, store):
        state = EconomyState()
        state.distance_per_second = Decimal(3)
        state.velocity_level = 2
        save_game(state, store, now_ms=0)
        loaded, elapsed = load_game(store, now_ms=100000)
        assert elapsed == 100
        expected = Decimal(3) * total_distance_multiplier(loaded) * 100
        assert loaded.distance == expected == 1200

    def test_mass_projected_when_unlocked(self, store):
        state = EconomyState()
        state.mass_unlocked, state.mass_per_second, state.triple_mass_unlocked = True, Decimal(1), True
        save_game(state, store, now_ms=0)
        loaded, _ = load_game(store, now_ms=60000)
        assert loaded.mass == 180

    def test_mass_not_projected_when_locked(self):
        state = EconomyState()
        state.mass_per_second = Decimal(1)
        distance_gain, mass_gain = apply_offline_progress(state, 10)
        assert distance_gain == 10
        assert mass_gain == 0 and state.mass == 0

    def test_future_timestamp_gives_nothing(self, store):
        save_game(EconomyState(), store, now_ms=10000)
        loaded, elapsed = load_game(store, now_ms=0)
        assert elapsed == 0
        assert loaded.distance == 0


class TestImport:

    def test_accepts_plain_json(self, store):
        import_save(store, json.dumps({"distance": "77"}))
        state, _ = load_game(store, now_ms=0)
        assert state.distance == 77

    def test_accepts_base64_json(self, store):
        import_save(store, encode_save({"scalePoints": "3"}))
        state, _ = load_game(store, now_ms=0)
        assert state.scale_points == 3

    def test_invalid_encoding_leaves_store_untouched(self, store):
        store.write("original")
        with pytest.raises(SaveEncodingError):
            import_save(store, "%%% not base64 %%%")
        assert store.read() == "original"

    @pytest.mark.parametrize("last_time", [float('nan'), float('-inf'), float('inf'), True, "yesterday"])
    def test_unusable_timestamp_rejected_before_write(self, store, last_time):
        store.write("original")
        with pytest.raises(SaveStructureError):
            import_save(store, json.dumps({"distance": "500", "lastTime": last_time}))
        assert store.read() == "original"

    def test_nan_timestamp_on_disk_is_structure_error(self, store):
        store.write(encode_save({"distance": "500", "lastTime": float('nan')}))
        with pytest.raises(SaveStructureError):
            load_game(store, now_ms=0)

    def test_invalid_structure_leaves_store_untouched(self, store):
        store.write("original")
        with pytest.raises(SaveStructureError):
            import_save(store, json.dumps({"distance": "lots"}))
        assert store.read() == "original"


class TestStateObject:

    def test_state_is_unhashable(self):
        with pytest.raises(TypeError):
            hash(EconomyState())

    def test_equality_by_value(self):
        assert EconomyState() == EconomyState()
        assert played_state() != EconomyState()
