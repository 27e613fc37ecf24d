"""
Save/load for the economy.

A save is one JSON object keyed by the original camelCase field names, with
every Decimal stored as a string. The current on-disk encoding is base64 of
that JSON; plain JSON from older builds still loads. Loading projects the
time since `lastTime` forward in one step (offline progress).
"""

import base64
import binascii
import json
import logging
import math as ma
import os
import time

from .actions import refresh_gated_unlocks
from .bignum import ZERO, D, parse_decimal, format_distance, format_mass
from .config import SAVE_FILE, SAVE_VERSION, GAME_VERSION
from .formulas import total_distance_multiplier, mass_multiplier
from .state import EconomyState, clamp_tick_rate, clamp_auto_save_interval

class SaveFormatError(ValueError):
    """Base class for saves that cannot be loaded or imported."""

class SaveEncodingError(SaveFormatError):
    """Neither JSON nor base64-encoded JSON."""

class SaveStructureError(SaveFormatError):
    """Decoded fine, but not a save object or a field is unusable."""

# (blob key, EconomyState attribute, kind)
SAVE_FIELDS = [
    ('distance', 'distance', 'decimal'),
    ('distancePerSecond', 'distance_per_second', 'decimal'),
    ('scalePoints', 'scale_points', 'decimal'),
    ('scaleUpgradesUnlocked', 'scale_upgrades_unlocked', 'bool'),
    ('upgradeLevel', 'velocity_level', 'int'),
    ('upgradeCost', 'velocity_cost', 'decimal'),
    ('accelLevel', 'accel_level', 'int'),
    ('accelCost', 'accel_cost', 'decimal'),
    ('accelUnlocked', 'accel_unlocked', 'bool'),
    ('compressionLevel', 'compression_level', 'int'),
    ('compressionCost', 'compression_cost', 'decimal'),
    ('compressionUnlocked', 'compression_unlocked', 'bool'),
    ('mass', 'mass', 'decimal'),
    ('massPerSecond', 'mass_per_second', 'decimal'),
    ('massUnlocked', 'mass_unlocked', 'bool'),
    ('massVelocityLevel', 'mass_velocity_level', 'int'),
    ('massVelocityCost', 'mass_velocity_cost', 'decimal'),
    ('massGenerationUnlocked', 'mass_generation_unlocked', 'bool'),
    ('autoUpgradeUnlocked', 'auto_upgrade_unlocked', 'bool'),
    ('tripleMassUnlocked', 'triple_mass_unlocked', 'bool'),
    ('persistentMassUpgrades', 'persistent_mass_upgrades', 'bool'),
    ('dimensionCollapseUnlocked', 'dimension_collapse_unlocked', 'bool'),
    ('dimensionsTabUnlocked', 'dimensions_tab_unlocked', 'bool'),
    ('enhancedDimensionsUnlocked', 'enhanced_dimensions_unlocked', 'bool'),
    ('dimensionPoints', 'dimension_points', 'decimal'),
    ('dimensionLevel', 'dimension_level', 'int'),
    ('dimensionCost', 'dimension_cost', 'decimal'),
    ('tickRate', 'tick_rate', 'tick_rate'),
    ('autoSaveInterval', 'auto_save_interval', 'auto_save_interval'),
]

def current_time_ms(): return int(time.time() * 1000)

# --- Field Conversion ---
def _parse_int(value):
    if isinstance(value, bool): raise ValueError(f"expected level, got {value!r}")
    if isinstance(value, float) and value.is_integer(): value = int(value)
    if not isinstance(value, int): raise ValueError(f"expected level, got {value!r}")
    if value < 0: raise ValueError(f"negative level {value}")
    return value

def _parse_bool(value):
    if not isinstance(value, bool): raise ValueError(f"expected true/false, got {value!r}")
    return value

_PARSERS = {
    'decimal': parse_decimal,
    'int': _parse_int,
    'bool': _parse_bool,
    'tick_rate': clamp_tick_rate,
    'auto_save_interval': clamp_auto_save_interval,
}

def state_to_dict(state, now_ms=None):
    data = {}
    for key, attr, kind in SAVE_FIELDS:
        value = getattr(state, attr)
        data[key] = str(value) if kind == 'decimal' else value
    data.update({"saveVersion": SAVE_VERSION, "version": GAME_VERSION,
                 "lastTime": current_time_ms() if now_ms is None else now_ms})
    return data

def state_from_dict(data):
    if not isinstance(data, dict): raise SaveStructureError("save is not a JSON object")
    state = EconomyState()
    for key, attr, kind in SAVE_FIELDS:
        # Missing (or null, as older builds wrote) keeps the default
        if data.get(key) is None: continue
        try: setattr(state, attr, _PARSERS[kind](data[key]))
        except ValueError as e: raise SaveStructureError(f"field '{key}': {e}") from e
    refresh_gated_unlocks(state)
    return state

# --- Blob Encoding ---
def encode_save(data):
    json_string = json.dumps(data, separators=(',', ':'))
    return base64.b64encode(json_string.encode('utf-8')).decode('utf-8')

def decode_save(text):
    text = (text or '').strip()
    if not text: raise SaveEncodingError("empty save")
    try: data = json.loads(text)
    except json.JSONDecodeError:
        try:
            json_string = base64.b64decode(text.encode('ascii'), validate=True).decode('utf-8')
            data = json.loads(json_string)
        except (json.JSONDecodeError, binascii.Error, UnicodeError) as decode_e:
            raise SaveEncodingError("invalid JSON (and not valid base64 JSON)") from decode_e
    if not isinstance(data, dict): raise SaveStructureError("save is not a JSON object")
    return data

# --- Offline Progress ---
def apply_offline_progress(state, elapsed_seconds):
    elapsed = max(ZERO, D(elapsed_seconds))
    distance_gain = state.distance_per_second * total_distance_multiplier(state) * elapsed
    state.distance += distance_gain
    mass_gain = ZERO
    if state.mass_unlocked:
        mass_gain = state.mass_per_second * mass_multiplier(state) * elapsed
        state.mass += mass_gain
    return distance_gain, mass_gain

def last_save_time(data):
    """The blob's lastTime in ms, or None when absent. Raises SaveStructureError when unusable."""
    last_time = data.get("lastTime")
    if last_time is None: return None
    # json.loads accepts NaN and Infinity
    if isinstance(last_time, bool) or not isinstance(last_time, (int, float)) or not ma.isfinite(last_time):
        raise SaveStructureError(f"field 'lastTime': expected a timestamp, got {last_time!r}")
    return last_time

def offline_seconds(data, now_ms):
    last_time = last_save_time(data)
    if last_time is None: return ZERO
    return max(ZERO, (D(now_ms) - D(last_time)) / 1000)

# --- Save Storage ---
class SaveStore:
    """Single-slot save file holding the encoded blob."""

    def __init__(self, path=SAVE_FILE):
        self.path = path

    def exists(self): return os.path.exists(self.path)

    def read(self):
        if not self.exists(): return None
        with open(self.path, "r", encoding='utf-8') as f: return f.read()

    def write(self, blob):
        with open(self.path, "w", encoding='utf-8') as f: f.write(blob)

    def clear(self):
        if self.exists(): os.remove(self.path)

# --- Save/Load ---
def save_game(state, store, now_ms=None):
    blob = encode_save(state_to_dict(state, now_ms))
    store.write(blob)
    return blob

def load_game(store, now_ms=None):
    """Returns (state, offline seconds) or None when there is no save. Raises SaveFormatError."""
    blob = store.read()
    if not blob or not blob.strip():
        logging.info("No save file found. Starting new game.")
        return None
    data = decode_save(blob)
    state = state_from_dict(data)
    elapsed = offline_seconds(data, current_time_ms() if now_ms is None else now_ms)
    if elapsed > 0:
        distance_gain, mass_gain = apply_offline_progress(state, elapsed)
        if state.mass_unlocked:
            logging.info(f"Offline for {int(elapsed)}s - gained {format_distance(distance_gain)} and {format_mass(mass_gain)}")
        else:
            logging.info(f"Offline for {int(elapsed)}s - gained {format_distance(distance_gain)}")
    return state, elapsed

def import_save(store, text):
    """Validates a pasted save (raw JSON or base64 JSON) and stores it re-encoded. Store untouched on error."""
    data = decode_save(text)
    state_from_dict(data)
    last_save_time(data)
    store.write(encode_save(data))
    return data
