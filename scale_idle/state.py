import math as ma

from .bignum import ZERO, ONE
from .config import (
    VELOCITY_BASE_COST, ACCEL_BASE_COST, COMPRESSION_BASE_COST, MASS_VELOCITY_BASE_COST,
    DIMENSION_BASE_COST, DEFAULT_TICK_RATE, MIN_TICK_RATE, MAX_TICK_RATE,
    DEFAULT_AUTOSAVE_INTERVAL_S, MIN_AUTOSAVE_INTERVAL_S, MAX_AUTOSAVE_INTERVAL_S,
)

# --- Economy State Object ---
class EconomyState:
    def __init__(self):
        # Distance
        self.distance = ZERO; self.distance_per_second = ONE
        self.scale_points = ZERO; self.scale_upgrades_unlocked = False
        # Mass
        self.mass = ZERO; self.mass_per_second = ZERO; self.mass_unlocked = False
        # Distance Upgrades
        self.velocity_level = 0; self.velocity_cost = VELOCITY_BASE_COST
        self.accel_level = 0; self.accel_cost = ACCEL_BASE_COST; self.accel_unlocked = False
        self.compression_level = 0; self.compression_cost = COMPRESSION_BASE_COST; self.compression_unlocked = False
        # Mass Upgrades
        self.mass_velocity_level = 0; self.mass_velocity_cost = MASS_VELOCITY_BASE_COST
        # Scale Upgrades
        self.mass_generation_unlocked = False; self.auto_upgrade_unlocked = False
        self.triple_mass_unlocked = False; self.persistent_mass_upgrades = False
        # Dimensions
        self.dimension_collapse_unlocked = False; self.dimensions_tab_unlocked = False
        self.enhanced_dimensions_unlocked = False
        self.dimension_points = ZERO; self.dimension_level = 0; self.dimension_cost = DIMENSION_BASE_COST
        # Settings
        self.tick_rate = DEFAULT_TICK_RATE; self.auto_save_interval = DEFAULT_AUTOSAVE_INTERVAL_S

    def fields(self):
        return {k: v for k, v in vars(self).items() if not k.startswith('_')}

    def __eq__(self, other):
        if not isinstance(other, EconomyState): return NotImplemented
        return self.fields() == other.fields()

    # Mutable; compared by value, never used as a key
    __hash__ = None

    def __repr__(self):
        return f"EconomyState(distance={self.distance}, scale_points={self.scale_points}, dimension_points={self.dimension_points})"

# --- Settings Clamps ---
def _clamp_int(value, low, high, default):
    try: number = float(value)
    except (TypeError, ValueError): return default
    if not ma.isfinite(number) or number == 0: return default
    return max(low, min(high, ma.floor(number)))

def clamp_tick_rate(value):
    return _clamp_int(value, MIN_TICK_RATE, MAX_TICK_RATE, DEFAULT_TICK_RATE)

def clamp_auto_save_interval(value):
    return _clamp_int(value, MIN_AUTOSAVE_INTERVAL_S, MAX_AUTOSAVE_INTERVAL_S, DEFAULT_AUTOSAVE_INTERVAL_S)
