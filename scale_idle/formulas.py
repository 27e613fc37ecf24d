"""
Pure economy formulas: multipliers, softcaps, cost discounts and prestige gain.

Nothing here mutates state. Every function returns a Decimal and is safe to
call from the query surface as often as the UI likes.
"""

from decimal import Decimal

from .bignum import D, ZERO, ONE, floor, power, sqrt
from .config import (
    VELOCITY_SOFTCAP_LEVEL, SCALE_POINT_SOFTCAP, ACCEL_SOFTCAP_LEVEL,
    DIMENSION_BASE, ENHANCED_DIMENSION_BASE, UNIT_COLLAPSE_THRESHOLD,
)

TWO = Decimal(2)
THREE = Decimal(3)
ONE_HALF_UP = Decimal("1.5")
ACCEL_PER_LEVEL = Decimal("0.25")
ACCEL_PER_SOFTCAPPED_LEVEL = Decimal("0.1")
TRIPLE_MASS_FACTOR = Decimal(3)

# --- Distance Multiplier Terms ---
def velocity_multiplier(level):
    # 2x per level, 1.5x per level past the softcap
    if level <= VELOCITY_SOFTCAP_LEVEL: return power(TWO, level)
    return power(TWO, VELOCITY_SOFTCAP_LEVEL) * power(ONE_HALF_UP, level - VELOCITY_SOFTCAP_LEVEL)

def scale_point_multiplier(scale_points):
    scale_points = D(scale_points)
    if scale_points <= SCALE_POINT_SOFTCAP: return power(ONE_HALF_UP, scale_points)
    # Past the softcap only sqrt of the excess counts
    excess = scale_points - SCALE_POINT_SOFTCAP
    return power(ONE_HALF_UP, SCALE_POINT_SOFTCAP) * power(ONE_HALF_UP, sqrt(excess))

def mass_velocity_multiplier(level):
    return power(THREE, level)

def dimension_multiplier(level, enhanced=False):
    base = ENHANCED_DIMENSION_BASE if enhanced else DIMENSION_BASE
    return power(base, level)

def total_distance_multiplier(state):
    mult = ONE
    mult *= velocity_multiplier(state.velocity_level)
    mult *= scale_point_multiplier(state.scale_points)
    mult *= mass_velocity_multiplier(state.mass_velocity_level) # uncapped, applied after the softcapped terms
    mult *= dimension_multiplier(state.dimension_level, state.enhanced_dimensions_unlocked)
    return mult

# --- Acceleration ---
def acceleration(level):
    if level <= 0: return ZERO
    if level <= ACCEL_SOFTCAP_LEVEL: return ACCEL_PER_LEVEL * level
    base_accel = ACCEL_PER_LEVEL * ACCEL_SOFTCAP_LEVEL
    return base_accel + ACCEL_PER_SOFTCAPPED_LEVEL * (level - ACCEL_SOFTCAP_LEVEL)

# --- Compression ---
def compression_divisor(level):
    # 2^sqrt(level): /2 at 1, /4 at 4, /8 at 9, /16 at 16
    if level <= 0: return ONE
    return power(TWO, sqrt(level))

def discounted_cost(base_cost, compression_level):
    return D(base_cost) / compression_divisor(compression_level)

# --- Mass ---
def mass_multiplier(state):
    mult = TRIPLE_MASS_FACTOR if state.triple_mass_unlocked else ONE
    return mult * dimension_multiplier(state.dimension_level, state.enhanced_dimensions_unlocked)

# --- Rates ---
def distance_rate(state):
    return state.distance_per_second * total_distance_multiplier(state)

def mass_rate(state):
    if not state.mass_unlocked: return ZERO
    return state.mass_per_second * mass_multiplier(state)

# --- Prestige ---
def unit_collapse_gain(distance):
    distance = D(distance)
    if distance < UNIT_COLLAPSE_THRESHOLD: return ZERO
    # 1e9 -> 1, 1e10 -> 2, 1e11 -> 3
    return max(ZERO, floor(distance.log10() - 8))

# --- Previews ---
def next_velocity_multiplier(level): return velocity_multiplier(level + 1)

def next_acceleration(level): return acceleration(level + 1)

def next_compression_divisor(level): return compression_divisor(level + 1)
