import logging

from .bignum import ONE
from .config import (
    VELOCITY_COST_FACTOR, ACCEL_COST_FACTOR, COMPRESSION_COST_FACTOR, MASS_VELOCITY_COST_FACTOR,
    DIMENSION_COST_INCREMENT, ACCEL_UNLOCK_VELOCITY_LEVEL, COMPRESSION_UNLOCK_ACCEL_LEVEL,
    MASS_GENERATION_COST_SP, AUTO_UPGRADE_COST_SP, TRIPLE_MASS_COST_SP, PERSISTENT_MASS_COST_SP,
    DIMENSION_COLLAPSE_COST_SP, ENHANCED_DIMENSIONS_COST_MASS, BASE_MASS_PER_SECOND,
    UNIT_COLLAPSE_THRESHOLD, DIMENSION_COLLAPSE_THRESHOLD,
)
from .formulas import (
    acceleration, compression_divisor, discounted_cost, distance_rate, mass_multiplier, mass_rate,
    next_acceleration, next_compression_divisor, next_velocity_multiplier, total_distance_multiplier,
    unit_collapse_gain, velocity_multiplier,
)
from .state import EconomyState

# --- Derived Unlocks ---
def refresh_gated_unlocks(state):
    if state.velocity_level >= ACCEL_UNLOCK_VELOCITY_LEVEL: state.accel_unlocked = True
    if state.accel_level >= COMPRESSION_UNLOCK_ACCEL_LEVEL: state.compression_unlocked = True

# --- Upgrade Functions ---
def velocity_price(state): return discounted_cost(state.velocity_cost, state.compression_level)

def accel_price(state): return discounted_cost(state.accel_cost, state.compression_level)

def buy_velocity(state):
    cst = velocity_price(state)
    if state.distance < cst: return False
    state.distance -= cst; state.velocity_level += 1
    state.velocity_cost *= VELOCITY_COST_FACTOR
    refresh_gated_unlocks(state)
    return True

def buy_acceleration(state):
    if not state.accel_unlocked: return False
    cst = accel_price(state)
    if state.distance < cst: return False
    state.distance -= cst; state.accel_level += 1
    state.accel_cost *= ACCEL_COST_FACTOR
    refresh_gated_unlocks(state)
    return True

def buy_compression(state):
    # Compression pays full price; it only discounts velocity and acceleration
    if not state.compression_unlocked: return False
    cst = state.compression_cost
    if state.distance < cst: return False
    state.distance -= cst; state.compression_level += 1
    state.compression_cost *= COMPRESSION_COST_FACTOR
    return True

def buy_mass_velocity(state):
    if not state.mass_unlocked: return False
    cst = state.mass_velocity_cost
    if state.mass < cst: return False
    state.mass -= cst; state.mass_velocity_level += 1
    state.mass_velocity_cost *= MASS_VELOCITY_COST_FACTOR
    return True

def buy_dimension(state):
    cst = state.dimension_cost
    if state.dimension_points < cst: return False
    state.dimension_points -= cst; state.dimension_level += 1
    state.dimension_cost += DIMENSION_COST_INCREMENT
    logging.info(f"Dimension bought! Level {state.dimension_level}. Next cost: {state.dimension_cost} DP")
    return True

# --- Scale Upgrades ---
def _spend_scale_points(state, cost, flag, requires=()):
    if getattr(state, flag) or state.scale_points < cost: return False
    if not all(getattr(state, r) for r in requires): return False
    state.scale_points -= cost; setattr(state, flag, True)
    logging.info(f"Unlocked {flag} for {cost} SP.")
    return True

def unlock_mass_generation(state):
    if not _spend_scale_points(state, MASS_GENERATION_COST_SP, 'mass_generation_unlocked'): return False
    state.mass_unlocked = True; state.mass_per_second = BASE_MASS_PER_SECOND
    return True

def unlock_auto_upgrade(state):
    return _spend_scale_points(state, AUTO_UPGRADE_COST_SP, 'auto_upgrade_unlocked', ('mass_generation_unlocked',))

def unlock_triple_mass(state):
    return _spend_scale_points(state, TRIPLE_MASS_COST_SP, 'triple_mass_unlocked', ('mass_generation_unlocked',))

def unlock_persistent_mass(state):
    return _spend_scale_points(state, PERSISTENT_MASS_COST_SP, 'persistent_mass_upgrades', ('mass_generation_unlocked',))

def unlock_dimension_collapse(state):
    return _spend_scale_points(state, DIMENSION_COLLAPSE_COST_SP, 'dimension_collapse_unlocked')

def unlock_enhanced_dimensions(state):
    if state.enhanced_dimensions_unlocked or not state.dimensions_tab_unlocked: return False
    if state.mass < ENHANCED_DIMENSIONS_COST_MASS: return False
    state.mass -= ENHANCED_DIMENSIONS_COST_MASS; state.enhanced_dimensions_unlocked = True
    logging.info("Enhanced Dimensions unlocked! Dimension base 4x -> 6x.")
    return True

# --- Reset Functions ---
# Each tier lists exactly what it wipes; anything not listed survives.
UNIT_COLLAPSE_RESETS = (
    'distance', 'distance_per_second',
    'velocity_level', 'velocity_cost',
    'accel_level', 'accel_cost', 'accel_unlocked',
    'compression_level', 'compression_cost', 'compression_unlocked',
    'mass',
)
MASS_UPGRADE_RESETS = ('mass_velocity_level', 'mass_velocity_cost')
DIMENSION_COLLAPSE_RESETS = (
    'scale_points',
    'mass_generation_unlocked', 'auto_upgrade_unlocked', 'triple_mass_unlocked', 'persistent_mass_upgrades',
    'mass_per_second', 'mass_unlocked',
)

def _restore_defaults(state, fields):
    defaults = EconomyState()
    for name in fields: setattr(state, name, getattr(defaults, name))

def reset_for_unit_collapse(state):
    _restore_defaults(state, UNIT_COLLAPSE_RESETS)
    if not state.persistent_mass_upgrades: _restore_defaults(state, MASS_UPGRADE_RESETS)

def reset_for_dimension_collapse(state):
    logging.info("Resetting for Dimension Collapse...")
    reset_for_unit_collapse(state)
    # Mass is re-locked, so its upgrades go regardless of persistence
    _restore_defaults(state, MASS_UPGRADE_RESETS)
    _restore_defaults(state, DIMENSION_COLLAPSE_RESETS)

# --- Prestige Functions ---
def can_unit_collapse(state): return state.distance >= UNIT_COLLAPSE_THRESHOLD

def can_dimension_collapse(state):
    return state.dimension_collapse_unlocked and state.distance >= DIMENSION_COLLAPSE_THRESHOLD

def unit_collapse(state):
    if not can_unit_collapse(state): return False
    gain = unit_collapse_gain(state.distance)
    state.scale_points += gain
    if not state.scale_upgrades_unlocked:
        state.scale_upgrades_unlocked = True; logging.info("First Unit Collapse! Scale Upgrades unlocked.")
    reset_for_unit_collapse(state)
    logging.info(f"Unit Collapse! Gained {gain} SP. Total: {state.scale_points} SP.")
    return True

def dimension_collapse(state):
    if not can_dimension_collapse(state): return False
    state.dimension_points += ONE
    if not state.dimensions_tab_unlocked:
        state.dimensions_tab_unlocked = True; logging.info("First Dimension Collapse! Dimensions unlocked.")
    reset_for_dimension_collapse(state)
    logging.info(f"Dimension Collapse! Total: {state.dimension_points} DP.")
    return True

ACTIONS = {
    'buy_velocity': buy_velocity,
    'buy_acceleration': buy_acceleration,
    'buy_compression': buy_compression,
    'buy_mass_velocity': buy_mass_velocity,
    'unlock_mass_generation': unlock_mass_generation,
    'unlock_auto_upgrade': unlock_auto_upgrade,
    'unlock_triple_mass': unlock_triple_mass,
    'unlock_persistent_mass': unlock_persistent_mass,
    'unlock_dimension_collapse': unlock_dimension_collapse,
    'unlock_enhanced_dimensions': unlock_enhanced_dimensions,
    'buy_dimension': buy_dimension,
    'unit_collapse': unit_collapse,
    'dimension_collapse': dimension_collapse,
}

# --- Query Surface ---
def snapshot(state):
    snap = state.fields()
    v_price, a_price = velocity_price(state), accel_price(state)
    snap.update({
        'total_multiplier': total_distance_multiplier(state),
        'distance_rate': distance_rate(state),
        'mass_multiplier': mass_multiplier(state),
        'mass_rate': mass_rate(state),
        'acceleration': acceleration(state.accel_level),
        'next_acceleration': next_acceleration(state.accel_level),
        'velocity_multiplier': velocity_multiplier(state.velocity_level),
        'next_velocity_multiplier': next_velocity_multiplier(state.velocity_level),
        'compression_divisor': compression_divisor(state.compression_level),
        'next_compression_divisor': next_compression_divisor(state.compression_level),
        'velocity_price': v_price,
        'accel_price': a_price,
        'can_afford_velocity': state.distance >= v_price,
        'can_afford_acceleration': state.accel_unlocked and state.distance >= a_price,
        'can_afford_compression': state.compression_unlocked and state.distance >= state.compression_cost,
        'can_afford_mass_velocity': state.mass_unlocked and state.mass >= state.mass_velocity_cost,
        'can_afford_dimension': state.dimension_points >= state.dimension_cost,
        'can_prestige': can_unit_collapse(state),
        'prestige_gain': unit_collapse_gain(state.distance),
        'can_dimension_collapse': can_dimension_collapse(state),
    })
    return snap
