import logging
from decimal import Decimal
from fractions import Fraction

from .actions import buy_velocity, buy_acceleration, buy_compression, buy_mass_velocity
from .config import MAX_CATCHUP_STEPS
from .formulas import acceleration, total_distance_multiplier, mass_multiplier

# --- Game Tick ---
def step(state, dt):
    state.distance_per_second += acceleration(state.accel_level) * dt
    state.distance += state.distance_per_second * total_distance_multiplier(state) * dt
    if state.mass_unlocked:
        state.mass += state.mass_per_second * mass_multiplier(state) * dt
    if state.auto_upgrade_unlocked: autobuy_tick(state)

# --- Autobuyer Logic ---
def autobuy_tick(state):
    bought = []
    if buy_velocity(state): bought.append('velocity')
    if state.accel_unlocked and buy_acceleration(state): bought.append('acceleration')
    if state.compression_unlocked and buy_compression(state): bought.append('compression')
    if state.mass_unlocked and buy_mass_velocity(state): bought.append('mass_velocity')
    return bought

# --- Fixed Timestep Loop ---
class TickSimulator:
    """Turns host wall-clock deltas into whole fixed-size ticks."""

    def __init__(self, max_steps=MAX_CATCHUP_STEPS):
        self.max_steps = max_steps
        self.accumulator = Fraction(0)
        self.dropped_seconds = 0.0

    def advance(self, state, elapsed):
        if elapsed > 0: self.accumulator += Fraction(elapsed)
        tick_dt = Fraction(1, state.tick_rate)
        dt = Decimal(tick_dt.numerator) / Decimal(tick_dt.denominator)
        steps = 0
        while self.accumulator >= tick_dt and steps < self.max_steps:
            step(state, dt)
            self.accumulator -= tick_dt
            steps += 1
        if steps >= self.max_steps:
            # Drop the backlog instead of spiralling after a long stall
            if self.accumulator > 0:
                self.dropped_seconds += float(self.accumulator)
                logging.warning(f"Tick catch-up capped at {self.max_steps} steps; dropped {float(self.accumulator):.2f}s.")
            self.accumulator = Fraction(0)
        return steps

    def reset(self):
        self.accumulator = Fraction(0)
