"""
Tests for the economy formulas: softcaps, discounts and prestige gain.
"""

from decimal import Decimal

import pytest

from scale_idle.formulas import (
    acceleration, compression_divisor, discounted_cost, dimension_multiplier, mass_multiplier,
    mass_velocity_multiplier, scale_point_multiplier, total_distance_multiplier, unit_collapse_gain,
    velocity_multiplier, next_compression_divisor,
)
from scale_idle.state import EconomyState


class TestVelocityMultiplier:
    """2x per level up to 5, then 1.5x per level."""

    def test_level_zero_is_identity(self):
        assert velocity_multiplier(0) == 1

    def test_softcap_boundary(self):
        assert velocity_multiplier(5) == Decimal(32)

    def test_first_softcapped_level(self):
        assert velocity_multiplier(6) == Decimal(48)

    def test_branches_agree_at_boundary(self):
        below = Decimal(2) ** 5
        above = Decimal(2) ** 5 * Decimal("1.5") ** 0
        assert velocity_multiplier(5) == below == above

    def test_strictly_increasing(self):
        values = [velocity_multiplier(level) for level in range(30)]
        assert all(b > a for a, b in zip(values, values[1:]))


class TestScalePointMultiplier:
    """1.5x per point up to 5, then 1.5^sqrt(excess)."""

    def test_boundary_value(self):
        assert scale_point_multiplier(Decimal(5)) == Decimal("7.59375")

    def test_sqrt_of_excess(self):
        # 6 SP -> sqrt(1) = 1 extra, 9 SP -> sqrt(4) = 2 extra
        assert scale_point_multiplier(Decimal(6)) == Decimal("11.390625")
        assert scale_point_multiplier(Decimal(9)) == Decimal("17.0859375")

    def test_continuous_just_past_boundary(self):
        at = scale_point_multiplier(Decimal(5))
        just_past = scale_point_multiplier(Decimal("5.000001"))
        assert just_past > at
        assert just_past - at < Decimal("0.01")

    def test_strictly_increasing(self):
        values = [scale_point_multiplier(Decimal(sp)) for sp in range(40)]
        assert all(b > a for a, b in zip(values, values[1:]))


class TestOtherTerms:

    def test_mass_velocity_is_uncapped(self):
        assert mass_velocity_multiplier(0) == 1
        assert mass_velocity_multiplier(4) == 81

    def test_dimension_base(self):
        assert dimension_multiplier(2) == 16
        assert dimension_multiplier(2, enhanced=True) == 36

    def test_total_multiplier_default_state(self):
        assert total_distance_multiplier(EconomyState()) == 1

    def test_total_multiplier_is_product(self):
        state = EconomyState()
        state.velocity_level = 6
        state.scale_points = Decimal(2)
        state.mass_velocity_level = 1
        state.dimension_level = 1
        assert total_distance_multiplier(state) == Decimal(48) * Decimal("2.25") * 3 * 4

    @pytest.mark.parametrize("field", ["velocity_level", "mass_velocity_level", "dimension_level"])
    def test_total_multiplier_increases_with_each_level(self, field):
        state = EconomyState()
        before = total_distance_multiplier(state)
        setattr(state, field, getattr(state, field) + 1)
        assert total_distance_multiplier(state) > before

    def test_mass_multiplier(self):
        state = EconomyState()
        assert mass_multiplier(state) == 1
        state.triple_mass_unlocked = True
        assert mass_multiplier(state) == 3
        state.dimension_level = 2
        assert mass_multiplier(state) == 48
        state.enhanced_dimensions_unlocked = True
        assert mass_multiplier(state) == 108


class TestAcceleration:

    def test_linear_region(self):
        assert acceleration(0) == 0
        assert acceleration(4) == 1
        assert acceleration(10) == Decimal("2.5")

    def test_softcapped_region(self):
        assert acceleration(11) == Decimal("2.6")
        assert acceleration(20) == Decimal("3.5")


class TestCompression:

    def test_divisor(self):
        assert compression_divisor(0) == 1
        assert compression_divisor(1) == 2
        assert compression_divisor(4) == 4
        assert compression_divisor(9) == 8

    def test_preview_uses_applied_formula(self):
        assert next_compression_divisor(3) == compression_divisor(4) == 4

    def test_discounted_cost(self):
        assert discounted_cost(Decimal(10), 0) == 10
        assert discounted_cost(Decimal(10), 4) == Decimal("2.5")


class TestUnitCollapseGain:

    def test_threshold_grants_one(self):
        assert unit_collapse_gain(Decimal("1e9")) == 1

    def test_next_order_grants_two(self):
        assert unit_collapse_gain(Decimal("1e10")) == 2

    def test_floor_truncates(self):
        assert unit_collapse_gain(Decimal("9.99e9")) == 1
        assert unit_collapse_gain(Decimal("5e11")) == 3

    def test_below_threshold_is_zero(self):
        assert unit_collapse_gain(Decimal("999999999")) == 0
        assert unit_collapse_gain(Decimal(0)) == 0
