"""Tests for the GDD / eGDD heat accumulation models.

Covers:
- classic base-10 degree days
- the eGDD correction factor and its continuity at 30 °C and 35 °C
- model dispatch and clamping
- cumulative series
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from vineyard_diary.gdd import (
    GDDMethod,
    HeatPoint,
    classic_base10,
    correction_factor,
    cumulative_series,
    daily_heat,
    effective,
)

# =============================================================================
# classic_base10
# =============================================================================


class TestClassicBase10:
    """Tests for the classic single-day computation."""

    def test_basic_warm_day(self):
        """(10 + 20) / 2 - 10 = 5."""
        assert classic_base10(tmin_c=10.0, tmax_c=20.0) == pytest.approx(5.0)

    def test_cold_day_zero(self):
        assert classic_base10(tmin_c=2.0, tmax_c=12.0) == 0.0

    def test_exact_base_zero(self):
        assert classic_base10(tmin_c=10.0, tmax_c=10.0) == 0.0

    def test_no_upper_cap(self):
        """Hot days are not capped: (25 + 45) / 2 - 10 = 25."""
        assert classic_base10(tmin_c=25.0, tmax_c=45.0) == pytest.approx(25.0)

    def test_never_negative(self):
        assert classic_base10(tmin_c=-20.0, tmax_c=-5.0) == 0.0


# =============================================================================
# correction_factor / effective
# =============================================================================


class TestCorrectionFactor:
    """Tests for the eGDD heat-stress multiplier."""

    @pytest.mark.parametrize("tmax", [-5.0, 10.0, 25.0, 30.0])
    def test_full_weight_up_to_30(self, tmax):
        assert correction_factor(tmax) == 1.0

    def test_linear_band(self):
        assert correction_factor(32.0) == pytest.approx(0.92)
        assert correction_factor(35.0) == pytest.approx(0.8)

    def test_quadratic_band(self):
        assert correction_factor(40.0) == pytest.approx(0.3)

    def test_clamped_at_zero(self):
        """Deep excursions above 35 °C cannot go negative."""
        assert correction_factor(45.0) == 0.0
        assert correction_factor(60.0) == 0.0

    @pytest.mark.parametrize("breakpoint", [30.0, 35.0])
    def test_continuous_at_breakpoints(self, breakpoint):
        eps = 1e-9
        below = correction_factor(breakpoint - eps)
        above = correction_factor(breakpoint + eps)
        assert above == pytest.approx(below, abs=1e-6)


class TestEffective:
    """Tests for the effective (eGDD) model."""

    def test_below_30_matches_classic(self):
        assert effective(tmin_c=12.0, tmax_c=28.0) == pytest.approx(classic_base10(12.0, 28.0))

    def test_linear_attenuation(self):
        """core = 11, m = 0.92 → 10.12."""
        assert effective(tmin_c=10.0, tmax_c=32.0) == pytest.approx(10.12)

    def test_quadratic_attenuation(self):
        """core = 20, m = 0.3 → 6.0."""
        assert effective(tmin_c=20.0, tmax_c=40.0) == pytest.approx(6.0)

    def test_extreme_heat_zero(self):
        assert effective(tmin_c=25.0, tmax_c=47.0) == 0.0

    @pytest.mark.parametrize("breakpoint", [30.0, 35.0])
    def test_continuous_in_tmax(self, breakpoint):
        eps = 1e-9
        below = effective(tmin_c=15.0, tmax_c=breakpoint - eps)
        above = effective(tmin_c=15.0, tmax_c=breakpoint + eps)
        assert above == pytest.approx(below, abs=1e-6)


# =============================================================================
# daily_heat
# =============================================================================


class TestDailyHeat:
    """Tests for model dispatch."""

    def test_dispatch_classic(self):
        assert daily_heat(10.0, 32.0, GDDMethod.CLASSIC_BASE10) == pytest.approx(11.0)

    def test_dispatch_effective(self):
        assert daily_heat(10.0, 32.0, GDDMethod.EFFECTIVE) == pytest.approx(10.12)

    def test_accepts_string_values(self):
        assert daily_heat(10.0, 20.0, GDDMethod("classic-base-10")) == pytest.approx(5.0)

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError, match="Unknown GDD method"):
            daily_heat(10.0, 20.0, "growing-season-index")  # type: ignore[arg-type]

    def test_both_models_non_negative(self):
        """Every tmin <= tmax pair yields a value >= 0 under both models."""
        for tmin in range(-15, 40, 5):
            for tmax in range(tmin, 55, 3):
                for method in GDDMethod:
                    assert daily_heat(float(tmin), float(tmax), method) >= 0.0


# =============================================================================
# cumulative_series
# =============================================================================


class TestCumulativeSeries:
    """Tests for the running sum."""

    def test_empty_input(self):
        assert cumulative_series([]) == []

    def test_first_point_equals_first_daily(self):
        daily = [HeatPoint(day=date(2024, 4, 1), value=3.5)]
        assert cumulative_series(daily) == [HeatPoint(day=date(2024, 4, 1), value=3.5)]

    def test_running_sum_law(self):
        start = date(2024, 4, 1)
        values = [5.0, 0.0, 2.5, 7.25, 0.0, 1.0]
        daily = [HeatPoint(day=start + timedelta(days=i), value=v) for i, v in enumerate(values)]

        result = cumulative_series(daily)

        assert [p.day for p in result] == [p.day for p in daily]
        for i, point in enumerate(result):
            assert point.value == pytest.approx(sum(values[: i + 1]))

    def test_zero_days_keep_total(self):
        daily = [
            HeatPoint(day=date(2024, 4, 1), value=4.0),
            HeatPoint(day=date(2024, 4, 2), value=0.0),
        ]
        result = cumulative_series(daily)
        assert result[1].value == pytest.approx(4.0)
