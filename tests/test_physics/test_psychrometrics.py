"""Tests for closed-form psychrometric relations."""

from __future__ import annotations

import math

import numpy as np
import pytest

from psychrocalc.core.errors import NumericDomainError
from psychrocalc.physics.constants import ANTOINE_C, STANDARD_PRESSURE
from psychrocalc.physics.psychrometrics import (
    barometric_pressure,
    dew_point,
    enthalpy,
    humidity_ratio_from_dew_point,
    humidity_ratio_from_relative_humidity,
    humidity_ratio_from_wet_bulb,
    relative_humidity,
    relative_humidity_from_dew_point,
    saturated_vapor_pressure,
    saturation_humidity_ratio,
    specific_volume,
    vapor_pressure,
)


class TestSaturatedVaporPressure:
    """Tests for the Antoine saturation pressure correlation."""

    def test_boiling_point(self) -> None:
        """Saturation pressure at 100°C is about one atmosphere."""
        assert abs(saturated_vapor_pressure(100.0) - STANDARD_PRESSURE) < 0.1

    def test_twenty_celsius(self) -> None:
        """Saturation pressure at 20°C is about 2.33 kPa."""
        assert abs(saturated_vapor_pressure(20.0) - 2.33) < 0.01

    def test_increases_with_temperature(self) -> None:
        """Saturation pressure is strictly increasing."""
        temps = np.linspace(-40.0, 100.0, 50)
        pressures = [saturated_vapor_pressure(t) for t in temps]
        assert all(b > a for a, b in zip(pressures, pressures[1:], strict=False))

    def test_extrapolates_below_fit_range(self) -> None:
        """Temperatures below the fitted range still give a positive value."""
        p = saturated_vapor_pressure(-20.0)
        assert 0 < p < saturated_vapor_pressure(0.0)

    @pytest.mark.parametrize("t", [-ANTOINE_C, -233.5])
    def test_pole_raises_domain_error(self, t: float) -> None:
        """Temperatures at the pole raise instead of overflowing."""
        with pytest.raises(NumericDomainError, match="pole"):
            saturated_vapor_pressure(t)


class TestBarometricPressure:
    """Tests for standard atmosphere pressure."""

    def test_sea_level(self) -> None:
        """Pressure at sea level is exactly standard pressure."""
        assert barometric_pressure(0.0) == STANDARD_PRESSURE

    def test_typical_altitude(self) -> None:
        """Pressure at 1500 m is about 84.6 kPa."""
        assert 84.5 < barometric_pressure(1500.0) < 84.7

    def test_decreases_with_altitude(self) -> None:
        """Pressure falls as altitude rises."""
        altitudes = np.linspace(-500.0, 20000.0, 42)
        pressures = [barometric_pressure(h) for h in altitudes]
        assert all(b < a for a, b in zip(pressures, pressures[1:], strict=False))

    def test_below_sea_level(self) -> None:
        """Negative altitudes give pressure above standard."""
        assert barometric_pressure(-500.0) > STANDARD_PRESSURE

    def test_edge_of_model(self) -> None:
        """At 20 000 m the model still returns a small positive pressure."""
        p = barometric_pressure(20000.0)
        assert 0 < p < 10

    def test_above_model_raises(self) -> None:
        """Altitudes above the model top are outside the numeric domain."""
        with pytest.raises(NumericDomainError, match="standard atmosphere"):
            barometric_pressure(50000.0)


class TestHumidityRatio:
    """Tests for humidity ratio relations."""

    def test_zero_humidity(self) -> None:
        """Humidity ratio at 0% RH is 0."""
        assert humidity_ratio_from_relative_humidity(20.0, 0.0) == 0.0

    def test_typical_conditions(self) -> None:
        """Humidity ratio at 20°C, 50% RH is about 0.0072."""
        w = humidity_ratio_from_relative_humidity(20.0, 50.0)
        assert 0.0071 < w < 0.0074

    def test_saturated_equals_dew_point_form(self) -> None:
        """At 100% RH the ratio equals the dew point form at that temperature."""
        w_rh = humidity_ratio_from_relative_humidity(25.0, 100.0)
        w_dp = humidity_ratio_from_dew_point(25.0)
        assert w_rh == pytest.approx(w_dp)
        assert w_dp == pytest.approx(saturation_humidity_ratio(25.0))

    def test_higher_altitude_holds_more_water(self) -> None:
        """Same RH at lower pressure gives a larger humidity ratio."""
        sea = humidity_ratio_from_relative_humidity(25.0, 50.0, 101.325)
        high = humidity_ratio_from_relative_humidity(25.0, 50.0, 80.0)
        assert high > sea

    def test_wet_bulb_equal_to_dry_bulb_is_saturated(self) -> None:
        """Zero wet-bulb depression gives the saturation humidity ratio."""
        w = humidity_ratio_from_wet_bulb(25.0, 25.0)
        assert w == pytest.approx(saturation_humidity_ratio(25.0))

    def test_wet_bulb_depression_reduces_ratio(self) -> None:
        """Larger depressions give drier air."""
        w_small = humidity_ratio_from_wet_bulb(25.0, 22.0)
        w_large = humidity_ratio_from_wet_bulb(25.0, 15.0)
        assert w_large < w_small

    def test_wet_bulb_not_floored(self) -> None:
        """Extreme depressions produce a negative ratio before flooring."""
        assert humidity_ratio_from_wet_bulb(40.0, 0.0) < 0

    def test_vapor_pressure_at_total_pressure_raises(self) -> None:
        """Saturation pressure above total pressure is a domain error."""
        with pytest.raises(NumericDomainError):
            humidity_ratio_from_relative_humidity(60.0, 100.0, 15.0)

    def test_boiling_wet_bulb_raises(self) -> None:
        """Wet-bulb at boiling point is a domain error at sea level."""
        with pytest.raises(NumericDomainError):
            humidity_ratio_from_wet_bulb(110.0, 100.5)


class TestRelativeHumidity:
    """Tests for relative humidity relations."""

    def test_round_trip(self) -> None:
        """RH -> W -> RH recovers the input."""
        w = humidity_ratio_from_relative_humidity(25.0, 60.0)
        assert relative_humidity(25.0, w) == pytest.approx(60.0)

    def test_clamped_above(self) -> None:
        """Supersaturated ratios clamp to 100%."""
        w = humidity_ratio_from_relative_humidity(25.0, 100.0) * 1.5
        assert relative_humidity(25.0, w) == 100.0

    def test_clamped_below(self) -> None:
        """Negative ratios clamp to 0%."""
        assert relative_humidity(25.0, -0.001) == 0.0

    def test_nan_not_clamped(self) -> None:
        """NaN ratios give NaN instead of a clamped value."""
        assert math.isnan(relative_humidity(25.0, math.nan))

    def test_from_dew_point(self) -> None:
        """Dew point equal to dry bulb means saturation."""
        assert relative_humidity_from_dew_point(22.0, 22.0) == pytest.approx(100.0)

    def test_from_dew_point_clamped(self) -> None:
        """Dew point above dry bulb clamps to 100%."""
        assert relative_humidity_from_dew_point(20.0, 25.0) == 100.0

    def test_from_dew_point_typical(self) -> None:
        """22°C with 15°C dew point is about 65% RH."""
        assert 60.0 < relative_humidity_from_dew_point(22.0, 15.0) < 70.0


class TestDewPoint:
    """Tests for dew point calculation."""

    @pytest.mark.parametrize("t_dp", [-10.0, 0.0, 10.0, 15.0, 25.0, 40.0])
    def test_inverts_dew_point_ratio(self, t_dp: float) -> None:
        """Dew point of the ratio at a dew point returns that dew point."""
        w = humidity_ratio_from_dew_point(t_dp)
        assert dew_point(w) == pytest.approx(t_dp, abs=1e-9)

    def test_at_altitude(self) -> None:
        """Inversion holds at reduced pressure."""
        p = barometric_pressure(2000.0)
        w = humidity_ratio_from_dew_point(12.0, p)
        assert dew_point(w, p) == pytest.approx(12.0, abs=1e-9)

    def test_dry_air(self) -> None:
        """Dry air maps to the correlation limit."""
        assert dew_point(0.0) == -ANTOINE_C

    def test_negative_ratio_raises(self) -> None:
        """Negative vapor pressure is outside the domain."""
        with pytest.raises(NumericDomainError, match="negative vapor pressure"):
            dew_point(-0.001)


class TestEnthalpy:
    """Tests for moist air enthalpy."""

    def test_dry_air_at_zero(self) -> None:
        """Dry air at 0°C has zero enthalpy."""
        assert enthalpy(0.0, 0.0) == 0.0

    def test_typical(self) -> None:
        """20°C with W=0.0074 is about 38.9 kJ/kg."""
        assert enthalpy(20.0, 0.0074) == pytest.approx(38.9, abs=0.05)

    def test_increases_with_moisture(self) -> None:
        """More water vapor means more enthalpy."""
        assert enthalpy(25.0, 0.015) > enthalpy(25.0, 0.005)


class TestSpecificVolume:
    """Tests for moist air specific volume."""

    def test_dry_air(self) -> None:
        """Dry air at 20°C is about 0.83 m3/kg."""
        assert specific_volume(20.0, 0.0) == pytest.approx(0.8305, abs=0.001)

    def test_increases_with_altitude(self) -> None:
        """Lower pressure means larger volume."""
        sea = specific_volume(20.0, 0.01, 101.325)
        high = specific_volume(20.0, 0.01, barometric_pressure(2000.0))
        assert high > sea


class TestVaporPressure:
    """Tests for vapor partial pressure."""

    def test_zero(self) -> None:
        """Dry air has zero vapor pressure."""
        assert vapor_pressure(0.0) == 0.0

    def test_consistent_with_rh(self) -> None:
        """Vapor pressure of 50% RH air is half the saturation pressure."""
        w = humidity_ratio_from_relative_humidity(30.0, 50.0)
        p_w = vapor_pressure(w)
        assert p_w == pytest.approx(0.5 * saturated_vapor_pressure(30.0))
        assert math.isclose(p_w / saturated_vapor_pressure(30.0), 0.5)
