"""Tests for the convective-diagnostics summary built on the parcel trajectory."""

import logging

import pytest

from analysis_engine import DEEP_CONVECTION_DEPTH_M, ParcelAnalysis, analyze_parcel
from sounding import Sounding, SurfaceParcel


class TestConvectiveMode:

    def test_dry_thermals(self, stable_sounding, surface):
        result = analyze_parcel(stable_sounding, surface)
        assert result.convective
        assert result.convective_mode == "Dry Thermals"
        assert result.cloud_base_m is None
        assert result.cloud_top_m is None
        assert any("before reaching saturation" in n for n in result.notes)

    def test_cumulus(self, shallow_sounding, surface):
        result = analyze_parcel(shallow_sounding, surface)
        assert result.convective_mode == "Cumulus"
        assert 1000.0 < result.cloud_depth_m < DEEP_CONVECTION_DEPTH_M

    def test_deep_convection_with_equilibrium(self, capped_sounding, surface):
        result = analyze_parcel(capped_sounding, surface)
        assert result.convective_mode == "Deep Convection"
        assert not result.open_top
        assert result.cloud_depth_m >= DEEP_CONVECTION_DEPTH_M

    def test_open_top_is_deep(self, open_top_sounding, surface):
        result = analyze_parcel(open_top_sounding, surface)
        assert result.open_top
        assert result.convective_mode == "Deep Convection"
        assert result.cloud_top_hpa == open_top_sounding.top_pressure
        assert result.cloud_top_m == pytest.approx(open_top_sounding.top_height)
        assert any("lower bound" in n for n in result.notes)

    def test_no_convection(self, superadiabatic_sounding, surface):
        result = analyze_parcel(superadiabatic_sounding, surface)
        assert not result.convective
        assert result.convective_mode == "No Convection"
        assert result.trajectory is None
        assert result.notes
        assert not result.fail_modes


class TestDerivedLevels:

    def test_cloud_base_matches_trajectory(self, capped_sounding, surface):
        result = analyze_parcel(capped_sounding, surface)
        traj = result.trajectory

        assert result.cloud_base_m == traj.cloud_base.height
        assert result.cloud_base_hpa == traj.p_thermal_top
        assert result.thermal_top_m == result.cloud_base_m
        assert result.cloud_base_t_c == pytest.approx(traj.cloud_base.value - 273.15, abs=0.01)
        assert result.cloud_top_hpa == traj.p_cloud_top
        assert result.cloud_top_m == pytest.approx(traj.equilibrium.height)

    def test_thermal_strength(self, stable_sounding, surface):
        """Surface parcel 2 K warmer than the environment at 1000 hPa."""
        result = analyze_parcel(stable_sounding, surface)
        assert result.thermal_strength_k == pytest.approx(2.0, abs=0.01)

    def test_thermal_strength_unavailable_below_sounding(self, stable_sounding):
        """Surface at 1010 hPa sits below the lowest 1000 hPa level."""
        result = analyze_parcel(stable_sounding, SurfaceParcel(t_k=295.15, p_hpa=1010.0, td_k=283.15))
        assert result.convective
        assert result.thermal_strength_k is None
        assert any("Thermal strength unavailable" in n for n in result.notes)


class TestFailureHandling:

    def test_malformed_sounding_recorded(self, surface, caplog):
        bad = Sounding(level=[1000.0, 850.0, 900.0], gh=[0.0, 1500.0, 1000.0], temp=[290.0, 280.0, 285.0])
        with caplog.at_level(logging.WARNING, logger="analysis_engine"):
            result = analyze_parcel(bad, surface)

        assert isinstance(result, ParcelAnalysis)
        assert not result.convective
        assert result.fail_modes
        assert "Parcel trajectory failed" in caplog.text

    def test_invalid_steps_recorded(self, stable_sounding, surface):
        result = analyze_parcel(stable_sounding, surface, steps=0)
        assert result.fail_modes
        assert result.convective_mode == "No Convection"
