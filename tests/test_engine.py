"""Tests for the compute entry point."""

import logging

import numpy as np
import pytest

from filterlab import (
    DesignConfig,
    FilterResult,
    FilterSpecification,
    InvalidSpecificationError,
    compute,
    design_coefficients,
)
from filterlab import engine
from filterlab.dsp.complex_math import Complex
from filterlab.engine import _sanitize
from filterlab.logging import get_logger


def _spec(**kwargs):
    params = dict(type="lowpass", implementation="iir", cutoff1=0.3, order=4)
    params.update(kwargs)
    return FilterSpecification(**params)


class TestIdealAndFIR:
    def test_ideal_lowpass_shape(self):
        result = compute(_spec(implementation="ideal", impulse_length=101))
        assert isinstance(result, FilterResult)
        assert len(result.impulse_response) == 101
        np.testing.assert_array_equal(result.time_indices, np.arange(-50, 51))
        assert result.impulse_response[50] == pytest.approx(0.3)
        assert result.poles == ()
        assert result.zeros == ()
        assert len(result.group_delay) == 0

    def test_frequency_grid(self, lowpass_fir):
        result = compute(lowpass_fir)
        freq = result.frequency_response
        assert len(freq.frequencies) == 512
        assert freq.frequencies[0] == 0.0
        assert freq.frequencies[-1] == pytest.approx(1.0)
        assert len(freq.magnitude) == 512
        assert np.all(freq.phase > -np.pi)
        assert np.all(freq.phase <= np.pi)

    @pytest.mark.parametrize("implementation", ["ideal", "fir"])
    @pytest.mark.parametrize("filter_type", ["lowpass", "highpass", "bandpass", "bandstop"])
    def test_symmetric_taps(self, implementation, filter_type):
        spec = _spec(
            type=filter_type,
            implementation=implementation,
            cutoff1=0.25,
            cutoff2=0.55,
            impulse_length=40,
            window="kaiser",
        )
        h = compute(spec).impulse_response
        assert len(h) == 41
        np.testing.assert_array_equal(h, h[::-1])

    def test_fir_lowpass_dc_gain(self, lowpass_fir):
        result = compute(lowpass_fir)
        assert result.frequency_response.magnitude[0] == pytest.approx(1.0, abs=0.01)

    def test_fir_group_delay_on_request(self, lowpass_fir):
        result = compute(lowpass_fir, with_group_delay=True)
        assert len(result.group_delay) == 512
        # Centred taps are zero-phase: no delay across the passband
        np.testing.assert_allclose(result.group_delay[:100], 0.0, atol=1e-6)

    def test_ideal_group_delay_matches_reported_phase(self):
        result = compute(_spec(implementation="ideal", impulse_length=21), with_group_delay=True)
        freq = result.frequency_response
        omegas = np.pi * freq.frequencies
        phase_slope = -np.gradient(np.unwrap(freq.phase), omegas)
        np.testing.assert_allclose(result.group_delay[:50], phase_slope[:50], atol=1e-6)
        np.testing.assert_allclose(result.group_delay[:50], 0.0, atol=1e-6)

    def test_fir_coefficients(self, lowpass_fir):
        b, a = design_coefficients(lowpass_fir)
        np.testing.assert_array_equal(b, compute(lowpass_fir).impulse_response)
        np.testing.assert_array_equal(a, [1.0])

    def test_kaiser_beta_is_used(self):
        narrow = compute(_spec(implementation="fir", window="kaiser", kaiser_beta=1.0))
        wide = compute(_spec(implementation="fir", window="kaiser", kaiser_beta=8.0))
        assert not np.allclose(narrow.impulse_response, wide.impulse_response)


class TestIIR:
    def test_butterworth_lowpass(self, lowpass_iir):
        result = compute(lowpass_iir)
        assert len(result.impulse_response) == 100
        np.testing.assert_array_equal(result.time_indices, np.arange(100))
        assert result.frequency_response.magnitude[0] == pytest.approx(1.0, abs=1e-3)
        assert len(result.group_delay) == 512
        assert np.all(np.isfinite(result.group_delay))

    def test_poles_inside_unit_circle(self, lowpass_iir):
        result = compute(lowpass_iir, DesignConfig(root_method="companion"))
        assert len(result.poles) == 4
        assert all(abs(p) < 1.0 for p in result.poles)
        assert not result.flags.roots_approximate

    def test_placeholder_roots_for_high_order(self, lowpass_iir):
        result = compute(lowpass_iir)
        assert result.flags.roots_approximate
        assert len(result.poles) == 4
        assert len(result.zeros) == 4
        assert all(abs(p) == pytest.approx(0.8) for p in result.poles)

    def test_order_two_uses_exact_roots(self):
        result = compute(_spec(order=2))
        assert len(result.poles) == 2
        assert len(result.zeros) == 2
        assert not result.flags.roots_approximate
        assert all(isinstance(p, Complex) for p in result.poles)
        # Conjugate pair strictly inside the unit circle
        p1, p2 = result.poles
        assert p1.re == pytest.approx(p2.re)
        assert p1.im == pytest.approx(-p2.im)
        assert abs(p1) < 1.0
        for z in result.zeros:
            assert z.re == pytest.approx(-1.0, abs=1e-6)

    def test_highpass_gains(self):
        result = compute(_spec(type="highpass"))
        magnitude = result.frequency_response.magnitude
        assert magnitude[0] < 0.01
        assert magnitude[-1] == pytest.approx(1.0, abs=0.01)

    @pytest.mark.parametrize("multiband", ["composite", "transform"])
    def test_bandpass(self, multiband):
        spec = _spec(type="bandpass", cutoff1=0.2, cutoff2=0.6, method="chebyshev1")
        result = compute(spec, DesignConfig(multiband=multiband))
        b, a = result.coefficients
        assert len(b) == 9
        assert len(a) == 9
        assert len(result.poles) == 8
        assert result.frequency_response.magnitude[0] < 0.05

    def test_bandstop(self):
        spec = _spec(type="bandstop", cutoff1=0.2, cutoff2=0.6)
        magnitude = compute(spec).frequency_response.magnitude
        assert magnitude[0] == pytest.approx(1.0, abs=0.02)
        assert magnitude[204] < 0.2

    def test_coefficient_response_source(self, lowpass_iir):
        from_impulse = compute(lowpass_iir)
        from_coefficients = compute(lowpass_iir, DesignConfig(iir_response="coefficients"))
        # 100 samples of a decaying response leave only a tiny truncation error
        np.testing.assert_allclose(
            from_impulse.frequency_response.magnitude,
            from_coefficients.frequency_response.magnitude,
            atol=1e-4,
        )
        assert from_coefficients.flags.near_pole_substitutions == 0

    @pytest.mark.parametrize("method", ["butterworth", "chebyshev1", "chebyshev2", "elliptic"])
    def test_all_methods_finite(self, method):
        result = compute(_spec(method=method, order=5))
        assert result.flags.non_finite_replaced == 0
        assert np.all(np.isfinite(result.impulse_response))
        assert np.all(np.isfinite(result.frequency_response.magnitude))

    def test_group_delay_can_be_skipped(self, lowpass_iir):
        assert len(compute(lowpass_iir, with_group_delay=False).group_delay) == 0


class TestQualityFlags:
    def test_sanitize_replaces_non_finite_and_warns(self, caplog):
        logger = get_logger("filterlab.engine")
        logger.addHandler(caplog.handler)
        try:
            values, count = _sanitize(np.array([1.0, np.nan, np.inf, -np.inf]), "magnitude")
        finally:
            logger.removeHandler(caplog.handler)
        np.testing.assert_array_equal(values, [1.0, 0.0, 0.0, 0.0])
        assert count == 3
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].name == "filterlab.engine"
        assert "Replaced 3 non-finite magnitude values" in warnings[0].getMessage()

    def test_sanitize_finite_input_is_silent(self, caplog):
        logger = get_logger("filterlab.engine")
        logger.addHandler(caplog.handler)
        try:
            values, count = _sanitize(np.array([0.5, -2.0]), "phase")
        finally:
            logger.removeHandler(caplog.handler)
        np.testing.assert_array_equal(values, [0.5, -2.0])
        assert count == 0
        assert not caplog.records

    def test_non_finite_impulse_response_is_counted(self, monkeypatch, lowpass_iir):
        def overflowing_impulse_response(b, a, length):
            h = np.ones(length)
            h[3] = np.nan
            h[5] = np.inf
            return h, np.arange(length)

        monkeypatch.setattr(engine, "impulse_response", overflowing_impulse_response)
        result = compute(lowpass_iir)
        assert result.flags.non_finite_replaced == 2
        assert result.impulse_response[3] == 0.0
        assert result.impulse_response[5] == 0.0
        assert np.all(np.isfinite(result.frequency_response.magnitude))
        assert np.all(np.isfinite(result.frequency_response.phase))

    def test_odd_order_highpass_delay_at_dc(self):
        result = compute(_spec(type="highpass", order=3))
        delay = result.group_delay
        # Zero of B at z = 1 sits on the first grid point
        assert delay[0] == 0.0
        assert result.flags.delay_zero_crossings == 1
        assert np.all(np.abs(delay) < 20.0)

    def test_odd_order_lowpass_delay_at_nyquist(self):
        result = compute(_spec(order=3))
        assert result.group_delay[-1] == 0.0
        assert result.flags.delay_zero_crossings == 1

    def test_even_order_has_no_delay_crossings(self, lowpass_iir):
        assert compute(lowpass_iir).flags.delay_zero_crossings == 0


class TestContract:
    def test_deterministic(self, lowpass_iir):
        first = compute(lowpass_iir)
        second = compute(lowpass_iir)
        np.testing.assert_array_equal(first.impulse_response, second.impulse_response)
        np.testing.assert_array_equal(
            first.frequency_response.magnitude, second.frequency_response.magnitude
        )
        np.testing.assert_array_equal(
            first.frequency_response.phase, second.frequency_response.phase
        )
        np.testing.assert_array_equal(first.group_delay, second.group_delay)
        assert first.poles == second.poles
        assert first.flags == second.flags

    def test_arrays_are_read_only(self, lowpass_iir):
        result = compute(lowpass_iir)
        with pytest.raises(ValueError):
            result.impulse_response[0] = 1.0
        with pytest.raises(ValueError):
            result.frequency_response.magnitude[0] = 1.0

    def test_custom_grid_size(self, lowpass_iir):
        result = compute(lowpass_iir, DesignConfig(num_frequencies=64, impulse_horizon=20))
        assert len(result.frequency_response.magnitude) == 64
        assert len(result.group_delay) == 64
        assert len(result.impulse_response) == 20

    def test_revalidates_specification(self):
        spec = _spec()
        object.__setattr__(spec, "cutoff1", 1.5)
        with pytest.raises(InvalidSpecificationError):
            compute(spec)
