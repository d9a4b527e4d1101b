"""Tests for the FlowField."""

import math

import pytest

from spiritvis.flow_field import FlowField


class TestFlowField:
    def test_deterministic_for_fixed_phase(self):
        field = FlowField()
        assert field.angle(120.0, 80.0, 0.5) == field.angle(120.0, 80.0, 0.5)

    def test_angle_range(self):
        """Noise spans two full turns; brightness adds at most 0.15 either way."""
        field = FlowField(phase=0.37)
        for x in range(0, 2000, 97):
            for y in range(0, 1200, 113):
                for brightness in (0.0, 0.5, 1.0):
                    a = field.angle(x, y, brightness)
                    assert -0.15 - 1e-9 <= a <= 4 * math.pi + 0.15 + 1e-9

    def test_brightness_bias(self):
        field = FlowField(phase=0.2)
        neutral = field.angle(300, 200, 0.5)
        assert field.angle(300, 200, 1.0) == pytest.approx(neutral + 0.15)
        assert field.angle(300, 200, 0.0) == pytest.approx(neutral - 0.15)

    def test_noise_in_unit_range(self):
        field = FlowField(phase=1.3)
        values = [field.noise_at(x * 37.0, x * 11.0) for x in range(200)]
        assert all(0.0 <= v <= 1.0 for v in values)
        assert len(set(values)) > 1

    def test_phase_advances_per_frame(self):
        field = FlowField()
        for _ in range(10):
            field.advance()
        assert field.phase == pytest.approx(0.008)
