"""Tests for the PulseSignal."""

import numpy as np
import pytest

from spiritvis.pulse import PulseSignal


class TestPulseSignal:
    """Bump and decay behaviour."""

    def test_starts_at_zero(self):
        assert PulseSignal().value == 0.0

    def test_bump_adds(self):
        pulse = PulseSignal()
        pulse.bump(0.6)
        assert pulse.value == pytest.approx(0.6)

    def test_bump_default_amount_is_one(self):
        pulse = PulseSignal()
        pulse.bump()
        assert pulse.value == pytest.approx(1.0)

    def test_bump_is_capped_at_two(self):
        pulse = PulseSignal(1.5)
        pulse.bump(1.1)
        assert pulse.value == 2.0

    def test_one_frame_of_decay(self):
        """1.5 becomes 1.44 after one frame."""
        pulse = PulseSignal(1.5)
        pulse.decay()
        assert pulse.value == pytest.approx(1.44)

    def test_decay_is_geometric_and_never_zero(self):
        pulse = PulseSignal(1.0)
        for frame in range(1, 500):
            pulse.decay()
            assert pulse.value == pytest.approx(0.96**frame)
            assert pulse.value > 0.0

    def test_random_sequences_stay_in_range(self):
        """Any mix of bumps and decays keeps the pulse in [0, 2]."""
        rng = np.random.default_rng(7)
        pulse = PulseSignal()
        for _ in range(2000):
            if rng.random() < 0.3:
                pulse.bump(float(rng.uniform(-3, 3)))
            else:
                pulse.decay()
            assert 0.0 <= pulse.value <= 2.0
