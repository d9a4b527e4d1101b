"""Tests for the per-frame AnimationDriver."""

import numpy as np
import pytest

from spiritvis.animation_driver import AnimationDriver
from spiritvis.audio_analyser import BandEnergies, apply_peak
from spiritvis.constants import TRAIL_FADE

from conftest import FakeAudioSource, FakeCamera


class LoudAnalyser:
    """Every frame is a peak."""

    def analyse(self, pulse):
        bands = BandEnergies(0.9, 0.9, 0.9)
        apply_peak(bands, pulse)
        return bands

    def close(self):
        pass


class TestAnimationDriver:
    def test_make_frame_returns_canvas(self, driver):
        frame = driver.make_frame()
        assert frame.shape == (150, 200, 3)
        assert frame.dtype == np.uint8
        assert driver.state.frame_count == 1

    def test_pool_size_is_invariant(self, driver):
        for _ in range(30):
            driver.make_frame()
        assert len(driver.state.particles) == 600

    def test_pulse_decays_each_frame(self, driver):
        driver.bump_pulse(1.5)
        driver.make_frame()
        assert driver.state.pulse.value == pytest.approx(1.44)

    def test_bump_pulse_default_and_cap(self, driver):
        driver.bump_pulse()
        assert driver.state.pulse.value == pytest.approx(1.0)
        driver.bump_pulse(5)
        assert driver.state.pulse.value == 2.0

    def test_posted_callbacks_run_next_frame(self, driver):
        driver.post(lambda: driver.bump_pulse(1.1))
        assert driver.state.pulse.value == 0.0
        driver.make_frame()
        assert driver.state.pulse.value == pytest.approx(1.1 * 0.96)

    def test_phase_advances_once_per_frame(self, driver):
        for _ in range(5):
            driver.make_frame()
        assert driver.state.flow.phase == pytest.approx(5 * 0.0008)

    def test_bands_stay_zero_without_audio(self, driver):
        for _ in range(3):
            driver.make_frame()
        assert driver.state.bands == BandEnergies()

    def test_audio_drives_bands(self, driver, loud_sine):
        driver.install_audio(FakeAudioSource(loud_sine))
        driver.make_frame()
        assert driver.state.bands.low > 0.0

    def test_install_audio_closes_previous(self, driver, silence):
        first = FakeAudioSource(silence)
        driver.install_audio(first)
        driver.install_audio(FakeAudioSource(silence))
        assert first.closed

    def test_camera_probe_every_sixth_frame(self, driver):
        camera = FakeCamera(255)
        driver.install_camera(camera)
        for _ in range(5):
            driver.make_frame()
        assert driver.state.brightness == 0.0
        driver.make_frame()
        assert driver.state.brightness == 1.0
        assert camera.reads == 1

    def test_trail_fade(self, rng):
        driver = AnimationDriver(200, 150, particle_count=0, rng=rng)
        driver.state.canvas[:] = 100
        frame = driver.make_frame()
        assert (frame[0, 0] == int(100 * (1.0 - TRAIL_FADE))).all()

    def test_resize(self, driver):
        driver.make_frame()
        driver.resize(320, 240)
        assert driver.state.canvas.shape == (240, 320, 3)
        assert not driver.state.canvas.any()
        assert driver.make_frame().shape == (240, 320, 3)

    def test_close_releases_devices(self, driver, silence):
        source, camera = FakeAudioSource(silence), FakeCamera(0)
        driver.install_audio(source)
        driver.install_camera(camera)
        driver.close()
        assert source.closed and camera.closed

    def test_peak_then_decay_in_one_frame(self, driver):
        """A peak while quiet sets 1.2, then the same frame decays it."""
        driver.state.audio = LoudAnalyser()
        driver.state.pulse.set(0.2)
        driver.make_frame()
        assert driver.state.pulse.value == pytest.approx(1.2 * 0.96)

    def test_peak_ignored_while_pulsing(self, driver):
        driver.state.audio = LoudAnalyser()
        driver.state.pulse.set(0.5)
        driver.make_frame()
        assert driver.state.pulse.value == pytest.approx(0.48)
