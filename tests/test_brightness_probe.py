"""Tests for the camera brightness probe."""

import numpy as np
import pytest

from spiritvis.brightness_probe import BrightnessProbe, frame_brightness

from conftest import FakeCamera


class TestFrameBrightness:
    def test_white_and_black(self):
        assert frame_brightness(np.full((120, 160, 3), 255, dtype=np.uint8)) == 1.0
        assert frame_brightness(np.zeros((120, 160, 3), dtype=np.uint8)) == 0.0

    def test_channel_average(self):
        """(R+G+B)/3 per pixel; alpha is ignored."""
        frame = np.zeros((120, 160, 4), dtype=np.uint8)
        frame[..., 0] = 255
        frame[..., 3] = 255
        assert frame_brightness(frame) == pytest.approx(1 / 3)

    def test_samples_every_tenth_pixel(self):
        frame = np.zeros((1, 100, 3), dtype=np.uint8)
        frame[0, ::10] = 255
        assert frame_brightness(frame) == 1.0
        frame = np.full((1, 100, 3), 255, dtype=np.uint8)
        frame[0, ::10] = 0
        assert frame_brightness(frame) == 0.0


class TestBrightnessProbe:
    def test_holds_without_camera(self):
        probe = BrightnessProbe()
        for frame_count in range(1, 30):
            assert probe.update(None, frame_count) == 0.0

    def test_updates_every_sixth_frame(self):
        camera = FakeCamera(51)
        probe = BrightnessProbe()
        for frame_count in range(1, 6):
            probe.update(camera, frame_count)
        assert camera.reads == 0
        assert probe.value == 0.0

        probe.update(camera, 6)
        assert camera.reads == 1
        assert probe.value == pytest.approx(0.2)

    def test_holds_between_updates(self):
        camera = FakeCamera(255)
        probe = BrightnessProbe()
        probe.update(camera, 6)
        camera.frame[:] = 0
        for frame_count in range(7, 12):
            assert probe.update(camera, frame_count) == 1.0
        assert probe.update(camera, 12) == 0.0

    def test_missing_frame_keeps_value(self):
        class DroppedCamera:
            def read(self):
                return None

        probe = BrightnessProbe()
        probe.value = 0.7
        assert probe.update(DroppedCamera(), 6) == 0.7
