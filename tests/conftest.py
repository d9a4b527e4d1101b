"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from spiritvis.animation_driver import AnimationDriver

TEST_SR = 44100


class FakeAudioSource:
    """Serves a fixed block of samples, like a microphone that never changes."""

    def __init__(self, samples):
        self.samples = np.asarray(samples, dtype=np.float32)
        self.closed = False

    def read(self, n):
        return self.samples[-n:]

    def close(self):
        self.closed = True


class FakeCamera:
    """Returns a solid-colour frame and counts reads."""

    def __init__(self, value):
        self.frame = np.full((120, 160, 3), value, dtype=np.uint8)
        self.reads = 0
        self.closed = False

    def read(self):
        self.reads += 1
        return self.frame

    def close(self):
        self.closed = True


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible particles."""
    return np.random.default_rng(42)


@pytest.fixture
def driver(rng) -> AnimationDriver:
    """A small driver with the full particle pool."""
    return AnimationDriver(200, 150, rng=rng)


@pytest.fixture
def loud_sine() -> np.ndarray:
    """A full-scale 200Hz sine, loud enough to saturate the low band."""
    t = np.arange(4096) / TEST_SR
    return np.sin(2 * np.pi * 200.0 * t).astype(np.float32)


@pytest.fixture
def silence() -> np.ndarray:
    return np.zeros(4096, dtype=np.float32)
