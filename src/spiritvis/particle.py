import math

import cv2
import numpy as np

from spiritvis.colors import blend_over, hsb_to_bgr
from spiritvis.constants import (
    PARTICLE_BRIGHTNESS,
    PARTICLE_COUNT,
    PARTICLE_HUE_RANGE,
    PARTICLE_SATURATION,
    PARTICLE_SIZE_RANGE,
    PARTICLE_SPEED_RANGE,
    RESPAWN_CHANCE,
    RESPAWN_PULSE,
    RESPAWN_RADIUS,
)


class Particle:
    """A single point traced through the flow field."""

    def __init__(self, width, height, rng):
        self.x = rng.uniform(0, width)
        self.y = rng.uniform(0, height)
        self.prev_x = self.x
        self.prev_y = self.y
        self.speed = rng.uniform(*PARTICLE_SPEED_RANGE)
        self.hue = rng.uniform(*PARTICLE_HUE_RANGE)
        self.size = rng.uniform(*PARTICLE_SIZE_RANGE)

    def update(self, field, brightness, pulse, width, height, rng):
        """Advect along the field, wrap at the edges, maybe respawn on a big pulse."""
        self.prev_x, self.prev_y = self.x, self.y
        angle = field.angle(self.x, self.y, brightness)
        self.x += math.cos(angle) * self.speed
        self.y += math.sin(angle) * self.speed

        # wrap
        if self.x < 0:
            self.x = width
        if self.x > width:
            self.x = 0
        if self.y < 0:
            self.y = height
        if self.y > height:
            self.y = 0

        if pulse > RESPAWN_PULSE and rng.random() < RESPAWN_CHANCE:
            self.respawn(width, height, rng)

    def respawn(self, width, height, rng):
        """Jump into the ring around the centre without leaving a trail."""
        r = rng.uniform(*RESPAWN_RADIUS)
        angle = rng.uniform(0, math.tau)
        self.x = width / 2 + math.cos(angle) * r
        self.y = height / 2 + math.sin(angle) * r
        self.prev_x, self.prev_y = self.x, self.y


class ParticleSystem:
    """
    Fixed pool of particles. Nothing is allocated or freed after creation.
    """

    def __init__(self, width, height, count=PARTICLE_COUNT, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.particles = [Particle(width, height, self.rng) for _ in range(count)]

    def __len__(self):
        return len(self.particles)

    def __iter__(self):
        return iter(self.particles)

    def update(self, field, brightness, pulse, width, height):
        for particle in self.particles:
            particle.update(field, brightness, pulse, width, height, self.rng)

    @staticmethod
    def opacity(bands):
        """Stroke opacity in percent, shared by every particle this frame."""
        alpha = 10 + 70 * (0.3 * bands.low + 0.5 * bands.mid + 0.2 * bands.high)
        return float(np.clip(alpha, 8, 90))

    def draw(self, canvas, bands):
        """Draw each particle's last step as a line segment onto `canvas`."""
        if not self.particles:
            return canvas
        layer = np.zeros_like(canvas)
        coverage = np.zeros(canvas.shape[:2], dtype=np.uint8)
        hues = np.array([p.hue for p in self.particles]) + 40 * bands.high
        colors = hsb_to_bgr(hues, PARTICLE_SATURATION, PARTICLE_BRIGHTNESS)

        for particle, color in zip(self.particles, colors):
            start = (int(round(particle.prev_x)), int(round(particle.prev_y)))
            end = (int(round(particle.x)), int(round(particle.y)))
            cv2.line(layer, start, end, tuple(int(c) for c in color), 1, cv2.LINE_AA)
            cv2.line(coverage, start, end, 255, 1, cv2.LINE_AA)

        return blend_over(canvas, layer, coverage, self.opacity(bands) / 100.0)
