import math

import noise

from spiritvis.constants import (
    BRIGHTNESS_BIAS,
    FLOW_SCALE,
    NOISE_OCTAVES,
    NOISE_PERSISTENCE,
    PHASE_STEP,
)


class FlowField:
    """
    Noise-driven heading field.

    The phase moves by a fixed step per frame rather than per second, so the
    field evolves at a speed tied to the frame rate.
    """

    def __init__(self, scale=FLOW_SCALE, phase_step=PHASE_STEP, phase=0.0):
        self.scale = scale
        self.phase_step = phase_step
        self.phase = phase

    def noise_at(self, x, y):
        """Coherent noise in [0, 1]."""
        n = noise.pnoise3(
            x * self.scale,
            y * self.scale,
            self.phase,
            octaves=NOISE_OCTAVES,
            persistence=NOISE_PERSISTENCE,
        )
        return min(1.0, max(0.0, (n + 1.0) / 2.0))

    def angle(self, x, y, brightness=0.5):
        """Heading in radians; brighter camera input rotates the field a little."""
        bias = (brightness - 0.5) * BRIGHTNESS_BIAS
        return self.noise_at(x, y) * 2.0 * math.tau + bias

    def advance(self):
        self.phase += self.phase_step
        return self.phase
