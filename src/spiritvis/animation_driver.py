import logging
import queue
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from spiritvis.audio_analyser import BandEnergies, FrequencyAnalyser
from spiritvis.avatar import AvatarRenderer
from spiritvis.brightness_probe import BrightnessProbe
from spiritvis.constants import PARTICLE_COUNT, TRAIL_FADE
from spiritvis.flow_field import FlowField
from spiritvis.particle import ParticleSystem
from spiritvis.pulse import PulseSignal

logger = logging.getLogger(__name__)


@dataclass
class SimulationState:
    """Everything the frame loop mutates. Owned by a single AnimationDriver."""

    width: int
    height: int
    canvas: np.ndarray
    particles: ParticleSystem
    flow: FlowField = field(default_factory=FlowField)
    pulse: PulseSignal = field(default_factory=PulseSignal)
    bands: BandEnergies = field(default_factory=BandEnergies)
    probe: BrightnessProbe = field(default_factory=BrightnessProbe)
    audio: Optional[FrequencyAnalyser] = None
    camera: Optional[object] = None
    frame_count: int = 0

    @classmethod
    def create(cls, width, height, particle_count=PARTICLE_COUNT, rng=None):
        return cls(
            width=width,
            height=height,
            canvas=np.zeros((height, width, 3), dtype=np.uint8),
            particles=ParticleSystem(width, height, particle_count, rng),
        )

    @property
    def brightness(self):
        return self.probe.value


class AnimationDriver:
    """
    Advances the visualisation by one frame per call to `make_frame`.

    All time evolution is per frame (phase step, pulse decay), not per second.
    Other threads hand work to the render thread with `post`; queued callbacks
    run at the start of the next frame.
    """

    def __init__(self, width, height, particle_count=PARTICLE_COUNT, rng=None):
        self.state = SimulationState.create(width, height, particle_count, rng)
        self.avatar = AvatarRenderer()
        self._pending = queue.SimpleQueue()

    def bump_pulse(self, amount=1.0):
        """The render-control entry point used by the chat side."""
        return self.state.pulse.bump(amount)

    def post(self, callback):
        self._pending.put(callback)

    def install_audio(self, source):
        if self.state.audio is not None:
            self.state.audio.close()
        self.state.audio = FrequencyAnalyser(source)

    def install_camera(self, camera):
        if self.state.camera is not None:
            self.state.camera.close()
        self.state.camera = camera

    def resize(self, width, height):
        """Start a fresh canvas; particles wrap into the new bounds as they move."""
        logger.info(f"[i] Resizing canvas to {width}x{height}")
        self.state.width = width
        self.state.height = height
        self.state.canvas = np.zeros((height, width, 3), dtype=np.uint8)

    def close(self):
        if self.state.audio is not None:
            self.state.audio.close()
        if self.state.camera is not None:
            self.state.camera.close()

    def _run_pending(self):
        while True:
            try:
                callback = self._pending.get_nowait()
            except queue.Empty:
                return
            callback()

    def make_frame(self):
        """
        Render one frame and return the persistent canvas (BGR).

        Callers that draw on top of the result must copy it first.
        """
        self._run_pending()
        s = self.state
        s.frame_count += 1

        # 1. Fade the previous frame for motion trails
        s.canvas = (s.canvas * (1.0 - TRAIL_FADE)).astype(np.uint8)

        # 2. Audio bands
        if s.audio is not None:
            s.bands = s.audio.analyse(s.pulse)

        # 3. Pulse decay
        s.pulse.decay()

        # 4. Particles
        s.particles.update(s.flow, s.brightness, s.pulse.value, s.width, s.height)
        s.canvas = s.particles.draw(s.canvas, s.bands)

        # 5. Avatar glow
        s.canvas = self.avatar.draw(s.canvas, s.bands, s.pulse.value)

        # 6. Evolve the field
        s.flow.advance()

        # 7. Camera brightness, every few frames
        s.probe.update(s.camera, s.frame_count)

        return s.canvas
