import numpy as np

from spiritvis.constants import PROBE_INTERVAL, PROBE_STRIDE


def frame_brightness(frame, stride=PROBE_STRIDE):
    """
    Mean brightness of every `stride`-th pixel, normalised to [0, 1].

    Each sampled pixel contributes the plain average of its first three
    channels, so BGR and RGB(A) frames give the same answer.
    """
    frame = np.asarray(frame)
    pixels = frame.reshape(-1, frame.shape[-1])
    if len(pixels) == 0:
        return None
    sampled = pixels[::stride, :3].astype(np.float64)
    return float(np.clip(sampled.mean(axis=1).mean() / 255.0, 0.0, 1.0))


class BrightnessProbe:
    """Samples the camera every few frames and holds the last value."""

    def __init__(self, interval=PROBE_INTERVAL, stride=PROBE_STRIDE):
        self.interval = interval
        self.stride = stride
        self.value = 0.0

    def due(self, frame_count):
        return frame_count % self.interval == 0

    def update(self, camera, frame_count):
        """Refresh from `camera` on due frames. Returns the current value."""
        if camera is None or not self.due(frame_count):
            return self.value
        frame = camera.read()
        if frame is not None:
            measured = frame_brightness(frame, self.stride)
            if measured is not None:
                self.value = measured
        return self.value
