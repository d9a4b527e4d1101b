"""
Audio and camera capabilities.

Each source is opened by a blocking call that either returns a ready handle
or raises DeviceUnavailable. The live app runs these calls on a worker thread
and installs the handle into the simulation state when it arrives.
"""

import logging
import threading

import cv2
import librosa
import numpy as np

from spiritvis.constants import (
    CAMERA_CAPTURE_SIZE,
    CAMERA_PROBE_SIZE,
    DEFAULT_FPS,
    FFT_SIZE,
    SAMPLE_RATE,
)

logger = logging.getLogger(__name__)


class DeviceUnavailable(RuntimeError):
    """Raised when a microphone, camera or audio file cannot be opened."""


class MicrophoneSource:
    """Live microphone input kept in a small ring buffer."""

    def __init__(self, device=None, samplerate=SAMPLE_RATE, buffer_size=FFT_SIZE * 4):
        self.samplerate = samplerate
        self._buffer = np.zeros(buffer_size, dtype=np.float32)
        self._lock = threading.Lock()
        try:
            # PortAudio is loaded on import, so a missing library is a device failure too
            import sounddevice as sd

            self.stream = sd.InputStream(
                device=device,
                channels=1,
                samplerate=samplerate,
                dtype="float32",
                callback=self._callback,
            )
            self.stream.start()
        except Exception as e:
            raise DeviceUnavailable(f"microphone: {e}") from e

    def _callback(self, indata, frames, time_, status):
        if status:
            logger.debug(f"[i] Input stream status: {status}")
        block = indata.mean(axis=1) if indata.ndim > 1 else indata
        n = min(len(block), len(self._buffer))
        with self._lock:
            self._buffer = np.roll(self._buffer, -n)
            self._buffer[-n:] = block[-n:]

    def read(self, n):
        with self._lock:
            return self._buffer[-n:].copy()

    def close(self):
        self.stream.stop()
        self.stream.close()


class FileAudioSource:
    """
    Plays an audio file into the analyser, one frame's worth of samples per read.

    Stands in for a microphone when none is around. Loops at the end.
    """

    def __init__(self, filepath, fps=DEFAULT_FPS, samplerate=SAMPLE_RATE, loop=True):
        logger.info(f"[+] Loading audio: {filepath}...")
        try:
            self.y, self.sr = librosa.load(filepath, sr=samplerate, mono=True)
        except Exception as e:
            raise DeviceUnavailable(f"audio file {filepath}: {e}") from e
        self.hop = max(1, int(round(self.sr / fps)))
        self.loop = loop
        self.position = 0
        logger.info(f"[+] Duration: {len(self.y) / self.sr:.2f} seconds")

    def read(self, n):
        self.position += self.hop
        if self.position > len(self.y):
            self.position = self.hop if self.loop else len(self.y)

        start = max(0, self.position - n)
        window = self.y[start:self.position]

        # Pad if needed
        if len(window) < n:
            window = np.pad(window, (n - len(window), 0))
        return window

    def close(self):
        pass


class CameraSource:
    """Low-resolution camera frames for the brightness probe."""

    def __init__(self, index=0, capture_size=CAMERA_CAPTURE_SIZE, probe_size=CAMERA_PROBE_SIZE):
        self.probe_size = probe_size
        self.capture = cv2.VideoCapture(index)
        if not self.capture.isOpened():
            self.capture.release()
            raise DeviceUnavailable(f"camera {index} could not be opened")
        self.capture.set(cv2.CAP_PROP_FRAME_WIDTH, capture_size[0])
        self.capture.set(cv2.CAP_PROP_FRAME_HEIGHT, capture_size[1])

    def read(self):
        """Latest frame downscaled to the probe size, or None."""
        ok, frame = self.capture.read()
        if not ok or frame is None:
            return None
        return cv2.resize(frame, self.probe_size, interpolation=cv2.INTER_AREA)

    def close(self):
        self.capture.release()


def open_microphone(device=None):
    source = MicrophoneSource(device=device)
    logger.info("[+] Microphone enabled")
    return source


def open_audio_file(filepath, fps=DEFAULT_FPS):
    return FileAudioSource(filepath, fps=fps)


def open_camera(index=0):
    source = CameraSource(index)
    logger.info(f"[+] Camera {index} enabled")
    return source
