import logging
from dataclasses import dataclass

import librosa
import numpy as np

from spiritvis.constants import (
    BAND_EDGES,
    FFT_SIZE,
    MAX_DECIBELS,
    MIN_DECIBELS,
    PEAK_PULSE,
    PEAK_QUIET_LEVEL,
    PEAK_THRESHOLD,
    PEAK_WEIGHTS,
    SPECTRUM_SMOOTHING,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BandEnergies:
    """Energy of the low, mid and high bands, each in [0, 1]."""

    low: float = 0.0
    mid: float = 0.0
    high: float = 0.0

    @property
    def level(self):
        """Weighted loudness used for peak detection."""
        w_low, w_mid, w_high = PEAK_WEIGHTS
        return w_low * self.low + w_mid * self.mid + w_high * self.high


def band_energies(spectrum):
    """
    Reduce a byte spectrum (0-255 per bin) to three band energies.

    Bands cover contiguous bin ranges given by BAND_EDGES. Each band is the
    plain mean of its bins divided by 255, clamped to [0, 1] so that
    out-of-range input never leaks into the renderers.
    """
    spectrum = np.asarray(spectrum, dtype=np.float64)
    n = len(spectrum)
    bounds = [int(np.floor(n * edge)) for edge in BAND_EDGES]

    def avg(a, b):
        return spectrum[a:b].sum() / max(1, b - a)

    values = [
        float(np.clip(avg(a, b) / 255.0, 0.0, 1.0))
        for a, b in zip(bounds[:-1], bounds[1:])
    ]
    return BandEnergies(*values)


def apply_peak(bands, pulse):
    """
    Fire a pulse on loud peaks, but only while the pulse is quiet.

    Returns True when the pulse was set.
    """
    if bands.level > PEAK_THRESHOLD and pulse.value < PEAK_QUIET_LEVEL:
        pulse.set(PEAK_PULSE)
        return True
    return False


class SpectrumAnalyser:
    """
    Byte frequency data from a block of time-domain samples.

    Follows the browser analyser node: Blackman window, magnitude scaled by
    the FFT size, exponential smoothing across calls, then decibels mapped
    linearly from [MIN_DECIBELS, MAX_DECIBELS] onto 0-255.
    """

    def __init__(self, fft_size=FFT_SIZE, smoothing=SPECTRUM_SMOOTHING):
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        self.fft_size = fft_size
        self.smoothing = smoothing
        self.window = np.blackman(fft_size)
        self.smoothed = np.zeros(self.bin_count)

    @property
    def bin_count(self):
        return self.fft_size // 2

    def byte_frequency_data(self, samples):
        samples = np.asarray(samples, dtype=np.float64)
        if len(samples) < self.fft_size:
            samples = np.pad(samples, (self.fft_size - len(samples), 0))
        block = samples[-self.fft_size:] * self.window

        magnitude = np.abs(np.fft.rfft(block))[: self.bin_count] / self.fft_size
        self.smoothed = self.smoothing * self.smoothed + (1 - self.smoothing) * magnitude

        decibels = librosa.amplitude_to_db(self.smoothed, ref=1.0, amin=1e-10, top_db=None)
        scaled = 255.0 / (MAX_DECIBELS - MIN_DECIBELS) * (decibels - MIN_DECIBELS)
        return np.clip(np.floor(scaled), 0, 255).astype(np.uint8)


class FrequencyAnalyser:
    """
    Turns an audio source into band energies once per frame.
    """

    def __init__(self, source, fft_size=FFT_SIZE, smoothing=SPECTRUM_SMOOTHING):
        self.source = source
        self.spectrum = SpectrumAnalyser(fft_size, smoothing)
        logger.info(
            f"[+] Frequency analyser ready: {self.spectrum.bin_count} bins "
            f"from {type(source).__name__}"
        )

    def analyse(self, pulse):
        """Compute this frame's bands and apply the peak rule to `pulse`."""
        samples = self.source.read(self.spectrum.fft_size)
        bands = band_energies(self.spectrum.byte_frequency_data(samples))
        if apply_peak(bands, pulse):
            logger.debug(f"[i] Audio peak at level {bands.level:.2f}, pulse -> {pulse.value}")
        return bands

    def close(self):
        self.source.close()
