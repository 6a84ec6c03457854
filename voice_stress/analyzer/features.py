"""Frequency-domain feature extraction.

This module derives the scalar features of one frame: volume level,
fundamental frequency, high-frequency energy, spectral centroid, and the
short-term jitter/shimmer instability measures that also read history.
Extraction never mutates history; the pipeline records the new samples
after scoring.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from voice_stress.common.logging import get_logger

from .config import AnalyzerConfig
from .history import VoiceHistory
from .types import Features, SpectralFrame

logger = get_logger(__name__)

# jitter/shimmer window: the last five history samples plus the current one
INSTABILITY_WINDOW = 5
MIN_INSTABILITY_HISTORY = 3
JITTER_DIVISOR = 100.0
SHIMMER_DIVISOR = 50.0


def clamp01(value: float) -> float:
    """Clamp to [0, 1]; NaN maps to 0."""
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


def db_to_power(spectrum: np.ndarray) -> np.ndarray:
    """Convert dB magnitudes to linear power, ``10 ** (db / 10)``."""
    with np.errstate(over="ignore", invalid="ignore"):
        return np.power(10.0, spectrum / 10.0)


def volume_level(levels: np.ndarray) -> int:
    """Mean byte amplitude rescaled to 0-100 and rounded."""
    if levels.size == 0:
        return 0
    mean = float(np.mean(levels))
    if not math.isfinite(mean):
        return 0
    # half-up rounding, matching the level scale the thresholds were tuned on
    return int(math.floor(mean / 255.0 * 100.0 + 0.5))


def mean_abs_step(history: Sequence[float], current: float, divisor: float) -> float:
    """Mean absolute consecutive difference over recent history plus ``current``.

    Returns 0 until at least three history samples exist.
    """
    if len(history) < MIN_INSTABILITY_HISTORY:
        return 0.0
    recent = np.asarray([*history[-INSTABILITY_WINDOW:], current], dtype=np.float64)
    steps = np.abs(np.diff(recent))
    return clamp01(float(np.sum(steps)) / (recent.size - 1) / divisor)


class FeatureExtractor:
    """Derive per-frame features against the current (pre-update) history."""

    def __init__(self, config: AnalyzerConfig | None = None) -> None:
        self.config = config or AnalyzerConfig()

    def extract(self, frame: SpectralFrame, history: VoiceHistory) -> Features:
        """Extract all features of ``frame``.

        Args:
            frame: Spectral frame for this tick
            history: Histories through the previous tick

        Returns:
            Features for this tick
        """
        if frame.is_degenerate:
            logger.warning(
                "frame.degenerate",
                bin_count=frame.bin_count,
                level_count=int(frame.time_domain_levels.size),
            )

        spectrum = frame.magnitude_spectrum
        volume = volume_level(frame.time_domain_levels)
        fundamental = self.fundamental_frequency(spectrum)

        return Features(
            fundamental_freq=fundamental,
            high_freq_energy=self.high_frequency_energy(spectrum),
            spectral_centroid=self.spectral_centroid(spectrum),
            jitter=self.jitter(history.pitch.values(), fundamental),
            shimmer=self.shimmer(history.volume.values(), volume),
            volume=volume,
        )

    def fundamental_frequency(self, spectrum: np.ndarray) -> float:
        """Frequency of the loudest bin inside the voiced-speech band.

        The band covers bins ``floor(low*N/ref)`` up to, but excluding,
        ``floor(high*N/ref)``; the first of equal peaks wins.
        """
        bin_count = spectrum.size
        if bin_count == 0:
            return 0.0
        reference = self.config.reference_nyquist_hz
        start = math.floor(self.config.voice_band_low_hz * bin_count / reference)
        end = min(
            math.floor(self.config.voice_band_high_hz * bin_count / reference),
            bin_count,
        )
        if start >= end:
            return 0.0

        band = spectrum[start:end]
        # NaN bins never win the peak search
        finite_band = np.where(np.isnan(band), -np.inf, band)
        if np.all(finite_band == -np.inf):
            return 0.0
        peak = start + int(np.argmax(finite_band))
        return peak * reference / bin_count

    def high_frequency_energy(self, spectrum: np.ndarray) -> float:
        """Mean linear power of the top 40% of bins, clamped to [0, 1]."""
        bin_count = spectrum.size
        start = math.floor(bin_count * self.config.high_band_start_ratio)
        if bin_count == 0 or start >= bin_count:
            return 0.0
        power = db_to_power(spectrum[start:])
        return clamp01(float(np.sum(power)) / (bin_count - start))

    def spectral_centroid(self, spectrum: np.ndarray) -> float:
        """Power-weighted mean bin index over the whole spectrum.

        The result is on the bin-index scale, not normalized to [0, 1].
        """
        if spectrum.size == 0:
            return 0.0
        power = db_to_power(spectrum)
        total = float(np.sum(power))
        if not total > 0 or not math.isfinite(total):
            return 0.0
        centroid = float(np.dot(np.arange(spectrum.size), power)) / total
        return centroid if math.isfinite(centroid) else 0.0

    def jitter(self, pitch_history: Sequence[float], current_pitch: float) -> float:
        """Short-term pitch instability, in [0, 1]."""
        return mean_abs_step(pitch_history, current_pitch, JITTER_DIVISOR)

    def shimmer(self, volume_history: Sequence[float], current_volume: float) -> float:
        """Short-term volume instability, in [0, 1]."""
        return mean_abs_step(volume_history, current_volume, SHIMMER_DIVISOR)
