"""Combine per-frame features and history into the five bounded scores."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .features import clamp01
from .history import VoiceHistory
from .types import Features, Scores

# Stress weights
HIGH_FREQ_ENERGY_WEIGHT = 0.30
JITTER_WEIGHT = 0.25
SHIMMER_WEIGHT = 0.25
CENTROID_BONUS = 0.20
# Compared against the raw bin-index centroid, so nearly every voiced frame gets the bonus.
CENTROID_THRESHOLD = 0.6

# Confidence
COMFORTABLE_VOLUME_RANGE = (20, 80)
COMFORTABLE_VOLUME_SCORE = 0.4
OTHER_VOLUME_SCORE = 0.2
STABILITY_WEIGHT = 0.3

# Insufficient-history defaults
MIN_PITCH_SAMPLES = 5
MIN_VOICE_SAMPLES = 10
MIN_VOLUME_SAMPLES = 5
DEFAULT_PITCH_VARIATION = 0.0
DEFAULT_SPEECH_RATE = 0.5
DEFAULT_VOLUME_CONSISTENCY = 1.0

PITCH_STD_DIVISOR = 100.0
VOLUME_STD_DIVISOR = 50.0
SPEECH_LEVEL = 10


def _population_std(samples: Sequence[float]) -> float:
    return float(np.std(np.asarray(samples, dtype=np.float64)))


class ScoreCalculator:
    """Pure scoring functions; history is only read."""

    def score(self, features: Features, history: VoiceHistory) -> Scores:
        return Scores(
            stress_level=self.stress_level(features),
            confidence_level=self.confidence_level(features),
            pitch_variation=self.pitch_variation(history.pitch.values()),
            speech_rate=self.speech_rate(history.voice.values()),
            volume_consistency=self.volume_consistency(history.volume.values()),
        )

    @staticmethod
    def stress_level(features: Features) -> float:
        centroid_term = (
            CENTROID_BONUS if features.spectral_centroid > CENTROID_THRESHOLD else 0.0
        )
        return clamp01(
            HIGH_FREQ_ENERGY_WEIGHT * features.high_freq_energy
            + JITTER_WEIGHT * features.jitter
            + SHIMMER_WEIGHT * features.shimmer
            + centroid_term
        )

    @staticmethod
    def confidence_level(features: Features) -> float:
        low, high = COMFORTABLE_VOLUME_RANGE
        volume_score = (
            COMFORTABLE_VOLUME_SCORE
            if low < features.volume < high
            else OTHER_VOLUME_SCORE
        )
        stability_score = STABILITY_WEIGHT * (1 - features.jitter) + STABILITY_WEIGHT * (
            1 - features.shimmer
        )
        return clamp01(volume_score + stability_score)

    @staticmethod
    def pitch_variation(pitch_history: Sequence[float]) -> float:
        """Population std-dev of the pitch history in units of 100 Hz."""
        if len(pitch_history) < MIN_PITCH_SAMPLES:
            return DEFAULT_PITCH_VARIATION
        return clamp01(_population_std(pitch_history) / PITCH_STD_DIVISOR)

    @staticmethod
    def speech_rate(voice_history: Sequence[float]) -> float:
        """Fraction of recent samples loud enough to count as speech."""
        if len(voice_history) < MIN_VOICE_SAMPLES:
            return DEFAULT_SPEECH_RATE
        voiced = sum(1 for level in voice_history if level > SPEECH_LEVEL)
        return clamp01(voiced / len(voice_history))

    @staticmethod
    def volume_consistency(volume_history: Sequence[float]) -> float:
        if len(volume_history) < MIN_VOLUME_SAMPLES:
            return DEFAULT_VOLUME_CONSISTENCY
        return clamp01(1 - _population_std(volume_history) / VOLUME_STD_DIVISOR)
