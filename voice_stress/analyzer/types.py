"""Core type definitions for the voice-stress analyzer.

This module defines the values that flow through one analysis tick: the
incoming spectral frame, the derived features and scores, and the emitted
voice analysis record.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

import numpy as np


class EmotionalState(str, Enum):
    """Categorical label assigned to each analysed tick."""

    CALM = "calm"
    STRESSED = "stressed"
    CONFIDENT = "confident"
    UNCERTAIN = "uncertain"
    DECEPTIVE = "deceptive"
    ANXIOUS = "anxious"


@dataclass(frozen=True, eq=False)
class SpectralFrame:
    """One snapshot of the input signal.

    ``magnitude_spectrum`` holds dB magnitudes, one per FFT bin; ``-inf`` is
    accepted for silent bins. ``time_domain_levels`` holds byte-scale
    amplitudes (0-255) and is only used for the volume level. Both are
    stored as read-only float64 arrays.
    """

    magnitude_spectrum: Sequence[float] | np.ndarray
    time_domain_levels: Sequence[int] | np.ndarray
    sample_rate_hz: int = 44100

    def __post_init__(self) -> None:
        """Normalize arrays and validate frame after initialization."""
        spectrum = np.array(self.magnitude_spectrum, dtype=np.float64).ravel()
        levels = np.array(self.time_domain_levels, dtype=np.float64).ravel()
        spectrum.setflags(write=False)
        levels.setflags(write=False)
        object.__setattr__(self, "magnitude_spectrum", spectrum)
        object.__setattr__(self, "time_domain_levels", levels)

        if self.sample_rate_hz <= 0:
            raise ValueError("sample_rate_hz must be positive")
        if levels.size and (np.any(levels < 0) or np.any(levels > 255)):
            raise ValueError("time_domain_levels must be between 0 and 255")

    @property
    def bin_count(self) -> int:
        return int(self.magnitude_spectrum.size)

    @property
    def is_degenerate(self) -> bool:
        """True when either array is empty."""
        return self.magnitude_spectrum.size == 0 or self.time_domain_levels.size == 0


@dataclass(frozen=True)
class Features:
    """Scalar features derived from one frame plus history."""

    fundamental_freq: float
    high_freq_energy: float
    spectral_centroid: float
    jitter: float
    shimmer: float
    volume: int


@dataclass(frozen=True)
class Scores:
    """The five bounded output scores."""

    stress_level: float
    confidence_level: float
    pitch_variation: float
    speech_rate: float
    volume_consistency: float

    def __post_init__(self) -> None:
        for name in (
            "stress_level",
            "confidence_level",
            "pitch_variation",
            "speech_rate",
            "volume_consistency",
        ):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0")


def _new_analysis_id() -> str:
    return f"voice_{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class VoiceAnalysis:
    """Immutable result of one analysed tick."""

    session_id: str
    stress_level: float
    confidence_level: float
    pitch_variation: float
    speech_rate: float
    volume_consistency: float
    emotional_state: EmotionalState
    timestamp: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_analysis_id)

    @classmethod
    def from_scores(
        cls,
        scores: Scores,
        state: EmotionalState,
        *,
        session_id: str,
        timestamp: datetime | None = None,
    ) -> VoiceAnalysis:
        return cls(
            session_id=session_id,
            stress_level=scores.stress_level,
            confidence_level=scores.confidence_level,
            pitch_variation=scores.pitch_variation,
            speech_rate=scores.speech_rate,
            volume_consistency=scores.volume_consistency,
            emotional_state=state,
            timestamp=timestamp or _utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Get a JSON-friendly representation of the record."""
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "session_id": self.session_id,
            "stress_level": self.stress_level,
            "confidence_level": self.confidence_level,
            "pitch_variation": self.pitch_variation,
            "speech_rate": self.speech_rate,
            "volume_consistency": self.volume_consistency,
            "emotional_state": self.emotional_state.value,
        }
