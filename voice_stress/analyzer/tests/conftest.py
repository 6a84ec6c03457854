"""Test fixtures for analyzer tests."""

from collections.abc import Callable
from datetime import datetime, timezone

import numpy as np
import pytest

from voice_stress.analyzer.config import AnalyzerConfig
from voice_stress.analyzer.pipeline import AnalysisPipeline
from voice_stress.analyzer.types import SpectralFrame

BIN_COUNT = 1024
NOISE_FLOOR_DB = -100.0
# bin 7 of 1024 maps to 7 * 22050 / 1024 ~= 150.7 Hz
PEAK_BIN_150HZ = 7

FIXED_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_frame() -> Callable[..., SpectralFrame]:
    """Build a frame with a flat noise floor, one 0 dB peak and constant levels."""

    def _make_frame(
        level_byte: float = 50,
        peak_bin: int | None = PEAK_BIN_150HZ,
        bin_count: int = BIN_COUNT,
        floor_db: float = NOISE_FLOOR_DB,
    ) -> SpectralFrame:
        spectrum = np.full(bin_count, floor_db)
        if peak_bin is not None:
            spectrum[peak_bin] = 0.0
        levels = np.full(bin_count, level_byte, dtype=np.float64)
        return SpectralFrame(spectrum, levels, sample_rate_hz=44100)

    return _make_frame


@pytest.fixture
def silent_frame(make_frame) -> SpectralFrame:
    return make_frame(level_byte=0, peak_bin=None)


@pytest.fixture
def voiced_frame(make_frame) -> SpectralFrame:
    """Levels averaging 50 (volume level 20) with a single 150 Hz peak."""
    return make_frame(level_byte=50)


@pytest.fixture
def analyzer_config(monkeypatch) -> AnalyzerConfig:
    for name in (
        "VOICE_STRESS_HISTORY_CAPACITY",
        "VOICE_STRESS_SILENCE_LEVEL",
        "VOICE_STRESS_REFERENCE_NYQUIST_HZ",
        "VOICE_STRESS_VOICE_BAND_LOW_HZ",
        "VOICE_STRESS_VOICE_BAND_HIGH_HZ",
        "VOICE_STRESS_HIGH_BAND_START_RATIO",
    ):
        monkeypatch.delenv(name, raising=False)
    return AnalyzerConfig()


@pytest.fixture
def pipeline(analyzer_config) -> AnalysisPipeline:
    return AnalysisPipeline(
        "session_test", analyzer_config, clock=lambda: FIXED_TIME
    )


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME
