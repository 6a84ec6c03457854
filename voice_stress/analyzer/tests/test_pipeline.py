"""Tests for the per-tick analysis pipeline."""

from unittest.mock import Mock

import numpy as np
import pytest

from voice_stress.analyzer.config import AnalyzerConfig
from voice_stress.analyzer.pipeline import AnalysisPipeline
from voice_stress.analyzer.types import EmotionalState, SpectralFrame, VoiceAnalysis

F0_BIN_7 = 7 * 22050 / 1024
F0_BIN_10 = 10 * 22050 / 1024


class TestSilenceGate:
    """Test that quiet frames are skipped without touching history."""

    @pytest.mark.component
    def test_silent_frame_returns_none(self, pipeline, silent_frame):
        assert pipeline.tick(silent_frame) is None
        assert len(pipeline.history) == 0
        assert pipeline.get_statistics()["skipped_count"] == 1

    @pytest.mark.component
    def test_level_five_is_skipped(self, pipeline, make_frame):
        assert pipeline.tick(make_frame(level_byte=14)) is None
        assert len(pipeline.history) == 0

    @pytest.mark.component
    def test_level_six_is_analyzed(self, pipeline, make_frame):
        assert pipeline.tick(make_frame(level_byte=15)) is not None
        assert len(pipeline.history) == 1

    @pytest.mark.component
    def test_silence_between_speech_leaves_history_alone(
        self, pipeline, voiced_frame, silent_frame
    ):
        pipeline.tick(voiced_frame)
        pipeline.tick(silent_frame)

        assert pipeline.history.volume.values() == [20.0]


class TestSingleTick:
    """Test the first tick against an empty history."""

    @pytest.mark.component
    def test_single_peak_frame(self, pipeline, voiced_frame, fixed_time):
        analysis = pipeline.tick(voiced_frame)

        assert isinstance(analysis, VoiceAnalysis)
        assert analysis.session_id == "session_test"
        assert analysis.timestamp == fixed_time
        # only the raw-centroid bonus contributes
        assert analysis.stress_level == pytest.approx(0.2, abs=1e-6)
        # level 20 is outside the exclusive 20-80 window
        assert analysis.confidence_level == pytest.approx(0.8)
        assert analysis.pitch_variation == 0.0
        assert analysis.speech_rate == 0.5
        assert analysis.volume_consistency == 1.0
        assert analysis.emotional_state is EmotionalState.CONFIDENT

    @pytest.mark.component
    def test_history_records_f0_and_level(self, pipeline, voiced_frame):
        pipeline.tick(voiced_frame)

        assert pipeline.history.pitch.values() == [pytest.approx(F0_BIN_7)]
        assert pipeline.history.volume.values() == [20.0]
        assert pipeline.history.voice.values() == [20.0]

    @pytest.mark.component
    def test_each_record_gets_a_fresh_id(self, pipeline, voiced_frame):
        first = pipeline.tick(voiced_frame)
        second = pipeline.tick(voiced_frame)

        assert first.id != second.id
        assert first.id.startswith("voice_")


class TestHistoryOrdering:
    """Test that each tick is scored against history through the previous tick."""

    @pytest.mark.component
    def test_jitter_uses_pre_update_history(self, pipeline, make_frame):
        for _ in range(3):
            pipeline.tick(make_frame(peak_bin=7))

        expected_jitter = (F0_BIN_10 - F0_BIN_7) / 3 / 100
        features = pipeline.extractor.extract(make_frame(peak_bin=10), pipeline.history)
        assert features.jitter == pytest.approx(expected_jitter)

        analysis = pipeline.tick(make_frame(peak_bin=10))

        assert analysis.stress_level == pytest.approx(
            0.2 + 0.25 * expected_jitter, abs=1e-6
        )
        assert pipeline.history.pitch.values()[-1] == pytest.approx(F0_BIN_10)

    @pytest.mark.component
    def test_pitch_variation_uses_pre_update_history(self, pipeline, make_frame):
        for peak_bin in (5, 12, 5, 12):
            pipeline.tick(make_frame(peak_bin=peak_bin))

        fifth = pipeline.tick(make_frame(peak_bin=5))
        sixth = pipeline.tick(make_frame(peak_bin=12))

        assert fifth.pitch_variation == 0.0
        assert sixth.pitch_variation > 0.0


class TestRepeatedFrames:
    """Test feeding one frame many times."""

    @pytest.mark.component
    def test_history_is_bounded_and_stable(self, pipeline, voiced_frame):
        results = [pipeline.tick(voiced_frame) for _ in range(30)]

        assert len(pipeline.history) == 20
        assert len(pipeline.history.voice) == 20
        last = results[-1]
        assert last.pitch_variation == 0.0
        assert last.volume_consistency == 1.0
        assert last.speech_rate == 1.0
        assert last.stress_level == pytest.approx(0.2, abs=1e-6)
        assert all(r.emotional_state is EmotionalState.CONFIDENT for r in results)

    @pytest.mark.component
    def test_instability_settles_to_zero(self, pipeline, make_frame):
        loud = make_frame(level_byte=200, peak_bin=12)
        pipeline.tick(make_frame(level_byte=50, peak_bin=5))
        for _ in range(3):
            pipeline.tick(loud)

        features = pipeline.extractor.extract(loud, pipeline.history)
        assert features.jitter > 0.0
        assert features.shimmer > 0.0

        for _ in range(5):
            pipeline.tick(loud)
        features = pipeline.extractor.extract(loud, pipeline.history)
        assert features.jitter == 0.0
        assert features.shimmer == 0.0


class TestRobustness:
    """Test score bounds against adversarial input."""

    @pytest.mark.component
    def test_scores_always_bounded(self, pipeline):
        rng = np.random.default_rng(1234)
        for _ in range(60):
            spectrum = rng.uniform(-200.0, 200.0, size=512)
            spectrum[rng.integers(0, 512, size=20)] = np.inf
            spectrum[rng.integers(0, 512, size=20)] = -np.inf
            spectrum[rng.integers(0, 512, size=20)] = np.nan
            levels = rng.integers(0, 256, size=512)
            analysis = pipeline.tick(SpectralFrame(spectrum, levels))
            if analysis is None:
                continue
            for value in (
                analysis.stress_level,
                analysis.confidence_level,
                analysis.pitch_variation,
                analysis.speech_rate,
                analysis.volume_consistency,
            ):
                assert 0.0 <= value <= 1.0

    @pytest.mark.component
    def test_empty_spectrum_does_not_crash(self, pipeline):
        analysis = pipeline.tick(SpectralFrame([], [50] * 8))

        assert analysis is not None
        assert analysis.stress_level == 0.0

    @pytest.mark.component
    def test_empty_levels_are_silence(self, pipeline):
        assert pipeline.tick(SpectralFrame([-50.0] * 64, [])) is None


class TestPipelineLifecycle:
    """Test construction, reset, statistics and metrics."""

    @pytest.mark.unit
    def test_empty_session_id_rejected(self, analyzer_config):
        with pytest.raises(ValueError, match="session_id cannot be empty"):
            AnalysisPipeline("", analyzer_config)

    @pytest.mark.unit
    def test_reset_clears_history(self, pipeline, voiced_frame):
        pipeline.tick(voiced_frame)
        pipeline.reset()

        assert len(pipeline.history) == 0

    @pytest.mark.unit
    def test_statistics(self, pipeline, voiced_frame, silent_frame):
        pipeline.tick(voiced_frame)
        pipeline.tick(silent_frame)
        pipeline.tick(voiced_frame)

        assert pipeline.get_statistics() == {
            "session_id": "session_test",
            "tick_count": 3,
            "analyzed_count": 2,
            "skipped_count": 1,
            "history_length": 2,
        }

    @pytest.mark.unit
    def test_history_capacity_from_config(self, analyzer_config, voiced_frame):
        config = AnalyzerConfig(history_capacity=5)
        pipeline = AnalysisPipeline("s", config)
        for _ in range(8):
            pipeline.tick(voiced_frame)

        assert len(pipeline.history) == 5

    @pytest.mark.unit
    def test_metrics_recorded(self, analyzer_config, voiced_frame, silent_frame):
        metrics = {"ticks": Mock(), "stress_level": Mock(), "tick_duration": Mock()}
        pipeline = AnalysisPipeline("s", analyzer_config, metrics=metrics)

        pipeline.tick(voiced_frame)
        pipeline.tick(silent_frame)

        metrics["ticks"].add.assert_any_call(1, {"outcome": "analyzed"})
        metrics["ticks"].add.assert_any_call(1, {"outcome": "skipped"})
        metrics["stress_level"].record.assert_called_once()
        assert metrics["tick_duration"].record.call_count == 2
