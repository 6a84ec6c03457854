"""Per-session analysis pipeline.

This module provides the AnalysisPipeline class that turns one spectral
frame into at most one VoiceAnalysis record per tick.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from voice_stress.common.logging import get_logger

from .classifier import StateClassifier
from .config import AnalyzerConfig
from .features import FeatureExtractor, volume_level
from .history import VoiceHistory
from .scoring import ScoreCalculator
from .types import SpectralFrame, VoiceAnalysis

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisPipeline:
    """Voice-stress analysis for one session.

    The pipeline owns the session's rolling history and is the only thing
    that mutates it. Ticks must be serialized by the caller; the pipeline
    holds no timer and takes no locks.
    """

    def __init__(
        self,
        session_id: str,
        config: AnalyzerConfig | None = None,
        *,
        extractor: FeatureExtractor | None = None,
        calculator: ScoreCalculator | None = None,
        classifier: StateClassifier | None = None,
        metrics: dict[str, Any] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            session_id: Session identifier copied onto every emitted record
            config: Analyzer configuration
            extractor: Feature extractor instance
            calculator: Score calculator instance
            classifier: State classifier instance
            metrics: Instruments from ``create_voice_metrics``
            clock: Source of record timestamps
        """
        if not session_id:
            raise ValueError("session_id cannot be empty")

        self.session_id = session_id
        self.config = config or AnalyzerConfig()
        self.extractor = extractor or FeatureExtractor(self.config)
        self.calculator = calculator or ScoreCalculator()
        self.classifier = classifier or StateClassifier()
        self.history = VoiceHistory(self.config.history_capacity)
        self._metrics = metrics or {}
        self._clock = clock or _utcnow
        self._logger = logger.bind(session_id=session_id)

        self._tick_count = 0
        self._analyzed_count = 0
        self._skipped_count = 0

        self._logger.debug(
            "pipeline.initialized",
            history_capacity=self.config.history_capacity,
            silence_level=self.config.silence_level,
        )

    def tick(self, frame: SpectralFrame) -> VoiceAnalysis | None:
        """Analyse one frame.

        Args:
            frame: Spectral frame supplied by the capture collaborator

        Returns:
            A fresh VoiceAnalysis, or None when the frame is at or below the
            silence level (history is left untouched in that case)
        """
        started = time.perf_counter()
        self._tick_count += 1

        level = volume_level(frame.time_domain_levels)
        if level <= self.config.silence_level:
            self._skipped_count += 1
            self._record_tick("skipped", started)
            self._logger.debug("voice_analysis.skipped_silence", level=level)
            return None

        features = self.extractor.extract(frame, self.history)
        scores = self.calculator.score(features, self.history)
        state = self.classifier.classify(scores)

        # recorded only after scoring: jitter/shimmer and the history scores
        # for this tick read history through the previous tick
        self.history.record(features.fundamental_freq, features.volume)

        analysis = VoiceAnalysis.from_scores(
            scores, state, session_id=self.session_id, timestamp=self._clock()
        )
        self._analyzed_count += 1
        self._record_tick("analyzed", started, stress=analysis.stress_level)

        self._logger.debug(
            "voice_analysis.emitted",
            analysis_id=analysis.id,
            emotional_state=state.value,
            stress_level=analysis.stress_level,
            confidence_level=analysis.confidence_level,
            fundamental_freq=features.fundamental_freq,
            level=level,
        )
        return analysis

    def reset(self) -> None:
        """Forget all history, e.g. when the speaker changes."""
        self.history.clear()
        self._logger.info("pipeline.reset")

    def get_statistics(self) -> dict[str, Any]:
        """Get pipeline processing statistics."""
        return {
            "session_id": self.session_id,
            "tick_count": self._tick_count,
            "analyzed_count": self._analyzed_count,
            "skipped_count": self._skipped_count,
            "history_length": len(self.history),
        }

    def _record_tick(
        self, outcome: str, started: float, *, stress: float | None = None
    ) -> None:
        if not self._metrics:
            return
        attributes = {"outcome": outcome}
        if "ticks" in self._metrics:
            self._metrics["ticks"].add(1, attributes)
        if stress is not None and "stress_level" in self._metrics:
            self._metrics["stress_level"].record(stress)
        if "tick_duration" in self._metrics:
            self._metrics["tick_duration"].record(
                time.perf_counter() - started, attributes
            )
