"""Session bookkeeping: one pipeline per session and voice-only summaries."""

from __future__ import annotations

import threading
from collections import Counter, deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from voice_stress.common.logging import get_logger, session_context

from .config import AnalyzerConfig
from .pipeline import AnalysisPipeline
from .types import EmotionalState, SpectralFrame, VoiceAnalysis

logger = get_logger(__name__)

DEFAULT_LOG_CAPACITY = 1000
RISK_WINDOW = 3


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate view over a session's emitted records."""

    session_id: str
    analyses: tuple[VoiceAnalysis, ...] = field(default_factory=tuple)

    @classmethod
    def from_analyses(
        cls, session_id: str, analyses: Sequence[VoiceAnalysis]
    ) -> SessionSummary:
        return cls(session_id=session_id, analyses=tuple(analyses))

    @property
    def count(self) -> int:
        return len(self.analyses)

    @property
    def average_stress(self) -> float:
        if not self.analyses:
            return 0.0
        return sum(a.stress_level for a in self.analyses) / len(self.analyses)

    @property
    def average_confidence(self) -> float:
        if not self.analyses:
            return 0.0
        return sum(a.confidence_level for a in self.analyses) / len(self.analyses)

    @property
    def state_counts(self) -> dict[EmotionalState, int]:
        return dict(Counter(a.emotional_state for a in self.analyses))

    def deception_risk(self, recent: int = RISK_WINDOW) -> tuple[int, list[str]]:
        """Score the most recent records for deception indicators.

        Returns:
            (risk score 0-100, list of contributing factors)
        """
        window = self.analyses[-recent:] if recent > 0 else ()
        score = 0
        factors: list[str] = []

        if sum(1 for a in window if a.stress_level > 0.7) > 1:
            score += 25
            factors.append("Elevated voice stress patterns")
        if any(a.emotional_state is EmotionalState.DECEPTIVE for a in window):
            score += 35
            factors.append("Deceptive voice patterns detected")
        if sum(1 for a in window if a.confidence_level < 0.4) > 1:
            score += 20
            factors.append("Low confidence indicators")

        return min(score, 100), factors

    def to_dict(self) -> dict[str, Any]:
        risk, factors = self.deception_risk()
        return {
            "session_id": self.session_id,
            "count": self.count,
            "average_stress": self.average_stress,
            "average_confidence": self.average_confidence,
            "state_counts": {
                state.value: count for state, count in self.state_counts.items()
            },
            "deception_risk": risk,
            "risk_factors": factors,
        }


class _Session:
    def __init__(self, pipeline: AnalysisPipeline, log_capacity: int) -> None:
        self.pipeline = pipeline
        self.log: deque[VoiceAnalysis] = deque(maxlen=log_capacity)


class SessionRegistry:
    """Hands out an independent AnalysisPipeline per session id.

    The lock only guards the session map; ticks against one session must
    still be serialized by the caller.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        *,
        metrics: dict[str, Any] | None = None,
        log_capacity: int = DEFAULT_LOG_CAPACITY,
    ) -> None:
        if log_capacity <= 0:
            raise ValueError("log_capacity must be positive")
        self.config = config or AnalyzerConfig()
        self._metrics = metrics
        self._log_capacity = log_capacity
        self._sessions: dict[str, _Session] = {}
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str) -> AnalysisPipeline:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                pipeline = AnalysisPipeline(
                    session_id, self.config, metrics=self._metrics
                )
                session = _Session(pipeline, self._log_capacity)
                self._sessions[session_id] = session
                logger.info("session.created", session_id=session_id)
            return session.pipeline

    def get(self, session_id: str) -> AnalysisPipeline | None:
        with self._lock:
            session = self._sessions.get(session_id)
        return session.pipeline if session else None

    def tick(self, session_id: str, frame: SpectralFrame) -> VoiceAnalysis | None:
        """Run one tick for ``session_id`` and keep the result in its log."""
        pipeline = self.get_or_create(session_id)
        with session_context(session_id):
            analysis = pipeline.tick(frame)
        if analysis is not None:
            with self._lock:
                session = self._sessions.get(session_id)
                if session is not None:
                    session.log.append(analysis)
        return analysis

    def summary(self, session_id: str) -> SessionSummary | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return SessionSummary.from_analyses(session_id, list(session.log))

    def close(self, session_id: str) -> SessionSummary | None:
        """Tear down a session, returning its final summary."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            logger.warning("session.close_unknown", session_id=session_id)
            return None
        summary = SessionSummary.from_analyses(session_id, list(session.log))
        stats = session.pipeline.get_statistics()
        logger.info(
            "session.closed",
            session_id=session_id,
            analyses=summary.count,
            tick_count=stats["tick_count"],
            skipped_count=stats["skipped_count"],
        )
        return summary

    def active_sessions(self) -> list[str]:
        with self._lock:
            return sorted(self._sessions)
