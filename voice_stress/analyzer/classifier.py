"""Map scores to an emotional-state label with an ordered rule list."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .types import EmotionalState, Scores


@dataclass(frozen=True)
class StateRule:
    """One classification rule; ``matches`` is evaluated on the scores."""

    state: EmotionalState
    description: str
    matches: Callable[[Scores], bool]


# First match wins; all comparisons are strict.
DEFAULT_RULES: tuple[StateRule, ...] = (
    StateRule(
        EmotionalState.STRESSED,
        "stress > 0.7",
        lambda s: s.stress_level > 0.7,
    ),
    StateRule(
        EmotionalState.CONFIDENT,
        "confidence > 0.7 and stress < 0.3",
        lambda s: s.confidence_level > 0.7 and s.stress_level < 0.3,
    ),
    StateRule(
        EmotionalState.UNCERTAIN,
        "pitch variation > 0.6 and speech rate < 0.4",
        lambda s: s.pitch_variation > 0.6 and s.speech_rate < 0.4,
    ),
    StateRule(
        EmotionalState.ANXIOUS,
        "stress > 0.5 and pitch variation > 0.5",
        lambda s: s.stress_level > 0.5 and s.pitch_variation > 0.5,
    ),
    StateRule(
        EmotionalState.DECEPTIVE,
        "stress > 0.4 and confidence < 0.4 and pitch variation > 0.4",
        lambda s: s.stress_level > 0.4
        and s.confidence_level < 0.4
        and s.pitch_variation > 0.4,
    ),
)


class StateClassifier:
    """Deterministic ordered decision list with ``calm`` as the fallback."""

    def __init__(
        self,
        rules: tuple[StateRule, ...] = DEFAULT_RULES,
        default: EmotionalState = EmotionalState.CALM,
    ) -> None:
        self.rules = rules
        self.default = default

    def classify(self, scores: Scores) -> EmotionalState:
        for rule in self.rules:
            if rule.matches(scores):
                return rule.state
        return self.default

    def explain(self, scores: Scores) -> StateRule | None:
        """Return the rule that decides ``scores``, or None for the fallback."""
        return next((rule for rule in self.rules if rule.matches(scores)), None)
