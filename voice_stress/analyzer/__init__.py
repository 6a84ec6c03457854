"""Voice-stress analysis pipeline.

Turns a stream of spectral frames into bounded stress, confidence, pitch
variation, speech rate and volume consistency scores plus an emotional-state
label, one tick at a time.
"""

from .classifier import DEFAULT_RULES, StateClassifier, StateRule
from .config import AnalyzerConfig
from .features import FeatureExtractor
from .history import RollingHistory, VoiceHistory
from .pipeline import AnalysisPipeline
from .scoring import ScoreCalculator
from .session import SessionRegistry, SessionSummary
from .types import EmotionalState, Features, Scores, SpectralFrame, VoiceAnalysis

__all__ = [
    "AnalysisPipeline",
    "AnalyzerConfig",
    "DEFAULT_RULES",
    "EmotionalState",
    "FeatureExtractor",
    "Features",
    "RollingHistory",
    "ScoreCalculator",
    "Scores",
    "SessionRegistry",
    "SessionSummary",
    "SpectralFrame",
    "StateClassifier",
    "StateRule",
    "VoiceAnalysis",
    "VoiceHistory",
]
