"""Real-time voice-stress feature extraction."""

__version__ = "0.1.0"
