"""Bounded rolling histories of past pitch and volume samples."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

DEFAULT_HISTORY_CAPACITY = 20


class RollingHistory:
    """Fixed-capacity FIFO of float samples, most recent last."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._samples: deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def push(self, value: float) -> None:
        """Append a sample, dropping the oldest once capacity is exceeded."""
        self._samples.append(float(value))

    def values(self) -> list[float]:
        return list(self._samples)

    def tail(self, count: int) -> list[float]:
        """Return at most ``count`` most recent samples, oldest first."""
        if count <= 0:
            return []
        return list(self._samples)[-count:]

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._samples))

    def __repr__(self) -> str:
        return f"RollingHistory(capacity={self.capacity}, values={self.values()!r})"


class VoiceHistory:
    """The three per-session histories read by features and scores.

    ``voice`` duplicates ``volume``; it feeds the speech-rate score while
    ``volume`` feeds shimmer and volume consistency.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY) -> None:
        self.pitch = RollingHistory(capacity)
        self.volume = RollingHistory(capacity)
        self.voice = RollingHistory(capacity)

    def record(self, pitch: float, volume: float) -> None:
        self.pitch.push(pitch)
        self.volume.push(volume)
        self.voice.push(volume)

    def clear(self) -> None:
        self.pitch.clear()
        self.volume.clear()
        self.voice.clear()

    def __len__(self) -> int:
        return len(self.pitch)
