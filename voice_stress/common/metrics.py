"""Voice analysis metrics using OpenTelemetry."""

from __future__ import annotations

from typing import Any

from opentelemetry.metrics import Meter

from voice_stress.common.logging import get_logger

logger = get_logger(__name__)


def create_voice_metrics(meter: Meter | None) -> dict[str, Any]:
    """Create the instruments recorded by the analysis pipeline.

    Args:
        meter: OpenTelemetry meter, or None when metrics are disabled

    Returns:
        Dictionary of metric instruments keyed by metric name; empty when
        no meter is available or instrument creation fails.
    """
    if meter is None:
        return {}

    try:
        metrics = {
            "ticks": meter.create_counter(
                "voice_ticks_total",
                unit="1",
                description="Analysis ticks by outcome (analyzed/skipped)",
            ),
            "stress_level": meter.create_histogram(
                "voice_stress_level", unit="1", description="Stress score (0-1)"
            ),
            "tick_duration": meter.create_histogram(
                "voice_tick_duration_seconds",
                unit="s",
                description="Time spent analysing one frame",
            ),
        }
    except Exception as exc:
        logger.warning(
            "metrics.registration_failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return {}

    logger.debug("metrics.registered", metric_count=len(metrics))
    return metrics


__all__ = ["create_voice_metrics"]
