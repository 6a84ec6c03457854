"""Tunable constants of the analysis pipeline."""

from __future__ import annotations

from voice_stress.common.config import BaseConfig, FieldDefinition, ValidationError


class AnalyzerConfig(BaseConfig):
    """Analyzer configuration.

    The defaults are the values the stress thresholds were tuned against;
    changing them shifts every score.
    """

    @classmethod
    def get_field_definitions(cls) -> list[FieldDefinition]:
        return [
            FieldDefinition(
                name="history_capacity",
                field_type=int,
                default=20,
                description="Samples kept per rolling history",
                env_var="VOICE_STRESS_HISTORY_CAPACITY",
                min_value=1,
                max_value=1000,
            ),
            FieldDefinition(
                name="silence_level",
                field_type=int,
                default=5,
                description="Frames with a volume level at or below this are skipped",
                env_var="VOICE_STRESS_SILENCE_LEVEL",
                min_value=0,
                max_value=100,
            ),
            FieldDefinition(
                name="reference_nyquist_hz",
                field_type=float,
                default=22050.0,
                description="Frequency mapped to the last bin",
                env_var="VOICE_STRESS_REFERENCE_NYQUIST_HZ",
                min_value=1.0,
            ),
            FieldDefinition(
                name="voice_band_low_hz",
                field_type=float,
                default=80.0,
                description="Lower edge of the fundamental frequency search band",
                env_var="VOICE_STRESS_VOICE_BAND_LOW_HZ",
                min_value=0.0,
            ),
            FieldDefinition(
                name="voice_band_high_hz",
                field_type=float,
                default=300.0,
                description="Upper edge of the fundamental frequency search band",
                env_var="VOICE_STRESS_VOICE_BAND_HIGH_HZ",
                min_value=0.0,
            ),
            FieldDefinition(
                name="high_band_start_ratio",
                field_type=float,
                default=0.6,
                description="Fraction of the spectrum where the high-frequency band starts",
                env_var="VOICE_STRESS_HIGH_BAND_START_RATIO",
                min_value=0.0,
                max_value=1.0,
            ),
        ]

    def _validate(self) -> None:
        super()._validate()
        if self.voice_band_low_hz >= self.voice_band_high_hz:
            raise ValidationError(
                "voice_band_low_hz",
                self.voice_band_low_hz,
                "Must be below voice_band_high_hz",
            )
