"""FastAPI request/response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from asmr_mastering.mixing.models import MAX_ECHO_DELAY_MS, BinauralSettings


class EQSettingsModel(BaseModel):
    low_freq: float = Field(default=0.0, ge=-20.0, le=20.0)
    mid_freq: float = Field(default=0.0, ge=-20.0, le=20.0)
    high_freq: float = Field(default=0.0, ge=-20.0, le=20.0)
    low_cutoff: float | None = Field(default=None, gt=0.0)
    high_cutoff: float | None = Field(default=None, gt=0.0)


class MixingOptionsModel(BaseModel):
    voice_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    soundscape_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    fade_in_duration: float = Field(default=0.0, ge=0.0)
    fade_out_duration: float = Field(default=0.0, ge=0.0)
    compression_ratio: float | None = Field(default=None, ge=1.0, le=10.0)
    eq_settings: EQSettingsModel | None = None


class BinauralSettingsModel(BaseModel):
    enabled: bool = False
    spatial_width: float = Field(default=1.0, ge=0.5, le=2.0)
    left_delay: float = Field(default=0.0, ge=0.0, le=MAX_ECHO_DELAY_MS)
    right_delay: float = Field(default=0.0, ge=0.0, le=MAX_ECHO_DELAY_MS)
    reverb_amount: float = Field(default=0.0, ge=0.0, le=1.0)
    room_size: float | None = Field(default=None, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_echo_taps(self) -> BinauralSettingsModel:
        BinauralSettings(**self.model_dump())
        return self


class MixRequest(BaseModel):
    voice_b64: str = Field(min_length=1)
    soundscape_b64: str = Field(min_length=1)
    options: MixingOptionsModel | None = None
    preset: str | None = None


class AudioRequest(BaseModel):
    audio_b64: str = Field(min_length=1)


class BinauralRequest(AudioRequest):
    settings: BinauralSettingsModel


class NormalizeRequest(AudioRequest):
    target_lufs: float = Field(default=-23.0, ge=-70.0, le=0.0)


class ConvertRequest(AudioRequest):
    target_format: Literal["mp3", "aac", "wav"]
    quality: Literal["standard", "high", "premium"] = "high"


class AudioResponse(BaseModel):
    audio_b64: str
    size: int


class AudioMetadataModel(BaseModel):
    duration: float
    sample_rate: int
    channels: int
    format: str
    size: int
    processing_time_ms: float


class FrequencyAnalysisModel(BaseModel):
    peak_frequency: float
    average_frequency: float
    dynamic_range: float
    spectral_centroid: float


class TechnicalMetricsModel(BaseModel):
    sample_rate: int
    bit_rate: int
    dynamic_range: float
    noise_floor: float
    frequency_response: FrequencyAnalysisModel


class AsmrMetricsModel(BaseModel):
    voice_clarity: float
    soundscape_harmony: float
    binaural_effectiveness: float
    relaxation_potential: float


class QualityReportModel(BaseModel):
    overall_score: float
    technical_metrics: TechnicalMetricsModel
    asmr_metrics: AsmrMetricsModel
    recommendations: list[str]
    needs_reprocessing: bool


class MixResponse(BaseModel):
    audio_b64: str
    metadata: AudioMetadataModel
    quality_report: QualityReportModel


class PresetModel(BaseModel):
    name: str
    description: str
    options: MixingOptionsModel


class PresetsResponse(BaseModel):
    presets: list[PresetModel]
