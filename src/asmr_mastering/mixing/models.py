"""Typed options and results for mixing, effects and quality reports."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

MAX_ECHO_DELAY_MS = 90_000.0


class OutputFormat(str, Enum):
    MP3 = "mp3"
    AAC = "aac"
    WAV = "wav"


class QualityTier(str, Enum):
    STANDARD = "standard"
    HIGH = "high"
    PREMIUM = "premium"


def _check_range(name: str, value: float, minimum: float, maximum: float | None = None) -> None:
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"[{minimum}, {maximum}]" if maximum is not None else f">= {minimum}"
        raise ValueError(f"{name}={value} is outside {bound}")


@dataclass(frozen=True, slots=True)
class EQSettings:
    low_freq: float = 0.0
    mid_freq: float = 0.0
    high_freq: float = 0.0
    low_cutoff: float | None = None
    high_cutoff: float | None = None

    def __post_init__(self) -> None:
        _check_range("low_freq", self.low_freq, -20.0, 20.0)
        _check_range("mid_freq", self.mid_freq, -20.0, 20.0)
        _check_range("high_freq", self.high_freq, -20.0, 20.0)
        for name, cutoff in (("low_cutoff", self.low_cutoff), ("high_cutoff", self.high_cutoff)):
            if cutoff is not None and cutoff <= 0:
                raise ValueError(f"{name}={cutoff} must be positive")


@dataclass(frozen=True, slots=True)
class MixingOptions:
    voice_volume: float = 1.0
    soundscape_volume: float = 1.0
    fade_in_duration: float = 0.0
    fade_out_duration: float = 0.0
    compression_ratio: float | None = None
    eq_settings: EQSettings | None = None

    def __post_init__(self) -> None:
        _check_range("voice_volume", self.voice_volume, 0.0, 1.0)
        _check_range("soundscape_volume", self.soundscape_volume, 0.0, 1.0)
        _check_range("fade_in_duration", self.fade_in_duration, 0.0)
        _check_range("fade_out_duration", self.fade_out_duration, 0.0)
        if self.compression_ratio is not None:
            _check_range("compression_ratio", self.compression_ratio, 1.0, 10.0)


@dataclass(slots=True)
class BinauralSettings:
    enabled: bool = False
    spatial_width: float = 1.0
    left_delay: float = 0.0
    right_delay: float = 0.0
    reverb_amount: float = 0.0
    room_size: float | None = None

    def __post_init__(self) -> None:
        _check_range("spatial_width", self.spatial_width, 0.5, 2.0)
        _check_range("left_delay", self.left_delay, 0.0, MAX_ECHO_DELAY_MS)
        _check_range("right_delay", self.right_delay, 0.0, MAX_ECHO_DELAY_MS)
        _check_range("reverb_amount", self.reverb_amount, 0.0, 1.0)
        if self.room_size is not None:
            _check_range("room_size", self.room_size, 0.0, 1.0)
        if self.enabled and (self.left_delay > 0 or self.right_delay > 0):
            # Every echo tap needs a positive delay and a positive decay.
            if self.left_delay <= 0 or self.right_delay <= 0:
                raise ValueError("left_delay and right_delay must both be positive when either is set")
            if self.reverb_amount <= 0:
                raise ValueError("reverb_amount must be positive when channel delays are set")


@dataclass(slots=True)
class FrequencyAnalysis:
    peak_frequency: float
    average_frequency: float
    dynamic_range: float
    spectral_centroid: float


@dataclass(slots=True)
class TechnicalMetrics:
    sample_rate: int
    bit_rate: int
    dynamic_range: float
    noise_floor: float
    frequency_response: FrequencyAnalysis


@dataclass(slots=True)
class AsmrMetrics:
    voice_clarity: float
    soundscape_harmony: float
    binaural_effectiveness: float
    relaxation_potential: float


@dataclass(slots=True)
class AudioQualityReport:
    overall_score: float
    technical_metrics: TechnicalMetrics
    asmr_metrics: AsmrMetrics
    recommendations: list[str] = field(default_factory=list)
    needs_reprocessing: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class AudioMetadata:
    duration: float
    sample_rate: int
    channels: int
    format: str
    size: int
    processing_time_ms: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class AudioProcessingResult:
    output_buffer: bytes
    metadata: AudioMetadata
    quality_report: AudioQualityReport
