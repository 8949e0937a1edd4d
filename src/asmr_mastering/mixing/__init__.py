"""Mixing domain public exports."""

from asmr_mastering.mixing.models import (
    AsmrMetrics,
    AudioMetadata,
    AudioProcessingResult,
    AudioQualityReport,
    BinauralSettings,
    EQSettings,
    FrequencyAnalysis,
    MixingOptions,
    OutputFormat,
    QualityTier,
    TechnicalMetrics,
)
from asmr_mastering.mixing.pipeline import MasteringPipeline, MasteringRequest, MasteringResult
from asmr_mastering.mixing.presets import ASMR_MIXING_PRESETS, AUDIO_QUALITY_STANDARDS, get_mixing_preset
from asmr_mastering.mixing.quality import QualityAnalyzer
from asmr_mastering.mixing.service import AudioMixerService

__all__ = [
    "ASMR_MIXING_PRESETS",
    "AUDIO_QUALITY_STANDARDS",
    "AsmrMetrics",
    "AudioMetadata",
    "AudioMixerService",
    "AudioProcessingResult",
    "AudioQualityReport",
    "BinauralSettings",
    "EQSettings",
    "FrequencyAnalysis",
    "MasteringPipeline",
    "MasteringRequest",
    "MasteringResult",
    "MixingOptions",
    "OutputFormat",
    "QualityAnalyzer",
    "QualityTier",
    "TechnicalMetrics",
    "get_mixing_preset",
]
