"""Named mixing presets and quality standard tiers."""

from __future__ import annotations

from dataclasses import dataclass

from asmr_mastering.mixing.models import EQSettings, MixingOptions


@dataclass(frozen=True, slots=True)
class MixingPreset:
    name: str
    description: str
    options: MixingOptions


@dataclass(frozen=True, slots=True)
class QualityStandard:
    sample_rate: int
    bit_rate: int
    dynamic_range: float
    noise_floor: float
    overall_score: float


ASMR_MIXING_PRESETS: dict[str, MixingPreset] = {
    "sleep_optimized": MixingPreset(
        name="sleep_optimized",
        description="Mix tuned for falling asleep",
        options=MixingOptions(
            voice_volume=0.7,
            soundscape_volume=0.3,
            fade_in_duration=3,
            fade_out_duration=5,
            compression_ratio=2.5,
            eq_settings=EQSettings(low_freq=-2, mid_freq=1, high_freq=-1, low_cutoff=80, high_cutoff=15_000),
        ),
    ),
    "focus_optimized": MixingPreset(
        name="focus_optimized",
        description="Mix tuned for concentration",
        options=MixingOptions(
            voice_volume=0.8,
            soundscape_volume=0.2,
            fade_in_duration=2,
            fade_out_duration=3,
            compression_ratio=1.8,
            eq_settings=EQSettings(low_freq=-1, mid_freq=2, high_freq=0, low_cutoff=100, high_cutoff=12_000),
        ),
    ),
    "relaxation_optimized": MixingPreset(
        name="relaxation_optimized",
        description="Mix tuned for deep relaxation",
        options=MixingOptions(
            voice_volume=0.65,
            soundscape_volume=0.35,
            fade_in_duration=4,
            fade_out_duration=6,
            compression_ratio=3,
            eq_settings=EQSettings(low_freq=1, mid_freq=0, high_freq=-2, low_cutoff=60, high_cutoff=16_000),
        ),
    ),
    # Louder voice, softer highs and longer fades for older listeners.
    "elderly_friendly": MixingPreset(
        name="elderly_friendly",
        description="Mix tuned for middle-aged and elderly listeners",
        options=MixingOptions(
            voice_volume=0.75,
            soundscape_volume=0.25,
            fade_in_duration=5,
            fade_out_duration=8,
            compression_ratio=2,
            eq_settings=EQSettings(low_freq=-3, mid_freq=3, high_freq=-4, low_cutoff=120, high_cutoff=8000),
        ),
    ),
}


AUDIO_QUALITY_STANDARDS: dict[str, QualityStandard] = {
    "asmr_minimum": QualityStandard(
        sample_rate=44_100,
        bit_rate=192_000,
        dynamic_range=12,
        noise_floor=-60,
        overall_score=4,
    ),
    "asmr_recommended": QualityStandard(
        sample_rate=48_000,
        bit_rate=256_000,
        dynamic_range=16,
        noise_floor=-65,
        overall_score=6,
    ),
    "asmr_premium": QualityStandard(
        sample_rate=48_000,
        bit_rate=320_000,
        dynamic_range=20,
        noise_floor=-70,
        overall_score=8,
    ),
}


def get_mixing_preset(name: str) -> MixingPreset:
    normalized = name.strip().lower().replace("-", "_")
    preset = ASMR_MIXING_PRESETS.get(normalized)
    if preset is None:
        raise KeyError(f"Unknown mixing preset '{name}'")
    return preset


def meets_standard(overall_score: float, standard: str = "asmr_minimum") -> bool:
    return overall_score >= AUDIO_QUALITY_STANDARDS[standard].overall_score
