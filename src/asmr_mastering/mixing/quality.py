"""Heuristic quality scoring over probed audio metadata."""

from __future__ import annotations

import asyncio
import logging

from asmr_mastering.audio.probe import ProbeResult, probe_file
from asmr_mastering.audio.runner import MediaProcessRunner
from asmr_mastering.audio.temp_files import TempFileManager, new_session_id
from asmr_mastering.mixing.models import AsmrMetrics, AudioQualityReport, FrequencyAnalysis, TechnicalMetrics

_LOGGER = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 10.0
REPROCESS_THRESHOLD = 6.0

# Fixed until a spectral analysis stage exists.
PLACEHOLDER_DYNAMIC_RANGE = 16.0
PLACEHOLDER_NOISE_FLOOR = -60.0

RECOMMEND_SAMPLE_RATE = "Use a sample rate of 44.1kHz or higher"
RECOMMEND_BIT_RATE = "Use a bitrate of 256kbps or higher to preserve ASMR detail"
RECOMMEND_REPROCESS = "Audio quality needs improvement; reprocessing is recommended"
RECOMMEND_ASMR_FILTER = "Applying the ASMR optimization filter may help improve quality"
DEFAULT_REPORT_NOTE = "Unable to complete detailed analysis; using default quality assessment"


def placeholder_frequency_response() -> FrequencyAnalysis:
    return FrequencyAnalysis(
        peak_frequency=1000.0,
        average_frequency=800.0,
        dynamic_range=PLACEHOLDER_DYNAMIC_RANGE,
        spectral_centroid=1200.0,
    )


def technical_score(sample_rate: int, bit_rate: int, channels: int) -> float:
    score = 5.0
    if sample_rate >= 48_000:
        score += 2
    elif sample_rate >= 44_100:
        score += 1

    if bit_rate >= 320_000:
        score += 2
    elif bit_rate >= 256_000:
        score += 1.5
    elif bit_rate >= 192_000:
        score += 1

    if channels >= 2:
        score += 1
    return _clamp(score)


def asmr_score(sample_rate: int, bit_rate: int) -> float:
    score = 5.0
    if sample_rate >= 44_100 and bit_rate >= 256_000:
        score += 3
    elif sample_rate >= 44_100 and bit_rate >= 192_000:
        score += 2
    return _clamp(score)


def build_recommendations(sample_rate: int, bit_rate: int, tech_score: float) -> list[str]:
    recommendations: list[str] = []
    if sample_rate < 44_100:
        recommendations.append(RECOMMEND_SAMPLE_RATE)
    if bit_rate < 256_000:
        recommendations.append(RECOMMEND_BIT_RATE)
    if tech_score < REPROCESS_THRESHOLD:
        recommendations.append(RECOMMEND_REPROCESS)
    if tech_score < 8:
        recommendations.append(RECOMMEND_ASMR_FILTER)
    return recommendations


def generate_quality_report(probe: ProbeResult) -> AudioQualityReport:
    tech = technical_score(probe.sample_rate, probe.bit_rate, probe.channels)
    asmr = asmr_score(probe.sample_rate, probe.bit_rate)
    return AudioQualityReport(
        overall_score=_clamp((tech + asmr) / 2),
        technical_metrics=TechnicalMetrics(
            sample_rate=probe.sample_rate,
            bit_rate=probe.bit_rate,
            dynamic_range=PLACEHOLDER_DYNAMIC_RANGE,
            noise_floor=PLACEHOLDER_NOISE_FLOOR,
            frequency_response=placeholder_frequency_response(),
        ),
        asmr_metrics=AsmrMetrics(
            voice_clarity=8.0 if asmr > 7 else 6.0,
            soundscape_harmony=7.0,
            binaural_effectiveness=6.0,
            relaxation_potential=8.0 if asmr > 6 else 5.0,
        ),
        recommendations=build_recommendations(probe.sample_rate, probe.bit_rate, tech),
        needs_reprocessing=tech < REPROCESS_THRESHOLD,
    )


def default_quality_report() -> AudioQualityReport:
    return AudioQualityReport(
        overall_score=5.0,
        technical_metrics=TechnicalMetrics(
            sample_rate=44_100,
            bit_rate=256_000,
            dynamic_range=PLACEHOLDER_DYNAMIC_RANGE,
            noise_floor=PLACEHOLDER_NOISE_FLOOR,
            frequency_response=placeholder_frequency_response(),
        ),
        asmr_metrics=AsmrMetrics(
            voice_clarity=5.0,
            soundscape_harmony=5.0,
            binaural_effectiveness=5.0,
            relaxation_potential=5.0,
        ),
        recommendations=[DEFAULT_REPORT_NOTE],
        needs_reprocessing=False,
    )


class QualityAnalyzer:
    def __init__(
        self,
        probe: MediaProcessRunner,
        temp_files: TempFileManager,
        logger: logging.Logger | None = None,
    ) -> None:
        self._probe = probe
        self._temp_files = temp_files
        self._logger = logger or _LOGGER

    async def probe(self, audio: bytes) -> ProbeResult:
        session_id = new_session_id()
        async with self._temp_files.session(session_id) as session:
            input_file = session.allocate("analyze")
            await asyncio.to_thread(input_file.write_bytes, audio)
            return await probe_file(self._probe, input_file)

    async def analyze(self, audio: bytes) -> AudioQualityReport:
        return generate_quality_report(await self.probe(audio))


def _clamp(score: float) -> float:
    return min(max(score, MIN_SCORE), MAX_SCORE)
