"""End-to-end mastering of generated voice + soundscape pairs."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field

from asmr_mastering.mixing.models import (
    AudioQualityReport,
    BinauralSettings,
    MixingOptions,
    OutputFormat,
    QualityTier,
)
from asmr_mastering.mixing.presets import AUDIO_QUALITY_STANDARDS, meets_standard
from asmr_mastering.mixing.service import AudioMixerService

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MasteringRequest:
    voice: bytes
    soundscape: bytes
    mixing: MixingOptions
    binaural: BinauralSettings | None = None
    output_format: OutputFormat = OutputFormat.WAV
    quality: QualityTier = QualityTier.HIGH
    minimum_score: float | None = None
    quality_standard: str = "asmr_minimum"

    def __post_init__(self) -> None:
        if self.quality_standard not in AUDIO_QUALITY_STANDARDS:
            raise ValueError(f"Unknown quality standard '{self.quality_standard}'")


@dataclass(slots=True)
class MasteringComponents:
    mixing_applied: bool = False
    binaural_applied: bool = False
    asmr_optimized: bool = False
    format_converted: bool = False


@dataclass(slots=True)
class MasteringMetadata:
    total_duration: float
    file_size: int
    format: str
    sample_rate: int
    processing_time_ms: float
    quality_score: float
    below_minimum: bool = False


@dataclass(slots=True)
class MasteringResult:
    audio: bytes
    metadata: MasteringMetadata
    quality_report: AudioQualityReport
    components: MasteringComponents = field(default_factory=MasteringComponents)


class MasteringPipeline:
    def __init__(
        self,
        mixer: AudioMixerService,
        max_concurrent: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._mixer = mixer
        self._max_concurrent = max(max_concurrent or mixer.config.max_concurrent_jobs, 1)
        self._logger = logger or _LOGGER

    async def master(self, request: MasteringRequest) -> MasteringResult:
        started = time.perf_counter()
        components = MasteringComponents()

        mixed = await self._mixer.mix_voice_and_soundscape(request.voice, request.soundscape, request.mixing)
        components.mixing_applied = True
        audio = mixed.output_buffer

        if request.binaural is not None and request.binaural.enabled:
            audio = await self._mixer.apply_binaural_effects(audio, request.binaural)
            components.binaural_applied = True

        audio = await self._mixer.optimize_for_asmr(audio)
        components.asmr_optimized = True

        report = await self._mixer.analyze_audio_quality(audio)
        if request.minimum_score is not None:
            below_minimum = report.overall_score < request.minimum_score
        else:
            below_minimum = not meets_standard(report.overall_score, request.quality_standard)
        if below_minimum:
            self._logger.warning(
                "Quality score %.1f below minimum for %s (needs_reprocessing=%s)",
                report.overall_score,
                request.minimum_score if request.minimum_score is not None else request.quality_standard,
                report.needs_reprocessing,
            )

        fmt = OutputFormat(request.output_format)
        if fmt is not OutputFormat.WAV:
            audio = await self._mixer.convert_format(audio, fmt, request.quality)
            components.format_converted = True

        processing_time_ms = (time.perf_counter() - started) * 1000.0
        return MasteringResult(
            audio=audio,
            metadata=MasteringMetadata(
                total_duration=mixed.metadata.duration,
                file_size=len(audio),
                format=fmt.value,
                sample_rate=mixed.metadata.sample_rate,
                processing_time_ms=processing_time_ms,
                quality_score=report.overall_score,
                below_minimum=below_minimum,
            ),
            quality_report=report,
            components=components,
        )

    async def master_batch(self, requests: list[MasteringRequest]) -> list[MasteringResult]:
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _bounded(request: MasteringRequest) -> MasteringResult:
            async with semaphore:
                return await self.master(request)

        outcomes = await asyncio.gather(*(_bounded(request) for request in requests), return_exceptions=True)
        results: list[MasteringResult] = []
        for index, outcome in enumerate(outcomes, start=1):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                self._logger.error("Batch item %d failed: %s", index, outcome)
                continue
            results.append(outcome)
        self._logger.info("Batch mastering completed: %d/%d successful", len(results), len(requests))
        return results
