"""Audio mixer service: mix, spatialize, master, normalize, convert, analyze.

Every operation follows the same scoped flow: allocate session temp paths,
write inputs, build the filter graph, run the engine, read the output back
and always clean the session files up, whether the engine succeeded or not.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable

from asmr_mastering.audio.probe import InvalidMetadataError, probe_file
from asmr_mastering.audio.runner import EngineError, MediaProcessRunner
from asmr_mastering.audio.temp_files import TempFileManager, TempSession
from asmr_mastering.audio.wav_info import estimate_pcm_duration, try_read_wav_info
from asmr_mastering.config import MixerConfig
from asmr_mastering.mixing.filter_graph import (
    DEFAULT_TARGET_LUFS,
    build_asmr_optimization_chain,
    build_binaural_graph,
    build_loudness_chain,
    build_mixing_graph,
)
from asmr_mastering.mixing.formats import PCM_SAMPLE_RATE, build_conversion_args, pcm_output_args
from asmr_mastering.mixing.models import (
    AudioMetadata,
    AudioProcessingResult,
    AudioQualityReport,
    BinauralSettings,
    MixingOptions,
    OutputFormat,
    QualityTier,
)
from asmr_mastering.mixing.quality import QualityAnalyzer, default_quality_report

_LOGGER = logging.getLogger(__name__)

MIX_CHANNELS = 2

ArgsBuilder = Callable[[Path, Path], list[str]]


class AudioMixerService:
    def __init__(
        self,
        config: MixerConfig | None = None,
        engine: MediaProcessRunner | None = None,
        probe: MediaProcessRunner | None = None,
        analyzer: QualityAnalyzer | None = None,
        temp_files: TempFileManager | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config or MixerConfig.from_env()
        self._logger = logger or _LOGGER
        self._temp_files = temp_files or TempFileManager(self._config.temp_dir, logger=self._logger)
        self._engine = engine or MediaProcessRunner(
            self._config.ffmpeg_path,
            timeout_sec=self._config.engine_timeout_sec,
            logger=self._logger,
        )
        self._probe = probe or MediaProcessRunner(
            self._config.ffprobe_path,
            timeout_sec=self._config.engine_timeout_sec,
            logger=self._logger,
        )
        self._analyzer = analyzer or QualityAnalyzer(self._probe, self._temp_files, logger=self._logger)

    @property
    def config(self) -> MixerConfig:
        return self._config

    @property
    def engine(self) -> MediaProcessRunner:
        return self._engine

    async def startup(self) -> None:
        self._logger.debug("Ensuring audio temp directory %s", self._temp_files.root)
        await asyncio.to_thread(self._temp_files.ensure_root)

    async def mix_voice_and_soundscape(
        self,
        voice: bytes,
        soundscape: bytes,
        options: MixingOptions,
    ) -> AudioProcessingResult:
        started = time.perf_counter()
        async with self._temp_files.session() as session:
            self._logger.debug("Starting audio mixing session %s", session.session_id)
            try:
                voice_file = session.allocate("voice")
                soundscape_file = session.allocate("soundscape")
                output_file = session.allocate("mixed")

                await _write(voice_file, voice)
                await _write(soundscape_file, soundscape)

                total_duration = None
                if options.fade_out_duration > 0:
                    total_duration = await self._shortest_duration(
                        session, [(voice_file, voice), (soundscape_file, soundscape)]
                    )

                graph = build_mixing_graph(options, total_duration=total_duration)
                command = [
                    "-i",
                    str(voice_file),
                    "-i",
                    str(soundscape_file),
                    "-filter_complex",
                    graph.render(),
                    "-map",
                    graph.map_target,
                    *pcm_output_args(PCM_SAMPLE_RATE, MIX_CHANNELS),
                    str(output_file),
                    "-y",
                ]
                await self._engine.run(command, f"Audio mixing for session {session.session_id}")
                output = await _read(output_file)
            except Exception as exc:
                self._logger.error("Audio mixing failed for session %s: %s", session.session_id, exc)
                raise

        quality_report = await self.analyze_audio_quality(output)
        processing_time_ms = (time.perf_counter() - started) * 1000.0
        self._logger.debug("Audio mixing completed in %.0fms", processing_time_ms)

        info = try_read_wav_info(output)
        return AudioProcessingResult(
            output_buffer=output,
            metadata=AudioMetadata(
                duration=info.duration_sec if info else estimate_pcm_duration(len(output)),
                sample_rate=info.sample_rate if info else PCM_SAMPLE_RATE,
                channels=info.channels if info else MIX_CHANNELS,
                format=OutputFormat.WAV.value,
                size=len(output),
                processing_time_ms=processing_time_ms,
            ),
            quality_report=quality_report,
        )

    async def apply_binaural_effects(self, audio: bytes, settings: BinauralSettings) -> bytes:
        if not settings.enabled:
            self._logger.debug("Binaural effects disabled, returning input unchanged")
            return audio

        graph = build_binaural_graph(settings)

        def _args(input_file: Path, output_file: Path) -> list[str]:
            return [
                "-i",
                str(input_file),
                "-filter_complex",
                graph.render(),
                "-map",
                graph.map_target,
                *pcm_output_args(PCM_SAMPLE_RATE),
                str(output_file),
                "-y",
            ]

        return await self._transform(audio, "binaural", "Binaural processing", _args)

    async def optimize_for_asmr(self, audio: bytes) -> bytes:
        chain = build_asmr_optimization_chain()

        def _args(input_file: Path, output_file: Path) -> list[str]:
            return [
                "-i",
                str(input_file),
                "-af",
                chain.render(),
                *pcm_output_args(PCM_SAMPLE_RATE),
                str(output_file),
                "-y",
            ]

        return await self._transform(audio, "asmr", "ASMR optimization", _args)

    async def analyze_audio_quality(self, audio: bytes) -> AudioQualityReport:
        self._logger.debug("Audio quality analysis started (%d bytes)", len(audio))
        try:
            report = await self._analyzer.analyze(audio)
        except Exception as exc:
            self._logger.error("Audio quality analysis failed: %s", exc)
            return default_quality_report()
        self._logger.debug("Audio quality analysis completed, score %.1f", report.overall_score)
        return report

    async def normalize_audio(self, audio: bytes, target_lufs: float = DEFAULT_TARGET_LUFS) -> bytes:
        chain = build_loudness_chain(target_lufs)

        def _args(input_file: Path, output_file: Path) -> list[str]:
            return [
                "-i",
                str(input_file),
                "-af",
                chain.render(),
                *pcm_output_args(PCM_SAMPLE_RATE),
                str(output_file),
                "-y",
            ]

        return await self._transform(audio, "normalized", "Audio normalization", _args)

    async def convert_format(
        self,
        audio: bytes,
        target_format: OutputFormat | str,
        quality: QualityTier | str = QualityTier.HIGH,
    ) -> bytes:
        fmt = OutputFormat(target_format)
        tier = QualityTier(quality)

        def _args(input_file: Path, output_file: Path) -> list[str]:
            return build_conversion_args(input_file, output_file, fmt, tier)

        return await self._transform(
            audio,
            "output",
            f"Format conversion to {fmt.value}",
            _args,
            output_ext=fmt.value,
        )

    async def _transform(
        self,
        audio: bytes,
        output_role: str,
        description: str,
        build_args: ArgsBuilder,
        output_ext: str = "wav",
    ) -> bytes:
        async with self._temp_files.session() as session:
            self._logger.debug("%s started for session %s", description, session.session_id)
            try:
                input_file = session.allocate("input")
                output_file = session.allocate(output_role, output_ext)
                await _write(input_file, audio)
                await self._engine.run(
                    build_args(input_file, output_file),
                    f"{description} for session {session.session_id}",
                )
                result = await _read(output_file)
            except Exception as exc:
                self._logger.error("%s failed for session %s: %s", description, session.session_id, exc)
                raise
            self._logger.debug("%s completed for session %s", description, session.session_id)
            return result

    async def _shortest_duration(
        self,
        session: TempSession,
        inputs: list[tuple[Path, bytes]],
    ) -> float | None:
        durations: list[float] = []
        for path, data in inputs:
            info = try_read_wav_info(data)
            if info is not None:
                durations.append(info.duration_sec)
                continue
            try:
                durations.append((await probe_file(self._probe, path)).duration)
            except (EngineError, InvalidMetadataError) as exc:
                self._logger.warning(
                    "Could not measure %s for session %s, using end-relative fade-out: %s",
                    path.name,
                    session.session_id,
                    exc,
                )
                return None
        return min(durations) if durations else None


async def _write(path: Path, data: bytes) -> None:
    await asyncio.to_thread(path.write_bytes, data)


async def _read(path: Path) -> bytes:
    return await asyncio.to_thread(path.read_bytes)
