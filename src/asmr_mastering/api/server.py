"""HTTP endpoints over the audio mixer service."""

from __future__ import annotations

import base64
import binascii
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException

from asmr_mastering.api.schemas import (
    AudioRequest,
    AudioResponse,
    BinauralRequest,
    BinauralSettingsModel,
    ConvertRequest,
    MixingOptionsModel,
    MixRequest,
    MixResponse,
    NormalizeRequest,
    PresetModel,
    PresetsResponse,
    QualityReportModel,
)
from asmr_mastering.audio.runner import (
    EngineError,
    EngineExecutionError,
    EngineSpawnError,
    EngineTimeoutError,
)
from asmr_mastering.mixing.models import (
    AudioQualityReport,
    BinauralSettings,
    EQSettings,
    MixingOptions,
    OutputFormat,
    QualityTier,
)
from asmr_mastering.mixing.presets import ASMR_MIXING_PRESETS, get_mixing_preset
from asmr_mastering.mixing.service import AudioMixerService


def create_app(service: AudioMixerService | None = None) -> FastAPI:
    mixer = service or AudioMixerService()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await mixer.startup()
        yield

    app = FastAPI(title="asmr-mastering API", version="0.1.0", lifespan=lifespan)

    @app.get("/")
    def root() -> dict[str, str]:
        return {
            "service": "asmr-mastering API",
            "status": "ok",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict[str, object]:
        available = await mixer.engine.is_available()
        return {"status": "ok" if available else "degraded", "engine_available": available}

    @app.get("/v1/presets", response_model=PresetsResponse)
    def list_presets() -> PresetsResponse:
        return PresetsResponse(
            presets=[
                PresetModel(
                    name=preset.name,
                    description=preset.description,
                    options=MixingOptionsModel.model_validate(asdict(preset.options)),
                )
                for preset in ASMR_MIXING_PRESETS.values()
            ]
        )

    @app.post("/v1/audio/mix", response_model=MixResponse)
    async def mix(payload: MixRequest) -> MixResponse:
        voice = _decode(payload.voice_b64, "voice_b64")
        soundscape = _decode(payload.soundscape_b64, "soundscape_b64")
        if payload.options is not None:
            options = _to_mixing_options(payload.options)
        elif payload.preset is not None:
            try:
                options = get_mixing_preset(payload.preset).options
            except KeyError as exc:
                raise HTTPException(status_code=400, detail=str(exc)) from exc
        else:
            options = MixingOptions()

        try:
            result = await mixer.mix_voice_and_soundscape(voice, soundscape, options)
        except EngineError as exc:
            raise _engine_http_error(exc) from exc
        return MixResponse(
            audio_b64=_encode(result.output_buffer),
            metadata=result.metadata.to_dict(),
            quality_report=_report_model(result.quality_report),
        )

    @app.post("/v1/audio/binaural", response_model=AudioResponse)
    async def binaural(payload: BinauralRequest) -> AudioResponse:
        audio = _decode(payload.audio_b64, "audio_b64")
        try:
            output = await mixer.apply_binaural_effects(audio, _to_binaural_settings(payload.settings))
        except EngineError as exc:
            raise _engine_http_error(exc) from exc
        return AudioResponse(audio_b64=_encode(output), size=len(output))

    @app.post("/v1/audio/optimize", response_model=AudioResponse)
    async def optimize(payload: AudioRequest) -> AudioResponse:
        audio = _decode(payload.audio_b64, "audio_b64")
        try:
            output = await mixer.optimize_for_asmr(audio)
        except EngineError as exc:
            raise _engine_http_error(exc) from exc
        return AudioResponse(audio_b64=_encode(output), size=len(output))

    @app.post("/v1/audio/normalize", response_model=AudioResponse)
    async def normalize(payload: NormalizeRequest) -> AudioResponse:
        audio = _decode(payload.audio_b64, "audio_b64")
        try:
            output = await mixer.normalize_audio(audio, target_lufs=payload.target_lufs)
        except EngineError as exc:
            raise _engine_http_error(exc) from exc
        return AudioResponse(audio_b64=_encode(output), size=len(output))

    @app.post("/v1/audio/convert", response_model=AudioResponse)
    async def convert(payload: ConvertRequest) -> AudioResponse:
        audio = _decode(payload.audio_b64, "audio_b64")
        try:
            output = await mixer.convert_format(
                audio,
                OutputFormat(payload.target_format),
                QualityTier(payload.quality),
            )
        except EngineError as exc:
            raise _engine_http_error(exc) from exc
        return AudioResponse(audio_b64=_encode(output), size=len(output))

    @app.post("/v1/audio/analyze", response_model=QualityReportModel)
    async def analyze(payload: AudioRequest) -> QualityReportModel:
        audio = _decode(payload.audio_b64, "audio_b64")
        report = await mixer.analyze_audio_quality(audio)
        return _report_model(report)

    return app


def _decode(value: str, field_name: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"{field_name} is not valid base64") from exc


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _to_mixing_options(model: MixingOptionsModel) -> MixingOptions:
    eq = model.eq_settings
    return MixingOptions(
        voice_volume=model.voice_volume,
        soundscape_volume=model.soundscape_volume,
        fade_in_duration=model.fade_in_duration,
        fade_out_duration=model.fade_out_duration,
        compression_ratio=model.compression_ratio,
        eq_settings=EQSettings(**eq.model_dump()) if eq is not None else None,
    )


def _to_binaural_settings(model: BinauralSettingsModel) -> BinauralSettings:
    return BinauralSettings(**model.model_dump())


def _report_model(report: AudioQualityReport) -> QualityReportModel:
    return QualityReportModel.model_validate(report.to_dict())


def _engine_http_error(exc: EngineError) -> HTTPException:
    if isinstance(exc, EngineExecutionError):
        return HTTPException(status_code=502, detail=exc.stderr or str(exc))
    if isinstance(exc, EngineSpawnError):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, EngineTimeoutError):
        return HTTPException(status_code=504, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


app = create_app()
