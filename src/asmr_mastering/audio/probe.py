"""ffprobe wrapper returning typed stream/format metadata."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from asmr_mastering.audio.runner import MediaProcessRunner

PROBE_ARGS = ("-v", "quiet", "-print_format", "json", "-show_format", "-show_streams")


class InvalidMetadataError(ValueError):
    """Raised when probe output lacks required audio fields."""


@dataclass(slots=True)
class ProbeResult:
    sample_rate: int
    bit_rate: int
    duration: float
    channels: int
    codec_name: str | None = None
    format_name: str | None = None


async def probe_file(runner: MediaProcessRunner, path: str | Path) -> ProbeResult:
    output = await runner.run([*PROBE_ARGS, str(path)], f"Probe of {Path(path).name}")
    try:
        payload = json.loads(output.stdout_text)
    except json.JSONDecodeError as exc:
        raise InvalidMetadataError(f"Failed to parse probe output: {exc}") from exc
    return parse_probe_payload(payload)


def parse_probe_payload(payload: Any) -> ProbeResult:
    if not isinstance(payload, dict):
        raise InvalidMetadataError("Invalid audio metadata: probe output is not an object")

    streams = payload.get("streams") or []
    audio_stream = next(
        (stream for stream in streams if isinstance(stream, dict) and stream.get("codec_type") == "audio"),
        None,
    )
    fmt = payload.get("format") or {}
    if audio_stream is None or not isinstance(fmt, dict):
        raise InvalidMetadataError("Invalid audio metadata: missing required fields")

    sample_rate = _number(audio_stream.get("sample_rate"), int)
    bit_rate = _number(fmt.get("bit_rate"), int)
    duration = _number(fmt.get("duration"), float)
    if not sample_rate or not bit_rate or not duration:
        raise InvalidMetadataError("Invalid audio metadata: missing required fields")

    return ProbeResult(
        sample_rate=sample_rate,
        bit_rate=bit_rate,
        duration=duration,
        channels=_number(audio_stream.get("channels"), int) or 0,
        codec_name=audio_stream.get("codec_name"),
        format_name=fmt.get("format_name"),
    )


def _number(raw: Any, kind: type[int] | type[float]) -> Any:
    if raw is None or raw == "" or raw == "N/A":
        return None
    try:
        return kind(float(raw))
    except (TypeError, ValueError) as exc:
        raise InvalidMetadataError(f"Invalid audio metadata value: {raw!r}") from exc
