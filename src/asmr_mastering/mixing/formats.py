"""Codec/bitrate table for output format conversion."""

from __future__ import annotations

from pathlib import Path

from asmr_mastering.mixing.models import OutputFormat, QualityTier

PCM_SAMPLE_RATE = 44_100

_LOSSY_CODECS: dict[OutputFormat, tuple[str, dict[QualityTier, str]]] = {
    OutputFormat.MP3: (
        "libmp3lame",
        {QualityTier.STANDARD: "192k", QualityTier.HIGH: "256k", QualityTier.PREMIUM: "320k"},
    ),
    OutputFormat.AAC: (
        "aac",
        {QualityTier.STANDARD: "128k", QualityTier.HIGH: "192k", QualityTier.PREMIUM: "256k"},
    ),
}


def pcm_output_args(sample_rate: int = PCM_SAMPLE_RATE, channels: int | None = None) -> list[str]:
    args = ["-c:a", "pcm_s16le", "-ar", str(sample_rate)]
    if channels is not None:
        args.extend(["-ac", str(channels)])
    return args


def bitrate_for(target_format: OutputFormat, quality: QualityTier) -> str | None:
    entry = _LOSSY_CODECS.get(target_format)
    if entry is None:
        return None
    return entry[1][quality]


def build_conversion_args(
    input_path: str | Path,
    output_path: str | Path,
    target_format: OutputFormat | str,
    quality: QualityTier | str = QualityTier.HIGH,
) -> list[str]:
    fmt = OutputFormat(target_format)
    tier = QualityTier(quality)
    args = ["-i", str(input_path)]
    entry = _LOSSY_CODECS.get(fmt)
    if entry is None:
        # Lossless output ignores the quality tier.
        args.extend(pcm_output_args())
    else:
        codec, bitrates = entry
        args.extend(["-c:a", codec, "-b:a", bitrates[tier]])
    args.extend([str(output_path), "-y"])
    return args
