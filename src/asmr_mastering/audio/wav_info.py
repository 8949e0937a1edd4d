"""In-memory WAV header inspection used for durations and metadata."""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass


@dataclass(slots=True)
class WavInfo:
    sample_rate: int
    channels: int
    sample_width: int
    frame_count: int

    @property
    def duration_sec(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate


def read_wav_info(data: bytes) -> WavInfo:
    with wave.open(io.BytesIO(data), "rb") as wav:
        channels = wav.getnchannels()
        sample_width = wav.getsampwidth()
        frame_count = wav.getnframes()
        frame_size = channels * sample_width
        if frame_size > 0 and frame_count * frame_size > len(data):
            # Streaming writers leave the size fields at their maximum; count what is actually there.
            frame_count = len(wav.readframes(frame_count)) // frame_size
        info = WavInfo(
            sample_rate=wav.getframerate(),
            channels=channels,
            sample_width=sample_width,
            frame_count=frame_count,
        )
    if info.channels <= 0:
        raise ValueError("invalid channel count in wav data")
    return info


def try_read_wav_info(data: bytes) -> WavInfo | None:
    try:
        return read_wav_info(data)
    except (wave.Error, EOFError, ValueError):
        return None


def estimate_pcm_duration(size: int, sample_rate: int = 44_100, channels: int = 2, sample_width: int = 2) -> float:
    # Header bytes are ignored; only a fallback when the header cannot be parsed.
    bytes_per_second = sample_rate * channels * sample_width
    if bytes_per_second <= 0:
        return 0.0
    return size / bytes_per_second

