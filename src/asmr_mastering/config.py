"""Runtime configuration for the mixing core."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path


def _default_temp_dir() -> Path:
    return Path(tempfile.gettempdir()) / "asmr_mastering" / "audio"


@dataclass(slots=True)
class MixerConfig:
    temp_dir: Path = field(default_factory=_default_temp_dir)
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    engine_timeout_sec: float | None = None
    max_concurrent_jobs: int = 3

    @staticmethod
    def from_env() -> MixerConfig:
        temp_dir_raw = os.getenv("AUDIO_TEMP_DIR", "").strip()
        ffmpeg_path = os.getenv("FFMPEG_PATH", "").strip() or "ffmpeg"
        ffprobe_path = os.getenv("FFPROBE_PATH", "").strip() or "ffprobe"

        timeout_raw = os.getenv("ASMR_ENGINE_TIMEOUT_SEC", "").strip()
        engine_timeout_sec: float | None = None
        if timeout_raw:
            try:
                engine_timeout_sec = max(float(timeout_raw), 0.1)
            except ValueError:
                engine_timeout_sec = None

        concurrency_raw = os.getenv("MAX_CONCURRENT_AUDIO_JOBS", "3").strip()
        try:
            max_concurrent_jobs = int(concurrency_raw)
        except ValueError:
            max_concurrent_jobs = 3

        return MixerConfig(
            temp_dir=Path(temp_dir_raw) if temp_dir_raw else _default_temp_dir(),
            ffmpeg_path=ffmpeg_path,
            ffprobe_path=ffprobe_path,
            engine_timeout_sec=engine_timeout_sec,
            max_concurrent_jobs=max(max_concurrent_jobs, 1),
        )
