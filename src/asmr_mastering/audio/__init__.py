"""Media engine process, probe and temp file utilities."""

from asmr_mastering.audio.probe import InvalidMetadataError, ProbeResult, probe_file
from asmr_mastering.audio.runner import (
    EngineError,
    EngineExecutionError,
    EngineSpawnError,
    EngineTimeoutError,
    MediaProcessRunner,
    ProcessOutput,
)
from asmr_mastering.audio.temp_files import TempFileManager, TempSession, new_session_id
from asmr_mastering.audio.wav_info import WavInfo, read_wav_info

__all__ = [
    "EngineError",
    "EngineExecutionError",
    "EngineSpawnError",
    "EngineTimeoutError",
    "InvalidMetadataError",
    "MediaProcessRunner",
    "ProbeResult",
    "ProcessOutput",
    "TempFileManager",
    "TempSession",
    "WavInfo",
    "new_session_id",
    "probe_file",
    "read_wav_info",
]
