import asyncio
import logging
import sys
from pathlib import Path

import pytest

from asmr_mastering.audio.runner import (
    EngineExecutionError,
    EngineSpawnError,
    EngineTimeoutError,
    MediaProcessRunner,
)


def test_run_captures_stdout_and_stderr() -> None:
    runner = MediaProcessRunner(sys.executable)
    output = asyncio.run(
        runner.run(
            ["-c", "import sys; sys.stdout.write('hello'); sys.stderr.write('progress')"],
            "echo",
        )
    )
    assert output.returncode == 0
    assert output.stdout == b"hello"
    assert output.stderr_text == "progress"


def test_nonzero_exit_raises_with_stderr(caplog: pytest.LogCaptureFixture) -> None:
    runner = MediaProcessRunner(sys.executable)
    caplog.set_level(logging.ERROR)

    with pytest.raises(EngineExecutionError) as excinfo:
        asyncio.run(
            runner.run(["-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"], "Audio mixing for session s1")
        )

    error = excinfo.value
    assert error.returncode == 3
    assert "boom" in error.stderr
    assert str(error) == "Audio mixing for session s1 failed with code 3"
    assert "boom" in caplog.text


def test_missing_executable_raises_spawn_error(tmp_path: Path) -> None:
    runner = MediaProcessRunner(str(tmp_path / "missing-ffmpeg"))
    with pytest.raises(EngineSpawnError) as excinfo:
        asyncio.run(runner.run(["-version"], "version"))
    assert excinfo.value.executable.endswith("missing-ffmpeg")


def test_timeout_kills_process() -> None:
    runner = MediaProcessRunner(sys.executable, timeout_sec=0.2)
    with pytest.raises(EngineTimeoutError) as excinfo:
        asyncio.run(runner.run(["-c", "import time; time.sleep(10)"], "slow job"))
    assert excinfo.value.timeout_sec == pytest.approx(0.2)


def test_is_available_false_for_missing_executable(tmp_path: Path) -> None:
    runner = MediaProcessRunner(str(tmp_path / "missing-ffprobe"))
    assert asyncio.run(runner.is_available()) is False
