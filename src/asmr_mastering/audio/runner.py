"""Subprocess bridge to the external media engine (ffmpeg / ffprobe)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

_LOGGER = logging.getLogger(__name__)


class EngineError(RuntimeError):
    """Base class for media engine failures."""


class EngineSpawnError(EngineError):
    def __init__(self, executable: str, reason: str) -> None:
        super().__init__(f"Failed to start media engine '{executable}': {reason}")
        self.executable = executable
        self.reason = reason


class EngineExecutionError(EngineError):
    def __init__(self, description: str, returncode: int, stderr: str) -> None:
        super().__init__(f"{description} failed with code {returncode}")
        self.description = description
        self.returncode = returncode
        self.stderr = stderr


class EngineTimeoutError(EngineError):
    def __init__(self, description: str, timeout_sec: float) -> None:
        super().__init__(f"{description} timed out after {timeout_sec:g}s")
        self.description = description
        self.timeout_sec = timeout_sec


@dataclass(slots=True)
class ProcessOutput:
    stdout: bytes
    stderr: bytes
    returncode: int

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class MediaProcessRunner:
    def __init__(
        self,
        executable: str,
        timeout_sec: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._executable = executable
        self._timeout_sec = timeout_sec
        self._logger = logger or _LOGGER

    @property
    def executable(self) -> str:
        return self._executable

    async def run(self, args: Sequence[str], description: str) -> ProcessOutput:
        argv = [str(arg) for arg in args]
        self._logger.debug("Executing %s %s", self._executable, " ".join(argv))
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            self._logger.error("Failed to start %s: %s", self._executable, exc)
            raise EngineSpawnError(self._executable, str(exc)) from exc

        try:
            if self._timeout_sec is None:
                stdout, stderr = await process.communicate()
            else:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout_sec)
        except asyncio.TimeoutError as exc:
            await _kill(process)
            self._logger.error("%s timed out after %ss", description, self._timeout_sec)
            raise EngineTimeoutError(description, self._timeout_sec or 0.0) from exc
        except asyncio.CancelledError:
            await _kill(process)
            raise

        output = ProcessOutput(stdout=stdout, stderr=stderr, returncode=process.returncode or 0)
        if process.returncode != 0:
            self._logger.error("%s failed with code %s", description, process.returncode)
            self._logger.error("%s stderr: %s", self._executable, output.stderr_text)
            raise EngineExecutionError(description, process.returncode, output.stderr_text)

        self._logger.debug("%s completed successfully", description)
        return output

    async def is_available(self) -> bool:
        try:
            await self.run(["-version"], f"{self._executable} version check")
        except EngineError:
            return False
        return True


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()
