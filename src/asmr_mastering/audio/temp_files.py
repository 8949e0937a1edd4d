"""Session-scoped temp file paths with guaranteed cleanup."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable
from uuid import uuid4

_LOGGER = logging.getLogger(__name__)


def new_session_id() -> str:
    return uuid4().hex


class TempFileManager:
    def __init__(self, root: str | Path, logger: logging.Logger | None = None) -> None:
        self._root = Path(root)
        self._logger = logger or _LOGGER
        self._root_ready = False

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        if not self._root_ready:
            self._root.mkdir(parents=True, exist_ok=True)
            self._root_ready = True
        return self._root

    def allocate(self, session_id: str, role: str, ext: str = "wav") -> Path:
        root = self.ensure_root()
        return root / f"{role}_{session_id}.{ext.lstrip('.')}"

    async def cleanup(self, paths: Iterable[str | Path]) -> None:
        for path in paths:
            try:
                await asyncio.to_thread(Path(path).unlink, missing_ok=True)
            except OSError as exc:
                self._logger.warning("Failed to cleanup file %s: %s", path, exc)

    @asynccontextmanager
    async def session(self, session_id: str | None = None) -> AsyncIterator[TempSession]:
        scope = TempSession(self, session_id or new_session_id())
        try:
            yield scope
        finally:
            await self.cleanup(scope.paths)


class TempSession:
    def __init__(self, manager: TempFileManager, session_id: str) -> None:
        self._manager = manager
        self.session_id = session_id
        self.paths: list[Path] = []

    def allocate(self, role: str, ext: str = "wav") -> Path:
        path = self._manager.allocate(self.session_id, role, ext)
        self.paths.append(path)
        return path
