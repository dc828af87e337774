"""Plain directory backend. Every call goes back to disk."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from learnings import codec, search
from learnings.errors import NotFoundError
from learnings.models import (
    EXTENSION,
    RESERVED_FILENAME,
    Learning,
    LearningMetadata,
    SearchOptions,
    SearchResult,
)

logger = logging.getLogger(__name__)


class FileSystemBackend:
    """Learnings stored as ``*.md`` files directly under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def __repr__(self) -> str:
        return f"FileSystemBackend({str(self._base_dir)!r})"

    def _path(self, filename: str) -> Path:
        return self._base_dir / filename

    def _scan(self) -> list[str]:
        with os.scandir(self._base_dir) as entries:
            return [
                entry.name
                for entry in entries
                if entry.is_file()
                and entry.name.endswith(EXTENSION)
                and entry.name != RESERVED_FILENAME
            ]

    async def list_files(self) -> list[str]:
        return await asyncio.to_thread(self._scan)

    async def read(self, filename: str) -> Learning:
        path = self._path(filename)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(filename) from None
        metadata, content = codec.decode(text)
        return Learning(filename=filename, metadata=metadata, content=content)

    async def write(self, filename: str, metadata: LearningMetadata, content: str) -> None:
        text = codec.encode(metadata, content)
        await asyncio.to_thread(self._path(filename).write_text, text, encoding="utf-8")
        logger.info("Wrote learning %s (%d chars)", filename, len(text))

    async def delete(self, filename: str) -> None:
        try:
            await asyncio.to_thread(self._path(filename).unlink)
        except FileNotFoundError:
            raise NotFoundError(filename) from None
        logger.info("Deleted learning %s", filename)

    async def search(self, options: SearchOptions) -> list[SearchResult]:
        return await search.search(self, options)
