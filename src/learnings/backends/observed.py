"""Mutation-observer wrapper: storage mechanics stay in the inner backend,
persistence policy lives in the hook.
"""

from __future__ import annotations

from pathlib import Path

from learnings import search
from learnings.backends.base import Backend, MutationHook
from learnings.models import Learning, LearningMetadata, SearchOptions, SearchResult


class ObservedBackend:
    """Delegate everything to ``inner``; after each successful write or
    delete, await ``hook``. A failing hook propagates, but the mutation has
    already reached the inner backend.
    """

    def __init__(self, inner: Backend, hook: MutationHook) -> None:
        self.inner = inner
        self.hook = hook

    @property
    def base_dir(self) -> Path:
        return self.inner.base_dir

    def __repr__(self) -> str:
        return f"ObservedBackend({self.inner!r}, hook={self.hook!r})"

    async def list_files(self) -> list[str]:
        return await self.inner.list_files()

    async def read(self, filename: str) -> Learning:
        return await self.inner.read(filename)

    async def write(self, filename: str, metadata: LearningMetadata, content: str) -> None:
        await self.inner.write(filename, metadata, content)
        await self.hook("add", filename)

    async def delete(self, filename: str) -> None:
        await self.inner.delete(filename)
        await self.hook("remove", filename)

    async def search(self, options: SearchOptions) -> list[SearchResult]:
        return await search.search(self, options)
