"""Backend protocol and shared types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Literal, Protocol, runtime_checkable

from learnings.models import Learning, LearningMetadata, SearchOptions, SearchResult

Mutation = Literal["add", "remove"]

# Post-mutation hook: async (mutation, filename) -> None
MutationHook = Callable[[Mutation, str], Awaitable[None]]


@runtime_checkable
class Backend(Protocol):
    """Protocol that all storage backends must implement."""

    @property
    def base_dir(self) -> Path: ...

    async def list_files(self) -> list[str]:
        """Return learning filenames in directory listing order."""
        ...

    async def read(self, filename: str) -> Learning:
        """Read and decode one learning. Raises NotFoundError / FormatError."""
        ...

    async def write(self, filename: str, metadata: LearningMetadata, content: str) -> None:
        """Create or overwrite a learning."""
        ...

    async def delete(self, filename: str) -> None:
        """Delete a learning. Raises NotFoundError."""
        ...

    async def search(self, options: SearchOptions) -> list[SearchResult]:
        """Full scan filtered by topic, tags and text."""
        ...
