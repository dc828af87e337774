"""Business operations on a single backend."""

from __future__ import annotations

import logging
from datetime import date

from learnings import aggregate
from learnings.backends.base import Backend
from learnings.models import (
    EXTENSION,
    AddLearningParams,
    AddResult,
    Learning,
    LearningMetadata,
    SearchOptions,
    SearchResult,
    TopicsAndTags,
)

logger = logging.getLogger(__name__)


def normalize_filename(filename: str) -> str:
    """Append the ``.md`` extension exactly once."""
    filename = filename.strip()
    if filename.endswith(EXTENSION):
        return filename
    return filename + EXTENSION


def render_body(params: AddLearningParams) -> str:
    """Build the markdown body from the structured add parameters."""
    sections = [
        f"# {params.title}",
        params.one_liner.strip(),
        f"## Context\n\n{params.context.strip()}",
        f"## Examples\n\n{params.examples.strip()}",
    ]
    if params.related:
        links = "\n".join(f"- [{name}](./{name})" for name in params.related)
        sections.append(f"## See Also\n\n{links}")
    return "\n\n".join(sections)


class LearningsService:
    """list / get / add / remove / get_metadata over one backend."""

    def __init__(self, backend: Backend) -> None:
        self.backend = backend

    def __repr__(self) -> str:
        return f"LearningsService({self.backend!r})"

    async def list(self, options: SearchOptions | None = None) -> list[SearchResult]:
        return await self.backend.search(options or SearchOptions())

    async def get(self, filename: str) -> Learning:
        return await self.backend.read(filename)

    async def add(self, params: AddLearningParams) -> AddResult:
        filename = normalize_filename(params.filename)
        metadata = LearningMetadata(
            title=params.title,
            topic=params.topic,
            tags=list(params.tags),
            created=date.today().isoformat(),
            related=list(params.related),
        )
        await self.backend.write(filename, metadata, render_body(params))
        return AddResult(filename=filename)

    async def remove(self, filename: str) -> None:
        await self.backend.delete(filename)

    async def get_metadata(self) -> TopicsAndTags:
        return await aggregate.get_metadata(self.backend)
