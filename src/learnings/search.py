"""Full-scan search over a backend.

No index: each search lists the directory and reads every candidate.
Results keep the backend's listing order, which is OS-dependent.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from learnings.models import Learning, SearchOptions, SearchResult

if TYPE_CHECKING:
    from learnings.backends.base import Backend


def matches(learning: Learning, options: SearchOptions) -> bool:
    """Apply topic, then all-tags, then free-text filters."""
    meta = learning.metadata

    if options.topic and meta.topic != options.topic:
        return False

    if options.tags and not all(tag in meta.tags for tag in options.tags):
        return False

    if options.search:
        full_text = f"{meta.title} {learning.content}".lower()
        if options.search.lower() not in full_text:
            return False

    return True


async def read_all(backend: Backend) -> list[Learning]:
    """Read every learning concurrently. The first failing read propagates."""
    filenames = await backend.list_files()
    return list(await asyncio.gather(*(backend.read(f) for f in filenames)))


async def search(backend: Backend, options: SearchOptions) -> list[SearchResult]:
    results: list[SearchResult] = []
    for learning in await read_all(backend):
        if matches(learning, options):
            results.append(
                SearchResult(
                    filename=learning.filename,
                    title=learning.metadata.title,
                    topic=learning.metadata.topic,
                )
            )
    return results
