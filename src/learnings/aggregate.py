"""Topic and tag vocabularies ranked by frequency."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from learnings.models import TopicsAndTags
from learnings.search import read_all

if TYPE_CHECKING:
    from learnings.backends.base import Backend


def rank(counts: Counter[str]) -> list[str]:
    """Most frequent first; ties in ascending lexicographic order."""
    return [value for value, _ in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]


async def get_metadata(backend: Backend) -> TopicsAndTags:
    topics: Counter[str] = Counter()
    tags: Counter[str] = Counter()
    for learning in await read_all(backend):
        topics[learning.metadata.topic] += 1
        tags.update(learning.metadata.tags)
    return TopicsAndTags(topics=rank(topics), tags=rank(tags))


def merge(*vocabularies: TopicsAndTags) -> TopicsAndTags:
    """Order-preserving union: earlier vocabularies win position."""
    topics: dict[str, None] = {}
    tags: dict[str, None] = {}
    for vocab in vocabularies:
        topics.update(dict.fromkeys(vocab.topics))
        tags.update(dict.fromkeys(vocab.tags))
    return TopicsAndTags(topics=list(topics), tags=list(tags))
