"""Scope orchestrator: one global and one local store behind one API.

Responsibilities:
1. Fan list/get out to both scopes concurrently and merge the answers
2. Split a result limit between scopes in proportion to their hit counts
3. Merge the topic/tag vocabularies of both scopes
4. Route add/remove to exactly one explicitly chosen scope

Nothing is cached between calls.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from learnings import aggregate
from learnings.backends import FileSystemBackend, git_backend
from learnings.config import LearningsConfig, resolve_repository
from learnings.errors import NotFoundError
from learnings.models import (
    SCOPES,
    AddLearningParams,
    AddResult,
    Learning,
    Scope,
    SearchOptions,
    SearchResult,
    TopicsAndTags,
)
from learnings.service import LearningsService

logger = logging.getLogger(__name__)


def allocate_limit(limit: int, global_count: int, local_count: int) -> tuple[int, int]:
    """Split ``limit`` between scopes proportionally to their raw counts.

    The global share is rounded up and local gets the remainder. A share
    larger than its scope's count is not handed to the other scope: that can
    only happen when ``limit`` covers every result anyway.
    """
    total = global_count + local_count
    if total == 0 or limit <= 0:
        return 0, 0

    global_limit = -(-limit * global_count // total)
    return global_limit, limit - global_limit


@dataclass
class ScopedListing:
    """Result of a dual-scope list."""

    global_results: list[SearchResult] = field(default_factory=list)
    local_results: list[SearchResult] = field(default_factory=list)
    global_total: int = 0
    local_total: int = 0
    vocabulary: TopicsAndTags = field(default_factory=TopicsAndTags)

    @property
    def total(self) -> int:
        return self.global_total + self.local_total

    @property
    def shown(self) -> int:
        return len(self.global_results) + len(self.local_results)

    @property
    def truncated(self) -> bool:
        return self.total > self.shown


class ScopeOrchestrator:
    """Holds the global and local services; keeps no state of its own."""

    def __init__(
        self,
        global_service: LearningsService,
        local_service: LearningsService,
    ) -> None:
        self._services: dict[Scope, LearningsService] = {
            "global": global_service,
            "local": local_service,
        }

    @classmethod
    def from_config(cls, config: LearningsConfig, cwd: Path | None = None) -> ScopeOrchestrator:
        """Resolve the global repository and the local folder, build both stores."""
        repo = resolve_repository(config)
        if repo.is_git_repo:
            global_backend = git_backend(repo.learnings_path)
        else:
            global_backend = FileSystemBackend(repo.learnings_path)

        local_path = (cwd or Path.cwd()) / config.local_folder
        local_path.mkdir(parents=True, exist_ok=True)
        logger.info("Global learnings: %s, local learnings: %s", global_backend, local_path)

        return cls(
            LearningsService(global_backend),
            LearningsService(FileSystemBackend(local_path)),
        )

    def service(self, scope: Scope) -> LearningsService:
        if scope not in self._services:
            raise ValueError(f"Invalid scope: {scope!r} (expected 'global' or 'local')")
        return self._services[scope]

    # ── Reads (fan-out to both scopes) ───────────────────────

    async def list(
        self,
        options: SearchOptions | None = None,
        *,
        limit: int | None = None,
        scopes: tuple[Scope, ...] = SCOPES,
    ) -> ScopedListing:
        """Search both scopes concurrently. The first failure propagates."""
        options = options or SearchOptions()
        for scope in scopes:
            self.service(scope)

        async def _search(scope: Scope) -> list[SearchResult]:
            if scope not in scopes:
                return []
            return await self.service(scope).list(options)

        global_results, local_results, global_meta, local_meta = await asyncio.gather(
            _search("global"),
            _search("local"),
            self._services["global"].get_metadata(),
            self._services["local"].get_metadata(),
        )

        listing = ScopedListing(
            global_results=global_results,
            local_results=local_results,
            global_total=len(global_results),
            local_total=len(local_results),
            vocabulary=aggregate.merge(global_meta, local_meta),
        )
        if limit is not None:
            global_limit, local_limit = allocate_limit(
                limit, listing.global_total, listing.local_total
            )
            listing.global_results = global_results[:global_limit]
            listing.local_results = local_results[:local_limit]
        return listing

    async def get(self, filename: str) -> dict[Scope, Learning]:
        """Look the filename up in both scopes.

        A failing side counts as "not found"; a learning present in both
        scopes is returned twice. Raises NotFoundError if neither has it.
        """
        results = await asyncio.gather(
            *(self._services[scope].get(filename) for scope in SCOPES),
            return_exceptions=True,
        )

        found: dict[Scope, Learning] = {}
        for scope, result in zip(SCOPES, results):
            if isinstance(result, Learning):
                found[scope] = result
            elif isinstance(result, Exception):
                logger.debug("%s lookup of %s failed: %s", scope, filename, result)
            else:
                raise result

        if not found:
            raise NotFoundError(filename)
        return found

    async def get_metadata(self) -> TopicsAndTags:
        global_meta, local_meta = await asyncio.gather(
            self._services["global"].get_metadata(),
            self._services["local"].get_metadata(),
        )
        return aggregate.merge(global_meta, local_meta)

    # ── Writes (exactly one scope) ───────────────────────────

    async def add(self, params: AddLearningParams, scope: Scope = "global") -> AddResult:
        result = await self.service(scope).add(params)
        logger.info("Added %s learning: %s", scope, result.filename)
        return result

    async def remove(self, filename: str, scope: Scope = "global") -> None:
        await self.service(scope).remove(filename)
        logger.info("Removed %s learning: %s", scope, filename)
