"""Tests for the dual-scope orchestrator."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from learnings.backends import FileSystemBackend, ObservedBackend
from learnings.config import LearningsConfig
from learnings.errors import FormatError, NotFoundError
from learnings.models import AddLearningParams, SearchOptions
from learnings.scopes import ScopeOrchestrator, allocate_limit
from learnings.service import LearningsService


def params(filename: str, title: str = "T", topic: str = "t", **kwargs) -> AddLearningParams:
    return AddLearningParams(
        filename=filename,
        title=title,
        topic=topic,
        one_liner="one",
        context="ctx",
        examples="ex",
        **kwargs,
    )


@pytest.fixture
def dirs(tmp_path: Path) -> tuple[Path, Path]:
    global_dir, local_dir = tmp_path / "global", tmp_path / "local"
    global_dir.mkdir()
    local_dir.mkdir()
    return global_dir, local_dir


@pytest.fixture
def scopes(dirs: tuple[Path, Path]) -> ScopeOrchestrator:
    global_dir, local_dir = dirs
    return ScopeOrchestrator(
        LearningsService(FileSystemBackend(global_dir)),
        LearningsService(FileSystemBackend(local_dir)),
    )


class TestAllocateLimit:
    def test_proportional_ceil_global(self):
        assert allocate_limit(6, 8, 2) == (5, 1)

    def test_sums_to_limit(self):
        for g, l in [(8, 2), (1, 1), (3, 7), (0, 5), (5, 0)]:
            assert sum(allocate_limit(6, g, l)) == 6

    def test_no_results(self):
        assert allocate_limit(6, 0, 0) == (0, 0)

    def test_zero_limit(self):
        assert allocate_limit(0, 3, 3) == (0, 0)

    def test_global_rounds_up(self):
        assert allocate_limit(5, 1, 9) == (1, 4)
        assert allocate_limit(3, 1, 1) == (2, 1)

    def test_oversized_share_never_hides_results(self):
        # A share may exceed its scope's count, but only when the limit
        # already covers every result, so nothing is under-filled.
        for limit in range(0, 13):
            for g in range(0, 9):
                for l in range(0, 9):
                    g_share, l_share = allocate_limit(limit, g, l)
                    shown = min(g_share, g) + min(l_share, l)
                    assert shown == min(limit, g + l)


class TestList:
    @pytest.mark.asyncio
    async def test_tagged_by_scope(self, scopes: ScopeOrchestrator):
        await scopes.add(params("g.md", topic="git"), scope="global")
        await scopes.add(params("l.md", topic="local-topic"), scope="local")

        listing = await scopes.list()
        assert [r.filename for r in listing.global_results] == ["g.md"]
        assert [r.filename for r in listing.local_results] == ["l.md"]
        assert listing.total == 2
        assert not listing.truncated

    @pytest.mark.asyncio
    async def test_filters_apply_to_both(self, scopes: ScopeOrchestrator):
        await scopes.add(params("g1.md", topic="git"), scope="global")
        await scopes.add(params("g2.md", topic="ts"), scope="global")
        await scopes.add(params("l1.md", topic="git"), scope="local")

        listing = await scopes.list(SearchOptions(topic="git"))
        assert [r.filename for r in listing.global_results] == ["g1.md"]
        assert [r.filename for r in listing.local_results] == ["l1.md"]

    @pytest.mark.asyncio
    async def test_merged_vocabulary(self, scopes: ScopeOrchestrator):
        await scopes.add(params("g1.md", topic="git", tags=["a"]), scope="global")
        await scopes.add(params("g2.md", topic="git", tags=["b"]), scope="global")
        await scopes.add(params("l1.md", topic="ts", tags=["a", "c"]), scope="local")
        await scopes.add(params("l2.md", topic="git"), scope="local")

        listing = await scopes.list(SearchOptions(topic="nothing"))
        assert listing.total == 0
        assert listing.vocabulary.topics == ["git", "ts"]
        assert listing.vocabulary.tags == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_limit_split(self, scopes: ScopeOrchestrator):
        for i in range(8):
            await scopes.add(params(f"g{i}.md"), scope="global")
        for i in range(2):
            await scopes.add(params(f"l{i}.md"), scope="local")

        listing = await scopes.list(limit=6)
        assert len(listing.global_results) == 5
        assert len(listing.local_results) == 1
        assert (listing.global_total, listing.local_total) == (8, 2)
        assert listing.shown == 6
        assert listing.truncated

    @pytest.mark.asyncio
    async def test_scope_filter(self, scopes: ScopeOrchestrator):
        await scopes.add(params("g.md", topic="git"), scope="global")
        await scopes.add(params("l.md", topic="ts"), scope="local")

        listing = await scopes.list(scopes=("local",))
        assert listing.global_results == []
        assert [r.filename for r in listing.local_results] == ["l.md"]
        assert listing.vocabulary.topics == ["git", "ts"]

    @pytest.mark.asyncio
    async def test_invalid_scope(self, scopes: ScopeOrchestrator):
        with pytest.raises(ValueError, match="Invalid scope"):
            await scopes.list(scopes=("elsewhere",))

    @pytest.mark.asyncio
    async def test_failure_propagates(self, scopes: ScopeOrchestrator, dirs):
        _, local_dir = dirs
        (local_dir / "broken.md").write_text("not a learning", encoding="utf-8")
        with pytest.raises(FormatError):
            await scopes.list()


class TestGet:
    @pytest.mark.asyncio
    async def test_only_global(self, scopes: ScopeOrchestrator):
        await scopes.add(params("a.md", title="Global A"), scope="global")
        found = await scopes.get("a.md")
        assert list(found) == ["global"]
        assert found["global"].metadata.title == "Global A"

    @pytest.mark.asyncio
    async def test_both_scopes(self, scopes: ScopeOrchestrator):
        await scopes.add(params("a.md", title="Global A"), scope="global")
        await scopes.add(params("a.md", title="Local A"), scope="local")
        found = await scopes.get("a.md")
        assert found["global"].metadata.title == "Global A"
        assert found["local"].metadata.title == "Local A"

    @pytest.mark.asyncio
    async def test_failing_side_is_not_found(self, scopes: ScopeOrchestrator, dirs):
        global_dir, _ = dirs
        (global_dir / "a.md").write_text("broken", encoding="utf-8")
        await scopes.add(params("a.md", title="Local A"), scope="local")
        found = await scopes.get("a.md")
        assert list(found) == ["local"]

    @pytest.mark.asyncio
    async def test_missing_everywhere(self, scopes: ScopeOrchestrator):
        with pytest.raises(NotFoundError):
            await scopes.get("ghost.md")


class TestMutations:
    @pytest.mark.asyncio
    async def test_add_defaults_to_global(self, scopes: ScopeOrchestrator, dirs):
        global_dir, local_dir = dirs
        result = await scopes.add(params("new"))
        assert result.filename == "new.md"
        assert (global_dir / "new.md").exists()
        assert not (local_dir / "new.md").exists()

    @pytest.mark.asyncio
    async def test_remove_only_chosen_scope(self, scopes: ScopeOrchestrator, dirs):
        global_dir, local_dir = dirs
        await scopes.add(params("a.md"), scope="global")
        await scopes.add(params("a.md"), scope="local")

        await scopes.remove("a.md", scope="local")
        assert (global_dir / "a.md").exists()
        assert not (local_dir / "a.md").exists()

        listing = await scopes.list()
        assert [r.filename for r in listing.local_results] == []

    @pytest.mark.asyncio
    async def test_remove_missing(self, scopes: ScopeOrchestrator):
        with pytest.raises(NotFoundError):
            await scopes.remove("ghost.md", scope="global")

    @pytest.mark.asyncio
    async def test_invalid_scope(self, scopes: ScopeOrchestrator):
        with pytest.raises(ValueError):
            await scopes.add(params("a"), scope="elsewhere")

    @pytest.mark.asyncio
    async def test_get_metadata(self, scopes: ScopeOrchestrator):
        await scopes.add(params("a.md", topic="git"), scope="global")
        await scopes.add(params("b.md", topic="ts"), scope="local")
        meta = await scopes.get_metadata()
        assert meta.topics == ["git", "ts"]


class TestFromConfig:
    def test_plain_directory(self, tmp_path: Path):
        repo = tmp_path / "repo"
        repo.mkdir()
        orchestrator = ScopeOrchestrator.from_config(
            LearningsConfig(repository=str(repo)), cwd=tmp_path / "project"
        )
        assert isinstance(orchestrator.service("global").backend, FileSystemBackend)
        assert orchestrator.service("global").backend.base_dir == repo / "learnings"
        assert orchestrator.service("local").backend.base_dir == tmp_path / "project" / "learnings"
        assert (tmp_path / "project" / "learnings").is_dir()

    def test_git_repository_is_observed(self, tmp_path: Path):
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        orchestrator = ScopeOrchestrator.from_config(
            LearningsConfig(repository=str(repo), local_folder="notes"), cwd=tmp_path
        )
        assert isinstance(orchestrator.service("global").backend, ObservedBackend)
        assert isinstance(orchestrator.service("local").backend, FileSystemBackend)
        assert orchestrator.service("local").backend.base_dir == tmp_path / "notes"

    @pytest.mark.asyncio
    async def test_observed_global_add(self, dirs):
        global_dir, local_dir = dirs
        hook = AsyncMock()
        orchestrator = ScopeOrchestrator(
            LearningsService(ObservedBackend(FileSystemBackend(global_dir), hook)),
            LearningsService(FileSystemBackend(local_dir)),
        )
        await orchestrator.add(params("a"))
        await orchestrator.add(params("b"), scope="local")
        hook.assert_awaited_once_with("add", "a.md")
