"""Tools for agent access to learnings.

Each tool takes plain parameters, calls the scope orchestrator and renders a
markdown text answer. Errors are rendered as text with ``is_error`` set, so
the caller can show them verbatim.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from learnings.errors import LearningsError, SyncError
from learnings.models import (
    SCOPES,
    AddLearningParams,
    Learning,
    SearchOptions,
    SearchResult,
    TopicsAndTags,
)
from learnings.service import normalize_filename

if TYPE_CHECKING:
    from learnings.scopes import ScopeOrchestrator


@dataclass
class ToolResult:
    text: str
    is_error: bool = False


Tool = Callable[..., Awaitable[ToolResult]]


def format_vocabulary(vocab: TopicsAndTags) -> str:
    return (
        f"**Available topics**: {', '.join(vocab.topics) or 'none'}\n"
        f"**Available tags**: {', '.join(vocab.tags) or 'none'}"
    )


def format_results(label: str, total: int, results: list[SearchResult]) -> str:
    lines = "\n".join(f"- **{r.filename}**: {r.title} (topic: {r.topic})" for r in results)
    return f"**{label} learnings** ({total}):\n\n{lines}"


def format_learning(learning: Learning, scope: str) -> str:
    meta = learning.metadata
    return (
        f"# {meta.title}\n\n"
        f"**Scope**: {scope.capitalize()}\n"
        f"**Topic**: {meta.topic}\n"
        f"**Tags**: {', '.join(meta.tags) or 'none'}\n"
        f"**Created**: {meta.created}\n"
        f"**Related**: {', '.join(meta.related) or 'none'}\n\n"
        f"---\n\n"
        f"{learning.content}"
    )


def get_learning_tools(
    orchestrator: ScopeOrchestrator, default_limit: int = 6
) -> dict[str, Tool]:
    """Return a dict of tool_name -> async callable.

    These can be registered as MCP tools or called directly.
    """

    async def list_learnings(
        topic: str | None = None,
        tags: list[str] | None = None,
        search: str | None = None,
        limit: int | None = None,
        scope: str = "all",
    ) -> ToolResult:
        """Search and list learnings by topic, tags, or text search."""
        scopes = SCOPES if scope == "all" else (scope,)
        try:
            listing = await orchestrator.list(
                SearchOptions(topic=topic, tags=tags, search=search),
                limit=default_limit if limit is None else int(limit),
                scopes=scopes,
            )
        except (LearningsError, ValueError) as e:
            return ToolResult(f"Error listing learnings: {e}", is_error=True)

        vocabulary = format_vocabulary(listing.vocabulary)
        if listing.total == 0:
            return ToolResult(f"No learnings found matching the criteria.\n\n{vocabulary}")

        sections = []
        if listing.global_results:
            sections.append(format_results("Global", listing.global_total, listing.global_results))
        if listing.local_results:
            sections.append(format_results("Local", listing.local_total, listing.local_results))

        text = f"{vocabulary}\n\n" + "\n\n".join(sections)
        if listing.truncated:
            text += (
                f"\n\n_Showing {listing.shown} of {listing.total} total results. "
                "Use filters or increase limit to see more._"
            )
        return ToolResult(text)

    async def get_learning(filename: str) -> ToolResult:
        """Fetch the full content of a learning by filename."""
        try:
            found = await orchestrator.get(filename)
        except LearningsError as e:
            return ToolResult(str(e), is_error=True)
        return ToolResult(
            "\n\n---\n\n".join(format_learning(learning, scope) for scope, learning in found.items())
        )

    async def add_learning(
        filename: str,
        title: str,
        topic: str,
        one_liner: str,
        context: str,
        examples: str,
        tags: list[str] | None = None,
        related: list[str] | None = None,
        scope: str = "global",
    ) -> ToolResult:
        """Create a new learning in the global (default) or local scope."""
        params = AddLearningParams(
            filename=filename,
            title=title,
            topic=topic,
            one_liner=one_liner,
            context=context,
            examples=examples,
            tags=tags or [],
            related=related or [],
        )
        try:
            result = await orchestrator.add(params, scope=scope)
        except SyncError as e:
            return ToolResult(
                f"Saved {scope} learning {normalize_filename(filename)} locally, "
                f"but publishing failed: {e}",
                is_error=True,
            )
        except (LearningsError, ValueError) as e:
            return ToolResult(f"Error creating learning: {e}", is_error=True)
        return ToolResult(f"Successfully created {scope} learning: {result.filename}")

    async def remove_learning(filename: str, scope: str) -> ToolResult:
        """Delete a learning by filename from the given scope."""
        try:
            await orchestrator.remove(filename, scope=scope)
        except SyncError as e:
            return ToolResult(
                f"Deleted {scope} learning {filename} locally, but publishing failed: {e}",
                is_error=True,
            )
        except (LearningsError, ValueError) as e:
            return ToolResult(f"Error deleting learning: {e}", is_error=True)
        return ToolResult(f"Successfully deleted {scope} learning: {filename}")

    return {
        "list_learnings": list_learnings,
        "get_learning": get_learning,
        "add_learning": add_learning,
        "remove_learning": remove_learning,
    }
