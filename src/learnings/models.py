"""Shared types for learnings, search and scopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Scope = Literal["global", "local"]

SCOPES: tuple[Scope, ...] = ("global", "local")

EXTENSION = ".md"
RESERVED_FILENAME = "README.md"


@dataclass
class LearningMetadata:
    """Front-matter fields of a learning, in canonical order."""

    title: str
    topic: str
    tags: list[str] = field(default_factory=list)
    created: str = ""
    related: list[str] = field(default_factory=list)


@dataclass
class Learning:
    """A learning document: filename key, metadata and trimmed body."""

    filename: str
    metadata: LearningMetadata
    content: str


@dataclass
class SearchOptions:
    """Filters for a search. Unset fields match everything."""

    topic: str | None = None
    tags: list[str] | None = None
    search: str | None = None


@dataclass
class SearchResult:
    """Summary view of a learning, never the body."""

    filename: str
    title: str
    topic: str


@dataclass
class TopicsAndTags:
    """Frequency-ranked vocabulary of a backend or a scope pair."""

    topics: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class AddLearningParams:
    """Structured input for creating a learning."""

    filename: str
    title: str
    topic: str
    one_liner: str
    context: str
    examples: str
    tags: list[str] = field(default_factory=list)
    related: list[str] = field(default_factory=list)


@dataclass
class AddResult:
    filename: str
