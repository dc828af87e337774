"""Front-matter codec for learning files.

A learning on disk looks like::

    ---
    title: Git Rebase
    topic: git
    tags: [git, rebase]
    created: 2025-01-31
    related: [git-merge.md]
    ---

    # Git Rebase
    ...

The metadata block is a flat ``key: value`` list, not full YAML. Every value
stays a string (``created`` included); ``tags`` and ``related`` use bracket
notation. The schema lives in ``LearningHandler`` and nowhere else.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, fields

import frontmatter
from frontmatter.default_handlers import BaseHandler

from learnings.errors import FormatError
from learnings.models import LearningMetadata

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^(\w+):\s*(.+)$")


class LearningHandler(BaseHandler):
    """python-frontmatter handler for the fixed learning schema."""

    FM_BOUNDARY = re.compile(r"^---$", re.MULTILINE)
    START_DELIMITER = "---"
    END_DELIMITER = "---"

    FIELDS: tuple[str, ...] = tuple(f.name for f in fields(LearningMetadata))
    REQUIRED: tuple[str, ...] = ("title", "topic", "created")
    LIST_FIELDS: tuple[str, ...] = ("tags", "related")

    def load(self, fm: str) -> dict:
        """Parse ``key: value`` lines into a dict of known fields."""
        metadata: dict = {}
        for line in fm.splitlines():
            match = _LINE_RE.match(line.strip())
            if not match:
                continue
            key, value = match.group(1), match.group(2).strip()
            if key not in self.FIELDS:
                logger.debug("Ignoring unknown front-matter key: %s", key)
                continue
            if key in self.LIST_FIELDS:
                metadata[key] = _parse_list(value)
            else:
                metadata[key] = value
        return metadata

    def export(self, metadata: dict, **kwargs) -> str:
        """Render known fields in canonical order."""
        lines = []
        for key in self.FIELDS:
            value = metadata.get(key, [] if key in self.LIST_FIELDS else "")
            if key in self.LIST_FIELDS:
                value = f"[{', '.join(value)}]"
            lines.append(f"{key}: {value}")
        return "\n".join(lines)

    def validate(self, metadata: dict) -> LearningMetadata:
        missing = [key for key in self.REQUIRED if not metadata.get(key)]
        if missing:
            raise FormatError(
                f"Invalid learning: missing required metadata ({', '.join(missing)})"
            )
        return LearningMetadata(
            title=metadata["title"],
            topic=metadata["topic"],
            tags=metadata.get("tags", []),
            created=metadata["created"],
            related=metadata.get("related", []),
        )


def _parse_list(value: str) -> list[str]:
    inner = value
    if inner.startswith("["):
        inner = inner[1:]
    if inner.endswith("]"):
        inner = inner[:-1]
    return [item.strip() for item in inner.split(",") if item.strip()]


_handler = LearningHandler()


def decode(text: str) -> tuple[LearningMetadata, str]:
    """Split a learning into validated metadata and trimmed body."""
    if not _handler.detect(text):
        raise FormatError("Invalid learning format: missing front matter")
    try:
        fm, content = _handler.split(text)
    except ValueError:
        raise FormatError("Invalid learning format: unterminated front matter") from None
    if not fm.strip():
        raise FormatError("Invalid learning format: empty front matter")
    metadata = _handler.validate(_handler.load(fm))
    return metadata, content.strip()


def encode(metadata: LearningMetadata, content: str) -> str:
    """Render metadata and body back into a learning file."""
    post = frontmatter.Post(content, handler=_handler, **asdict(metadata))
    return frontmatter.dumps(post, handler=_handler)
