"""Prompt text for writing good learnings."""

from __future__ import annotations

LEARNING_GUIDELINES = """\
# Learning Creation Guidelines

## What Makes a Good Learning?

A learning is a shorthand for repeating a previous pattern, success, approach
or task. It should let you recall and apply something you worked out before.

## Key Principles

1. **Atomic**: one learning, one thing
2. **Contextual**: say when and why the approach applies
3. **Concrete**: include real snippets and examples
4. **Actionable**: it should tell you what to do next time

## Structure

### Filename
Use `{context}-{short-title}.md`, for example:
- `git-rebase-interactive-cleanup.md`
- `python-dataclass-default-factory.md`

### Front Matter (required)
```yaml
---
title: Short descriptive title
topic: main-topic
tags: [tag1, tag2, tag3]
created: YYYY-MM-DD
related: [other-learning.md, another-learning.md]
---
```

### Content
```markdown
# Title

One-line description of what this learning is about.

## Context

When and why you would use this. What problem does it solve?

## Examples

Concrete code and what it does.

## See Also

- [other-learning.md](./other-learning.md)
```

## Tips

- Split a learning that covers more than one thing
- Link related learnings so they form a graph
- Prefer code from actual work over made-up examples
- `created` is filled in for you
"""


def build_learning_prompt(
    title: str | None = None,
    topic: str | None = None,
    context: str | None = None,
) -> str:
    """User message for the ``create_learning`` prompt."""
    about = f" about: {title}" if title else ""
    topic_part = f" (topic: {topic})" if topic else ""
    context_part = (
        f"Here's some context about what I want to capture:\n{context}\n\n" if context else ""
    )
    return (
        f"I want to create a new learning{about}{topic_part}.\n\n"
        f"{LEARNING_GUIDELINES}\n"
        f"{context_part}"
        "Please help me structure this learning according to the guidelines above. "
        "Ask me questions to fill in any missing parts (context, examples, related learnings)."
    )
