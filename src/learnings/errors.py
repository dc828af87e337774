"""Error taxonomy for the learnings store.

Nothing here is retried. Callers surface the message to the user as is.
"""

from __future__ import annotations


class LearningsError(Exception):
    """Base class for all learnings errors."""


class FormatError(LearningsError):
    """Malformed or incomplete front matter. Never silently repaired."""


class NotFoundError(LearningsError):
    """A learning file does not exist on read or delete."""

    def __init__(self, filename: str, message: str | None = None) -> None:
        self.filename = filename
        super().__init__(message or f"Learning not found: {filename}")


class SyncError(LearningsError):
    """A git command failed after the local mutation already happened.

    Treat as "saved locally, not yet published".
    """

    def __init__(
        self,
        command: list[str],
        returncode: int | None,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        # git commit reports "nothing to commit" and similar on stdout
        detail = stderr.strip() or stdout.strip() or f"exit code {returncode}"
        super().__init__(f"Git command failed ({' '.join(command)}): {detail}")


class ConfigError(LearningsError):
    """Missing or invalid repository configuration."""
