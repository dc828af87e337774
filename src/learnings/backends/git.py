"""Git synchronisation hook: stage, commit if anything is staged, push.

Runs after the file is already written or deleted. If any git step fails the
local copy is kept and ``SyncError`` is raised, so local and remote can
diverge until the next successful push.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from learnings.backends.base import Mutation
from learnings.backends.filesystem import FileSystemBackend
from learnings.backends.observed import ObservedBackend
from learnings.errors import SyncError

logger = logging.getLogger(__name__)

COMMIT_TEMPLATE = "{verb} learning: {filename}"

COMMIT_FOOTER = "Committed automatically by learnings."

_VERBS = {"add": "Add", "remove": "Remove"}


def commit_message(mutation: Mutation, filename: str) -> str:
    subject = COMMIT_TEMPLATE.format(verb=_VERBS[mutation], filename=filename)
    return f"{subject}\n\n{COMMIT_FOOTER}"


class GitSync:
    """Post-mutation hook that publishes changes in ``repo_dir``."""

    def __init__(self, repo_dir: Path, *, remote: str | None = None) -> None:
        self.repo_dir = Path(repo_dir)
        self.remote = remote

    def __repr__(self) -> str:
        return f"GitSync({str(self.repo_dir)!r})"

    async def __call__(self, mutation: Mutation, filename: str) -> None:
        await self._git("add", ".")

        # Only the index counts; unstaged files elsewhere in the repo do not
        staged = await self._git("diff", "--cached", "--name-only")
        if not staged.strip():
            logger.debug("Nothing staged after %s of %s", mutation, filename)
            return

        await self._git("commit", "-m", commit_message(mutation, filename))
        push = ["push", self.remote] if self.remote else ["push"]
        await self._git(*push)
        logger.info("Committed and pushed: %s learning %s", mutation, filename)

    async def _git(self, *args: str) -> str:
        """Run one git command in ``repo_dir`` and return its stdout."""
        cmd = ["git", *args]
        logger.debug("Running: %s", " ".join(cmd[:3]))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.repo_dir),
            )
        except OSError as e:
            raise SyncError(cmd, None, str(e)) from e

        stdout, stderr = await proc.communicate()
        out = stdout.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise SyncError(
                cmd, proc.returncode, stderr.decode("utf-8", errors="replace"), stdout=out
            )
        return out


def git_backend(base_dir: Path, *, remote: str | None = None) -> ObservedBackend:
    """Filesystem backend whose mutations are committed and pushed."""
    return ObservedBackend(FileSystemBackend(base_dir), GitSync(base_dir, remote=remote))
