"""Storage backends.

- ``FileSystemBackend``: one directory of ``.md`` files, no index.
- ``ObservedBackend``: wraps any backend and runs a hook after each mutation.
- ``git_backend()``: a filesystem backend observed by ``GitSync``.
"""

from learnings.backends.base import Backend, MutationHook
from learnings.backends.filesystem import FileSystemBackend
from learnings.backends.git import GitSync, git_backend
from learnings.backends.observed import ObservedBackend

__all__ = [
    "Backend",
    "FileSystemBackend",
    "GitSync",
    "MutationHook",
    "ObservedBackend",
    "git_backend",
]
