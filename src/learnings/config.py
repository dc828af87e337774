"""Configuration loading from CLI overrides, environment variables and learnings.toml."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from learnings.errors import ConfigError

logger = logging.getLogger(__name__)

_CONFIG_FILENAME = "learnings.toml"
_HOME_DIR = Path.home() / ".learnings"
_URL_PREFIXES = ("http://", "https://", "git@")


@dataclass
class LearningsConfig:
    """Top-level configuration, created once at startup."""

    repository: str | None = None
    clone_location: str | None = None
    local_folder: str = "learnings"
    subdirectory: str = "learnings"
    default_limit: int = 6
    log_level: str = "INFO"


@dataclass
class ResolvedRepository:
    learnings_path: Path
    is_git_repo: bool


def load_config(config_path: Path | None = None, **overrides) -> LearningsConfig:
    """Load configuration.

    Priority: explicit overrides (CLI flags) > environment variables >
    learnings.toml > defaults. ``None`` overrides are ignored.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [Path.cwd() / _CONFIG_FILENAME, _HOME_DIR / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    config = LearningsConfig(
        repository=os.getenv("LEARNINGS_REPOSITORY", file_data.get("repository")),
        clone_location=os.getenv("LEARNINGS_CLONE_LOCATION", file_data.get("clone_location")),
        local_folder=os.getenv("LEARNINGS_LOCAL_FOLDER", file_data.get("local_folder", "learnings")),
        subdirectory=file_data.get("subdirectory", "learnings"),
        default_limit=int(os.getenv("LEARNINGS_LIMIT", file_data.get("default_limit", 6))),
        log_level=os.getenv("LEARNINGS_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(config, key):
            raise TypeError(f"Unknown config option: {key}")
        setattr(config, key, value)
    return config


# ── Repository bootstrap ─────────────────────────────────────


def is_url(location: str) -> bool:
    return location.startswith(_URL_PREFIXES)


def repo_name_from_url(url: str) -> str:
    """``https://github.com/user/my-learnings.git`` -> ``my-learnings``."""
    match = re.search(r"[/:]([^/:]+?)(\.git)?/?$", url)
    if not match:
        raise ConfigError(f"Cannot extract repository name from URL: {url}")
    return match.group(1)


def _clone(url: str, target: Path) -> None:
    logger.info("Cloning %s to %s", url, target)
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        subprocess.run(
            ["git", "clone", url, str(target)],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        detail = getattr(e, "stderr", None) or str(e)
        raise ConfigError(f"Failed to clone repository: {detail.strip()}") from e


def resolve_repository(config: LearningsConfig) -> ResolvedRepository:
    """Turn ``config.repository`` into the global learnings directory.

    URLs are cloned once (into ``clone_location`` or ~/.learnings/<name>) and
    reused afterwards. Local paths must exist; they are git-synced only if
    they contain a ``.git`` directory.
    """
    if not config.repository:
        raise ConfigError(
            "Missing repository: pass --repository, set LEARNINGS_REPOSITORY, "
            f"or add 'repository' to {_CONFIG_FILENAME}"
        )

    if is_url(config.repository):
        if config.clone_location:
            repo_path = Path(config.clone_location).expanduser()
        else:
            repo_path = _HOME_DIR / repo_name_from_url(config.repository)
        if repo_path.exists():
            logger.info("Using existing clone at %s", repo_path)
        else:
            _clone(config.repository, repo_path)
        is_git_repo = True
    else:
        repo_path = Path(config.repository).expanduser()
        if not repo_path.exists():
            raise ConfigError(f"Repository path does not exist: {repo_path}")
        is_git_repo = (repo_path / ".git").exists()
        if not is_git_repo:
            logger.warning(
                "%s is not a git repository. Changes will not be committed automatically.",
                repo_path,
            )

    learnings_path = repo_path / config.subdirectory
    learnings_path.mkdir(parents=True, exist_ok=True)
    return ResolvedRepository(learnings_path=learnings_path, is_git_repo=is_git_repo)
