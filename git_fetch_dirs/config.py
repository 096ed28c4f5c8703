"""Resolve the target repository and the directory mapping from user input."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from .exceptions import GitCommandError, ValidationError
from .git import resolve_toplevel

DEBUG_ENV = "GIT_FETCH_DIRS_DEBUG"


def resolve_repo_path(repo_override: Path | None = None) -> Path:
    if repo_override:
        candidate = repo_override.expanduser()
        if not candidate.exists():
            raise ValidationError(f"Repository override path does not exist: {candidate}")
        cwd = candidate
    else:
        cwd = Path.cwd()
    try:
        return resolve_toplevel(cwd)
    except GitCommandError as exc:
        raise ValidationError(f"{cwd} is not inside a git repository.") from exc


def parse_mapping(pairs: Iterable[str]) -> dict[str, str]:
    """Turn ``SRC=DEST`` arguments into an ordered mapping."""

    mapping: dict[str, str] = {}
    for raw in pairs:
        source, sep, dest = raw.partition("=")
        source = source.strip()
        dest = dest.strip()
        if not sep or not source or not dest:
            raise ValidationError(f"Invalid mapping {raw!r}; expected SRC=DEST, e.g. lib=vendor/lib/")
        if source in mapping:
            raise ValidationError(f"Source directory {source!r} is mapped more than once.")
        mapping[source] = dest
    return mapping


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}
