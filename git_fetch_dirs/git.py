"""Thin wrappers around git plumbing commands.

Every function takes the local repository as its first argument and runs git
with that directory as the working directory.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable, Sequence

from .exceptions import GitCommandError
from .models import TreeEntry
from .records import (
    OBJECT_KIND,
    PATH_LISTING,
    REF_LISTING,
    TRANSFER_RESULT,
    TREE_LISTING,
    parse_first,
    parse_records,
)

logger = logging.getLogger(__name__)

# ls-remote --exit-code status when no ref matched
LS_REMOTE_NO_MATCH = 2


def run_git(
    args: Iterable[str],
    *,
    cwd: Path,
    input: str | None = None,
    raise_on_error: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    cmd = ["git", *args]
    logger.debug("running %s in %s", " ".join(cmd), cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            input=input,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(cmd, 127, str(exc)) from exc
    if raise_on_error and proc.returncode != 0:
        raise GitCommandError(cmd, proc.returncode, proc.stderr)
    return proc


def resolve_toplevel(path: Path) -> Path:
    proc = run_git(["rev-parse", "--show-toplevel"], cwd=path)
    return Path(proc.stdout.strip())


def resolve_remote_tag(repo: Path, remote: str, tag: str) -> str | None:
    """Return the id the remote advertises for ``refs/tags/<tag>``."""

    refname = f"refs/tags/{tag}"
    proc = run_git(
        ["ls-remote", "--exit-code", "--tags", remote, refname],
        cwd=repo,
        raise_on_error=False,
    )
    if proc.returncode == LS_REMOTE_NO_MATCH:
        return None
    if proc.returncode != 0:
        raise GitCommandError(proc.args, proc.returncode, proc.stderr)
    for oid, name in parse_records(proc.stdout, REF_LISTING):
        if name == refname:
            return oid
    return None


def object_kind(repo: Path, ref: str) -> str:
    """Return commit/tree/blob/tag; raises GitCommandError if ``ref`` is absent."""

    proc = run_git(["cat-file", "-t", ref], cwd=repo)
    row = parse_first(proc.stdout, OBJECT_KIND)
    return row[0] if row else ""


def peel_commit(repo: Path, ref: str) -> str | None:
    """Return the commit ``ref`` points to if it is available locally."""

    proc = run_git(
        ["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
        cwd=repo,
        raise_on_error=False,
    )
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def transfer_commit(repo: Path, remote: str, commit: str) -> str | None:
    """Fetch the objects of ``commit`` without history and keep the pack."""

    proc = run_git(["fetch-pack", "--keep", "--depth=1", remote, commit], cwd=repo)
    for row in parse_records(proc.stdout, TRANSFER_RESULT):
        token, value = row
        if token in ("pack", "keep"):
            return value.strip()
    return None


def _tree_entries(stdout: str) -> list[TreeEntry]:
    return [TreeEntry(*row) for row in parse_records(stdout, TREE_LISTING)]


def locate_subtrees(repo: Path, commit: str, paths: Sequence[str]) -> dict[str, str]:
    """Resolve every directory path in ``paths`` to its tree id in one call."""

    if not paths:
        return {}
    proc = run_git(["ls-tree", "-z", "-d", "--full-tree", commit, *paths], cwd=repo)
    return {entry.path: entry.oid for entry in _tree_entries(proc.stdout) if entry.is_tree}


def list_directories(repo: Path, commit: str) -> list[str]:
    proc = run_git(["ls-tree", "-z", "-d", "--full-tree", commit], cwd=repo)
    return [entry.path for entry in _tree_entries(proc.stdout) if entry.is_tree]


def list_tree(repo: Path, tree: str) -> list[TreeEntry]:
    """List every non-tree entry reachable from ``tree``."""

    proc = run_git(["ls-tree", "-r", "-z", tree], cwd=repo)
    return _tree_entries(proc.stdout)


def merge_tree_into_index(repo: Path, tree: str, prefix: str) -> int:
    """Stage the contents of ``tree`` under ``prefix``, replacing collisions.

    Returns the number of entries staged.
    """

    entries = list_tree(repo, tree)
    if not entries:
        return 0
    payload = "".join(f"{entry.index_info(prefix)}\0" for entry in entries)
    run_git(["update-index", "-z", "--index-info"], cwd=repo, input=payload)
    return len(entries)


def list_staged_paths(repo: Path) -> list[str]:
    proc = run_git(["ls-files", "--cached", "-z"], cwd=repo)
    return [row[0] for row in parse_records(proc.stdout, PATH_LISTING)]


def materialize(repo: Path, paths: Sequence[str]) -> None:
    """Write the staged content of exactly ``paths`` to the working tree."""

    if not paths:
        return
    payload = "".join(f"{path}\0" for path in paths)
    run_git(["checkout-index", "-f", "-z", "--stdin"], cwd=repo, input=payload)


def unstage(repo: Path, prefixes: Sequence[str]) -> None:
    """Reset index entries under ``prefixes`` to HEAD, leaving files alone."""

    if not prefixes:
        return
    run_git(["--literal-pathspecs", "reset", "-q", "--", *prefixes], cwd=repo)
