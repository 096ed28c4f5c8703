"""High-level orchestration for fetching directories from a tagged commit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from . import git
from .exceptions import FetchDirsError, GitCommandError, SubtreeNotFoundError, TagNotFoundError, ValidationError
from .models import COMMIT, TAG, FetchResult

logger = logging.getLogger(__name__)


@dataclass
class DirFetcher:
    """Fetch into ``repo``, which must be the top level of the working tree."""

    repo: Path

    def resolve_tag(self, remote: str, tag: str) -> str:
        ref = git.resolve_remote_tag(self.repo, remote, tag)
        if ref is None:
            raise TagNotFoundError(remote, tag)
        logger.info("Resolved %s at %s to %s", tag, remote, ref)
        return ref

    def is_local_commit(self, ref: str) -> bool:
        try:
            kind = git.object_kind(self.repo, ref)
        except GitCommandError:
            return False
        if kind == COMMIT:
            return True
        # annotated tag: present once the commit it points to is
        return kind == TAG and git.peel_commit(self.repo, ref) is not None

    def ensure_local(self, remote: str, ref: str) -> str | None:
        """Transfer ``ref`` unless it is already present; returns the pack id."""

        if self.is_local_commit(ref):
            logger.info("Commit %s already present, skipping transfer", ref)
            return None
        transfer_id = git.transfer_commit(self.repo, remote, ref)
        logger.info("Fetched %s from %s (pack %s)", ref, remote, transfer_id or "?")
        return transfer_id

    def prepare(self, remote: str, tag: str) -> tuple[str, str | None]:
        """Resolve ``tag`` once and make its commit local.

        Returns the commit id and the transfer id (``None`` when nothing was
        transferred).
        """

        ref = self.resolve_tag(remote, tag)
        transfer_id = self.ensure_local(remote, ref)
        commit = git.peel_commit(self.repo, ref)
        if commit is None:
            raise FetchDirsError(f"tag {tag} at {remote} does not point to a commit ({ref})")
        return commit, transfer_id

    def locate(self, commit: str, paths: Sequence[str]) -> dict[str, str]:
        """Resolve all ``paths`` to tree ids in a single lookup."""

        lookup = {path: normalize_tree_path(path) for path in paths}
        wanted = [path for path in dict.fromkeys(lookup.values()) if path]
        found = git.locate_subtrees(self.repo, commit, wanted)
        trees: dict[str, str] = {}
        for path, normalized in lookup.items():
            if normalized not in found:
                raise SubtreeNotFoundError(path, commit)
            trees[path] = found[normalized]
        return trees

    def apply(self, trees: Mapping[str, str], mapping: Mapping[str, str]) -> list[str]:
        """Merge trees under their prefixes, then check out and unstage that scope.

        Every staged path under the scope is checked out, including paths
        staged by earlier runs, so the working tree matches the index.
        """

        for source, prefix in mapping.items():
            count = git.merge_tree_into_index(self.repo, trees[source], prefix)
            logger.info("Staged %d entries from %s under %s", count, source, prefix)
        scope = list(dict.fromkeys(mapping.values()))
        affected = filter_by_prefixes(git.list_staged_paths(self.repo), scope)
        git.materialize(self.repo, affected)
        git.unstage(self.repo, scope)
        logger.info("Checked out %d files", len(affected))
        return affected

    def fetch_commit(
        self,
        remote: str,
        tag: str,
        commit: str,
        mapping: Mapping[str, str],
        *,
        transfer_id: str | None = None,
    ) -> FetchResult:
        """Check out ``mapping`` from a commit already resolved and present."""

        require_mapping(mapping)
        trees = self.locate(commit, list(mapping))
        materialized = self.apply(trees, mapping)
        return FetchResult(
            remote=remote,
            tag=tag,
            commit=commit,
            transfer_id=transfer_id,
            subtrees=trees,
            materialized=materialized,
        )

    def fetch(self, remote: str, tag: str, mapping: Mapping[str, str]) -> FetchResult:
        require_mapping(mapping)
        commit, transfer_id = self.prepare(remote, tag)
        return self.fetch_commit(remote, tag, commit, mapping, transfer_id=transfer_id)


def fetch_dirs(repo: Path, remote: str, tag: str, mapping: Mapping[str, str]) -> FetchResult:
    """Fetch ``mapping``'s source directories at ``tag`` into the repository containing ``repo``."""

    return DirFetcher(git.resolve_toplevel(Path(repo))).fetch(remote, tag, mapping)


def require_mapping(mapping: Mapping[str, str]) -> None:
    if not mapping:
        raise ValidationError("At least one SRC=DEST mapping is required.")


def normalize_tree_path(path: str) -> str:
    return path.strip("/")


def filter_by_prefixes(paths: Iterable[str], prefixes: Sequence[str]) -> list[str]:
    # plain string prefix: "ab" also matches "abc/x"
    return [path for path in paths if any(path.startswith(prefix) for prefix in prefixes)]
