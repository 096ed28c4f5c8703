"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, field

COMMIT = "commit"
TREE = "tree"
TAG = "tag"


@dataclass(frozen=True)
class TreeEntry:
    """One row of ``git ls-tree`` output."""

    mode: str
    kind: str
    oid: str
    path: str

    @property
    def is_tree(self) -> bool:
        return self.kind == TREE

    def index_info(self, prefix: str = "") -> str:
        """Render the entry in the form ``update-index --index-info`` reads."""

        return f"{self.mode} {self.kind} {self.oid}\t{join_prefix(prefix, self.path)}"


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a fetch run."""

    remote: str
    tag: str
    commit: str
    transfer_id: str | None
    subtrees: dict[str, str] = field(default_factory=dict)
    materialized: list[str] = field(default_factory=list)

    @property
    def transferred(self) -> bool:
        return self.transfer_id is not None


def join_prefix(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return f"{prefix.rstrip('/')}/{path}"
