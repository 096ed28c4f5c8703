"""Top-level package for git-fetch-dirs."""

from importlib import metadata

from .exceptions import (
    FetchDirsError,
    GitCommandError,
    SubtreeNotFoundError,
    TagNotFoundError,
    ValidationError,
)
from .fetcher import DirFetcher, fetch_dirs
from .models import FetchResult

try:  # pragma: no cover - best effort metadata lookup
    __version__ = metadata.version("git-fetch-dirs")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "DirFetcher",
    "FetchResult",
    "fetch_dirs",
    "FetchDirsError",
    "GitCommandError",
    "SubtreeNotFoundError",
    "TagNotFoundError",
    "ValidationError",
]
