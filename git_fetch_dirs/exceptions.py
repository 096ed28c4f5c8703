"""Custom error hierarchy for git-fetch-dirs."""

from __future__ import annotations


class FetchDirsError(RuntimeError):
    """Base error for all custom exceptions."""


class GitCommandError(FetchDirsError):
    """Raised when a git invocation fails or git cannot be started."""

    def __init__(self, command: list[str], returncode: int, stderr: str | None = None):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        if self.stderr.strip():
            message = f"{message}\n{self.stderr.strip()}"
        super().__init__(message)


class TagNotFoundError(FetchDirsError):
    """Raised when the remote does not advertise the requested tag."""

    def __init__(self, remote: str, tag: str):
        self.remote = remote
        self.tag = tag
        super().__init__(f"failed to resolve tag {tag} in {remote}")


class SubtreeNotFoundError(FetchDirsError):
    """Raised when a requested path is not a directory at the fetched commit."""

    def __init__(self, path: str, commit: str):
        self.path = path
        self.commit = commit
        super().__init__(f"directory {path!r} not found at commit {commit}")


class ValidationError(FetchDirsError):
    """Raised when user input is invalid."""


class UserAbort(FetchDirsError):
    """Raised when the user cancels an interactive flow."""


__all__ = [
    "FetchDirsError",
    "GitCommandError",
    "TagNotFoundError",
    "SubtreeNotFoundError",
    "ValidationError",
    "UserAbort",
]
