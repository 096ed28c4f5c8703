"""Typer-based CLI for git-fetch-dirs."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import git
from .config import debug_enabled, parse_mapping, resolve_repo_path
from .exceptions import FetchDirsError
from .fetcher import DirFetcher
from .interactive import prompt_mapping
from .models import FetchResult

app = typer.Typer(help="Fetch directories from a tagged commit of a remote repository")
console = Console()
logger = logging.getLogger("git_fetch_dirs")


@app.callback()
def main(
    ctx: typer.Context,
    repo: Path | None = typer.Option(
        None,
        "--repo",
        help="Path to the git repository to fetch into. Defaults to the current directory.",
        exists=False,
        dir_okay=True,
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git command."),
) -> None:
    ctx.ensure_object(dict)
    ctx.obj["repo_override"] = repo
    configure_logging(verbose or debug_enabled())


@app.command(help="Fetch SRC directories at TAG and check them out under DEST prefixes")
def fetch(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote repository URL or path."),
    tag: str = typer.Argument(..., help="Tag to fetch."),
    mappings: list[str] | None = typer.Argument(
        None,
        help="SRC=DEST pairs. If omitted, directories are picked interactively.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Output JSON for scripting."),
) -> None:
    try:
        fetcher = DirFetcher(resolve_repo_path(ctx.obj.get("repo_override")))
        if mappings:
            result = fetcher.fetch(remote, tag, parse_mapping(mappings))
        else:
            commit, transfer_id = fetcher.prepare(remote, tag)
            mapping = prompt_mapping(git.list_directories(fetcher.repo, commit))
            result = fetcher.fetch_commit(remote, tag, commit, mapping, transfer_id=transfer_id)
    except FetchDirsError as err:
        _fail(str(err))
    if as_json:
        typer.echo(json.dumps(_result_to_dict(result), indent=2))
        return
    _print_result(result)


@app.command(help="Print the commit a remote tag points to")
def resolve(
    ctx: typer.Context,
    remote: str = typer.Argument(..., help="Remote repository URL or path."),
    tag: str = typer.Argument(..., help="Tag to resolve."),
) -> None:
    try:
        fetcher = DirFetcher(resolve_repo_path(ctx.obj.get("repo_override")))
        commit = fetcher.resolve_tag(remote, tag)
    except FetchDirsError as err:
        _fail(str(err))
    typer.echo(commit)


def configure_logging(debug: bool) -> None:
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


def _result_to_dict(result: FetchResult) -> dict:
    return {
        "remote": result.remote,
        "tag": result.tag,
        "commit": result.commit,
        "transfer_id": result.transfer_id,
        "subtrees": result.subtrees,
        "materialized": result.materialized,
    }


def _print_result(result: FetchResult) -> None:
    status = f"fetched pack {result.transfer_id}" if result.transferred else "already present"
    console.print(f"{result.tag} -> {result.commit} ({status})")
    if not result.materialized:
        console.print("No files checked out.")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    for path in result.materialized:
        table.add_row(path)
    console.print(table)


def _fail(message: str, code: int = 1) -> None:
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
