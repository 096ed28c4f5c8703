"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import UserAbort, ValidationError

DEFAULT_VENDOR_ROOT = "vendor"


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Pass SRC=DEST mappings to run non-interactively."
        )


def select_directories(directories: Sequence[str]) -> list[str]:
    _ensure_tty()
    if not directories:
        raise ValidationError("The tagged commit has no directories to fetch.")
    choices = [Choice(value=name, name=name) for name in directories]
    selected = inquirer.fuzzy(
        message="Select directories to fetch",
        choices=choices,
        multiselect=True,
    ).execute()
    if not selected:
        raise UserAbort("No directories selected.")
    return [str(item) for item in selected]


def text_input(message: str, default: str | None = None) -> str:
    _ensure_tty()
    return inquirer.text(message=message, default=default or "").execute().strip()


def default_prefix(directory: str) -> str:
    return f"{DEFAULT_VENDOR_ROOT}/{directory.strip('/')}/"


def prompt_mapping(directories: Sequence[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for directory in select_directories(directories):
        prefix = text_input(f"Destination for {directory}", default=default_prefix(directory))
        if not prefix:
            raise ValidationError(f"Destination for {directory} cannot be empty.")
        mapping[directory] = prefix
    return mapping
