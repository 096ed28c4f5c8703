"""Delimiter-aware decoding of git plumbing output.

Plumbing commands emit records terminated by either NUL (``-z`` output) or a
newline. Inside a record, fields are separated by a fixed sequence of
separators; the last field keeps everything up to the terminator so paths may
contain spaces and tabs.
"""

from __future__ import annotations

from dataclasses import dataclass

NUL = "\0"
NEWLINE = "\n"


@dataclass(frozen=True)
class RecordFormat:
    """Shape of one record: its terminator and how fields are split."""

    terminator: str
    separators: tuple[str, ...] = ()
    variadic: bool = False

    def split(self, record: str) -> tuple[str, ...] | None:
        """Split a single record into fields, or ``None`` if it does not fit."""

        if self.variadic:
            return tuple(record.split(self.separators[0]))
        fields: list[str] = []
        rest = record
        for separator in self.separators:
            head, found, rest = rest.partition(separator)
            if not found:
                return None
            fields.append(head)
        fields.append(rest)
        return tuple(fields)


# <id> TAB <refname> NEWLINE
REF_LISTING = RecordFormat(NEWLINE, ("\t",))
# <mode> SP <kind> SP <id> TAB <path> NUL
TREE_LISTING = RecordFormat(NUL, (" ", " ", "\t"))
# pack|keep TAB <id> NEWLINE, mixed with other free-form lines
TRANSFER_RESULT = RecordFormat(NEWLINE, ("\t",))
# <kind> NEWLINE
OBJECT_KIND = RecordFormat(NEWLINE)
# <path> NUL
PATH_LISTING = RecordFormat(NUL)


def iter_raw_records(text: str, terminator: str) -> list[str]:
    """Return complete, non-empty records; an unterminated tail is dropped."""

    chunks = text.split(terminator)
    # the last chunk is either empty or lacks its terminator
    return [chunk for chunk in chunks[:-1] if chunk]


def parse_records(text: str, fmt: RecordFormat) -> list[tuple[str, ...]]:
    rows: list[tuple[str, ...]] = []
    for record in iter_raw_records(text, fmt.terminator):
        fields = fmt.split(record)
        if fields is not None:
            rows.append(fields)
    return rows


def parse_first(text: str, fmt: RecordFormat) -> tuple[str, ...] | None:
    for record in iter_raw_records(text, fmt.terminator):
        fields = fmt.split(record)
        if fields is not None:
            return fields
    return None


__all__ = [
    "RecordFormat",
    "REF_LISTING",
    "TREE_LISTING",
    "TRANSFER_RESULT",
    "OBJECT_KIND",
    "PATH_LISTING",
    "parse_records",
    "parse_first",
]
