"""Line parsing for the bowtie notation."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .models import Barrier, Cause, Consequence, Event, Record, Title
from .results import Fatal, Ok, ParseError

KEYWORDS = ("title", "cause", "event", "consequence", "barrier")

# keyword, then the rest of the line (possibly empty)
LINE_PATTERN = re.compile(r"^(\S+)(?:\s+(.*))?$")


def parse_line(line: str, line_no: int) -> Record:
    """Classify a single non-blank line.

    Args:
        line: Raw source line
        line_no: 1-based line number, used in error reports

    Returns:
        The typed record for the line

    Raises:
        ParseError: if the line does not match the grammar
    """
    match = LINE_PATTERN.match(line.strip())
    if not match:
        raise ParseError("missing-value", "Empty record", line=line_no)

    keyword, value = match.group(1), (match.group(2) or "").strip()
    if keyword not in KEYWORDS:
        raise ParseError(
            "unknown-keyword",
            f"Unknown record keyword '{keyword}'",
            line=line_no,
            subject=keyword,
        )
    if not value:
        raise ParseError(
            "missing-value",
            f"'{keyword}' record has no value",
            line=line_no,
            subject=keyword,
        )

    if keyword == "title":
        return Title(value, line_no)
    if keyword == "cause":
        return Cause(value, line_no)
    if keyword == "event":
        return Event(value, line_no)
    if keyword == "consequence":
        return Consequence(value, line_no)
    return _parse_barrier(value, line_no)


def _parse_barrier(value: str, line_no: int) -> Barrier:
    """Parse `<name>: <target>[, <target>]*`."""
    name, sep, target_list = value.partition(":")
    name = name.strip()
    if not sep:
        raise ParseError(
            "malformed-barrier",
            f"Barrier '{name}' is missing ':' before its target list",
            line=line_no,
            subject=name,
        )
    if not name:
        raise ParseError(
            "malformed-barrier",
            "Barrier has no name before ':'",
            line=line_no,
        )

    targets = tuple(t.strip() for t in target_list.split(","))
    if not any(targets):
        raise ParseError(
            "empty-target",
            f"Barrier '{name}' has an empty target list",
            line=line_no,
            subject=name,
        )
    if not all(targets):
        raise ParseError(
            "empty-target",
            f"Barrier '{name}' has an empty entry in its target list",
            line=line_no,
            subject=name,
        )

    return Barrier(name, targets, line_no)


def iter_records(lines: str | Iterable[str]) -> Iterator[Record]:
    """Yield one record per non-blank line, in source order.

    Single pass: the iterator is exhausted once consumed. Stops with
    ParseError at the first malformed line.
    """
    if isinstance(lines, str):
        # Records end at "\n" only; splitlines() would also break on \f, \x85, U+2028
        lines = lines.split("\n")

    title_line: int | None = None
    for line_no, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue

        record = parse_line(line, line_no)
        if isinstance(record, Title):
            if title_line is not None:
                raise ParseError(
                    "duplicate-title",
                    f"Second title (first declared on line {title_line})",
                    line=line_no,
                    subject=record.text,
                )
            title_line = line_no
        yield record


def parse_document(text: str | Iterable[str]) -> Ok[tuple[Record, ...]] | Fatal:
    """Parse a whole document into records, or the first parse failure."""
    try:
        return Ok(tuple(iter_records(text)))
    except ParseError as exc:
        return Fatal(exc.diagnostic)
