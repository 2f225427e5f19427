"""httpsel reader - request text acquisition from files, streams and strings."""

import mmap
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO

import click


def iter_file_lines(path: str | Path) -> Iterator[str]:
    """Lazily yield the lines of a file through a read-only memory map.

    The file is checked for readability immediately, so a missing or
    unreadable file raises OSError here rather than on first iteration; the
    handle itself is only held while the generator runs. Lines are split on
    '\\n' exactly like ``str.split("\\n")``: no newline characters, and a
    trailing empty line when the file ends with a newline.
    """
    with open(path, "rb"):
        pass
    return _iter_mapped_lines(path)


def _iter_mapped_lines(path: str | Path) -> Iterator[str]:
    with open(path, "rb") as fh:
        if os.fstat(fh.fileno()).st_size == 0:
            # Zero-length files cannot be mapped.
            yield ""
            return
        with mmap.mmap(fh.fileno(), 0, access=mmap.ACCESS_READ) as mapped:
            start = 0
            while True:
                newline = mapped.find(b"\n", start)
                if newline == -1:
                    yield _decode(mapped[start:])
                    return
                yield _decode(mapped[start:newline])
                start = newline + 1


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def iter_stream_lines(stream: IO | Iterable) -> Iterator[str]:
    """Yield lines from a text or binary stream without their trailing newline.

    Binary lines are decoded like file lines, so '\\r' survives and bad bytes
    are replaced. Matches ``content.split("\\n")`` line for line.
    """
    ended_with_newline = True
    for line in stream:
        if isinstance(line, bytes):
            line = _decode(line)
        ended_with_newline = line.endswith("\n")
        yield line[:-1] if ended_with_newline else line
    if ended_with_newline:
        yield ""


def read_source(source: str | None, text: str | None = None) -> tuple[str, Iterable[str]]:
    """Pick the input for a parse run.

    Returns (label, lines). Literal text wins over source; '-' reads stdin as
    bytes; anything else is a file path (OSError if it cannot be opened).
    """
    if text is not None:
        return ("<text>", text.split("\n"))
    if source == "-":
        return ("<stdin>", iter_stream_lines(click.get_binary_stream("stdin")))
    if not source:
        raise ValueError("No request source given.")
    return (source, iter_file_lines(source))
