"""Content-line reader: turns raw iCalendar bytes into logical lines.

The reader is a single forward pass over the input. It only ever holds the
logical line being unfolded, so it is safe to feed it a stream of any size;
the tree builder downstream is what materializes a whole document.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Iterable, Iterator, NamedTuple, Union

from .errors import MalformedLine

Source = Union[bytes, bytearray, BinaryIO, Iterable[bytes]]

_BOM = b"\xef\xbb\xbf"
_CONTINUATION = (b" ", b"\t")


class LogicalLine(NamedTuple):
    text: str
    line: int
    offset: int


def _physical_lines(source: Source) -> Iterator[tuple[int, int, bytes]]:
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    offset = 0
    for number, raw in enumerate(source, start=1):
        yield number, offset, raw
        offset += len(raw)


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


def _decode(chunks: list[bytes], line: int, offset: int) -> LogicalLine:
    data = b"".join(chunks)
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedLine("Content line is not valid UTF-8", line=line, offset=offset + exc.start) from exc
    return LogicalLine(text, line, offset)


def unfold(source: Source) -> Iterator[LogicalLine]:
    """Yield unfolded logical lines from ``source``.

    Accepts CRLF or LF terminators. A physical line starting with a space or
    tab continues the previous logical line with that one character removed.
    Empty physical lines are skipped and a final unterminated line is kept.
    """
    pending: list[bytes] | None = None
    start_line = 0
    start_offset = 0

    for number, offset, raw in _physical_lines(source):
        data = _strip_terminator(raw)
        if number == 1 and data.startswith(_BOM):
            data = data[len(_BOM):]
            offset += len(_BOM)
        if not data:
            continue
        if data[:1] in _CONTINUATION:
            if pending is None:
                raise MalformedLine("Continuation line before any content line", line=number, offset=offset)
            pending.append(data[1:])
            continue
        if pending is not None:
            yield _decode(pending, start_line, start_offset)
        pending = [data]
        start_line = number
        start_offset = offset

    if pending is not None:
        yield _decode(pending, start_line, start_offset)
