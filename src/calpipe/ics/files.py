"""File and stream helpers for the command-line driver.

The parsing and transformation modules never touch files; the driver reads
every input up front through these helpers and writes the result at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from .errors import CalendarFileError

STDIN_MARKER = "-"


@dataclass(frozen=True)
class InputDocument:
    name: str
    data: bytes

    @property
    def is_blank(self) -> bool:
        return not self.data.strip()


def read_document(path: Path) -> InputDocument:
    if not path.exists():
        raise CalendarFileError("Calendar file not found", path=str(path))
    if path.is_dir():
        raise CalendarFileError("Calendar path is a directory", path=str(path))
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise CalendarFileError("Unable to read calendar file", path=str(path)) from exc
    return InputDocument(name=str(path), data=data)


def read_stream(stream: BinaryIO, name: str = "<stdin>") -> InputDocument:
    try:
        data = stream.read()
    except OSError as exc:
        raise CalendarFileError("Unable to read standard input", path=name) from exc
    return InputDocument(name=name, data=data)


def collect_inputs(paths: Iterable[Path], stdin: Optional[BinaryIO]) -> list[InputDocument]:
    """Read ``paths`` in order, ``-`` standing for ``stdin``.

    With no paths, ``stdin`` is the only input when it is given. Blank
    inputs are dropped.
    """
    documents: list[InputDocument] = []
    paths = list(paths)
    if not paths:
        if stdin is not None:
            documents.append(read_stream(stdin))
    else:
        for path in paths:
            if str(path) == STDIN_MARKER:
                if stdin is None:
                    raise CalendarFileError("Standard input is not available", path=STDIN_MARKER)
                documents.append(read_stream(stdin))
            else:
                documents.append(read_document(path))
    return [document for document in documents if not document.is_blank]


def _ensure_parent_dir(path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CalendarFileError("Unable to create output directory", path=str(path)) from exc


def write_document(path: Path, data: bytes) -> None:
    _ensure_parent_dir(path)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise CalendarFileError("Unable to write calendar file", path=str(path)) from exc
