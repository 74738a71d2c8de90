"""Document model: logical lines of grapheme cells, loaded from and saved to bytes."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .constants import ViewerConstants
from .segmenter import SENTINEL, Cell, is_control, segment

logger = logging.getLogger(__name__)


class DocumentDecodeError(ValueError):
    """Raised when file contents are not valid UTF-8."""

    def __init__(self, reason: str, path: Optional[str] = None):
        self.reason = reason
        self.path = path
        where = f"{path}: " if path else ""
        super().__init__(f"{where}not valid UTF-8 ({reason})")


@dataclass
class Line:
    """One logical line: raw bytes (terminator included) and its cells.

    The last cell ends the line: its terminator, or on the final line of a
    document the sentinel, so a cursor can rest after the last character.
    """
    raw: bytes
    cells: list[Cell]
    _starts: list[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        starts = []
        offset = 0
        for cell in self.cells:
            starts.append(offset)
            offset += cell.byte_len
        self._starts = starts

    @classmethod
    def empty(cls) -> "Line":
        return cls(raw=b"", cells=[SENTINEL])

    @property
    def last_index(self) -> int:
        """Index of the end cell: the last navigable position."""
        return len(self.cells) - 1

    @property
    def total_width(self) -> int:
        """Sum of cell widths; the end cell counts as one column."""
        return sum(cell.width for cell in self.cells)

    def span(self, index: int) -> tuple[int, int]:
        """Byte range of the cell at index."""
        start = self._starts[index]
        return start, start + self.cells[index].byte_len

    def spans(self) -> Iterator[tuple[int, int, Cell]]:
        for index, cell in enumerate(self.cells):
            start, end = self.span(index)
            yield start, end, cell

    def glyph(self, index: int) -> bytes:
        """Bytes painted on screen for the cell at index.

        Terminators paint as blanks so the terminal advances exactly as the
        layout does; control clusters and the sentinel paint nothing.
        """
        cell = self.cells[index]
        if cell.is_sentinel:
            return b""
        if cell.terminator:
            return b" " * cell.width
        start, end = self.span(index)
        data = self.raw[start:end]
        if is_control(data.decode("utf-8")):
            return b""
        return data


class Document:
    """Ordered, never empty sequence of lines."""

    def __init__(self, lines: Optional[list[Line]] = None):
        self.lines: list[Line] = lines or [Line.empty()]

    @classmethod
    def from_text(cls, text: str) -> "Document":
        lines: list[Line] = []
        raw = bytearray()
        cells: list[Cell] = []
        for cluster, cell in segment(text):
            raw.extend(cluster.encode("utf-8"))
            cells.append(cell)
            if cell.terminator:
                lines.append(Line(raw=bytes(raw), cells=cells))
                raw = bytearray()
                cells = []
        # Only the final line lacks a terminator to rest on
        cells.append(SENTINEL)
        lines.append(Line(raw=bytes(raw), cells=cells))
        return cls(lines)

    @classmethod
    def from_bytes(cls, data: bytes, path: Optional[str] = None) -> "Document":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentDecodeError(f"byte {e.start}: {e.reason}", path) from e
        return cls.from_text(text)

    def to_bytes(self) -> bytes:
        return b"".join(line.raw for line in self.lines)

    def line(self, index: int) -> Line:
        return self.lines[index]

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)


def load_document(path: str) -> Document:
    """Read the whole file as UTF-8 and build a document.

    Raises DocumentDecodeError for invalid UTF-8; OSError (including
    FileNotFoundError) propagates.
    """
    with open(path, 'rb') as f:
        data = f.read()
    document = Document.from_bytes(data, path=path)
    logger.info("Loaded %s: %d bytes, %d lines", path, len(data), len(document))
    return document


def save_document(document: Document, path: str) -> None:
    """Write the document's bytes to path atomically.

    The bytes go to a temporary file in the same directory, which is then
    renamed over the target. OSError propagates after the temporary file is
    removed.
    """
    data = document.to_bytes()
    dir_name = os.path.dirname(path) or '.'
    base_name = os.path.basename(path)

    with tempfile.NamedTemporaryFile(
        mode='wb',
        dir=dir_name,
        prefix=ViewerConstants.ATOMIC_SAVE_PREFIX + base_name,
        suffix=ViewerConstants.ATOMIC_SAVE_SUFFIX,
        delete=False
    ) as temp_file:
        temp_filename = temp_file.name
        try:
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        except OSError:
            temp_file.close()
            os.remove(temp_filename)
            raise

    try:
        os.replace(temp_filename, path)
    except OSError:
        os.remove(temp_filename)
        raise
    logger.info("Saved %s: %d bytes", path, len(data))
