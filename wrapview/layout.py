"""Soft-wrap layout: where every cell of the document lands on the grid.

The wrap arithmetic follows what a terminal with automatic margins does
when text is written to it sequentially:

- a cell that does not fit in what is left of a row starts the next row;
- a cell whose end reaches the right edge moves the position to column 0
  of the next row (``advance`` reports this as an edge wrap);
- at the end of a logical line the next line starts one row down, unless
  the line's content already wrapped at the edge. A terminal leaves the
  cursor parked on the last column in that case and the line separator
  does not produce a blank row, so neither does the layout.

Both the cursor search and the repaint use these same functions.
"""

from __future__ import annotations

import logging
from typing import Iterator, NamedTuple, Optional

from .constants import ViewerConstants
from .document import Document, Line
from .model import Command, LogicalCursor, PhysicalPoint, Viewport

logger = logging.getLogger(__name__)


class LayoutError(RuntimeError):
    """Raised when the layout state breaks an invariant (a bug, not input)."""


class LineLayout(NamedTuple):
    origins: list[PhysicalPoint]  # Origin of each visible cell, in order
    next_row: int  # Row where the following line starts


class Placement(NamedTuple):
    line: int
    cell: int
    col: int
    row: int


class Resolution(NamedTuple):
    offset: int
    point: PhysicalPoint
    cursor: LogicalCursor


def place(col: int, row: int, width: int, screen_width: int) -> tuple[int, int]:
    """Return the origin of a cell of the given width at position (col, row)."""
    if col > 0 and col + width > screen_width:
        return 0, row + 1
    return col, row


def advance(col: int, row: int, width: int, screen_width: int) -> tuple[int, int, bool]:
    """Move past a cell; return (col, row, edge_wrap).

    edge_wrap is True when the cell ended on the right edge and the
    position moved to the start of the next row.
    """
    if width == 0:
        return col, row, False
    col, row = place(col, row, width, screen_width)
    col += width
    if col >= screen_width:
        return 0, row + 1, True
    return col, row, False


def layout_line(line: Line, screen_width: int, row: int = 0,
                limit: Optional[int] = None) -> LineLayout:
    """Lay out one line starting at column 0 of row.

    Origins at or below limit are dropped, and next_row is then limit.
    """
    origins: list[PhysicalPoint] = []
    col = 0
    wrapped = False
    for cell in line.cells:
        origin = PhysicalPoint(*place(col, row, cell.width, screen_width))
        if limit is not None and origin.row >= limit:
            return LineLayout(origins, limit)
        origins.append(origin)
        if cell.is_sentinel:
            break
        col, row, edge_wrap = advance(col, row, cell.width, screen_width)
        if cell.width:
            wrapped = edge_wrap
    return LineLayout(origins, row if wrapped else row + 1)


def line_rows(line: Line, screen_width: int) -> int:
    """Number of physical rows the line occupies."""
    return layout_line(line, screen_width).next_row


def walk(document: Document, offset: int, width: int, height: int) -> Iterator[Placement]:
    """Yield the placement of every visible cell from line offset onward."""
    row = 0
    for number in range(offset, len(document)):
        if row >= height:
            return
        layout = layout_line(document[number], width, row, limit=height)
        for index, origin in enumerate(layout.origins):
            yield Placement(number, index, origin.col, origin.row)
        row = layout.next_row


def locate(document: Document, viewport: Viewport,
           cursor: LogicalCursor) -> Optional[PhysicalPoint]:
    """Physical position of the cursor, or None if it is not on screen."""
    for placement in walk(document, viewport.offset, viewport.width, viewport.height):
        if placement.line > cursor.line:
            break
        if placement.line == cursor.line and placement.cell == cursor.cell:
            return PhysicalPoint(placement.col, placement.row)
    return None


def _check_cursor(document: Document, cursor: LogicalCursor) -> None:
    if not 0 <= cursor.line < len(document):
        raise LayoutError(f"cursor line {cursor.line} outside document of {len(document)} lines")
    last = document[cursor.line].last_index
    if not 0 <= cursor.cell <= last:
        raise LayoutError(f"cursor cell {cursor.cell} outside line {cursor.line} (last index {last})")


def _pin_to_screen(document: Document, viewport: Viewport,
                   cursor: LogicalCursor) -> Resolution:
    last = None
    for placement in walk(document, cursor.line, viewport.width, viewport.height):
        if placement.line != cursor.line:
            break
        last = placement
    if last is None:
        raise LayoutError(f"line {cursor.line} has no cell on a {viewport.width}x{viewport.height} grid")
    logger.debug("Cell %d of line %d is below the viewport; pinned to cell %d",
                 cursor.cell, cursor.line, last.cell)
    return Resolution(cursor.line, PhysicalPoint(last.col, last.row),
                      LogicalCursor(cursor.line, last.cell))


def resolve(document: Document, viewport: Viewport, cursor: LogicalCursor,
            command: Optional[Command] = None) -> Resolution:
    """Apply a horizontal command and find the cursor on screen.

    Left and right move within the line and stop at its ends. If the cursor
    is below the viewport, the offset moves down one line at a time until
    it is visible. When the cursor line is at the top and the cell is still
    below the bottom row, the line is taller than the viewport and the
    cursor is pinned to its last visible cell.
    """
    if viewport.is_empty:
        raise LayoutError(f"cannot lay out into a {viewport.width}x{viewport.height} viewport")
    _check_cursor(document, cursor)

    line = document[cursor.line]
    if command is Command.RIGHT and cursor.cell < line.last_index:
        cursor = LogicalCursor(cursor.line, cursor.cell + 1)
    elif command is Command.LEFT and cursor.cell > 0:
        cursor = LogicalCursor(cursor.line, cursor.cell - 1)

    offset = viewport.offset
    if offset > cursor.line:
        raise LayoutError(f"cursor line {cursor.line} is above viewport offset {offset}")
    while True:
        point = locate(document, Viewport(offset, viewport.width, viewport.height), cursor)
        if point is not None:
            if offset != viewport.offset:
                logger.debug("Offset moved %d -> %d to reach %s", viewport.offset, offset, cursor)
            return Resolution(offset, point, cursor)
        if offset == cursor.line:
            return _pin_to_screen(document, viewport, cursor)
        offset += 1


def materialize(document: Document, viewport: Viewport, first_row: int = 0,
                last_row: Optional[int] = None) -> bytes:
    """Bytes that paint rows [first_row, last_row) of the layout.

    Lines are joined with the line separator. A line takes part when it
    starts inside the range or paints something inside it, so writing the
    result from column 0 of first_row reproduces the layout.
    """
    if last_row is None:
        last_row = viewport.height
    chunks: list[bytes] = []
    row = 0
    for number in range(viewport.offset, len(document)):
        if row >= last_row:
            break
        line = document[number]
        layout = layout_line(line, viewport.width, row, limit=last_row)
        data = b"".join(
            line.glyph(index)
            for index, origin in enumerate(layout.origins)
            if origin.row >= first_row
        )
        if row >= first_row or data:
            chunks.append(data)
        row = layout.next_row
    return ViewerConstants.LINE_SEPARATOR.join(chunks)
