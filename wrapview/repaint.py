"""Repaint planning: choose the cheapest terminal update for a frame.

A frame either only moves the cursor, scrolls the screen by the rows of
one logical line and paints the rows that scrolled in, or clears and
repaints everything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .document import Document
from .layout import line_rows, materialize
from .model import PhysicalPoint, Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorOnly:
    point: PhysicalPoint


@dataclass(frozen=True)
class ScrollBy:
    """Scroll by one logical line and paint the newly exposed rows.

    delta is +1 when the offset moved down (content scrolls up) and -1 when
    it moved up. rows is the number of physical rows scrolled, and data is
    painted starting at column 0 of row.
    """
    delta: int
    rows: int
    row: int
    data: bytes
    point: PhysicalPoint


@dataclass(frozen=True)
class Full:
    data: bytes
    point: PhysicalPoint


RepaintAction = Union[CursorOnly, ScrollBy, Full]


def plan(document: Document, old_viewport: Optional[Viewport], new_viewport: Viewport,
         point: PhysicalPoint, is_resize: bool = False) -> RepaintAction:
    """Pick the repaint for going from old_viewport to new_viewport.

    old_viewport is None on the first frame.
    """
    if old_viewport is None or is_resize:
        return Full(materialize(document, new_viewport), point)

    delta = new_viewport.offset - old_viewport.offset
    if delta == 0:
        return CursorOnly(point)
    if abs(delta) > 1:
        return Full(materialize(document, new_viewport), point)

    height = new_viewport.height
    if delta > 0:
        # The old top line scrolls off
        rows = line_rows(document[old_viewport.offset], new_viewport.width)
        row = height - rows
    else:
        # The new top line scrolls in
        rows = line_rows(document[new_viewport.offset], new_viewport.width)
        row = 0
    if rows >= height:
        return Full(materialize(document, new_viewport), point)
    data = materialize(document, new_viewport, first_row=row, last_row=row + rows)
    return ScrollBy(delta, rows, row, data, point)


def emit(action: RepaintAction, terminal) -> None:
    """Send the action to the terminal and flush."""
    if isinstance(action, Full):
        terminal.hide_cursor()
        terminal.clear_all()
        terminal.write_text(action.data)
        terminal.move_cursor(action.point.col, action.point.row)
        terminal.show_cursor()
    elif isinstance(action, ScrollBy):
        terminal.hide_cursor()
        if action.delta > 0:
            terminal.scroll_up(action.rows)
        else:
            terminal.scroll_down(action.rows)
        terminal.move_cursor(0, action.row)
        terminal.write_text(action.data)
        terminal.move_cursor(action.point.col, action.point.row)
        terminal.show_cursor()
    else:
        terminal.move_cursor(action.point.col, action.point.row)
    terminal.flush()
    logger.debug("Emitted %s", type(action).__name__)
