"""Cursor navigation: apply a directional command to cursor and viewport."""

from __future__ import annotations

from typing import Optional

from .document import Document
from .layout import Resolution, resolve
from .model import Command, LogicalCursor, Viewport

__all__ = ['Command', 'apply', 'follow_cursor']


def follow_cursor(offset: int, line: int, height: int) -> int:
    """Smallest offset change that keeps line within [offset, offset + height)."""
    offset = min(offset, line)
    if line + 1 >= height:
        offset = max(offset, line + 1 - height)
    return offset


def apply(document: Document, cursor: LogicalCursor, viewport: Viewport,
          command: Optional[Command] = None) -> Resolution:
    """Move the cursor and return the resolved offset, screen point and cursor.

    Up and down change the line and clamp the cell index to the target
    line; there is no remembered column. Left and right are carried out by
    the layout walk. At the document and line edges a command does nothing.
    """
    line, cell = cursor.line, cursor.cell
    if command is Command.UP and line > 0:
        line -= 1
    elif command is Command.DOWN and line + 1 < len(document):
        line += 1
    if line != cursor.line:
        cell = min(cell, document[line].last_index)

    offset = follow_cursor(viewport.offset, line, viewport.height)
    return resolve(
        document,
        Viewport(offset, viewport.width, viewport.height),
        LogicalCursor(line, cell),
        command,
    )
