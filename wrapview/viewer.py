"""Main viewer controller: owns the document, cursor and viewport."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Optional

from . import navigator
from .document import Document, load_document, save_document
from .keyboard import KeyEvent, KeyType
from .model import Command, LogicalCursor, Viewport
from .repaint import RepaintAction, emit, plan
from .terminal import ResizeEvent, TerminalInterface

logger = logging.getLogger(__name__)


class Viewer:
    """Terminal text viewer application controller.

    Each input event runs one frame pass to completion: the navigator moves
    the cursor, the layout resolves it on screen, and the repaint planner
    sends the smallest update to the terminal.
    """

    def __init__(self, terminal: Optional[TerminalInterface] = None):
        """Initialize the viewer components."""
        self.terminal = terminal or TerminalInterface()
        self.document = Document()
        self.cursor = LogicalCursor()
        self.viewport: Optional[Viewport] = None  # None until the first frame
        self.filename: Optional[str] = None
        self.running = False

    def load_file(self, filename: str):
        """Load a file into the viewer.

        A path that does not exist yet gives an empty document; it is
        created on save.
        """
        self.filename = filename
        if not os.path.exists(filename):
            logger.info("%s does not exist; starting with an empty document", filename)
            self.document = Document()
        else:
            self.document = load_document(filename)
        self.cursor = LogicalCursor()
        if self.viewport is not None:
            self.viewport = replace(self.viewport, offset=0)

    def save_file(self, filename: Optional[str] = None):
        """Save the document to filename (default: the loaded path)."""
        filename = filename or self.filename
        if filename is None:
            raise ValueError("no file name to save to")
        save_document(self.document, filename)

    def step(self, command: Optional[Command] = None,
             size: Optional[tuple[int, int]] = None) -> Optional[RepaintAction]:
        """Run one frame: navigate, lay out, repaint.

        Args:
            command: Navigation command, or None to only re-resolve.
            size: New (columns, rows) when the terminal was resized.

        Returns:
            The repaint action sent to the terminal, or None when nothing
            can be drawn (no size yet, or a grid with no cells).
        """
        old = self.viewport
        is_resize = False
        new = old
        if size is not None:
            width, height = size
            is_resize = old is None or (old.width, old.height) != (width, height)
            new = Viewport(old.offset if old else 0, width, height)
        if new is None:
            return None
        if new.is_empty:
            logger.debug("Skipping frame for empty %dx%d viewport", new.width, new.height)
            self.viewport = new
            return None

        resolution = navigator.apply(self.document, self.cursor, new, command)
        self.cursor = resolution.cursor
        self.viewport = replace(new, offset=resolution.offset)

        action = plan(self.document, old, self.viewport, resolution.point, is_resize)
        emit(action, self.terminal)
        return action

    def handle_event(self, event) -> bool:
        """Handle one input event; return False when the viewer should quit."""
        if isinstance(event, ResizeEvent):
            self.step(size=(event.columns, event.rows))
            return True
        if not isinstance(event, KeyEvent):
            return True
        if event.key_type == KeyType.CTRL:
            if event.value == 'c':
                return False
            if event.value == 's':
                self.save_file()
            return True
        command = event.command()
        if command is not None:
            self.step(command)
        return True

    def run(self):
        """Run the main viewer loop until Ctrl-C."""
        with self.terminal:
            self.running = True
            self.step(size=self.terminal.size())
            while self.running:
                event = self.terminal.read_event()
                self.running = self.handle_event(event)
