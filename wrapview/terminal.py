"""Terminal interface using Blessed for display and Curtsies for input."""

from __future__ import annotations

import logging
import os
import select
import signal
import sys
from dataclasses import dataclass
from typing import Optional, Union

import blessed

from .constants import ViewerConstants
from .keyboard import KeyboardHandler, KeyEvent, KeyType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    rows: int


Event = Union[KeyEvent, ResizeEvent]


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    Use as a context manager: entering switches to the alternate screen in
    raw mode, leaving always switches back, also when the body raises.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.stream = stream or sys.stdout
        self.keyboard = KeyboardHandler(self)
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._signal_pipe_r: Optional[int] = None
        self._signal_pipe_w: Optional[int] = None
        self._original_handlers: dict[int, object] = {}

    def __enter__(self) -> "TerminalInterface":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def setup(self):
        """Enter fullscreen raw mode and install signal handlers."""
        from curtsies import Input  # type: ignore

        try:
            self._signal_pipe_r, self._signal_pipe_w = os.pipe()
            for signum, handler in ((signal.SIGWINCH, self._handle_resize),
                                    (signal.SIGINT, self._handle_sigint)):
                self._original_handlers[signum] = signal.signal(signum, handler)
            self._write(self.term.enter_fullscreen)
            self.is_fullscreen = True
            # Flow control off so Ctrl-S reaches us instead of freezing output
            curtsies_input = Input(keynames='curtsies', disable_terminal_start_stop=True)  # type: ignore
            curtsies_input.__enter__()  # type: ignore
            self._curtsies_input = curtsies_input
            self.flush()
        except BaseException:
            # __exit__ does not run when __enter__ fails
            self.cleanup()
            raise
        logger.debug("Terminal set up: %dx%d", *self.size())

    def cleanup(self):
        """Exit fullscreen mode and restore terminal and signal handlers."""
        try:
            if self._curtsies_input is not None:
                # Exit raw mode context
                self._curtsies_input.__exit__(None, None, None)  # type: ignore
        finally:
            self._curtsies_input = None
            if self.is_fullscreen:
                self._write(self.term.exit_fullscreen + self.term.normal_cursor)
                self.flush()
                self.is_fullscreen = False
            for signum, handler in self._original_handlers.items():
                signal.signal(signum, handler)
            self._original_handlers = {}
            for fd in (self._signal_pipe_r, self._signal_pipe_w):
                if fd is not None:
                    os.close(fd)
            self._signal_pipe_r = self._signal_pipe_w = None
            logger.debug("Terminal restored")

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame # Unused
        # Write to pipe to wake up select()
        os.write(self._signal_pipe_w, ViewerConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Handle SIGINT (Ctrl-C) as a key press."""
        del signum, frame # Unused
        os.write(self._signal_pipe_w, ViewerConstants.INTERRUPT_PIPE_MARKER)

    def _write(self, text: str) -> None:
        self.stream.write(text)

    # Output primitives; coordinates are 0-based column/row

    def hide_cursor(self):
        self._write(self.term.hide_cursor)

    def show_cursor(self):
        self._write(self.term.normal_cursor)

    def move_cursor(self, col: int, row: int):
        """Move the cursor to a position without redrawing the screen."""
        self._write(self.term.move(row, col))

    def clear_all(self):
        """Clear the entire screen."""
        self._write(self.term.home + self.term.clear)

    def scroll_up(self, n: int):
        """Scroll content up n rows; blank rows appear at the bottom."""
        self._write(self.term.move(self.height - 1, 0) + self.term.scroll_forward * n)

    def scroll_down(self, n: int):
        """Scroll content down n rows; blank rows appear at the top."""
        self._write(self.term.move(0, 0) + self.term.scroll_reverse * n)

    def write_text(self, data: bytes):
        self._write(data.decode("utf-8"))

    def flush(self):
        self.stream.flush()

    # Input

    def get_key(self, timeout=None):
        """Get a single keypress token from curtsies.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name, or None if nothing arrived in time.
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            r, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not r:
                return None
        evt = next(self._curtsies_input)  # type: ignore
        return str(evt)

    def read_event(self) -> Event:
        """Block until a key press or resize arrives and return it."""
        while True:
            ready, _, _ = select.select([0, self._signal_pipe_r], [], [])
            if self._signal_pipe_r in ready:
                data = os.read(self._signal_pipe_r, 1024)
                if ViewerConstants.INTERRUPT_PIPE_MARKER in data:
                    return KeyEvent(key_type=KeyType.CTRL, value='c', raw='\x03', is_ctrl=True)
                columns, rows = self.size()
                return ResizeEvent(columns, rows)
            if 0 in ready:
                event = self.keyboard.get_key_event(timeout=0)
                if event:
                    return event

    def size(self) -> tuple[int, int]:
        """Terminal size as (columns, rows)."""
        return self.width, self.height

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
