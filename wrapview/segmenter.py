"""Grapheme segmentation: split text into cells with byte length and width.

A cell is one extended grapheme cluster. Its width is the number of
terminal columns it takes (0, 1 or 2). Clusters that end a line (CR, LF,
CRLF and the Unicode vertical whitespace characters) are reported as
terminator cells with the same width as the end-of-line sentinel.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

from .constants import ViewerConstants


LINE_BREAKS = frozenset({
    "\r\n",
    "\n",
    "\x0b",
    "\x0c",
    "\r",
    "\x85",
    "\u2028",
    "\u2029",
})


@dataclass(frozen=True)
class Cell:
    """Storage length and display width of one grapheme cluster."""
    byte_len: int
    width: int
    terminator: bool = False

    @property
    def is_sentinel(self) -> bool:
        return self.byte_len == 0


SENTINEL = Cell(byte_len=0, width=ViewerConstants.SENTINEL_WIDTH)


def is_line_break(cluster: str) -> bool:
    """Return True if the cluster closes the current line."""
    return cluster in LINE_BREAKS


def is_control(cluster: str) -> bool:
    """Return True for clusters that start with a C0/C1 control character."""
    return bool(cluster) and unicodedata.category(cluster[0]) == "Cc"


def cell_width(cluster: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Line terminators take the sentinel width.
    2. Other control characters (TAB included) -> 0
    3. Emoji sequences (VS16, ZWJ, skin tone, regional indicators) -> 2
    4. Otherwise the widest code point according to wcwidth.
    """
    if not cluster:
        return 0
    if is_line_break(cluster):
        return ViewerConstants.SENTINEL_WIDTH
    if is_control(cluster):
        return 0

    if len(cluster) == 1:
        return min(max(_wcwidth.wcwidth(cluster), 0), 2)

    for ch in cluster:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    width = max(_wcwidth.wcwidth(ch) for ch in cluster)
    return min(max(width, 0), 2)


def segment(text: str) -> Iterator[tuple[str, Cell]]:
    """Yield (cluster, cell) for every grapheme cluster of text, in order."""
    for cluster in grapheme.graphemes(text):
        yield cluster, Cell(
            byte_len=len(cluster.encode("utf-8")),
            width=cell_width(cluster),
            terminator=is_line_break(cluster),
        )
