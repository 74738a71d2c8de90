"""wrapview - A terminal text viewer with soft wrap and grapheme-aware navigation."""

import logging

from .document import Document, Line, DocumentDecodeError, load_document, save_document
from .layout import LayoutError, resolve
from .model import Command, LogicalCursor, PhysicalPoint, Viewport
from .segmenter import Cell

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Cell',
    'Command',
    'Document',
    'DocumentDecodeError',
    'LayoutError',
    'Line',
    'LogicalCursor',
    'PhysicalPoint',
    'Viewport',
    'load_document',
    'resolve',
    'save_document',
]
