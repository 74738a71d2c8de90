from enum import Enum
from dataclasses import dataclass
from typing import NamedTuple


@dataclass
class LogicalCursor:
    line: int = 0
    cell: int = 0


@dataclass(frozen=True)
class Viewport:
    """Window into the document: first drawn line and grid size."""
    offset: int = 0
    width: int = 0
    height: int = 0

    @property
    def is_empty(self) -> bool:
        """True when the grid has no cells to draw into."""
        return self.width < 1 or self.height < 1


class PhysicalPoint(NamedTuple):
    col: int
    row: int


class Command(Enum):
    """Directional navigation command."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
