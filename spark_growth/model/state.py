"""Snapshot dataclasses for the spark growth simulation."""

from dataclasses import dataclass
from typing import List, Dict, Tuple

from .grid import Coordinate

WINDOW_RADIUS = 2


@dataclass(frozen=True)
class SnapshotCell:
    """One cell of a snapshot window."""
    x: int
    y: int
    weight: float

    def to_record(self) -> Dict:
        return {"x": self.x, "y": self.y, "weight": self.weight}


@dataclass(frozen=True)
class SnapshotWindow:
    """
    5x5 neighborhood emitted after a tick, centered on the cell that tick
    activated. Cells are row-major: y outer, x inner, offsets -2..+2.
    """
    step: int
    center: Coordinate
    cells: Tuple[SnapshotCell, ...]

    def to_records(self) -> List[Dict]:
        """Convert to the outbound message format."""
        return [cell.to_record() for cell in self.cells]

    def weight_at(self, coord: Coordinate) -> float:
        """Weight reported for `coord`, which must lie inside the window."""
        dx = coord.x - self.center.x + WINDOW_RADIUS
        dy = coord.y - self.center.y + WINDOW_RADIUS
        size = 2 * WINDOW_RADIUS + 1
        if not (0 <= dx < size and 0 <= dy < size):
            raise KeyError(coord)
        return self.cells[dy * size + dx].weight
