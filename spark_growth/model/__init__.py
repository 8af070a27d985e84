"""Model package for the spark growth simulation."""

from .grid import Coordinate, GridBounds
from .field import PotentialField
from .state import SnapshotCell, SnapshotWindow
from .engine import GrowthEngine

__all__ = [
    'Coordinate',
    'GridBounds',
    'PotentialField',
    'SnapshotCell',
    'SnapshotWindow',
    'GrowthEngine',
]
