"""Grid coordinates and bounds for the spark growth simulation."""

from typing import List, NamedTuple


class Coordinate(NamedTuple):
    """Integer grid cell. Equal iff both components match."""
    x: int
    y: int

    @property
    def key(self) -> str:
        """Canonical "x-y" string form."""
        return f"{self.x}-{self.y}"

    def offset(self, dx: int, dy: int) -> "Coordinate":
        return Coordinate(self.x + dx, self.y + dy)

    def neighbors4(self) -> List["Coordinate"]:
        """Axis-adjacent cells, unfiltered: +x, -x, +y, -y."""
        return [
            Coordinate(self.x + 1, self.y),
            Coordinate(self.x - 1, self.y),
            Coordinate(self.x, self.y + 1),
            Coordinate(self.x, self.y - 1),
        ]


class GridBounds:
    """
    Inclusive rectangular bounds [0, width] x [0, height].

    A grid configured as width W holds W + 1 columns: x == W is in bounds,
    x == W + 1 is not.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    @property
    def shape(self):
        """Dense array shape, (rows, columns)."""
        return (self.height + 1, self.width + 1)

    @property
    def cell_count(self) -> int:
        return (self.width + 1) * (self.height + 1)

    def is_out_of_bounds(self, coord: Coordinate) -> bool:
        return (coord.x > self.width or coord.x < 0 or
                coord.y > self.height or coord.y < 0)

    def __repr__(self) -> str:
        return f"GridBounds(width={self.width}, height={self.height})"
