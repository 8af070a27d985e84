"""Sparse potential field for the spark growth simulation."""

import numpy as np
from typing import Dict, List, Optional, Mapping

from .grid import Coordinate, GridBounds


class PotentialField:
    """
    Sparse mapping from grid cell to potential in [0, 1].

    Cells that were never touched read as 0. Keys are only ever added, never
    removed. The active set is the subset of keys pinned at exactly 1; it is
    kept both as a dict for membership and as a list in activation order so
    that uniform draws can index into it.
    """

    def __init__(self, bounds: GridBounds):
        self.bounds = bounds
        self.weights: Dict[Coordinate, float] = {}
        self._active: Dict[Coordinate, None] = {}
        self.active_cells: List[Coordinate] = []
        # Free in-bounds cells with at least one active neighbor
        self._frontier: Dict[Coordinate, None] = {}

    def __len__(self) -> int:
        return len(self.weights)

    def __contains__(self, coord: Coordinate) -> bool:
        return coord in self.weights

    def get(self, coord: Coordinate) -> float:
        """Return stored weight, or 0 for an untouched cell."""
        return self.weights.get(coord, 0.0)

    def is_out_of_bounds(self, coord: Coordinate) -> bool:
        return self.bounds.is_out_of_bounds(coord)

    def is_active(self, coord: Coordinate) -> bool:
        return coord in self._active

    def neighbors4(self, coord: Coordinate) -> List[Coordinate]:
        return coord.neighbors4()

    def candidate_neighbors(
        self,
        coord: Coordinate,
        processed: Optional[Mapping[Coordinate, float]] = None
    ) -> List[Coordinate]:
        """
        Cells around `coord` that may receive a new value.

        Tested in the order (x, y), (x+1, y), (x-1, y), (x, y+1), (x, y-1).
        A cell is kept when it is in bounds, not active, and not already a
        key of `processed`. The reference cell itself only survives the
        filter when it is not active, which in practice happens during
        relaxation of an inactive trace cell and never during selection,
        where the reference cell is always active.
        """
        candidates = []
        for cell in [coord] + coord.neighbors4():
            if self.is_out_of_bounds(cell):
                continue
            if cell in self._active:
                continue
            if processed is not None and cell in processed:
                continue
            candidates.append(cell)
        return candidates

    def neighbor_mean(self, coord: Coordinate) -> float:
        """Mean of the four axis-neighbors' weights, missing cells as 0."""
        return sum(self.get(cell) for cell in coord.neighbors4()) / 4

    def relax(self) -> Dict[Coordinate, float]:
        """
        Run one Jacobi sweep over the frontier of the known trace.

        Every candidate neighbor of every known cell is set to the mean of
        its four neighbors. All values are computed from the field as it was
        before the sweep and committed together at the end. Returns the
        committed updates.
        """
        updates: Dict[Coordinate, float] = {}
        for coord in self.weights:
            for cell in self.candidate_neighbors(coord, updates):
                updates[cell] = self.neighbor_mean(cell)

        self.weights.update(updates)
        return updates

    def activate(self, coord: Coordinate) -> None:
        """Pin a cell at weight 1 and add it to the active set."""
        self.weights[coord] = 1.0
        if coord in self._active:
            return
        self._active[coord] = None
        self.active_cells.append(coord)
        self._frontier.pop(coord, None)
        for cell in coord.neighbors4():
            if not self.is_out_of_bounds(cell) and cell not in self._active:
                self._frontier[cell] = None

    def has_frontier(self) -> bool:
        """True if any active cell still has a free in-bounds neighbor."""
        return bool(self._frontier)

    @property
    def frontier_size(self) -> int:
        return len(self._frontier)

    def to_array(self) -> np.ndarray:
        """Dense (height + 1, width + 1) array of weights, [y, x] indexed."""
        field = np.zeros(self.bounds.shape, dtype=np.float64)
        for coord, weight in self.weights.items():
            field[coord.y, coord.x] = weight
        return field

    def active_mask(self) -> np.ndarray:
        """Dense boolean mask of active cells, [y, x] indexed."""
        mask = np.zeros(self.bounds.shape, dtype=bool)
        for coord in self.active_cells:
            mask[coord.y, coord.x] = True
        return mask
