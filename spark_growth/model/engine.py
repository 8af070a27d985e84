"""Growth engine for the spark growth simulation."""

import numpy as np
from typing import Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from .grid import Coordinate
from .field import PotentialField
from .state import SnapshotCell, SnapshotWindow, WINDOW_RADIUS
from ..errors import GridSaturatedError, InvalidConfigError

if TYPE_CHECKING:
    from ..config import SparkConfig

DEFAULT_MAX_ATTEMPTS = 100_000
SATURATION_POLICIES = ('stop', 'raise')


class GrowthEngine:
    """
    Drives a dielectric-breakdown style growth run.

    Each tick is two phases over one shared sparse field:
    1. Relax the field once around the known trace
    2. Pick one new active cell by rejection sampling and emit a snapshot
       window around it

    The engine owns its field exclusively and is single-threaded. All
    randomness comes from the injected generator.
    """

    def __init__(self, config: "SparkConfig",
                 rng: Optional[np.random.Generator] = None,
                 max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 on_saturation: str = 'stop'):
        config.validate()
        if max_attempts <= 0:
            raise InvalidConfigError(f"max_attempts must be > 0, got {max_attempts}")
        if on_saturation not in SATURATION_POLICIES:
            raise InvalidConfigError(f"Unknown saturation policy: {on_saturation}")

        self.config = config
        self.exp = float(config.exp)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts
        self.on_saturation = on_saturation

        self.current_step = 0
        self.saturated = False
        self.saturation_reason: Optional[str] = None

        # Rejection-loop bookkeeping
        self.attempts_last_tick = 0
        self.rejections_last_tick = 0
        self.total_attempts = 0
        self.total_rejections = 0

        self.field = PotentialField(config.bounds)
        self.field.activate(config.initial_spark_position)

    @property
    def active_cells(self) -> List[Coordinate]:
        """Active cells in activation order, seed first."""
        return self.field.active_cells

    def relax(self) -> Dict[Coordinate, float]:
        """Phase 1: one relaxation sweep."""
        return self.field.relax()

    def select_next(self) -> Coordinate:
        """
        Phase 2: pick and commit the next active cell.

        Draws an active cell, then one of its free neighbors, and accepts
        it with probability (1 - w) ** exp where w is its current weight.
        The loop is capped at `max_attempts` draws. If a drawn active cell
        is fully surrounded and the field has no frontier left, the grid is
        exhausted and the tick fails at once.
        """
        active = self.field.active_cells
        attempts = 0
        rejections = 0

        while True:
            if attempts >= self.max_attempts:
                self._record_attempts(attempts, rejections)
                raise GridSaturatedError(self.current_step + 1, attempts,
                                         'attempt_cap')
            attempts += 1

            origin = active[int(self.rng.integers(len(active)))]
            candidates = self.field.candidate_neighbors(origin)
            if not candidates:
                if not self.field.has_frontier():
                    self._record_attempts(attempts, rejections)
                    raise GridSaturatedError(self.current_step + 1,
                                             attempts, 'exhausted')
                continue

            candidate = candidates[int(self.rng.integers(len(candidates)))]
            if self.field.is_active(candidate):
                continue

            probability = (1.0 - self.field.get(candidate)) ** self.exp
            if self.rng.random() < probability:
                self.field.activate(candidate)
                self._record_attempts(attempts, rejections)
                return candidate
            rejections += 1

    def _record_attempts(self, attempts: int, rejections: int) -> None:
        self.attempts_last_tick = attempts
        self.rejections_last_tick = rejections
        self.total_attempts += attempts
        self.total_rejections += rejections

    def snapshot(self, center: Coordinate) -> SnapshotWindow:
        """Build the 5x5 window around `center`, y outer, x inner."""
        offsets = range(-WINDOW_RADIUS, WINDOW_RADIUS + 1)
        cells = []
        for dy in offsets:
            for dx in offsets:
                coord = center.offset(dx, dy)
                cells.append(SnapshotCell(coord.x, coord.y,
                                          self.field.get(coord)))
        return SnapshotWindow(step=self.current_step, center=center,
                              cells=tuple(cells))

    def step(self) -> SnapshotWindow:
        """
        Execute one tick.

        Raises GridSaturatedError when no new cell can be activated; the
        step counter is not advanced in that case.
        """
        if self.is_finished():
            raise RuntimeError("Run is finished; no further ticks")

        self.relax()
        try:
            new_active = self.select_next()
        except GridSaturatedError as exc:
            self.saturated = True
            self.saturation_reason = exc.reason
            raise
        self.current_step += 1
        return self.snapshot(new_active)

    def run(self, should_stop: Optional[Callable[[], bool]] = None
            ) -> Iterator[SnapshotWindow]:
        """
        Yield one snapshot per tick until the run is finished.

        `should_stop` is polled before every tick. Under the "stop" policy a
        saturated grid ends the run early; under "raise" the error
        propagates.
        """
        while not self.is_finished():
            if should_stop is not None and should_stop():
                return
            try:
                window = self.step()
            except GridSaturatedError:
                if self.on_saturation == 'raise':
                    raise
                return
            yield window

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return (self.current_step >= self.config.number_of_intervals or
                self.saturated)

    def get_summary(self) -> Dict:
        """Get summary statistics for the run."""
        return {
            'total_steps': self.current_step,
            'intervals': self.config.number_of_intervals,
            'active_cells': len(self.field.active_cells),
            'trace_size': len(self.field),
            'total_attempts': self.total_attempts,
            'total_rejections': self.total_rejections,
            'avg_attempts': self.total_attempts / max(1, self.current_step),
            'saturated': self.saturated,
            'saturation_reason': self.saturation_reason
        }
