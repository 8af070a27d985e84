"""Summary report generation for the spark growth simulation."""

import math
import numpy as np
from typing import List, Dict, Optional, Sequence, Tuple, TYPE_CHECKING
from pathlib import Path
from scipy import ndimage

from ..model.grid import Coordinate

if TYPE_CHECKING:
    from ..config import SparkConfig

# Index of the window center in a row-major 5x5 snapshot message
CENTER_INDEX = 12


def box_counting_dimension(cells: Sequence[Tuple[int, int]]) -> float:
    """
    Estimate the fractal dimension of a set of cells by box counting.

    Boxes of side 1, 2, 4, ... up to the extent of the set are laid over
    it; the dimension is minus the slope of log(count) against log(size).
    Returns 0.0 when fewer than two box sizes fit.
    """
    if len(cells) < 2:
        return 0.0
    points = np.asarray(cells, dtype=np.int64)
    points = points - points.min(axis=0)
    extent = int(points.max()) + 1

    sizes = []
    counts = []
    size = 1
    while size <= extent:
        boxes = np.unique(points // size, axis=0)
        sizes.append(size)
        counts.append(len(boxes))
        size *= 2

    if len(sizes) < 2:
        return 0.0
    slope, _ = np.polyfit(np.log(sizes), np.log(counts), 1)
    return float(-slope)


def count_components(cells: Sequence[Tuple[int, int]]) -> int:
    """Number of 4-connected components formed by the cells."""
    if not cells:
        return 0
    points = np.asarray(cells, dtype=np.int64)
    points = points - points.min(axis=0)
    width, height = points.max(axis=0) + 1
    mask = np.zeros((height, width), dtype=bool)
    mask[points[:, 1], points[:, 0]] = True
    # Default structuring element is the 4-connected cross
    _, n_components = ndimage.label(mask)
    return int(n_components)


STOP_REASONS = {
    None: "completed",
    'exhausted': "grid exhausted (no free cells next to the trace)",
    'attempt_cap': "selection attempt cap reached with free cells left",
}


def _stop_reason(summary: Dict) -> str:
    return STOP_REASONS.get(summary.get('saturation_reason'),
                            str(summary.get('saturation_reason')))


class Reporter:
    """
    Generates summary statistics and formatted text report.

    Works purely from the outbound snapshot stream: the center of every
    window is the cell activated on that tick, so the growth order can be
    rebuilt without access to the engine.
    """

    def __init__(self, config_path: str, seed: Optional[int],
                 spark: "SparkConfig"):
        self.config_path = config_path
        self.seed = seed
        self.spark = spark
        self.activated: List[Coordinate] = [spark.initial_spark_position]
        self.ticks = 0
        self.max_radius = 0.0
        self.high_weight_cells = 0

    def update(self, records: List[Dict]) -> None:
        """Accumulate metrics per tick."""
        self.ticks += 1
        center = records[CENTER_INDEX]
        cell = Coordinate(center['x'], center['y'])
        self.activated.append(cell)

        origin = self.spark.initial_spark_position
        radius = math.hypot(cell.x - origin.x, cell.y - origin.y)
        if radius > self.max_radius:
            self.max_radius = radius

        self.high_weight_cells += sum(
            1 for r in records if 0.5 < r['weight'] < 1)

    def generate_summary(self, summary: Dict,
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        expected = self.spark.number_of_intervals
        completion_pct = self.ticks / expected * 100 if expected > 0 else 0
        dimension = box_counting_dimension(self.activated)
        components = count_components(self.activated)
        seed_pos = self.spark.initial_spark_position

        lines = [
            "",
            "=" * 80,
            "                      SPARK GROWTH SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            f"Grid:        [0, {self.spark.width}] x [0, {self.spark.height}]",
            f"Spark Seed:  ({seed_pos.x}, {seed_pos.y})",
            f"Exponent:    {self.spark.exp}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Ticks Received:        {self.ticks} / {expected} ({completion_pct:.1f}%)",
            f"Active Cells:          {len(self.activated)}",
            f"Trace Size:            {summary.get('trace_size', 0)} cells",
            f"Selection Attempts:    {summary.get('total_attempts', 0)} "
            f"({summary.get('avg_attempts', 0):.2f} per tick)",
            f"Rejections:            {summary.get('total_rejections', 0)}",
            f"Max Radius:            {self.max_radius:.1f} cells",
            "",
            "PATTERN",
            "-" * 40,
            f"Fractal Dimension:     {dimension:.3f} (box counting)",
            f"Connected Components:  {components}",
            f"[{'X' if summary.get('saturated') else ' '}] Grid saturated before completion",
            f"Stop Reason:           {_stop_reason(summary)}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        # Output file paths
        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'spark_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'spark.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
