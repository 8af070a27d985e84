"""Configuration dataclasses and YAML loader for the spark growth simulation."""

import math
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
from pathlib import Path

import numpy as np
import yaml

from .errors import InvalidConfigError
from .model.engine import DEFAULT_MAX_ATTEMPTS, SATURATION_POLICIES
from .model.grid import Coordinate, GridBounds

# Host-side fallbacks. The engine never applies these itself.
DEFAULT_WIDTH = 250
DEFAULT_HEIGHT = 250
DEFAULT_INTERVALS = 500
DEFAULT_POSITION = Coordinate(100, 100)
DEFAULT_EXP = 2.0
DEFAULT_COLOR = '#05edf5'
DEFAULT_SCALE = 3


def _is_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and \
        not isinstance(value, bool)


@dataclass(frozen=True)
class SparkConfig:
    """Immutable parameters of one growth run."""
    width: int
    height: int
    initial_spark_position: Coordinate
    number_of_intervals: int
    exp: float = DEFAULT_EXP

    @property
    def bounds(self) -> GridBounds:
        return GridBounds(self.width, self.height)

    def validate(self) -> "SparkConfig":
        """Raise InvalidConfigError if any parameter is unusable."""
        for name in ('width', 'height', 'number_of_intervals'):
            value = getattr(self, name)
            if not _is_int(value):
                raise InvalidConfigError(
                    f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidConfigError(f"{name} must be > 0, got {value}")

        seed = self.initial_spark_position
        if not (_is_int(seed.x) and _is_int(seed.y)):
            raise InvalidConfigError(
                f"initial spark position must be integral, got {tuple(seed)}")
        if self.bounds.is_out_of_bounds(seed):
            raise InvalidConfigError(
                f"initial spark position ({seed.x}, {seed.y}) lies outside "
                f"[0, {self.width}] x [0, {self.height}]")

        if not _is_number(self.exp) or not math.isfinite(self.exp):
            raise InvalidConfigError(f"exp must be a finite number, got {self.exp!r}")
        if self.exp < 0:
            raise InvalidConfigError(f"exp must be >= 0, got {self.exp}")
        return self

    def to_message(self) -> Dict[str, Any]:
        """Inbound message form of this configuration."""
        return {
            'width': self.width,
            'height': self.height,
            'initialSparkPositions': {
                'x': self.initial_spark_position.x,
                'y': self.initial_spark_position.y,
            },
            'numberOfIntervals': self.number_of_intervals,
            'exp': self.exp,
        }


@dataclass
class RunConfig:
    spark: SparkConfig

    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    on_saturation: str = 'stop'

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    # Rendering
    color: str = DEFAULT_COLOR
    scale: int = DEFAULT_SCALE

    def validate(self) -> "RunConfig":
        self.spark.validate()
        if not _is_int(self.max_attempts) or self.max_attempts <= 0:
            raise InvalidConfigError(
                f"max_attempts must be a positive integer, got {self.max_attempts!r}")
        if self.on_saturation not in SATURATION_POLICIES:
            raise InvalidConfigError(
                f"on_saturation must be one of {SATURATION_POLICIES}, "
                f"got {self.on_saturation!r}")
        if not _is_int(self.scale) or self.scale <= 0:
            raise InvalidConfigError(f"scale must be a positive integer, got {self.scale!r}")
        return self


def _coerce_int(value: Any, default: int) -> int:
    """Numeric fallback: unparseable or missing input yields the default."""
    if value is None or value == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def _coerce_float(value: Any, default: float) -> float:
    if value is None or value == '':
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


def parse_position(text: Optional[str],
                   default: Coordinate = DEFAULT_POSITION) -> Coordinate:
    """
    Parse an "x, y" string into a Coordinate.

    Falls back to `default` when either component is missing or not a
    number.
    """
    if not text:
        return default
    parts = text.replace(' ', '').split(',')
    if len(parts) != 2:
        return default
    try:
        x = float(parts[0])
        y = float(parts[1])
    except ValueError:
        return default
    if not (math.isfinite(x) and math.isfinite(y)):
        return default
    return Coordinate(int(x), int(y))


def message_to_config(message: Dict[str, Any]) -> SparkConfig:
    """
    Build a SparkConfig from an inbound configuration message.

    Missing or unparseable fields fall back to the host defaults. The
    result is not validated here; GrowthEngine validates on construction.
    """
    position_raw = message.get('initialSparkPositions')
    if not isinstance(position_raw, dict):
        position_raw = {}
    position = Coordinate(
        _coerce_int(position_raw.get('x'), DEFAULT_POSITION.x),
        _coerce_int(position_raw.get('y'), DEFAULT_POSITION.y)
    )
    return SparkConfig(
        width=_coerce_int(message.get('width'), DEFAULT_WIDTH),
        height=_coerce_int(message.get('height'), DEFAULT_HEIGHT),
        initial_spark_position=position,
        number_of_intervals=_coerce_int(message.get('numberOfIntervals'),
                                        DEFAULT_INTERVALS),
        exp=_coerce_float(message.get('exp'), DEFAULT_EXP)
    )


def _parse_position_raw(raw: Any) -> Coordinate:
    """Accept [x, y], {x: .., y: ..} or "x, y" from YAML."""
    if raw is None:
        return DEFAULT_POSITION
    if isinstance(raw, dict):
        return Coordinate(raw['x'], raw['y'])
    if isinstance(raw, str):
        return parse_position(raw)
    x, y = raw
    return Coordinate(x, y)


def load_config(config_path: Path) -> RunConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    grid_raw = raw.get('grid', {})
    spark_raw = raw.get('spark', {})
    sim_raw = raw.get('simulation', {})
    export_raw = raw.get('export', {})
    render_raw = raw.get('render', {})

    spark = SparkConfig(
        width=grid_raw.get('width', DEFAULT_WIDTH),
        height=grid_raw.get('height', DEFAULT_HEIGHT),
        initial_spark_position=_parse_position_raw(spark_raw.get('position')),
        number_of_intervals=sim_raw.get('intervals', DEFAULT_INTERVALS),
        exp=spark_raw.get('exp', DEFAULT_EXP)
    )

    config = RunConfig(
        spark=spark,
        seed=sim_raw.get('seed'),
        max_attempts=sim_raw.get('max_attempts', DEFAULT_MAX_ATTEMPTS),
        on_saturation=sim_raw.get('on_saturation', 'stop'),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        color=render_raw.get('color', DEFAULT_COLOR),
        scale=render_raw.get('scale', DEFAULT_SCALE)
    )
    return config.validate()
