"""Spark growth: a dielectric-breakdown style discharge simulation."""

from .config import SparkConfig, RunConfig, load_config, message_to_config
from .errors import SparkError, InvalidConfigError, GridSaturatedError
from .model import Coordinate, GrowthEngine, PotentialField, SnapshotWindow
from .channel import SparkWorker

__version__ = "0.1.0"

__all__ = [
    'SparkConfig',
    'RunConfig',
    'load_config',
    'message_to_config',
    'SparkError',
    'InvalidConfigError',
    'GridSaturatedError',
    'Coordinate',
    'GrowthEngine',
    'PotentialField',
    'SnapshotWindow',
    'SparkWorker',
]
