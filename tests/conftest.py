"""Shared fixtures for spark growth tests."""

from __future__ import annotations

import numpy as np
import pytest

from spark_growth.config import SparkConfig
from spark_growth.model.engine import GrowthEngine
from spark_growth.model.field import PotentialField
from spark_growth.model.grid import Coordinate, GridBounds


def make_config(width: int = 10, height: int = 10,
                seed: tuple[int, int] = (5, 5),
                intervals: int = 10, exp: float = 2.0) -> SparkConfig:
    return SparkConfig(
        width=width, height=height,
        initial_spark_position=Coordinate(*seed),
        number_of_intervals=intervals, exp=exp,
    )


def make_engine(rng_seed: int = 0, **kwargs) -> GrowthEngine:
    engine_kwargs = {
        key: kwargs.pop(key)
        for key in ("max_attempts", "on_saturation") if key in kwargs
    }
    return GrowthEngine(make_config(**kwargs),
                        rng=np.random.default_rng(rng_seed), **engine_kwargs)


def make_message(width: int = 20, height: int = 20, x: int = 10, y: int = 10,
                 intervals: int = 15, exp: float = 2.0) -> dict:
    return {
        "width": width,
        "height": height,
        "initialSparkPositions": {"x": x, "y": y},
        "numberOfIntervals": intervals,
        "exp": exp,
    }


@pytest.fixture
def field() -> PotentialField:
    """10x10 inclusive field with a single active cell at (5, 5)."""
    f = PotentialField(GridBounds(10, 10))
    f.activate(Coordinate(5, 5))
    return f


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
