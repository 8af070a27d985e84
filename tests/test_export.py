"""Tests for host-side exporters: CSV log, pixel canvas and text report."""

from __future__ import annotations

import csv

import numpy as np
import pytest
from PIL import Image

from spark_growth.export.canvas import Canvas
from spark_growth.export.csv_writer import CSVWriter
from spark_growth.export.reporter import (
    Reporter,
    box_counting_dimension,
    count_components,
)
from spark_growth.model.engine import GrowthEngine

from conftest import make_config

pytestmark = pytest.mark.unit


@pytest.fixture
def windows():
    engine = GrowthEngine(make_config(20, 20, (10, 10), 8),
                          rng=np.random.default_rng(0))
    return engine, [w.to_records() for w in engine.run()]


# --------------------------------------------------------------------------
# CSV
# --------------------------------------------------------------------------

def test_csv_rows_per_tick(tmp_path, windows):
    _, messages = windows
    path = tmp_path / "nested" / "log.csv"
    with CSVWriter(path) as writer:
        for step, records in enumerate(messages, start=1):
            writer.append(step, records)
        assert writer.rows_written == 25 * len(messages)

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 25 * len(messages)
    assert list(rows[0]) == ["step", "x", "y", "weight"]
    assert rows[0]["step"] == "1"
    assert rows[-1]["step"] == str(len(messages))
    assert float(rows[12]["weight"]) == 1.0


def test_csv_append_opens_lazily(tmp_path):
    writer = CSVWriter(tmp_path / "lazy.csv")
    writer.append(1, [{"x": 0, "y": 0, "weight": 0.5}])
    writer.close()
    assert (tmp_path / "lazy.csv").read_text().splitlines()[1] == "1,0,0,0.5"


# --------------------------------------------------------------------------
# Canvas
# --------------------------------------------------------------------------

class TestCanvas:
    @pytest.mark.parametrize("weight,fade", [
        (1.0, 0xFF), (0.75, 0x15), (0.5, 0x07), (0.0, 0x07),
    ])
    def test_fade_for_weight(self, weight, fade):
        assert Canvas.fade_for(weight) == fade

    def test_paint_respects_inclusive_edges(self):
        canvas = Canvas(10, 10, scale=1)
        assert canvas.paint_pixel(10, 10)
        assert not canvas.paint_pixel(11, 10)
        assert not canvas.paint_pixel(-1, 0)
        assert canvas.painted == 1

    def test_full_fade_sets_color(self):
        canvas = Canvas(4, 4, color="#ff0000", scale=1)
        canvas.paint_pixel(2, 3)
        assert canvas.pixels[3, 2].tolist() == [1.0, 0.0, 0.0]
        assert canvas.pixels[0, 0].tolist() == [0.0, 0.0, 0.0]

    def test_low_fades_accumulate(self):
        canvas = Canvas(4, 4, color="#ffffff", scale=1)
        canvas.paint_pixel(1, 1, Canvas.FADE_LOW)
        once = canvas.pixels[1, 1, 0]
        canvas.paint_pixel(1, 1, Canvas.FADE_LOW)
        assert once == pytest.approx(0x07 / 0xFF)
        assert canvas.pixels[1, 1, 0] > once

    def test_reset_clears(self):
        canvas = Canvas(4, 4, scale=1)
        canvas.paint_pixel(1, 1)
        canvas.reset()
        assert not canvas.pixels.any()
        assert canvas.painted == 0

    def test_paint_records_skips_off_grid(self, windows):
        engine, messages = windows
        canvas = Canvas(20, 20, scale=1)
        for records in messages:
            canvas.paint_records(records)
        for cell in engine.active_cells[1:]:
            assert canvas.pixels[cell.y, cell.x].any()

    def test_image_is_scaled(self):
        canvas = Canvas(9, 4, scale=3)
        img = canvas.to_image()
        assert img.size == (30, 15)

    def test_snapshot_and_gif_written(self, tmp_path, windows):
        _, messages = windows
        canvas = Canvas(20, 20, scale=2)
        for records in messages:
            canvas.paint_records(records)
            canvas.buffer_frame()

        png = tmp_path / "out" / "final.png"
        gif = tmp_path / "out" / "spark.gif"
        canvas.save_snapshot(png, len(messages), len(messages) + 1)
        canvas.generate_gif(gif, fps=5)

        assert png.exists() and png.stat().st_size > 0
        with Image.open(gif) as img:
            assert img.n_frames > 1

    def test_gif_without_frames_is_skipped(self, tmp_path):
        Canvas(4, 4).generate_gif(tmp_path / "none.gif")
        assert not (tmp_path / "none.gif").exists()


# --------------------------------------------------------------------------
# Pattern analysis
# --------------------------------------------------------------------------

def test_line_has_dimension_one():
    line = [(x, 0) for x in range(16)]
    assert box_counting_dimension(line) == pytest.approx(1.0)


def test_filled_square_has_dimension_two():
    square = [(x, y) for x in range(16) for y in range(16)]
    assert box_counting_dimension(square) == pytest.approx(2.0)


def test_single_cell_dimension_is_zero():
    assert box_counting_dimension([(3, 3)]) == 0.0


def test_component_count():
    assert count_components([]) == 0
    assert count_components([(0, 0), (1, 0), (1, 1)]) == 1
    # Diagonal contact does not connect
    assert count_components([(0, 0), (1, 1)]) == 2
    assert count_components([(5, 5), (9, 9), (9, 8)]) == 2


# --------------------------------------------------------------------------
# Reporter
# --------------------------------------------------------------------------

def test_reporter_rebuilds_growth_from_stream(tmp_path, windows):
    engine, messages = windows
    reporter = Reporter("run.yaml", 0, engine.config)
    for records in messages:
        reporter.update(records)

    assert reporter.ticks == len(messages)
    assert reporter.activated == engine.active_cells
    assert reporter.max_radius >= 1.0

    report = reporter.generate_summary(engine.get_summary(), tmp_path,
                                       csv_enabled=True, snapshot_enabled=False,
                                       gif_enabled=False)
    assert "SPARK GROWTH SIMULATION REPORT" in report
    assert f"Ticks Received:        {len(messages)} / 8 (100.0%)" in report
    assert "Connected Components:  1" in report
    assert "Stop Reason:           completed" in report
    assert "Random Seed: 0" in report
    assert "Snapshot:   (disabled)" in report
    assert str(tmp_path / "spark_log.csv") in report
