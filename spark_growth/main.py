#!/usr/bin/env python3
"""
Spark Growth Simulation

A dielectric-breakdown style growth of a branching discharge on a bounded
grid, seeded from a single charged cell.

Usage:
    spark-growth --config configs/default.yaml [options]

Examples:
    spark-growth --config configs/default.yaml
    spark-growth --config configs/default.yaml --gif --out-dir results/
    spark-growth --config configs/default.yaml --no-csv --no-snapshot --quiet
    spark-growth --config configs/default.yaml --seed 42 --exp 1.5
"""

import argparse
import dataclasses
import sys
from pathlib import Path

import numpy as np
import yaml

from .config import load_config, parse_position
from .channel import SparkWorker
from .errors import InvalidConfigError, GridSaturatedError
from .export.csv_writer import CSVWriter
from .export.canvas import Canvas
from .export.reporter import Reporter

GIF_FRAME_EVERY = 5


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Spark Growth Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    spark-growth --config configs/default.yaml
    spark-growth --config configs/default.yaml --gif --out-dir results/
    spark-growth --config configs/default.yaml --no-csv --no-snapshot --quiet
    spark-growth --config configs/default.yaml --seed 42 --exp 1.5
        """
    )

    # Required arguments
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override number of intervals (ticks)')
    parser.add_argument('--exp', type=float, default=None,
                        help='Override growth sharpness exponent')
    parser.add_argument('--position', type=str, default=None,
                        help='Override spark seed as "x,y"')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except (InvalidConfigError, yaml.YAMLError, KeyError, TypeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    spark = config.spark
    if args.steps is not None:
        spark = dataclasses.replace(spark, number_of_intervals=args.steps)
    if args.exp is not None:
        spark = dataclasses.replace(spark, exp=args.exp)
    if args.position is not None:
        spark = dataclasses.replace(
            spark,
            initial_spark_position=parse_position(args.position,
                                                  spark.initial_spark_position))
    config.spark = spark
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    # Initialize worker
    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {spark.width}x{spark.height}")
        print(f"  Seed position: ({spark.initial_spark_position.x}, "
              f"{spark.initial_spark_position.y})")
        print(f"  Intervals: {spark.number_of_intervals}")
        print(f"  Exponent: {spark.exp}")

    try:
        worker = SparkWorker(
            spark.to_message(),
            rng=np.random.default_rng(config.seed),
            max_attempts=config.max_attempts,
            on_saturation=config.on_saturation
        )
    except InvalidConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'spark_log.csv')
        csv_writer.open()

    canvas = Canvas(spark.width, spark.height, config.color, config.scale)
    canvas.paint_pixel(spark.initial_spark_position.x,
                       spark.initial_spark_position.y)

    reporter = Reporter(str(args.config), config.seed, spark)

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    exit_code = 0
    worker.start()
    try:
        for records in worker.messages():
            step = worker.received

            if csv_writer:
                csv_writer.append(step, records)

            canvas.paint_records(records)

            # Buffer GIF frame (every N ticks to reduce memory)
            if config.gif_enabled:
                if step % GIF_FRAME_EVERY == 0 or step == worker.expected:
                    canvas.buffer_frame()

            reporter.update(records)

            # Progress indicator
            if not config.quiet and step % 100 == 0:
                print(f"  Tick {step}/{worker.expected}: "
                      f"{step / worker.expected * 100:.0f}%")

    except KeyboardInterrupt:
        worker.cancel()
        if not config.quiet:
            print("\nSimulation interrupted by user.")
    except GridSaturatedError as e:
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1

    worker.join(timeout=5.0)
    summary = worker.engine.get_summary()

    reason = summary['saturation_reason']
    if exit_code == 0 and reason == 'attempt_cap':
        print(f"Error: selection hit the attempt cap ({config.max_attempts}) "
              f"after {worker.received} ticks with free cells remaining",
              file=sys.stderr)
        exit_code = 1
    elif not config.quiet and reason == 'exhausted' and exit_code == 0:
        print(f"  Grid saturated after {worker.received} ticks; stopping early.")

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'spark_log.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        canvas.save_snapshot(snapshot_path, worker.received,
                             len(reporter.activated))
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'spark.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(canvas.frames)} frames)...")
        canvas.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet:
        report = reporter.generate_summary(
            summary,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
