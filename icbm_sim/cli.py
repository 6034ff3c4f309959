"""
ICBM Trajectory Optimizer - CLI

Solves one launch between two geographic points, prints a summary of the
best trajectory and optionally writes report plots.

    icbm-sim --start 0 0 --target 0 180
    python -m icbm_sim --start 50.45 30.52 --target 38.9 -77.04 --accurate
"""

import argparse
import asyncio
import logging
import os
import sys
from dataclasses import replace

from .config import create_default_config
from .earth import Earth
from .plotting import generate_all_plots
from .solver import TrajectorySolver
from .utils import format_duration_str

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="ICBM trajectory optimizer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--start", nargs=2, type=float, metavar=("LAT", "LON"),
        default=[0.0, 0.0],
        help="Launch site latitude and longitude (deg)"
    )
    parser.add_argument(
        "--target", nargs=2, type=float, metavar=("LAT", "LON"),
        default=[0.0, 180.0],
        help="Target latitude and longitude (deg)"
    )
    parser.add_argument(
        "--generations", type=int, default=None,
        help="Maximum number of generations (default from constants)"
    )
    parser.add_argument(
        "--population", type=int, default=None,
        help="Population size (default from constants)"
    )
    parser.add_argument(
        "--accurate", action="store_true",
        help="Use the larger population for a more accurate solve"
    )
    parser.add_argument(
        "--minimize-flight-time", action="store_true",
        help="Add the flight time to the fitness"
    )
    parser.add_argument(
        "--step", type=float, default=None,
        help="Integration time step in seconds"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Random seed for a reproducible solve"
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Threads used to evaluate fitness"
    )
    parser.add_argument(
        "--output-dir", "-o", type=str, default="plots",
        help="Directory to save output plots"
    )
    parser.add_argument(
        "--no-plots", action="store_true",
        help="Skip plot generation"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress verbose output"
    )
    return parser.parse_args(argv)


def build_config(args):
    """SolverConfig from the defaults plus command-line overrides."""
    overrides = {
        'max_generations': args.generations,
        'population_size': args.population,
        'population_size_accurate': args.population,
        'step': args.step,
        'seed': args.seed,
        'workers': args.workers,
    }
    return replace(create_default_config(),
                   **{k: v for k, v in overrides.items() if v is not None})


def print_summary(summary: dict):
    print("\n" + "=" * 60)
    print("TRAJECTORY SUMMARY")
    print("=" * 60)
    print(f"Status:               {summary['status']} after {summary['generations']} generations")
    print(f"Miss distance:        {summary['miss_distance']:.3f} km")
    print(f"Flight time:          {format_duration_str(summary['flight_time'])}")
    print(f"Max altitude:         {summary['max_altitude']:.1f} km ({summary['apogee_layer']})")
    print(f"Travelled distance:   {summary['travelled_distance']:.1f} km")
    print(f"Fuel combustion time: {format_duration_str(summary['fuel_combustion_time'])}")
    print(f"Ideal delta-v:        {summary['ideal_delta_v']:.3f} km/s")
    print(f"Payload / fuel mass:  {summary['payload_mass']:.0f} kg / {summary['fuel_mass']:.0f} kg")
    print(f"Flight stopped:       {summary['stop_reason']}")
    if summary['final_latitude'] is not None:
        print(f"Impact point:         {summary['final_latitude']:.2f}, "
              f"{summary['final_longitude']:.2f} deg")
    print("-" * 60)
    for name, value in summary['parameters'].items():
        print(f"  {name:30s} {value:.6g}")
    print("=" * 60 + "\n")


def main(argv=None):
    """Main execution flow."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = build_config(args)
        earth = Earth()
        solver = TrajectorySolver(
            earth=earth,
            start=earth.geo_to_position(*args.start),
            target=earth.geo_to_position(*args.target),
            minimize_flight_time=args.minimize_flight_time,
            increase_calculation_accuracy=args.accurate,
            config=config,
        )

        def report(best_genome, percent):
            logger.info(f"Progress {percent:5.1f}%: best fitness {best_genome.fitness:.3f}")

        solver.on_progress = report

        result = asyncio.run(solver.calc_trajectory())
        print_summary(result.summary())

        if not args.no_plots:
            plot_dir = args.output_dir
            if not os.path.isabs(plot_dir):
                plot_dir = os.path.join(os.getcwd(), plot_dir)

            logger.info(f"Generating plots in {plot_dir}")
            _, flight_log = solver.replay(result)
            generate_all_plots(result, flight_log, plot_dir, target=solver.target)
            print(f"Plots written to: {plot_dir}")

    except Exception as e:
        logger.error(f"Trajectory solve failed: {e}", exc_info=True)
        print(f"\n[ERROR] Trajectory solve failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
