#!/usr/bin/env python3
"""
floatplace CLI

Command-line interface for Gauss-Seidel floating placement.

Usage:
    floatplace place <netlist> [options]
    floatplace wirelength <netlist> [options]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_CONVERGED = 2


def load_problem(args):
    """
    Load the netlist and assemble the solver configuration.

    Precedence (lowest to highest): built-in defaults, settings embedded in
    the netlist file, ``--config`` file, individual command-line flags.

    Returns:
        Tuple of (netlist, config)
    """
    from .netlist.reader import SinglePinPolicy, load_netlist
    from .placement.config import SolverConfig, read_config_file

    doc = load_netlist(Path(args.netlist), SinglePinPolicy(args.single_pin_nets))
    config = doc.config or SolverConfig()
    if args.config:
        config = config.replace(**read_config_file(Path(args.config)))

    config = config.replace(
        convergence_epsilon=args.epsilon,
        max_iterations=args.max_iterations,
        convergence_metric=args.metric,
        sweep_order=args.order,
        initial_placement=args.initial,
        timeout=args.timeout,
    )
    if doc.dropped_nets:
        print(f"  Ignored {doc.dropped_nets} single-pin nets")
    return doc.netlist, config


def solve(args):
    """Load and solve; returns (netlist, result)."""
    from .placement.gauss_seidel import GaussSeidelPlacer

    netlist, config = load_problem(args)
    stats = netlist.stats()
    print(f"Loaded netlist: {args.netlist}")
    print(f"  Cells: {stats['cells']} ({stats['fixed']} fixed, {stats['free']} free)")
    print(f"  Nets: {stats['nets']}")

    def progress_callback(report):
        if report.sweep % 10 == 0:
            print(f"  Sweep {report.sweep}: max_delta={report.max_delta:.6g}")

    placer = GaussSeidelPlacer(netlist, config)
    result = placer.solve(callback=progress_callback if args.verbose else None)
    if args.round:
        result = result.rounded()
    return netlist, result


def cmd_place(args):
    """Run floating placement and report/save the result."""
    from .output.writer import format_table, write_result
    from .placement.metrics import manhattan_wirelength

    netlist, result = solve(args)

    print()
    print(result.summary())
    print(f"Manhattan wirelength: {manhattan_wirelength(netlist, result.positions):.6g}")

    if args.output:
        path = write_result(result, Path(args.output))
        print(f"\nSaved to: {path}")
    else:
        print()
        print(format_table(result), end="")

    return EXIT_OK if result.converged else EXIT_NOT_CONVERGED


def cmd_wirelength(args):
    """Solve and print only the Manhattan wirelength."""
    from .placement.metrics import manhattan_wirelength

    netlist, result = solve(args)
    print(f"{manhattan_wirelength(netlist, result.positions):.6g}")
    return EXIT_OK if result.converged else EXIT_NOT_CONVERGED


def add_solver_arguments(parser: argparse.ArgumentParser):
    """Options shared by every solving command."""
    parser.add_argument('netlist', help='Netlist file (.yaml/.yml or legacy text format)')
    parser.add_argument('-c', '--config', help='YAML solver configuration file')
    parser.add_argument('--epsilon', type=float, help='Convergence epsilon (default: 1e-4)')
    parser.add_argument('--max-iterations', type=int, help='Maximum sweeps (default: 100)')
    parser.add_argument('--metric', choices=['max_delta', 'rms_delta'],
                        help='Convergence metric (default: max_delta)')
    parser.add_argument('--order', choices=['ascending', 'colored'],
                        help='Sweep order (default: ascending)')
    parser.add_argument('--initial', choices=['given', 'centroid'],
                        help='Initial placement of free cells (default: given)')
    parser.add_argument('--single-pin-nets', choices=['reject', 'ignore', 'warn'],
                        default='reject', help='Handling of single-pin nets (default: reject)')
    parser.add_argument('--timeout', type=float, help='Stop after this many seconds')
    parser.add_argument('--round', action='store_true',
                        help='Round final coordinates to integers')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')


def main(argv: Optional[list] = None):
    """Main entry point."""
    from .errors import FloatplaceError

    parser = argparse.ArgumentParser(
        description="floatplace - Gauss-Seidel floating placement",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  floatplace place design.yaml
  floatplace place design.yaml -o placed.yaml --epsilon 1e-6
  floatplace place legacy.txt --max-iterations 500 --round
  floatplace wirelength legacy.txt --round
        """,
    )

    parser.add_argument('--version', action='version', version=f'floatplace {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Place command
    place_parser = subparsers.add_parser('place', help='Run floating placement')
    add_solver_arguments(place_parser)
    place_parser.add_argument('-o', '--output',
                              help='Output file (.yaml, .json or .txt)')

    # Wirelength command
    wl_parser = subparsers.add_parser('wirelength',
                                      help='Solve and print the Manhattan wirelength')
    add_solver_arguments(wl_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        'place': cmd_place,
        'wirelength': cmd_wirelength,
    }

    try:
        return commands[args.command](args)
    except (FloatplaceError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
