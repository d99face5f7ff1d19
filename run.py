#!/usr/bin/env python3
"""
run.py - Main entry point for Gravity Four
"""

import argparse
import sys

from gravityfour.interfaces.cli import SimpleCLI, build_parser, configure_debug


def main(argv=None) -> int:
    """Main entry point for Gravity Four."""
    parser = build_parser()
    parser.formatter_class = argparse.RawDescriptionHelpFormatter
    parser.epilog = """
    Examples:

    # Play a classic-size game where gravity reverses every 5 turns
    python run.py play

    # Play on the hard preset (8x10, 7 random tokens) starting with gravity up
    python run.py play --difficulty hard --mode inverse

    # Play plain Connect Four
    python run.py play --flip-every 0

    # Analyse a 6x7 position given row by row
    python run.py test --position 0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,1,1,1,1,2,2,2

    # Run the built-in validation scenarios with debug logging
    python run.py --debug test_all

    # Benchmark with 5000 iterations
    python run.py benchmark --iterations 5000
    """

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    cli = SimpleCLI(args)
    configure_debug(args)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
