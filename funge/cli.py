#!/usr/bin/env python3
"""
Funge CLI — run a two-dimensional stack program from a source file.

    funge program.bf
    funge --strict -v program.bf
"""

import argparse
import logging
import sys

from funge import __version__


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="funge",
        description="Run a 2-D grid program (256x256 torus, 8-bit cells).",
    )
    parser.add_argument("--version", action="version", version=f"funge {__version__}")
    parser.add_argument("source", help="program source file")
    parser.add_argument("--strict", action="store_true",
                        help="reject characters outside 0-127 (by default they are "
                             "truncated to 8 bits and may become instructions)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="trace every executed instruction to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    from funge.channel import StreamChannel
    from funge.grid import GridError, load
    from funge.state import MachineState
    from funge.vm import VMError, run

    try:
        with open(args.source, encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"❌ failed to read source file {args.source}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        grid = load(source, strict=args.strict)
    except GridError as e:
        print(f"❌ Load error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        run(MachineState(grid), StreamChannel())
    except VMError as e:
        print(f"❌ Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n[funge] Interrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
