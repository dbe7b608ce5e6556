"""Plan a single move of the arm from the command line.

Example:
    plan-move 0.14 0.14
    plan-move --home --samples 11
"""

import argparse
import logging
import sys

from planar_arm.arm_state import ArmState, format_status, parse_target
from planar_arm.config import DEFAULT_DURATION, DEFAULT_SAMPLE_COUNT
from planar_arm.errors import InvalidInputError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='plan-move',
        description="Solve IK for a TCP target and print the joint trajectory.")
    parser.add_argument('x', nargs='?', help="Target x (meters)")
    parser.add_argument('y', nargs='?', help="Target y (meters)")
    parser.add_argument('--home', action='store_true',
                        help="Move to the home position instead of x, y")
    parser.add_argument('--samples', type=int, default=DEFAULT_SAMPLE_COUNT,
                        help="Number of trajectory samples (default: %(default)s)")
    parser.add_argument('--duration', type=float, default=DEFAULT_DURATION,
                        help="Move duration in seconds (default: %(default)s)")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.samples < 2 or not args.duration > 0:
        parser.error("--samples must be at least 2 and --duration positive")

    arm = ArmState(sample_count=args.samples, duration=args.duration)

    if args.home:
        result = arm.home()
    else:
        if args.x is None or args.y is None:
            parser.error("x and y are required unless --home is given")
        try:
            target = parse_target(args.x, args.y)
        except InvalidInputError as e:
            parser.error(str(e))
        result = arm.move_to(target)

    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    print(format_status(arm.snapshot()))
    print(f"{'t (s)':>8} {'q1 (rad)':>10} {'q2 (rad)':>10} "
          f"{'x (m)':>8} {'y (m)':>8}")
    for sample in result.trajectory:
        print(f"{sample.t:8.2f} {sample.q1:10.4f} {sample.q2:10.4f} "
              f"{sample.x:8.4f} {sample.y:8.4f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
