#!/usr/bin/env python3
"""
Compute bracket placement for a pipe spacing and print the measurements.

Usage:
    python scripts/compute_shift.py 28-31/32
    python scripts/compute_shift.py 28.96875 --back 29.25 --gap-mm 1.5
    python scripts/compute_shift.py 27.9 --mode inner --config configs/fixture_0001.json
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import bracket_layout
import bracket_solver
import fixture_config
from shelf_units import format_inches, format_with_fraction, parse_length_expression, to_mm

BracketLayout = bracket_layout.BracketLayout
FixtureConfig = fixture_config.FixtureConfig


def parse_length_arg(text: str) -> float:
    """argparse type for inch values such as 28.96875, 28-31/32 or 3/8"."""
    value = parse_length_expression(text)
    if value is None:
        raise argparse.ArgumentTypeError(f"Not a length: {text!r}")
    return value


def load_config(path):
    if path is None:
        return FixtureConfig()
    print(f"Loading configuration from {path}")
    return FixtureConfig.from_file(path)


def print_report(layout: BracketLayout, precision: int = 5) -> None:
    """Print shift, bounds, clearances and placement guide for each depth position."""
    spacing = layout.spacing
    positions = ['front'] if spacing.is_parallel else ['front', 'back']

    print("\nBracket Placement")
    print(f"  Spacing mode: {spacing.mode}")
    print(f"  Required nut gap: {to_mm(spacing.nut_clearance):.2f}mm")

    for position in positions:
        result = layout.shift_result(position)
        guide = layout.placement_guide(position)

        print(f"\n{position.capitalize()} brackets")
        print(f"  Pipe spacing (center): {format_inches(result.center_spacing, precision=precision)}")
        print(f"  Shift: {format_with_fraction(result.shift)}")
        for name, value in result.component_bounds.items():
            print(f"    min ({name}): {format_inches(value, precision=precision)}")
        print(f"    max (inner hole): {format_inches(result.max_shift, precision=precision)}")
        if result.limiting_bound:
            print(f"    limited by: {result.limiting_bound}")

        print(f"  Bracket edge from shelf edge: {format_with_fraction(guide.bracket_edge_from_shelf_edge)}")
        print(f"  Outer hole from shelf edge: {format_with_fraction(guide.outer_hole_from_shelf_edge)}")
        print(f"  Inner hole from shelf edge: {format_with_fraction(guide.inner_hole_from_shelf_edge)}")

        for check in layout.clearance_checks(position):
            status = 'OK' if check.is_ok else 'TOO CLOSE'
            print(f"  Nut gap ({check.side}): {to_mm(check.gap):.2f}mm [{status}]")

        if result.has_conflict:
            print(f"WARNING: {position} nut gap not achievable "
                  f"(needs {format_inches(result.min_shift, precision=precision)}, "
                  f"max {format_inches(result.max_shift, precision=precision)}); "
                  f"shift clamped to the inner-hole limit")

    depth = layout.depth
    print("\nDepth placement")
    print(f"  Inset from front/back edge: {format_with_fraction(depth.inset)}")
    print(f"  Gap between brackets: {format_with_fraction(depth.gap_between)}")
    if depth.is_degenerate:
        print("WARNING: brackets are longer than half the shelf depth")

    if layout.gap_below_minimum:
        print(f"WARNING: requested nut gap is below the "
              f"{to_mm(layout.geometry.nut_clearance.minimum):.2f}mm minimum")


def add_layout_arguments(parser: argparse.ArgumentParser) -> None:
    """Spacing and configuration options shared by the layout scripts."""
    parser.add_argument('spacing', type=parse_length_arg, nargs='?',
                        help='Pipe spacing at the front (inches, fractions allowed)')
    parser.add_argument('--back', type=parse_length_arg,
                        help='Pipe spacing at the back, when the pipes are not parallel')
    parser.add_argument('--gap-mm', type=float, help='Required nut-to-pipe gap (mm)')
    parser.add_argument('--mode', choices=fixture_config.SPACING_MODES,
                        help='Spacing measured center-to-center or between inner edges')
    parser.add_argument('--bounds', help='Lower bound policy (standard, nut_only)')
    parser.add_argument('--config', '-c', type=Path, help='Fixture configuration JSON')


def build_layout(args):
    """
    Solve the layout described by parsed arguments.

    Returns:
        (config, layout)

    Raises:
        ValueError: If the configuration or spacing is invalid
    """
    config = load_config(args.config)
    if args.mode:
        config.data['solver']['spacing_mode'] = args.mode
    geometry = config.geometry()
    spacing = config.default_spacing(args.spacing, args.back, args.gap_mm)
    bounds = bracket_solver.resolve_bound_policy(
        [args.bounds] if args.bounds else config.bound_names()
    )
    return config, BracketLayout(geometry, spacing, bounds)


def main():
    parser = argparse.ArgumentParser(
        description='Compute bracket shift and drilling measurements'
    )
    add_layout_arguments(parser)
    args = parser.parse_args()

    try:
        config, layout = build_layout(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print_report(layout, precision=config.data.get('precision', 5))


if __name__ == '__main__':
    main()
