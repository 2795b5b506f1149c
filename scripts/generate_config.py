#!/usr/bin/env python3
"""
Generate fixture configuration files.

Usage:
    python scripts/generate_config.py --output configs/fixture_0000.json
    python scripts/generate_config.py --base configs/fixture_0000.json --shelf-width 36 --auto-version
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import fixture_config
from shelf_units import format_with_fraction, to_inches, to_mm

FixtureConfig = fixture_config.FixtureConfig


def main():
    parser = argparse.ArgumentParser(
        description='Generate a shelf bracket fixture configuration'
    )
    parser.add_argument('--output', '-o', type=Path, help='Output JSON file path')
    parser.add_argument('--base', '-b', type=Path,
                        help='Base configuration to copy parameters from')
    parser.add_argument('--auto-version', '-a', action='store_true',
                        help='Automatically determine next version number')
    parser.add_argument('--shelf-width', type=float, help='Shelf width (inches)')
    parser.add_argument('--shelf-depth', type=float, help='Shelf depth (inches)')
    parser.add_argument('--shelf-thickness', type=float, help='Shelf thickness (inches)')
    parser.add_argument('--pipe-diameter', type=float, help='Pipe outer diameter (inches)')
    parser.add_argument('--spacing', type=float,
                        help='Default pipe spacing (inches)')
    parser.add_argument('--gap-mm', type=float,
                        help='Target nut-to-pipe gap (mm)')
    parser.add_argument('--layout', choices=['golden', 'flush'],
                        help='Depth placement rule')

    args = parser.parse_args()

    if args.base:
        print(f"Loading base configuration from {args.base}")
        config = FixtureConfig.from_file(args.base)
    else:
        print("Creating new default configuration")
        config = FixtureConfig()

    overrides = [
        (config.shelf, 'width', args.shelf_width),
        (config.shelf, 'depth', args.shelf_depth),
        (config.shelf, 'thickness', args.shelf_thickness),
        (config.pipe, 'diameter', args.pipe_diameter),
        (config.data['solver'], 'default_spacing', args.spacing),
        (config.data['layout'], 'mode', args.layout),
    ]
    for section, key, value in overrides:
        if value is not None:
            section[key] = value
    if args.gap_mm is not None:
        config.hardware['nut_pipe_clearance']['target'] = to_inches(args.gap_mm)

    try:
        geometry = config.geometry()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.auto_version:
        config_dir = Path('configs')
        version = config.get_next_version_number(config_dir)
        output_path = config_dir / f'fixture_{version}.json'
    elif args.output:
        output_path = args.output
    else:
        print("Error: Must specify --output or --auto-version", file=sys.stderr)
        sys.exit(1)

    config.version = output_path.stem.split('_')[1] if '_' in output_path.stem else "0000"

    print(f"Saving configuration to {output_path}")
    config.to_file(output_path)

    b = geometry.bracket
    print("\nConfiguration Summary:")
    print(f"  Version: {config.version}")
    print(f"  Shelf: {geometry.shelf.width}\" x {geometry.shelf.depth}\" x {geometry.shelf.thickness}\"")
    print(f"  Pipe: {format_with_fraction(geometry.pipe.diameter)} diameter")
    print(f"  Bracket: {to_mm(b.width):.1f} x {to_mm(b.length):.1f} mm, "
          f"hole offset {format_with_fraction(b.hole_offset)}")
    print(f"  Nut gap target: {to_mm(geometry.nut_clearance.target):.2f}mm "
          f"(minimum {to_mm(geometry.nut_clearance.minimum):.2f}mm)")
    print(f"  Layout: {geometry.depth_mode}")


if __name__ == '__main__':
    main()
