#!/usr/bin/env python3
"""
Generate printable drilling templates and the hole calibration sheet.

Usage:
    python scripts/generate_template.py 28-31/32 --shelf 3
    python scripts/generate_template.py 28.96875 --formats pdf dxf --output-dir output/templates
    python scripts/generate_template.py --calibration
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import calibration_template
import template_generator
from compute_shift import add_layout_arguments, build_layout, load_config

CalibrationTemplate = calibration_template.CalibrationTemplate
TemplateGenerator = template_generator.TemplateGenerator


def main():
    parser = argparse.ArgumentParser(
        description='Generate bracket drilling templates (SVG, PDF, DXF)'
    )
    add_layout_arguments(parser)
    parser.add_argument('--shelf', default='', help='Shelf label printed in the title')
    parser.add_argument('--formats', nargs='+', choices=['svg', 'pdf', 'dxf'],
                        default=['pdf'], help='Output formats (default: pdf)')
    parser.add_argument('--calibration', action='store_true',
                        help='Generate the hole calibration sheet instead')
    parser.add_argument('--output-dir', '-o', type=Path, default=Path('output/templates'),
                        help='Output directory (default: output/templates)')

    args = parser.parse_args()

    try:
        if args.calibration:
            config = load_config(args.config)
            calibration = CalibrationTemplate(config.geometry().bracket)
        else:
            config, layout = build_layout(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    args.output_dir.mkdir(parents=True, exist_ok=True)

    if args.calibration:
        print("Generating calibration sheet...")
        for fmt in args.formats:
            if fmt == 'svg':
                calibration.save_svg(args.output_dir / 'bracket-calibration.svg')
            elif fmt == 'pdf':
                calibration.save_pdf(args.output_dir / 'bracket-calibration.pdf')
            else:
                print("WARNING: DXF is not available for the calibration sheet")
        return

    generator = TemplateGenerator(layout, shelf_number=args.shelf)
    spacing = layout.spacing.front
    print(f"Generating template for {spacing:.5f}\" spacing...")

    if layout.has_conflict:
        print("WARNING: nut gap not achievable at this spacing; template uses the clamped shift")
    if layout.gap_below_minimum:
        print("WARNING: requested nut gap is below the configured minimum")

    timestamp = datetime.now()
    for fmt in args.formats:
        filepath = args.output_dir / template_generator.template_filename(spacing, fmt, timestamp)
        if fmt == 'svg':
            # SVG holds one page; non-parallel pipes get one file per position
            for position in generator.positions:
                page_path = filepath
                if len(generator.positions) > 1:
                    page_path = filepath.with_name(f'{filepath.stem}-{position}.svg')
                generator.save_svg(page_path, position)
        elif fmt == 'pdf':
            generator.save_pdf(filepath)
        else:
            generator.save_dxf(filepath)

    print(f"\nTemplates saved to {args.output_dir}")


if __name__ == '__main__':
    main()
