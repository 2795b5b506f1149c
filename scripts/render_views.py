#!/usr/bin/env python3
"""
Render the top and front views of a bracket layout to PNG.

Usage:
    python scripts/render_views.py 28.96875
    python scripts/render_views.py 28.96875 --back 29.5 --views top --translucent
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import view_renderer
from compute_shift import add_layout_arguments, build_layout

ViewRenderer = view_renderer.ViewRenderer


def main():
    parser = argparse.ArgumentParser(
        description='Render top and front views of the shelf, pipes and brackets'
    )
    add_layout_arguments(parser)
    parser.add_argument('--views', nargs='+', choices=['top', 'front'],
                        default=['top', 'front'], help='Views to render')
    parser.add_argument('--width', type=float, default=1100,
                        help='Available width in pixels (default: 1100)')
    parser.add_argument('--height', type=float, default=650,
                        help='Available height in pixels (default: 650)')
    parser.add_argument('--translucent', action='store_true',
                        help='Draw the shelf at 50%% opacity to show the brackets')
    parser.add_argument('--output-dir', '-o', type=Path, default=Path('output/views'),
                        help='Output directory (default: output/views)')

    args = parser.parse_args()

    try:
        config, layout = build_layout(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    renderer = ViewRenderer(layout, config.colors, config.display,
                            shelf_opacity=0.5 if args.translucent else 1.0)

    distance = f'{layout.spacing.front:.3f}'.replace('.', '-')
    for view in args.views:
        output_path = args.output_dir / f'shelf-{view}-{distance}.png'
        frame = renderer.render(view, output_path, args.width, args.height)
        print(f"  {view} view: {output_path} ({frame.scale:.1f} px/in)")

    if layout.has_conflict:
        print("WARNING: nut gap not achievable at this spacing")


if __name__ == '__main__':
    main()
