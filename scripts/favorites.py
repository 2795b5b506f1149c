#!/usr/bin/env python3
"""
Manage saved pipe spacings.

Usage:
    python scripts/favorites.py list
    python scripts/favorites.py save 28-31/32 --shelf 2 --gap-mm 1.0
    python scripts/favorites.py load <id>
    python scripts/favorites.py delete <id>
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import bracket_layout
import favorites_store
from compute_shift import add_layout_arguments, build_layout, load_config, print_report

FavoritesStore = favorites_store.FavoritesStore


def list_favorites(store: FavoritesStore) -> None:
    rows = store.table_rows()
    if not rows:
        print("No saved configurations yet.")
        return

    print(f"{'Shelf #':<8} {'Pipe Distance (in)':<22} {'Nut Gap (mm)':<13} ID")
    for row in rows:
        print(f"{row['shelf']:<8} {row['distance']:<22} {row['gap_mm']:<13} {row['id']}")


def main():
    parser = argparse.ArgumentParser(description='Manage saved pipe spacings')
    parser.add_argument('--file', '-f', type=Path,
                        default=favorites_store.DEFAULT_FAVORITES_FILE,
                        help='Favorites JSON file (default: favorites.json)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('list', help='List saved spacings')

    save_parser = subparsers.add_parser('save', help='Save a spacing')
    add_layout_arguments(save_parser)
    save_parser.add_argument('--shelf', default='', help='Shelf label')

    load_parser = subparsers.add_parser('load', help='Solve a saved spacing')
    load_parser.add_argument('id')
    load_parser.add_argument('--config', '-c', type=Path, help='Fixture configuration JSON')

    delete_parser = subparsers.add_parser('delete', help='Delete a saved spacing')
    delete_parser.add_argument('id')

    args = parser.parse_args()
    store = FavoritesStore(args.file)

    try:
        if args.command == 'list':
            list_favorites(store)

        elif args.command == 'save':
            _, layout = build_layout(args)
            entry = store.save(layout.spacing, args.shelf)
            print(f"Saved {entry['pipe_distance']:.5f}\" as {entry['id']}")

        elif args.command == 'load':
            spacing = store.load(args.id)
            if spacing is None:
                print(f"Error: No saved spacing with id {args.id}", file=sys.stderr)
                sys.exit(1)
            config = load_config(args.config)
            layout = bracket_layout.BracketLayout(config.geometry(), spacing)
            print_report(layout, precision=config.data.get('precision', 5))

        elif args.command == 'delete':
            if not store.delete(args.id):
                print(f"Error: No saved spacing with id {args.id}", file=sys.stderr)
                sys.exit(1)
            print(f"Deleted {args.id}")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
