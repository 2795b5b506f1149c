#!/usr/bin/env python3
"""
Cross-check the closed-form shift bounds against a numeric root find.

Sweeps pipe spacing and nut gap, and for each case compares the nut
clearance bound with the shift where the nut clearance reaches zero
(found with brentq). Optionally plots the bounds against spacing.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import numpy as np
import matplotlib.pyplot as plt

import bracket_solver
import fixture_config
from shelf_units import to_inches

BracketShiftSolver = bracket_solver.BracketShiftSolver
SpacingInput = fixture_config.SpacingInput


def sweep(solver: BracketShiftSolver, spacings, gaps_mm):
    """
    Compare analytic and numeric nut bounds.

    Returns:
        (worst absolute difference, number of cases)
    """
    worst = 0.0
    cases = 0
    for gap_mm in gaps_mm:
        for spacing_value in spacings:
            spacing = SpacingInput(front=float(spacing_value), nut_clearance=to_inches(gap_mm))
            result = solver.optimal_shift(spacing)
            for is_left in (True, False):
                numeric = bracket_solver.solve_nut_tangency_shift(solver, spacing, 'front', is_left)
                worst = max(worst, abs(max(numeric, 0.0) - result.min_shift_nut))
                cases += 1
    return worst, cases


def plot_bounds(solver: BracketShiftSolver, spacings, gap_mm: float, output_path: Path):
    results = [solver.optimal_shift(SpacingInput(front=float(s), nut_clearance=to_inches(gap_mm)))
               for s in spacings]

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(spacings, [r.min_shift_button_head for r in results], label='button head bound')
    ax.plot(spacings, [r.min_shift_nut for r in results], label='nut clearance bound')
    ax.plot(spacings, [r.max_shift for r in results], 'k--', label='inner hole limit')
    ax.plot(spacings, [r.shift for r in results], 'r-', linewidth=2, label='chosen shift')
    ax.set_xlabel('Pipe spacing (in)')
    ax.set_ylabel('Shift (in)')
    ax.set_title(f'Bracket shift vs spacing ({gap_mm:.1f}mm nut gap)')
    ax.grid(True, alpha=0.3)
    ax.legend()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description='Verify shift bounds numerically')
    parser.add_argument('--config', '-c', type=Path, help='Fixture configuration JSON')
    parser.add_argument('--tolerance', type=float, default=1e-9,
                        help='Largest allowed difference in inches')
    parser.add_argument('--plot', type=Path, help='Save a bounds plot to this path')
    args = parser.parse_args()

    config = (fixture_config.FixtureConfig.from_file(args.config) if args.config
              else fixture_config.FixtureConfig())
    geometry = config.geometry()
    solver = BracketShiftSolver(geometry, bracket_solver.BOUND_POLICIES['standard'])

    width = geometry.shelf.width
    spacings = np.linspace(width * 0.5, width + 2.0, 101)
    gaps_mm = [0.0, 0.5, 1.0, 2.0, 5.0]

    worst, cases = sweep(solver, spacings, gaps_mm)
    print(f"Checked {cases} cases, worst difference {worst:.3e} in")

    if args.plot:
        plot_bounds(solver, spacings, 1.0, args.plot)

    if worst > args.tolerance:
        print(f"WARNING: analytic and numeric bounds differ by more than {args.tolerance:g} in")
        sys.exit(1)
    print("Analytic bounds match")


if __name__ == '__main__':
    main()
