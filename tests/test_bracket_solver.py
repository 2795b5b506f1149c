"""Tests for bracket_solver module."""
import dataclasses

import numpy as np
import pytest

import bracket_solver
from bracket_solver import (
    BOUND_POLICIES,
    BracketShiftSolver,
    bracket_inset_depth,
    depth_placement,
    resolve_bound_policy,
    solve_nut_tangency_shift,
)
from fixture_config import HoleInsets, SpacingInput
from shelf_units import to_inches


@pytest.fixture
def solver(geometry):
    return BracketShiftSolver(geometry)


class TestReferenceScenario:
    """28-31/32in spacing, 1mm gap, default hardware."""

    def test_bounds(self, solver, spacing):
        result = solver.optimal_shift(spacing)
        assert result.min_shift_button_head == pytest.approx(0.334030, abs=1e-5)
        assert result.min_shift_nut == pytest.approx(0.279277, abs=1e-5)
        assert result.max_shift == pytest.approx(0.393701, abs=1e-5)

    def test_shift_is_button_head_bound(self, solver, spacing):
        result = solver.optimal_shift(spacing)
        assert not result.has_conflict
        assert result.shift == pytest.approx(result.min_shift_button_head)
        assert result.limiting_bound == 'button_head'

    def test_nut_clears_pipe(self, solver, spacing):
        result = solver.optimal_shift(spacing)
        for check in solver.clearance_checks(spacing, result):
            assert check.is_ok
            assert check.gap == pytest.approx(0.094124, abs=1e-5)
            assert check.gap >= to_inches(1.0)

    def test_both_positions_solved(self, solver, spacing):
        results = solver.solve(spacing)
        assert set(results) == {'front', 'back'}
        assert results['front'].shift == results['back'].shift


class TestShiftProperties:

    def test_shift_within_bounds(self, solver):
        for spacing_value in np.linspace(24.0, 31.0, 29):
            result = solver.optimal_shift(SpacingInput(front=spacing_value,
                                                       nut_clearance=to_inches(1.0)))
            assert result.shift >= 0.0
            if not result.has_conflict:
                assert result.min_shift <= result.shift + 1e-12
                assert result.shift <= result.max_shift + 1e-12

    def test_button_head_bound_decreases_with_spacing(self, solver):
        bounds = [solver.optimal_shift(SpacingInput(front=s, nut_clearance=0.04)).min_shift_button_head
                  for s in np.linspace(25.0, 30.0, 21)]
        assert all(b2 < b1 for b1, b2 in zip(bounds, bounds[1:]))

    def test_nut_bound_grows_with_gap(self, solver, spacing):
        small = solver.optimal_shift(dataclasses.replace(spacing, nut_clearance=to_inches(0.5)))
        large = solver.optimal_shift(dataclasses.replace(spacing, nut_clearance=to_inches(2.0)))
        assert large.min_shift_nut > small.min_shift_nut

    def test_nut_bound_independent_of_spacing(self, solver):
        a = solver.optimal_shift(SpacingInput(front=26.0, nut_clearance=0.04))
        b = solver.optimal_shift(SpacingInput(front=29.0, nut_clearance=0.04))
        assert a.min_shift_nut == pytest.approx(b.min_shift_nut)


class TestConflict:

    def test_narrow_spacing_conflicts(self, solver):
        """Pipes far inside the shelf edge push the button head bound past the limit."""
        result = solver.optimal_shift(SpacingInput(front=28.0, nut_clearance=to_inches(1.0)))
        assert result.has_conflict
        assert result.shift == pytest.approx(result.max_shift)

    def test_large_gap_conflicts(self, solver):
        result = solver.optimal_shift(SpacingInput(front=29.5, nut_clearance=0.5))
        assert result.has_conflict
        assert result.limiting_bound == 'nut_clearance'

    def test_conflict_boundary(self, solver, geometry):
        """Spacing where the button head bound equals max_shift."""
        b = geometry.bracket
        head_radius = geometry.fastener.screw_head_diameter / 2
        boundary = geometry.shelf.width - 2 * (2 * b.hole_offset - head_radius - b.edge_clearance)

        below = solver.optimal_shift(SpacingInput(front=boundary - 1e-6, nut_clearance=0))
        above = solver.optimal_shift(SpacingInput(front=boundary + 1e-6, nut_clearance=0))
        assert below.has_conflict
        assert not above.has_conflict

    def test_no_bounds_gives_zero_shift(self, geometry, spacing):
        result = BracketShiftSolver(geometry, bounds=()).optimal_shift(spacing)
        assert result.shift == 0.0
        assert result.min_shift == 0.0
        assert result.limiting_bound is None


class TestClearance:

    def test_sides_agree(self, solver, spacing):
        for shift in (0.0, 0.2, 0.35):
            left = solver.nut_to_pipe_clearance(True, shift, spacing)
            right = solver.nut_to_pipe_clearance(False, shift, spacing)
            assert left.gap == pytest.approx(right.gap)
            assert left.is_ok == right.is_ok

    def test_not_ok_below_nut_bound(self, solver, spacing):
        result = solver.optimal_shift(spacing)
        check = solver.nut_to_pipe_clearance(True, result.min_shift_nut - 0.01, spacing)
        assert not check.is_ok
        assert check.clearance < 0

    def test_ok_at_nut_bound(self, solver, spacing):
        result = solver.optimal_shift(spacing)
        check = solver.nut_to_pipe_clearance(False, result.min_shift_nut, spacing)
        assert check.is_ok
        assert check.clearance == pytest.approx(0.0, abs=1e-12)

    def test_overlap_is_negative_gap(self, solver):
        spacing = SpacingInput(front=28.0, nut_clearance=0.0)
        check = solver.nut_to_pipe_clearance(True, 0.0, spacing)
        assert check.gap < 0
        assert check.overlaps_pipe

    def test_numeric_tangency_matches_bound(self, solver):
        for gap_mm in (0.0, 1.0, 3.0):
            spacing = SpacingInput(front=28.96875, nut_clearance=to_inches(gap_mm))
            result = solver.optimal_shift(spacing)
            for is_left in (True, False):
                numeric = solve_nut_tangency_shift(solver, spacing, 'front', is_left)
                assert max(numeric, 0.0) == pytest.approx(result.min_shift_nut, abs=1e-9)


def _one_inch_pipe_geometry(geometry):
    """1in NPS pipe with a 2in bracket and a larger cap nut."""
    return dataclasses.replace(
        geometry,
        pipe=dataclasses.replace(geometry.pipe, diameter=1.315),
        bracket=dataclasses.replace(
            geometry.bracket, width=2.0,
            hole_insets=HoleInsets(0.375, 0.375, 0.375, 0.375)),
        fastener=dataclasses.replace(geometry.fastener, nut_across_flats=0.375,
                                     nut_across_corners=0.433),
    )


GEOMETRY_VARIANTS = {
    'default': lambda geometry: geometry,
    'one_inch_pipe': _one_inch_pipe_geometry,
}


class TestClearanceAgreesWithNutBound:
    """The clearance check and the nut bound never disagree in sign."""

    @pytest.mark.parametrize("variant", sorted(GEOMETRY_VARIANTS))
    @pytest.mark.parametrize("mode,spacings", [
        ('center', (26.0, 28.0, 28.96875, 30.0, 31.5)),
        ('inner', (25.0, 27.5, 28.0, 29.0)),
    ])
    @pytest.mark.parametrize("gap_mm", [0.0, 0.5, 1.0, 2.0, 4.0])
    def test_sweep(self, geometry, variant, mode, spacings, gap_mm):
        solver = BracketShiftSolver(GEOMETRY_VARIANTS[variant](geometry))
        for spacing_value in spacings:
            spacing = SpacingInput(front=spacing_value, nut_clearance=to_inches(gap_mm),
                                   mode=mode)
            result = solver.optimal_shift(spacing)
            nut_bound = result.min_shift_nut

            if not result.has_conflict:
                for check in solver.clearance_checks(spacing, result):
                    assert check.is_ok

            if nut_bound > 0:
                for is_left in (True, False):
                    check = solver.nut_to_pipe_clearance(is_left, nut_bound - 1e-6, spacing)
                    assert not check.is_ok

            for shift in np.linspace(0.0, result.max_shift, 17):
                if abs(shift - nut_bound) < 1e-6:
                    continue
                expected = shift > nut_bound or nut_bound == 0
                for is_left in (True, False):
                    check = solver.nut_to_pipe_clearance(is_left, shift, spacing)
                    assert check.is_ok == expected

    def test_nut_limited_conflict_clamps_exactly(self, geometry, spacing):
        solver = BracketShiftSolver(geometry)
        # Analytic nut bound for a 0.25in gap is well past the hole offset
        wide_gap = dataclasses.replace(spacing, nut_clearance=0.25)
        result = solver.optimal_shift(wide_gap)
        assert result.min_shift_nut > geometry.bracket.hole_offset
        assert result.limiting_bound == 'nut_clearance'
        assert result.has_conflict
        assert result.shift == result.max_shift
        assert result.shift == bracket_solver.inner_hole_bound(geometry)


class TestBoundPolicies:

    def test_standard(self):
        assert resolve_bound_policy(['standard']) == BOUND_POLICIES['standard']

    def test_explicit_names(self):
        bounds = resolve_bound_policy(['nut_clearance'])
        assert [b.name for b in bounds] == ['nut_clearance']

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown bound"):
            resolve_bound_policy(['wall'])

    def test_nut_only_ignores_shelf_edge(self, geometry, spacing):
        result = BracketShiftSolver(geometry, BOUND_POLICIES['nut_only']).optimal_shift(spacing)
        assert result.min_shift_button_head is None
        assert result.shift == pytest.approx(result.min_shift_nut)


class TestDepthPlacement:

    def test_golden_formula(self):
        phi = (1 + np.sqrt(5)) / 2
        inset = bracket_inset_depth(12.0, 2.0, phi)
        assert inset == pytest.approx(8.0 / (2 * (1 + phi)))

    def test_gap_is_two_phi_insets(self, geometry):
        depth = depth_placement(geometry)
        assert depth.gap_between == pytest.approx(2 * geometry.phi * depth.inset)

    def test_depth_sums(self, geometry):
        depth = depth_placement(geometry)
        length = geometry.bracket.length
        total = depth.inset + length + depth.gap_between + length + depth.inset
        assert total == pytest.approx(geometry.shelf.depth)
        assert depth.back_y == pytest.approx(depth.inset)
        assert depth.front_y + length + depth.inset == pytest.approx(geometry.shelf.depth)

    def test_flush(self):
        assert bracket_inset_depth(12.0, 2.0, mode='flush') == 0.0

    def test_degenerate(self, geometry):
        assert bracket_inset_depth(3.0, 2.0) == 0.0
        short = dataclasses.replace(
            geometry, shelf=dataclasses.replace(geometry.shelf, depth=4.0))
        assert depth_placement(short).is_degenerate


class TestHolePositions:

    def test_outer_hole_is_outboard(self, geometry):
        c, shift = 28.0, 0.3
        left = bracket_solver.outer_hole_x(geometry, True, c, shift)
        right = bracket_solver.outer_hole_x(geometry, False, c, shift)
        assert left == pytest.approx(-right)
        assert left < bracket_solver.pipe_center_x(True, c)

    def test_inner_hole_reaches_pipe_at_max_shift(self, geometry):
        c = 28.0
        shift = bracket_solver.inner_hole_bound(geometry)
        assert bracket_solver.inner_hole_x(geometry, True, c, shift) == pytest.approx(-c / 2)
