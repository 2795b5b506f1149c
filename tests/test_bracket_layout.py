"""Tests for bracket_layout module."""
import numpy as np
import pytest

from bracket_layout import BracketLayout
from fixture_config import SpacingInput
from shelf_units import to_inches


class TestPlacements:

    def test_four_brackets(self, layout):
        placements = layout.generate_all_placements()
        assert [(p.position, p.side) for p in placements] == [
            ('back', 'left'), ('back', 'right'), ('front', 'left'), ('front', 'right'),
        ]

    def test_mirror_symmetric(self, layout):
        left = layout.generate_placement('front', 'left')
        right = layout.generate_placement('front', 'right')
        assert left.center_x == pytest.approx(-right.center_x)
        assert left.outer_hole_x == pytest.approx(-right.outer_hole_x)

    def test_outer_holes_face_shelf_edge(self, layout):
        left = layout.generate_placement('front', 'left')
        assert np.all(left.outer_holes[:, 0] < left.inner_holes[:, 0])
        right = layout.generate_placement('front', 'right')
        assert np.all(right.outer_holes[:, 0] > right.inner_holes[:, 0])

    def test_holes_inside_bracket(self, layout, geometry):
        for placement in layout.generate_all_placements():
            min_x, max_x, min_y, max_y = placement.get_bounds()
            assert np.all((placement.holes[:, 0] > min_x) & (placement.holes[:, 0] < max_x))
            assert np.all((placement.holes[:, 1] > min_y) & (placement.holes[:, 1] < max_y))
            assert max_x - min_x == pytest.approx(geometry.bracket.width)

    def test_bracket_center_is_pipe_plus_shift(self, layout):
        shift = layout.shift_result('front').shift
        c = layout.center_spacing('front')
        left = layout.generate_placement('front', 'left')
        assert left.center_x == pytest.approx(-c / 2 - shift)

    def test_depth_positions(self, layout, geometry):
        back = layout.generate_placement('back', 'left')
        front = layout.generate_placement('front', 'left')
        assert back.top_y == pytest.approx(layout.depth.inset)
        assert front.top_y + front.length == pytest.approx(geometry.shelf.depth - layout.depth.inset)

    def test_placement_carries_clearance(self, layout):
        placement = layout.generate_placement('back', 'right')
        assert placement.clearance.side == 'right'
        assert placement.clearance.position == 'back'
        assert placement.clearance.is_ok

    @pytest.mark.parametrize("position, side", [('middle', 'left'), ('front', 'top')])
    def test_invalid(self, layout, position, side):
        with pytest.raises(ValueError):
            layout.generate_placement(position, side)


class TestPlacementGuide:

    def test_scenario(self, layout, geometry):
        guide = layout.placement_guide('front')
        b = geometry.bracket
        assert guide.shelf_overhang == pytest.approx(0.515625)
        assert guide.bracket_edge_from_shelf_edge == pytest.approx(guide.shift + b.width / 2 - 0.515625)
        assert guide.inner_hole_from_shelf_edge == pytest.approx(0.515625 - guide.shift + b.hole_offset)

    def test_matches_placement(self, layout, geometry):
        guide = layout.placement_guide('front')
        left = layout.generate_placement('front', 'left')
        shelf_edge = -geometry.shelf.width / 2
        assert shelf_edge - left.left_x == pytest.approx(guide.bracket_edge_from_shelf_edge)
        assert shelf_edge - left.outer_hole_x == pytest.approx(guide.outer_hole_from_shelf_edge)
        assert left.inner_holes[0, 0] - shelf_edge == pytest.approx(guide.inner_hole_from_shelf_edge)

    def test_button_head_clears_shelf_edge(self, layout, geometry):
        guide = layout.placement_guide('front')
        head_radius = geometry.fastener.screw_head_diameter / 2
        edge_gap = guide.outer_hole_from_shelf_edge - head_radius
        assert edge_gap == pytest.approx(geometry.bracket.edge_clearance)


class TestTaperedPipes:

    def test_positions_solved_separately(self, tapered_layout):
        front = tapered_layout.shift_result('front')
        back = tapered_layout.shift_result('back')
        assert back.center_spacing == 29.5
        assert back.shift < front.shift

    def test_centerline_passes_through_both_pipe_centers(self, tapered_layout):
        line = tapered_layout.pipe_centerline('left')
        depth = tapered_layout.depth
        half = tapered_layout.geometry.bracket.length / 2
        for position, y in (('back', depth.back_y + half), ('front', depth.front_y + half)):
            t = (y - line[0, 1]) / (line[1, 1] - line[0, 1])
            x = line[0, 0] + t * (line[1, 0] - line[0, 0])
            assert x == pytest.approx(-tapered_layout.center_spacing(position) / 2)

    def test_parallel_centerline_is_straight(self, layout):
        line = layout.pipe_centerline('right')
        assert line[0, 0] == line[1, 0]
        assert line[1, 1] - line[0, 1] == pytest.approx(layout.geometry.pipe.length)


class TestFlags:

    def test_no_conflict(self, layout):
        assert not layout.has_conflict
        assert not layout.gap_below_minimum

    def test_gap_below_minimum(self, geometry):
        layout = BracketLayout(geometry, SpacingInput(front=28.96875, nut_clearance=to_inches(0.5)))
        assert layout.gap_below_minimum

    def test_conflict(self, geometry):
        layout = BracketLayout(geometry, SpacingInput(front=28.0, nut_clearance=to_inches(1.0)))
        assert layout.has_conflict


class TestBounds:

    def test_top_scene_contains_shelf_and_pipes(self, layout, geometry):
        bounds = layout.scene_bounds('top')
        assert bounds.min_y == pytest.approx(-geometry.pipe.overhang)
        assert bounds.min_x < -geometry.shelf.width / 2
        assert bounds.width > geometry.shelf.width

    def test_front_scene(self, layout, geometry):
        bounds = layout.scene_bounds('front')
        assert bounds.min_y == pytest.approx(-geometry.bracket.thickness - geometry.shelf.thickness)
        assert bounds.max_y == pytest.approx(max(geometry.pipe.diameter, geometry.fastener.nut_height))

    def test_unknown_view(self, layout):
        with pytest.raises(ValueError):
            layout.scene_bounds('side')
