"""
Assemble complete bracket placements from the solver and depth rule.

Top view coordinates: x = 0 on the shelf centerline, y = 0 on the back edge
of the shelf, y grows toward the front. Front view coordinates: same x,
y = 0 on the top of the pipes, y grows downward (the shelf sits at negative y).
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

import bracket_solver
from fixture_config import DEPTH_POSITIONS, FixtureGeometry, SpacingInput
from shelf_projection import Bounds

BracketShiftSolver = bracket_solver.BracketShiftSolver
ClearanceCheck = bracket_solver.ClearanceCheck
ShiftResult = bracket_solver.ShiftResult
DepthPlacement = bracket_solver.DepthPlacement

SIDES = ('left', 'right')

# Hole order within a bracket: top-left, top-right, bottom-left, bottom-right
HOLE_LABELS = ('TL', 'TR', 'BL', 'BR')


class BracketPlacement:
    """Represents one placed bracket with its holes."""

    def __init__(self, position: str, side: str, center_x: float, top_y: float,
                 geometry: FixtureGeometry, shift_result: ShiftResult,
                 clearance: ClearanceCheck):
        """
        Initialize bracket placement.

        Args:
            position: 'front' or 'back'
            side: 'left' or 'right'
            center_x: Bracket center along the shelf width
            top_y: Bracket edge nearest the back of the shelf
            geometry: Fixture dimensions
            shift_result: Solve this placement came from
            clearance: Nut-to-pipe check for this bracket
        """
        b = geometry.bracket
        self.position = position
        self.side = side
        self.center_x = center_x
        self.top_y = top_y
        self.width = b.width
        self.length = b.length
        self.hole_diameter = b.hole_diameter
        self.shift_result = shift_result
        self.clearance = clearance

        left_x = center_x - b.width / 2
        insets = b.hole_insets
        self.holes = np.array([
            [left_x + insets.left, top_y + insets.top],
            [left_x + b.width - insets.right, top_y + insets.top],
            [left_x + insets.left, top_y + b.length - insets.bottom],
            [left_x + b.width - insets.right, top_y + b.length - insets.bottom],
        ])

    @property
    def is_left(self) -> bool:
        return self.side == 'left'

    @property
    def shift(self) -> float:
        return self.shift_result.shift

    @property
    def left_x(self) -> float:
        return self.center_x - self.width / 2

    @property
    def outer_hole_indices(self) -> Tuple[int, int]:
        """Holes on the column away from the shelf centerline (button heads + nuts)."""
        return (0, 2) if self.is_left else (1, 3)

    @property
    def inner_hole_indices(self) -> Tuple[int, int]:
        return (1, 3) if self.is_left else (0, 2)

    @property
    def outer_holes(self) -> np.ndarray:
        return self.holes[list(self.outer_hole_indices)]

    @property
    def inner_holes(self) -> np.ndarray:
        return self.holes[list(self.inner_hole_indices)]

    @property
    def outer_hole_x(self) -> float:
        return float(self.holes[self.outer_hole_indices[0], 0])

    def get_bounds(self) -> Tuple[float, float, float, float]:
        """
        Get bounding box of bracket.

        Returns:
            (min_x, max_x, min_y, max_y)
        """
        return (self.left_x, self.left_x + self.width,
                self.top_y, self.top_y + self.length)


@dataclass(frozen=True)
class PlacementGuide:
    """
    Tape-measure distances for marking one shelf corner.

    Attributes:
        bracket_edge_from_shelf_edge: Bracket outer edge past the shelf edge
        outer_hole_from_shelf_edge: Outer hole center past the shelf edge
        inner_hole_from_shelf_edge: Inner hole center inside the shelf edge
        depth_inset: Bracket distance from the shelf's front/back edge
    """

    position: str
    shift: float
    shelf_overhang: float
    bracket_edge_from_shelf_edge: float
    outer_hole_from_shelf_edge: float
    inner_hole_from_shelf_edge: float
    depth_inset: float


class BracketLayout:
    """Generates the complete bracket layout for one spacing input."""

    def __init__(self, geometry: FixtureGeometry, spacing: SpacingInput,
                 bounds: Sequence[bracket_solver.ShiftBound] = bracket_solver.BOUND_POLICIES['standard']):
        """
        Initialize bracket layout.

        Args:
            geometry: Fixture dimensions
            spacing: Pipe spacing and required nut gap
            bounds: Lower-bound policy for the solver
        """
        self.geometry = geometry
        self.spacing = spacing
        self.solver = BracketShiftSolver(geometry, bounds)
        self.results: Dict[str, ShiftResult] = self.solver.solve(spacing)
        self.depth: DepthPlacement = bracket_solver.depth_placement(geometry)

    def shift_result(self, position: str = 'front') -> ShiftResult:
        return self.results[position]

    def clearance_checks(self, position: str = 'front') -> Tuple[ClearanceCheck, ClearanceCheck]:
        """Left and right nut checks at a depth position."""
        return self.solver.clearance_checks(self.spacing, self.results[position])

    @property
    def has_conflict(self) -> bool:
        return any(result.has_conflict for result in self.results.values())

    @property
    def gap_below_minimum(self) -> bool:
        """Requested nut gap is under the configured minimum."""
        minimum = self.geometry.nut_clearance.minimum
        return self.spacing.nut_clearance < minimum - bracket_solver.CLEARANCE_TOLERANCE

    def center_spacing(self, position: str = 'front') -> float:
        return self.results[position].center_spacing

    def shelf_overhang(self, position: str = 'front') -> float:
        return bracket_solver.shelf_overhang(self.geometry, self.center_spacing(position))

    def generate_placement(self, position: str, side: str) -> BracketPlacement:
        """
        Place a single bracket.

        Args:
            position: 'front' or 'back'
            side: 'left' or 'right'

        Returns:
            BracketPlacement instance
        """
        if position not in DEPTH_POSITIONS:
            raise ValueError(f"Unknown position: {position}")
        if side not in SIDES:
            raise ValueError(f"Unknown side: {side}")

        result = self.results[position]
        is_left = side == 'left'
        center_x = bracket_solver.bracket_center_x(is_left, result.center_spacing,
                                                   result.shift)
        clearance = self.solver.nut_to_pipe_clearance(is_left, result.shift,
                                                      self.spacing, position)
        return BracketPlacement(position, side, center_x, self.depth.y_for(position),
                                self.geometry, result, clearance)

    def generate_all_placements(self) -> List[BracketPlacement]:
        """Back then front, left then right."""
        return [self.generate_placement(position, side)
                for position in ('back', 'front')
                for side in SIDES]

    def placement_guide(self, position: str = 'front') -> PlacementGuide:
        """Measurements from the shelf edge for one depth position."""
        result = self.results[position]
        b = self.geometry.bracket
        overhang = self.shelf_overhang(position)
        shift = result.shift

        return PlacementGuide(
            position=position,
            shift=shift,
            shelf_overhang=overhang,
            bracket_edge_from_shelf_edge=shift + b.width / 2 - overhang,
            outer_hole_from_shelf_edge=shift + b.hole_offset - overhang,
            inner_hole_from_shelf_edge=overhang - shift + b.hole_offset,
            depth_inset=self.depth.inset,
        )

    def pipe_centerline(self, side: str) -> np.ndarray:
        """
        Pipe centerline in top view as [[x, y_start], [x, y_end]].

        With different front and back spacing the pipe runs at an angle
        through both bracket mid-points.
        """
        is_left = side == 'left'
        b_len = self.geometry.bracket.length
        y_back = self.depth.back_y + b_len / 2
        y_front = self.depth.front_y + b_len / 2
        x_back = bracket_solver.pipe_center_x(is_left, self.center_spacing('back'))
        x_front = bracket_solver.pipe_center_x(is_left, self.center_spacing('front'))

        y_start = -self.geometry.pipe.overhang
        y_end = y_start + self.geometry.pipe.length

        if np.isclose(y_front, y_back):
            return np.array([[x_front, y_start], [x_front, y_end]])

        slope = (x_front - x_back) / (y_front - y_back)
        return np.array([
            [x_back + slope * (y_start - y_back), y_start],
            [x_back + slope * (y_end - y_back), y_end],
        ])

    def shelf_bounds(self, view: str = 'top') -> Bounds:
        w = self.geometry.shelf.width
        if view == 'top':
            return Bounds(-w / 2, 0.0, w / 2, self.geometry.shelf.depth)
        top = -self.geometry.bracket.thickness - self.geometry.shelf.thickness
        return Bounds(-w / 2, top, w / 2, -self.geometry.bracket.thickness)

    def scene_bounds(self, view: str = 'top') -> Bounds:
        """
        Physical region a renderer must show.

        Args:
            view: 'top' or 'front'
        """
        if view not in ('top', 'front'):
            raise ValueError(f"Unknown view: {view}")

        r = self.geometry.pipe.radius
        bounds = self.shelf_bounds(view)

        if view == 'top':
            for side in SIDES:
                line = self.pipe_centerline(side)
                pipe = Bounds(float(line[:, 0].min()) - r, float(line[0, 1]),
                              float(line[:, 0].max()) + r, float(line[1, 1]))
                bounds = bounds.union(pipe)
            for placement in self.generate_all_placements():
                min_x, max_x, min_y, max_y = placement.get_bounds()
                bounds = bounds.union(Bounds(min_x, min_y, max_x, max_y))
            return bounds

        fastener = self.geometry.fastener
        c = self.center_spacing('front')
        bounds = bounds.union(Bounds(-c / 2 - r, 0.0, c / 2 + r, self.geometry.pipe.diameter))
        for side in SIDES:
            placement = self.generate_placement('front', side)
            half = max(fastener.nut_across_corners, fastener.screw_head_diameter) / 2
            min_x, max_x, _, _ = placement.get_bounds()
            hole_x = placement.outer_hole_x
            bounds = bounds.union(Bounds(min(min_x, hole_x - half), 0.0,
                                         max(max_x, hole_x + half), fastener.nut_height))
        return bounds
