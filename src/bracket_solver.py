"""
Bracket shift solver and depth placement rule.

Coordinates are shelf-centred: x = 0 on the shelf's lengthwise centerline,
the left pipe center at -c/2 and the right at +c/2 for a center-to-center
spacing c. A positive shift moves a bracket outward, away from the centerline.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import brentq

from fixture_config import DEPTH_POSITIONS, FixtureGeometry, SpacingInput

# Clearance comparisons tolerate float noise at the exact bound
CLEARANCE_TOLERANCE = 1e-9

BoundFunction = Callable[[FixtureGeometry, float, float], float]


class ShiftBound(NamedTuple):
    """A named lower bound on the bracket shift."""

    name: str
    compute: BoundFunction


def shelf_overhang(geometry: FixtureGeometry, center_spacing: float) -> float:
    """Shelf overhang past each pipe center (negative when pipes sit outside the shelf)."""
    return (geometry.shelf.width - center_spacing) / 2


def button_head_bound(geometry: FixtureGeometry, center_spacing: float,
                      required_gap: float) -> float:
    """
    Minimum shift that keeps the outer button head outside the shelf edge.

    The outer hole, plus the head radius and the edge clearance, must lie
    outboard of the shelf edge. The result is not clamped: a negative value
    means the shelf edge is already cleared at zero shift.

    Args:
        geometry: Fixture dimensions
        center_spacing: Pipe center-to-center distance at this depth
        required_gap: Unused, kept for a uniform bound signature

    Returns:
        Minimum shift in inches
    """
    b = geometry.bracket
    head_radius = geometry.fastener.screw_head_diameter / 2
    return (shelf_overhang(geometry, center_spacing) - b.hole_offset
            + head_radius + b.edge_clearance)


def nut_clearance_bound(geometry: FixtureGeometry, center_spacing: float,
                        required_gap: float) -> float:
    """
    Minimum shift that keeps the outer cap nut clear of the pipe.

    The nut's flat nearest the pipe sits nut_across_flats/2 inboard of the
    outer hole; it must stay required_gap outside the pipe surface.

    Returns:
        Minimum shift in inches, never negative
    """
    pipe_radius = geometry.pipe.radius
    nut_radius = geometry.fastener.nut_across_flats / 2
    tangency_shift = pipe_radius - geometry.bracket.hole_offset + nut_radius + required_gap
    return max(0.0, tangency_shift)


def inner_hole_bound(geometry: FixtureGeometry) -> float:
    """Largest shift before the inner hole column crosses the pipe centerline."""
    return geometry.bracket.hole_offset


BUTTON_HEAD = ShiftBound('button_head', button_head_bound)
NUT_CLEARANCE = ShiftBound('nut_clearance', nut_clearance_bound)

LOWER_BOUNDS: Dict[str, ShiftBound] = {
    BUTTON_HEAD.name: BUTTON_HEAD,
    NUT_CLEARANCE.name: NUT_CLEARANCE,
}

BOUND_POLICIES: Dict[str, Tuple[ShiftBound, ...]] = {
    'standard': (BUTTON_HEAD, NUT_CLEARANCE),
    # Older layouts only guarded the nut; the shelf edge was checked by hand
    'nut_only': (NUT_CLEARANCE,),
}


def resolve_bound_policy(names: Sequence[str]) -> Tuple[ShiftBound, ...]:
    """
    Turn policy or bound names into a tuple of bounds.

    Args:
        names: A single policy name (e.g. ['standard']) or bound names
            (e.g. ['button_head', 'nut_clearance'])

    Raises:
        ValueError: For an unknown name
    """
    if len(names) == 1 and names[0] in BOUND_POLICIES:
        return BOUND_POLICIES[names[0]]

    bounds = []
    for name in names:
        if name not in LOWER_BOUNDS:
            raise ValueError(
                f"Unknown bound: {name}. "
                f"Valid bounds: {list(LOWER_BOUNDS)}, policies: {list(BOUND_POLICIES)}"
            )
        bounds.append(LOWER_BOUNDS[name])
    return tuple(bounds)


@dataclass(frozen=True)
class ShiftResult:
    """
    Outcome of one solve at one depth position.

    Attributes:
        shift: Chosen outward shift, never negative
        min_shift: Largest active lower bound
        max_shift: Inner-hole upper bound
        has_conflict: True when min_shift > max_shift (shift is then max_shift)
        component_bounds: Each lower bound by name
        position: 'front' or 'back'
        center_spacing: Pipe center-to-center spacing used
        required_gap: Nut-to-pipe gap the bounds were computed for
    """

    shift: float
    min_shift: float
    max_shift: float
    has_conflict: bool
    component_bounds: Dict[str, float] = field(default_factory=dict)
    position: str = 'front'
    center_spacing: float = 0.0
    required_gap: float = 0.0

    @property
    def min_shift_button_head(self) -> Optional[float]:
        return self.component_bounds.get(BUTTON_HEAD.name)

    @property
    def min_shift_nut(self) -> Optional[float]:
        return self.component_bounds.get(NUT_CLEARANCE.name)

    @property
    def limiting_bound(self) -> Optional[str]:
        """Name of the bound that set min_shift."""
        if not self.component_bounds:
            return None
        return max(self.component_bounds, key=self.component_bounds.get)


@dataclass(frozen=True)
class ClearanceCheck:
    """
    Nut-to-pipe clearance on one side.

    gap is the signed air gap between the nut flat and the pipe surface
    (negative when they overlap); clearance is gap minus the required gap.
    """

    side: str
    position: str
    gap: float
    required: float
    clearance: float
    is_ok: bool

    @property
    def overlaps_pipe(self) -> bool:
        return self.gap < -CLEARANCE_TOLERANCE


def pipe_center_x(is_left: bool, center_spacing: float) -> float:
    """Pipe center in shelf-centred coordinates."""
    return -center_spacing / 2 if is_left else center_spacing / 2


def bracket_center_x(is_left: bool, center_spacing: float, shift: float) -> float:
    """Bracket center after shifting outward from its pipe."""
    direction = -1.0 if is_left else 1.0
    return pipe_center_x(is_left, center_spacing) + direction * shift


def outer_hole_x(geometry: FixtureGeometry, is_left: bool, center_spacing: float,
                 shift: float) -> float:
    """Outer hole column (the one away from the shelf centerline)."""
    direction = -1.0 if is_left else 1.0
    return (bracket_center_x(is_left, center_spacing, shift)
            + direction * geometry.bracket.hole_offset)


def inner_hole_x(geometry: FixtureGeometry, is_left: bool, center_spacing: float,
                 shift: float) -> float:
    direction = -1.0 if is_left else 1.0
    return (bracket_center_x(is_left, center_spacing, shift)
            - direction * geometry.bracket.hole_offset)


class BracketShiftSolver:
    """Solves the outward bracket shift for a fixture geometry."""

    def __init__(self, geometry: FixtureGeometry,
                 bounds: Sequence[ShiftBound] = BOUND_POLICIES['standard']):
        """
        Initialize solver.

        Args:
            geometry: Validated fixture dimensions
            bounds: Lower bounds to combine with max()
        """
        self.geometry = geometry
        self.bounds = tuple(bounds)

    @property
    def hole_offset(self) -> float:
        return self.geometry.bracket.hole_offset

    def center_spacing(self, spacing: SpacingInput, position: str = 'front') -> float:
        """Center-to-center pipe spacing at a depth position."""
        return spacing.center_to_center(position, self.geometry.pipe.diameter)

    def optimal_shift(self, spacing: SpacingInput, position: str = 'front') -> ShiftResult:
        """
        Compute the bracket shift at one depth position.

        Args:
            spacing: Pipe spacing and required nut gap
            position: 'front' or 'back'

        Returns:
            ShiftResult; an infeasible request is flagged with has_conflict and
            carries the clamped shift
        """
        center_spacing = self.center_spacing(spacing, position)
        gap = spacing.nut_clearance

        component_bounds = {
            bound.name: float(bound.compute(self.geometry, center_spacing, gap))
            for bound in self.bounds
        }
        min_shift = max(component_bounds.values(), default=0.0)
        max_shift = inner_hole_bound(self.geometry)

        has_conflict = min_shift > max_shift
        shift = max_shift if has_conflict else min_shift

        return ShiftResult(
            shift=max(0.0, shift),
            min_shift=min_shift,
            max_shift=max_shift,
            has_conflict=has_conflict,
            component_bounds=component_bounds,
            position=position,
            center_spacing=center_spacing,
            required_gap=gap,
        )

    def solve(self, spacing: SpacingInput) -> Dict[str, ShiftResult]:
        """Shift results for both depth positions."""
        return {position: self.optimal_shift(spacing, position)
                for position in DEPTH_POSITIONS}

    def nut_to_pipe_clearance(self, is_left: bool, shift: float,
                              spacing: SpacingInput,
                              position: str = 'front') -> ClearanceCheck:
        """
        Check the outer cap nut against the pipe on one side.

        Args:
            is_left: Left (True) or right (False) bracket
            shift: Outward shift to test
            spacing: Pipe spacing and required nut gap
            position: 'front' or 'back'

        Returns:
            ClearanceCheck with signed gap and clearance
        """
        center_spacing = self.center_spacing(spacing, position)
        pipe_radius = self.geometry.pipe.radius
        nut_radius = self.geometry.fastener.nut_across_flats / 2

        hole_x = outer_hole_x(self.geometry, is_left, center_spacing, shift)
        pipe_x = pipe_center_x(is_left, center_spacing)

        if is_left:
            nut_inner_edge = hole_x + nut_radius
            pipe_outer_edge = pipe_x - pipe_radius
            gap = pipe_outer_edge - nut_inner_edge
        else:
            nut_inner_edge = hole_x - nut_radius
            pipe_outer_edge = pipe_x + pipe_radius
            gap = nut_inner_edge - pipe_outer_edge

        clearance = gap - spacing.nut_clearance
        return ClearanceCheck(
            side='left' if is_left else 'right',
            position=position,
            gap=gap,
            required=spacing.nut_clearance,
            clearance=clearance,
            is_ok=clearance >= -CLEARANCE_TOLERANCE,
        )

    def clearance_checks(self, spacing: SpacingInput,
                         result: ShiftResult) -> Tuple[ClearanceCheck, ClearanceCheck]:
        """Left and right checks at a solved shift."""
        return (
            self.nut_to_pipe_clearance(True, result.shift, spacing, result.position),
            self.nut_to_pipe_clearance(False, result.shift, spacing, result.position),
        )


def solve_nut_tangency_shift(solver: BracketShiftSolver, spacing: SpacingInput,
                             position: str = 'front', is_left: bool = True,
                             search_span: Optional[float] = None) -> float:
    """
    Find numerically the shift at which the nut clearance reaches zero.

    Independent of nut_clearance_bound: it only evaluates
    nut_to_pipe_clearance, so the two can be compared.

    Args:
        solver: Solver to evaluate
        spacing: Pipe spacing and required nut gap
        position: 'front' or 'back'
        is_left: Side to evaluate
        search_span: Half-width of the bracketing interval (defaults to a
            generous multiple of the fixture size)

    Returns:
        Shift in inches (may be negative when the nut clears at zero shift)
    """
    geometry = solver.geometry
    if search_span is None:
        search_span = 4 * (geometry.pipe.diameter + geometry.bracket.width
                           + spacing.nut_clearance)

    def clearance_at(shift: float) -> float:
        return solver.nut_to_pipe_clearance(is_left, shift, spacing, position).clearance

    return float(brentq(clearance_at, -search_span, search_span, xtol=1e-12))


@dataclass(frozen=True)
class DepthPlacement:
    """
    Bracket positions along the shelf depth (y = 0 at the back edge).

    Attributes:
        inset: Distance from each shelf edge to the nearest bracket
        free_span: Depth left after both brackets (depth - 2 * length)
        gap_between: Distance between the two brackets
        back_y: Back bracket's edge nearest the back of the shelf
        front_y: Front bracket's edge nearest the back of the shelf
        is_degenerate: True when the brackets do not fit (free_span <= 0)
    """

    inset: float
    free_span: float
    gap_between: float
    back_y: float
    front_y: float
    is_degenerate: bool

    def y_for(self, position: str) -> float:
        return self.front_y if position == 'front' else self.back_y


def bracket_inset_depth(shelf_depth: float, bracket_length: float,
                        phi: float = (1 + np.sqrt(5)) / 2,
                        mode: str = 'golden') -> float:
    """
    Inset of each bracket from its shelf edge.

    The free depth is split so that the gap between the brackets is 2 * phi
    times each edge inset.

    Args:
        shelf_depth: Shelf depth
        bracket_length: Bracket length along the depth
        phi: Proportion constant (golden ratio)
        mode: 'golden', or 'flush' to put brackets on the edges

    Returns:
        Inset in inches; 0 when the brackets do not fit
    """
    if mode != 'golden':
        return 0.0

    free = shelf_depth - 2 * bracket_length
    if free <= 0:
        return 0.0

    inset = free / (2 * (1 + phi))
    if not np.isfinite(inset) or inset < 0:
        return 0.0
    return float(inset)


def depth_placement(geometry: FixtureGeometry) -> DepthPlacement:
    """Place the back and front brackets along the shelf depth."""
    depth = geometry.shelf.depth
    length = geometry.bracket.length
    inset = bracket_inset_depth(depth, length, geometry.phi, geometry.depth_mode)
    free = depth - 2 * length

    return DepthPlacement(
        inset=inset,
        free_span=free,
        gap_between=free - 2 * inset,
        back_y=inset,
        front_y=depth - inset - length,
        is_degenerate=free <= 0,
    )
