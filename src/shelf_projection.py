"""
Projection of physical lengths (inches) onto an output surface.

Both physical views and output surfaces use a y axis that grows downward, so
a projection is a uniform scale plus a translation; no axis is flipped.
Screen views, print templates and exports all convert through a
ProjectionFrame so they agree with each other and with the solver.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

POINTS_PER_INCH = 72.0
LETTER_PAGE = (8.5, 11.0)

ArrayLike = Union[float, Tuple[float, float], np.ndarray]


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned physical bounding box, in inches."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: 'Bounds') -> 'Bounds':
        return Bounds(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                      max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    @classmethod
    def from_points(cls, points: np.ndarray) -> 'Bounds':
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        return cls(float(np.min(points[:, 0])), float(np.min(points[:, 1])),
                   float(np.max(points[:, 0])), float(np.max(points[:, 1])))


def fit_scale(span_width: float, span_height: float,
              viewport_width: float, viewport_height: float,
              padding: float = 0.0) -> float:
    """
    Largest uniform scale that fits a physical span inside a viewport.

    Args:
        span_width, span_height: Physical extent to show
        viewport_width, viewport_height: Output surface size
        padding: Output margin kept on every side

    Returns:
        Output units per inch (the smaller of the width and height fits)

    Raises:
        ValueError: If the span is empty or the padding leaves no room
    """
    if span_width <= 0 or span_height <= 0:
        raise ValueError(f"Span must be positive, got {span_width} x {span_height}")

    available_width = viewport_width - 2 * padding
    available_height = viewport_height - 2 * padding
    if available_width <= 0 or available_height <= 0:
        raise ValueError(
            f"Viewport {viewport_width} x {viewport_height} too small for padding {padding}"
        )

    return min(available_width / span_width, available_height / span_height)


@dataclass(frozen=True)
class ProjectionFrame:
    """
    Uniform scale plus origin offset from inches to output units.

    Attributes:
        scale: Output units per inch
        origin_offset: Output position of the physical origin
        snap: Round projected coordinates to whole output units (raster
            surfaces only)
    """

    scale: float
    origin_offset: Tuple[float, float] = (0.0, 0.0)
    snap: bool = False

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"Projection scale must be > 0, got {self.scale}")

    @classmethod
    def fit(cls, bounds: Bounds, viewport_width: float, viewport_height: float,
            padding: float = 0.0,
            reference: Optional[Tuple[float, float]] = None,
            anchor: Optional[Tuple[float, float]] = None,
            snap: bool = False) -> 'ProjectionFrame':
        """
        Fit a physical bounding box into a viewport.

        Args:
            bounds: Physical region that must be visible
            viewport_width, viewport_height: Output surface size
            padding: Output margin on every side
            reference: Physical point pinned to anchor (defaults to the
                bounds' minimum corner)
            anchor: Output location of reference (defaults to
                (padding, padding))
            snap: Round projected coordinates

        Returns:
            ProjectionFrame
        """
        scale = fit_scale(bounds.width, bounds.height, viewport_width,
                          viewport_height, padding)
        if reference is None:
            reference = (bounds.min_x, bounds.min_y)
        if anchor is None:
            anchor = (padding, padding)
        return cls.fixed(scale, reference, anchor, snap=snap)

    @classmethod
    def fixed(cls, scale: float,
              reference: Tuple[float, float] = (0.0, 0.0),
              anchor: Tuple[float, float] = (0.0, 0.0),
              snap: bool = False) -> 'ProjectionFrame':
        """Frame with a known scale, pinning a physical reference point to anchor."""
        offset = (anchor[0] - reference[0] * scale, anchor[1] - reference[1] * scale)
        return cls(scale=scale, origin_offset=offset, snap=snap)

    def _finish(self, value):
        if self.snap:
            value = np.round(value)
        if np.ndim(value) == 0:
            return float(value)
        return value

    def to_output_x(self, x: float) -> float:
        return self._finish(self.origin_offset[0] + x * self.scale)

    def to_output_y(self, y: float) -> float:
        return self._finish(self.origin_offset[1] + y * self.scale)

    def to_output_length(self, length: ArrayLike) -> ArrayLike:
        """Scale a length (no translation)."""
        return self._finish(np.asarray(length, dtype=float) * self.scale)

    def physical_to_output(self, points: ArrayLike) -> np.ndarray:
        """
        Project one (x, y) point or an (N, 2) array of points.

        Returns:
            Array with the same shape as the input
        """
        points = np.asarray(points, dtype=float)
        projected = points * self.scale + np.asarray(self.origin_offset, dtype=float)
        if self.snap:
            projected = np.round(projected)
        return projected

    def output_to_physical(self, points: ArrayLike) -> np.ndarray:
        """Inverse projection (unsnapped)."""
        points = np.asarray(points, dtype=float)
        return (points - np.asarray(self.origin_offset, dtype=float)) / self.scale

    def project_bounds(self, bounds: Bounds) -> Bounds:
        corners = self.physical_to_output([[bounds.min_x, bounds.min_y],
                                           [bounds.max_x, bounds.max_y]])
        return Bounds.from_points(corners)

    def canvas_size(self, bounds: Bounds, padding: float = 0.0) -> Tuple[int, int]:
        """Whole-unit output size that holds bounds plus padding on every side."""
        return (int(round(bounds.width * self.scale + 2 * padding)),
                int(round(bounds.height * self.scale + 2 * padding)))


def screen_view_frame(bounds: Bounds, available_width: float, available_height: float,
                      padding: float = 40, min_width: float = 600,
                      min_height: float = 300) -> ProjectionFrame:
    """
    Raster frame for an on-screen view.

    The available area is clamped to the minimum canvas size before fitting,
    and coordinates snap to whole pixels.
    """
    width = max(available_width, min_width)
    height = max(available_height, min_height)
    return ProjectionFrame.fit(bounds, width, height, padding=padding, snap=True)


def template_frame(reference: Tuple[float, float] = (0.0, 0.0),
                   anchor: Tuple[float, float] = (0.0, 0.0),
                   dpi: float = POINTS_PER_INCH) -> ProjectionFrame:
    """Print frame at true scale: one physical inch is dpi output points."""
    return ProjectionFrame.fixed(dpi, reference, anchor)
