"""
Render top and front views of the shelf, pipes, brackets and hardware to
raster images.
"""

from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.path import Path as MplPath

import bracket_layout
import shelf_projection
from fixture_config import DISPLAY_DEFAULTS
from shelf_units import to_inches

BracketLayout = bracket_layout.BracketLayout
ProjectionFrame = shelf_projection.ProjectionFrame

# One output pixel per point, so line widths read as pixels
RASTER_DPI = 72

HEX_SOCKET_DIAMETER = to_inches(3.0)
CENTERLINE_COLOR = '#ff0000'


class ViewRenderer:
    """Draws layout views through a projection frame."""

    def __init__(self, layout: BracketLayout, colors: Dict[str, str],
                 display: Optional[Dict[str, float]] = None,
                 shelf_opacity: float = 1.0):
        """
        Initialize renderer.

        Args:
            layout: Solved bracket layout
            colors: Colour palette (see FixtureConfig colors section)
            display: Padding and minimum canvas size in pixels
            shelf_opacity: 1.0 for a solid shelf, 0.5 to see brackets through it
        """
        self.layout = layout
        self.geometry = layout.geometry
        self.colors = colors
        self.display = dict(DISPLAY_DEFAULTS, **(display or {}))
        self.shelf_opacity = shelf_opacity

    def frame(self, view: str, available_width: float,
              available_height: float) -> Tuple[ProjectionFrame, Tuple[int, int]]:
        """
        Projection frame and canvas size for a view.

        Args:
            view: 'top' or 'front'
            available_width, available_height: Space offered by the caller

        Returns:
            (frame, (canvas_width, canvas_height))
        """
        bounds = self.layout.scene_bounds(view)
        padding = self.display['padding']
        frame = shelf_projection.screen_view_frame(
            bounds, available_width, available_height, padding=padding,
            min_width=self.display['min_canvas_width'],
            min_height=self.display['min_canvas_height'],
        )
        return frame, frame.canvas_size(bounds, padding)

    def shelf_contains(self, view: str, frame: ProjectionFrame,
                       pixel_x: float, pixel_y: float) -> bool:
        """Whether a canvas position falls on the shelf (for opacity toggling)."""
        x, y = frame.output_to_physical((pixel_x, pixel_y))
        return self.layout.shelf_bounds(view).contains(x, y)

    def toggle_shelf_opacity(self) -> float:
        self.shelf_opacity = 0.5 if self.shelf_opacity == 1.0 else 1.0
        return self.shelf_opacity

    def render(self, view: str, output_path: Path, available_width: float = 1100,
               available_height: float = 650) -> ProjectionFrame:
        """
        Render a view to an image file.

        Args:
            view: 'top' or 'front'
            output_path: Image path (format from the suffix, e.g. .png)
            available_width, available_height: Space to fit the view into

        Returns:
            The ProjectionFrame used
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        frame, (width, height) = self.frame(view, available_width, available_height)

        fig = plt.figure(figsize=(width / RASTER_DPI, height / RASTER_DPI), dpi=RASTER_DPI)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.axis('off')
        fig.patch.set_facecolor(self.colors['background'])

        if view == 'top':
            self._draw_pipes_top(ax, frame)
            self._draw_brackets_top(ax, frame)
            self._draw_shelf(ax, frame, view)
        else:
            self._draw_pipes_front(ax, frame)
            self._draw_brackets_front(ax, frame)
            self._draw_shelf(ax, frame, view)

        fig.savefig(output_path, dpi=RASTER_DPI, facecolor=fig.get_facecolor())
        plt.close(fig)
        return frame

    def _rect(self, frame: ProjectionFrame, x: float, y: float, w: float, h: float,
              **kwargs) -> patches.Rectangle:
        origin = frame.physical_to_output((x, y))
        return patches.Rectangle(tuple(origin), frame.to_output_length(w),
                                 frame.to_output_length(h), **kwargs)

    # ---- top view ----

    def _draw_pipes_top(self, ax, frame: ProjectionFrame) -> None:
        r = self.geometry.pipe.radius
        for side in bracket_layout.SIDES:
            line = self.layout.pipe_centerline(side)
            outline = np.array([
                [line[0, 0] - r, line[0, 1]],
                [line[0, 0] + r, line[0, 1]],
                [line[1, 0] + r, line[1, 1]],
                [line[1, 0] - r, line[1, 1]],
            ])
            ax.add_patch(patches.Polygon(frame.physical_to_output(outline), closed=True,
                                         facecolor=self.colors['pipe'],
                                         edgecolor=self.colors['pipe_stroke'], linewidth=1))
            projected = frame.physical_to_output(line)
            ax.plot(projected[:, 0], projected[:, 1], color=CENTERLINE_COLOR, linewidth=1)

    def _draw_brackets_top(self, ax, frame: ProjectionFrame) -> None:
        fastener = self.geometry.fastener
        hole_radius = frame.to_output_length(self.geometry.bracket.hole_diameter / 2)
        head_radius = frame.to_output_length(fastener.screw_head_diameter / 2)
        socket_radius = frame.to_output_length(HEX_SOCKET_DIAMETER / 2)

        for placement in self.layout.generate_all_placements():
            ax.add_patch(self._rect(frame, placement.left_x, placement.top_y,
                                    placement.width, placement.length,
                                    facecolor=self.colors['bracket'],
                                    edgecolor=self.colors['bracket_stroke'], linewidth=1))

            holes = frame.physical_to_output(placement.holes)
            for hx, hy in holes:
                ax.add_patch(patches.Circle((hx, hy), hole_radius,
                                            facecolor=self.colors['bracket_hole'],
                                            edgecolor='none'))

            for index in placement.outer_hole_indices:
                hx, hy = holes[index]
                ax.add_patch(patches.Circle((hx, hy), head_radius,
                                            facecolor=self.colors['button_screw_head'],
                                            edgecolor=self.colors['button_screw_head_stroke'],
                                            linewidth=1))
                ax.add_patch(patches.RegularPolygon((hx, hy), numVertices=6,
                                                    radius=socket_radius,
                                                    facecolor=self.colors['button_screw_socket']))

    def _draw_shelf(self, ax, frame: ProjectionFrame, view: str) -> None:
        bounds = self.layout.shelf_bounds(view)
        ax.add_patch(self._rect(frame, bounds.min_x, bounds.min_y, bounds.width,
                                bounds.height, facecolor=self.colors['shelf'],
                                edgecolor=self.colors['shelf_stroke'], linewidth=2,
                                alpha=self.shelf_opacity))

    # ---- front view ----

    def _draw_pipes_front(self, ax, frame: ProjectionFrame) -> None:
        pipe = self.geometry.pipe
        c = self.layout.center_spacing('front')
        for x in (-c / 2, c / 2):
            cx, cy = frame.physical_to_output((x, pipe.radius))
            ax.add_patch(patches.Circle((cx, cy), frame.to_output_length(pipe.radius),
                                        facecolor=self.colors['pipe'],
                                        edgecolor=self.colors['pipe_stroke'], linewidth=1))
            line = frame.physical_to_output([[x, 0.0], [x, pipe.diameter]])
            ax.plot(line[:, 0], line[:, 1], color=CENTERLINE_COLOR, linewidth=1)

    def _draw_brackets_front(self, ax, frame: ProjectionFrame) -> None:
        b = self.geometry.bracket
        fastener = self.geometry.fastener

        for side in bracket_layout.SIDES:
            placement = self.layout.generate_placement('front', side)
            ax.add_patch(self._rect(frame, placement.left_x, -b.thickness, b.width,
                                    b.thickness, facecolor=self.colors['bracket'],
                                    edgecolor=self.colors['bracket_stroke'], linewidth=1))

            hole_x = placement.outer_hole_x

            # Button head sits on the bracket beside the shelf
            head_w = frame.to_output_length(fastener.screw_head_diameter)
            head_h = frame.to_output_length(fastener.screw_head_height)
            hx, hy = frame.physical_to_output((hole_x - fastener.screw_head_diameter / 2,
                                               -b.thickness - fastener.screw_head_height))
            ax.add_patch(patches.FancyBboxPatch(
                (hx, hy), head_w, head_h,
                boxstyle=patches.BoxStyle('Round', pad=0, rounding_size=head_h / 2),
                facecolor=self.colors['button_screw_head'],
                edgecolor=self.colors['button_screw_head_stroke'], linewidth=1))

            self._draw_cap_nut(ax, frame, hole_x)

    def _draw_cap_nut(self, ax, frame: ProjectionFrame, hole_x: float) -> None:
        """Hex body hanging below the bracket with a domed acorn cap."""
        fastener = self.geometry.fastener
        width = fastener.nut_across_corners
        hex_height = fastener.nut_across_flats
        dome_height = max(fastener.nut_height - hex_height, 0.0)
        left = hole_x - width / 2

        ax.add_patch(self._rect(frame, left, 0.0, width, hex_height,
                                facecolor=self.colors['hex_nut'],
                                edgecolor=self.colors['hex_nut_stroke'], linewidth=1))

        top = hex_height
        bottom = hex_height + dome_height
        dome = frame.physical_to_output([
            [left, top],
            [left, top + dome_height * 0.3],
            [left, bottom],
            [left + width / 2, bottom],
            [left + width, bottom],
            [left + width, top + dome_height * 0.3],
            [left + width, top],
            [left, top],
        ])
        codes = [MplPath.MOVETO, MplPath.LINETO, MplPath.CURVE3, MplPath.CURVE3,
                 MplPath.CURVE3, MplPath.CURVE3, MplPath.LINETO, MplPath.CLOSEPOLY]
        ax.add_patch(patches.PathPatch(MplPath(dome, codes),
                                       facecolor=self.colors['hex_nut'],
                                       edgecolor=self.colors['hex_nut_stroke'], linewidth=1))
