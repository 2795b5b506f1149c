"""
Printable drilling template for marking bracket holes at the shelf corners.

Each page shows the two corners of one depth position at true scale, with
the bracket outline, hole centers, the bracket-edge dimension, the
tape-measure values and a one-inch scale square. Pages are written to SVG
or PDF, and the full top-view layout can be exported to DXF for CAD.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import ezdxf
from ezdxf import units

import bracket_layout
import shelf_projection
import template_page
from shelf_units import format_with_fraction, to_mm

BracketLayout = bracket_layout.BracketLayout
BracketPlacement = bracket_layout.BracketPlacement
TemplatePage = template_page.TemplatePage

DPI = shelf_projection.POINTS_PER_INCH
PAGE_WIDTH = shelf_projection.LETTER_PAGE[0] * DPI
PAGE_HEIGHT = shelf_projection.LETTER_PAGE[1] * DPI

TEMPLATE_TITLE = 'Shelf Bracket Drilling Template'

# Page layout, in points
CORNER_OFFSET_X = 3.2 * DPI
CORNER_Y = 1.6 * DPI
CORNER_MARK_LENGTH = 3.0 * DPI
MEASUREMENTS_Y = 7.5 * DPI
INSTRUCTIONS_Y = 8.8 * DPI
TEXT_MARGIN_X = 0.75 * DPI
LINE_HEIGHT = 13
SCALE_BOX_INSET = 1.8 * DPI
DIMENSION_OFFSET = 35
DIMENSION_TEXT_OFFSET = 14
CROSSHAIR_OVERSHOOT = 6


def template_filename(spacing: float, extension: str,
                      timestamp: Optional[datetime] = None) -> str:
    """
    Export file name, e.g. shelf-template-28-969-20260101-120000.pdf.

    Args:
        spacing: Pipe spacing in inches (front spacing when non-parallel)
        extension: 'svg', 'pdf' or 'dxf'
        timestamp: Time to stamp (defaults to now)
    """
    timestamp = timestamp or datetime.now()
    distance = f'{spacing:.3f}'.replace('.', '-')
    return f"shelf-template-{distance}-{timestamp.strftime('%Y%m%d-%H%M%S')}.{extension}"


class TemplateGenerator:
    """Builds drilling template pages from a solved layout."""

    def __init__(self, layout: BracketLayout, shelf_number: Optional[str] = None):
        """
        Initialize template generator.

        Args:
            layout: Solved bracket layout
            shelf_number: Optional label printed in the title
        """
        self.layout = layout
        self.geometry = layout.geometry
        self.shelf_number = shelf_number

    @property
    def positions(self) -> List[str]:
        """Depth positions that need their own page."""
        if self.layout.spacing.is_parallel:
            return ['front']
        return ['front', 'back']

    def title(self) -> str:
        if self.shelf_number:
            return f'Shelf {self.shelf_number} Bracket Drilling Template'
        return 'Bracket Drilling Template'

    def build_page(self, position: str = 'front') -> TemplatePage:
        """
        Lay out the template page for one depth position.

        Args:
            position: 'front' or 'back'

        Returns:
            TemplatePage in points
        """
        spacing = self.layout.spacing
        page = TemplatePage(self.title(), PAGE_WIDTH, PAGE_HEIGHT)
        center_x = PAGE_WIDTH / 2

        page.text(center_x, 0.5 * DPI, self.title(), 'title')
        subtitle = f'Pipe Distance: {format_with_fraction(spacing.spacing_for(position))}'
        if not spacing.is_parallel:
            subtitle = f'{position.capitalize()} corners - {subtitle}'
        page.text(center_x, 0.5 * DPI + 16, subtitle, 'dimension-text')

        for side in bracket_layout.SIDES:
            placement = self.layout.generate_placement(position, side)
            anchor_x = center_x - CORNER_OFFSET_X if side == 'left' else center_x + CORNER_OFFSET_X
            self._draw_corner(page, placement, (anchor_x, CORNER_Y))

        last_y = self._draw_measurements(page, position)
        self._draw_instructions(page, position, max(INSTRUCTIONS_Y, last_y + 1.5 * LINE_HEIGHT))
        page.scale_reference(PAGE_WIDTH - SCALE_BOX_INSET, PAGE_HEIGHT - SCALE_BOX_INSET)
        return page

    def pages(self) -> List[TemplatePage]:
        return [self.build_page(position) for position in self.positions]

    def _corner_local_y(self, placement: BracketPlacement, y: float) -> float:
        """Distance of a top-view y from the shelf edge nearest the bracket."""
        if placement.position == 'back':
            return y
        return self.geometry.shelf.depth - y

    def _draw_corner(self, page: TemplatePage, placement: BracketPlacement,
                     anchor) -> None:
        """Corner marks, bracket outline, holes and edge dimension."""
        w = self.geometry.shelf.width
        is_left = placement.is_left
        corner_x = -w / 2 if is_left else w / 2
        interior = 1.0 if is_left else -1.0
        frame = shelf_projection.template_frame(reference=(corner_x, 0.0), anchor=anchor)
        ax, ay = anchor

        page.group(f'{placement.side}-corner')

        label_x = ax + interior * 0.2 * DPI
        page.text(label_x, ay - 24, f'{placement.side.upper()} CORNER', 'label',
                  anchor='start' if is_left else 'end')

        # Bracket outline in corner-local depth
        near = self._corner_local_y(placement, placement.top_y)
        far = self._corner_local_y(placement, placement.top_y + placement.length)
        top, bottom = min(near, far), max(near, far)

        preview = max(CORNER_MARK_LENGTH, frame.to_output_length(bottom) + 0.5 * DPI)
        page.line(ax, ay, ax + interior * CORNER_MARK_LENGTH, ay, 'corner-mark')
        page.line(ax, ay, ax, ay + preview, 'corner-mark')

        x0, y0 = frame.physical_to_output((placement.left_x, top))
        page.rect(x0, y0, frame.to_output_length(placement.width),
                  frame.to_output_length(bottom - top), 'bracket')

        hole_radius = frame.to_output_length(placement.hole_diameter / 2)
        for hx, hy in placement.holes:
            cx, cy = frame.physical_to_output((hx, self._corner_local_y(placement, hy)))
            page.circle(cx, cy, hole_radius, 'drill-hole')
            page.crosshair(cx, cy, hole_radius + CROSSHAIR_OVERSHOOT, 'crosshair')

        # Shelf edge to bracket outer edge
        outer_edge = placement.left_x if is_left else placement.left_x + placement.width
        outer_x = frame.to_output_x(outer_edge)
        dim_y = frame.to_output_y(bottom) + DIMENSION_OFFSET
        page.line(ax, dim_y, outer_x, dim_y, 'dimension-line')
        for x in (ax, outer_x):
            page.line(x, dim_y - 4, x, dim_y + 4, 'dimension-line')
        guide = self.layout.placement_guide(placement.position)
        page.text((ax + outer_x) / 2, dim_y + DIMENSION_TEXT_OFFSET,
                  format_with_fraction(guide.bracket_edge_from_shelf_edge), 'dimension-text')

        page.group(None)

    def _draw_measurements(self, page: TemplatePage, position: str) -> float:
        """Measurement lines and warnings; returns the baseline of the last line."""
        guide = self.layout.placement_guide(position)
        result = self.layout.shift_result(position)
        lines = [
            f'Shift from pipe center: {format_with_fraction(guide.shift)}',
            f'Bracket edge from shelf edge: {format_with_fraction(guide.bracket_edge_from_shelf_edge)}',
            f'Outer hole from shelf edge: {format_with_fraction(guide.outer_hole_from_shelf_edge)}',
            f'Inner hole from shelf edge: {format_with_fraction(guide.inner_hole_from_shelf_edge)}',
            f'Bracket inset from shelf edge: {format_with_fraction(guide.depth_inset)}',
            f'Nut-to-pipe gap: {to_mm(self.layout.spacing.nut_clearance):.1f}mm',
        ]

        page.group('measurements')
        y = MEASUREMENTS_Y
        page.text(TEXT_MARGIN_X, y, 'Measurements', 'label', anchor='start')
        for line in lines:
            y += LINE_HEIGHT
            page.text(TEXT_MARGIN_X, y, line, 'dimension-text', anchor='start')

        warnings = []
        if result.has_conflict:
            warnings.append('WARNING: nut gap not achievable; shift clamped to the inner-hole limit')
        if self.layout.gap_below_minimum:
            warnings.append('WARNING: nut gap is below the configured minimum')
        for warning in warnings:
            y += LINE_HEIGHT
            page.text(TEXT_MARGIN_X, y, warning, 'warning-text', anchor='start')
        page.group(None)
        return y

    def _draw_instructions(self, page: TemplatePage, position: str,
                           top: float = INSTRUCTIONS_Y) -> None:
        if self.layout.spacing.is_parallel:
            flip = 'Flip the paper 180 degrees to mark the opposite corners'
        else:
            flip = f'Use this page for the {position} corners only'
        lines = [
            'Print at 100% scale; check the 1" square before drilling',
            'Align the thick corner marks with the shelf corner',
            'Center punch each crosshair, then drill',
            flip,
        ]

        page.group('instructions')
        y = top
        for number, line in enumerate(lines, 1):
            page.text(TEXT_MARGIN_X, y, f'{number}. {line}', 'info-text', anchor='start')
            y += LINE_HEIGHT - 2
        page.group(None)

    def save_svg(self, filepath: Path, position: str = 'front') -> None:
        """Save one depth position's page as SVG."""
        self.build_page(position).save_svg(filepath)
        print(f"  Exported SVG: {filepath}")

    def save_pdf(self, filepath: Path) -> None:
        """Save every page to a single PDF."""
        template_page.save_pdf(self.pages(), filepath, title=TEMPLATE_TITLE)
        print(f"  Exported PDF: {filepath}")

    def save_dxf(self, filepath: Path) -> None:
        """
        Export the top-view layout to DXF in inches.

        The shelf, bracket outlines, holes and pipe centerlines go on separate
        layers. DXF y points up, so top-view y is negated.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        doc = ezdxf.new('R2010')
        doc.units = units.IN
        for name in ('SHELF', 'BRACKETS', 'HOLES', 'PIPES'):
            doc.layers.add(name)
        msp = doc.modelspace()

        shelf = self.layout.shelf_bounds('top')
        msp.add_lwpolyline([
            (shelf.min_x, -shelf.min_y), (shelf.max_x, -shelf.min_y),
            (shelf.max_x, -shelf.max_y), (shelf.min_x, -shelf.max_y),
        ], close=True, dxfattribs={'layer': 'SHELF'})

        for placement in self.layout.generate_all_placements():
            min_x, max_x, min_y, max_y = placement.get_bounds()
            msp.add_lwpolyline([
                (min_x, -min_y), (max_x, -min_y), (max_x, -max_y), (min_x, -max_y),
            ], close=True, dxfattribs={'layer': 'BRACKETS'})
            for hx, hy in placement.holes:
                msp.add_circle((float(hx), -float(hy)), placement.hole_diameter / 2,
                               dxfattribs={'layer': 'HOLES'})

        for side in bracket_layout.SIDES:
            (x1, y1), (x2, y2) = self.layout.pipe_centerline(side)
            msp.add_line((float(x1), -float(y1)), (float(x2), -float(y2)),
                         dxfattribs={'layer': 'PIPES'})

        doc.saveas(filepath)
        print(f"  Exported DXF: {filepath}")
