"""
Calibration sheet for checking where a bracket's holes really are.

Four blocks each hold a true-scale bracket outline. Around every nominal
hole center is a 7 x 7 grid of crosshairs stepped in 0.5mm increments; the
crosshair that lines up with a real hole gives the correction in mm.
"""

from pathlib import Path
from typing import List, NamedTuple, Tuple

import numpy as np

import shelf_projection
import template_page
from fixture_config import BracketDimensions
from shelf_units import to_inches

TemplatePage = template_page.TemplatePage

MM_ADJUSTMENTS = (-1.5, -1.0, -0.5, 0.0, 0.5, 1.0, 1.5)
BLOCK_LABELS = ('A', 'B', 'C', 'D')
HOLE_NAMES = {'TL': 'Top Left', 'TR': 'Top Right', 'BL': 'Bottom Left', 'BR': 'Bottom Right'}
NOTES_COLUMNS = (('Hole', 0.15), ('Horizontal mm', 0.2), ('Vertical mm', 0.2), ('Notes', 0.45))

CALIBRATION_TITLE = 'Bracket Hole Calibration Sheet'

DPI = shelf_projection.POINTS_PER_INCH
PAGE_WIDTH = shelf_projection.LETTER_PAGE[0] * DPI
PAGE_HEIGHT = shelf_projection.LETTER_PAGE[1] * DPI

BLOCK_WIDTH = 3.45 * DPI
BLOCK_HEIGHT = 3.3 * DPI
BLOCK_GAP_X = 0.35 * DPI
BLOCK_GAP_Y = 0.3 * DPI
BLOCKS_TOP = 1.25 * DPI
BLOCK_LABEL_HEIGHT = 18
CROSS_HALF_LENGTH = 0.04 * DPI
MARGIN_X = 0.7 * DPI
NOTES_HEIGHT = 1.0 * DPI
NOTES_ROWS = 5


class HoleDefinition(NamedTuple):
    """Nominal hole center in bracket coordinates (inches from the top-left corner)."""

    name: str
    x: float
    y: float
    edge_x: str
    edge_y: str


def hole_definitions(bracket: BracketDimensions) -> List[HoleDefinition]:
    insets = bracket.hole_insets
    right = bracket.width - insets.right
    bottom = bracket.length - insets.bottom
    return [
        HoleDefinition('TL', insets.left, insets.top, 'left', 'top'),
        HoleDefinition('TR', right, insets.top, 'right', 'top'),
        HoleDefinition('BL', insets.left, bottom, 'left', 'bottom'),
        HoleDefinition('BR', right, bottom, 'right', 'bottom'),
    ]


def crosshair_grid(hole: HoleDefinition) -> List[Tuple[float, float, float, float]]:
    """
    Crosshair positions around one hole.

    Positive adjustments move away from the hole's nearest edges, toward the
    bracket center.

    Returns:
        (column_mm, row_mm, x, y) for every column and row adjustment
    """
    sign_x = 1.0 if hole.edge_x == 'left' else -1.0
    sign_y = 1.0 if hole.edge_y == 'top' else -1.0
    return [
        (col_mm, row_mm,
         hole.x + sign_x * to_inches(col_mm),
         hole.y + sign_y * to_inches(row_mm))
        for col_mm in MM_ADJUSTMENTS
        for row_mm in MM_ADJUSTMENTS
    ]


class CalibrationTemplate:
    """Builds the calibration sheet for a bracket."""

    def __init__(self, bracket: BracketDimensions):
        self.bracket = bracket

    def block_origins(self) -> List[Tuple[float, float]]:
        """Top-left corner of each block, A to D in reading order."""
        start_x = (PAGE_WIDTH - (2 * BLOCK_WIDTH + BLOCK_GAP_X)) / 2
        return [(start_x + col * (BLOCK_WIDTH + BLOCK_GAP_X),
                 BLOCKS_TOP + row * (BLOCK_HEIGHT + BLOCK_GAP_Y))
                for row in range(2) for col in range(2)]

    def build_page(self) -> TemplatePage:
        page = TemplatePage(CALIBRATION_TITLE, PAGE_WIDTH, PAGE_HEIGHT)
        center_x = PAGE_WIDTH / 2

        page.text(center_x, 0.45 * DPI, CALIBRATION_TITLE, 'calibration-title')
        page.text(center_x, 0.65 * DPI,
                  'Align a bracket with an outline, then note which crosshair lines up with each hole',
                  'calibration-subtitle')
        instructions = [
            'Steps are 0.5mm (about 0.020") moving the hole center toward (+) or away from (-) the bracket center.',
            'Red crosshairs mark the current 0mm position; use the legend to read the offset in mm.',
        ]
        for index, line in enumerate(instructions):
            page.text(center_x, 0.85 * DPI + index * 12, line, 'calibration-instruction')

        for label, origin in zip(BLOCK_LABELS, self.block_origins()):
            self._draw_block(page, label, origin)

        blocks_bottom = BLOCKS_TOP + 2 * BLOCK_HEIGHT + BLOCK_GAP_Y
        legend_y = blocks_bottom + 0.25 * DPI
        self._draw_legend(page, MARGIN_X, legend_y)
        page.scale_reference(PAGE_WIDTH - MARGIN_X - DPI, legend_y - 10,
                             caption='1" square', caption_class='calibration-instruction')
        self._draw_notes_table(page, MARGIN_X, legend_y + 1.3 * DPI,
                               PAGE_WIDTH - 2 * MARGIN_X, NOTES_HEIGHT)
        return page

    def _draw_block(self, page: TemplatePage, label: str, origin: Tuple[float, float]) -> None:
        x, y = origin
        page.group(f'block-{label}')
        page.rect(x, y, BLOCK_WIDTH, BLOCK_HEIGHT, 'calibration-block')
        page.text(x + BLOCK_WIDTH / 2, y + BLOCK_LABEL_HEIGHT, f'Block {label}',
                  'calibration-block-label')

        bracket_width = self.bracket.width * DPI
        anchor = (x + (BLOCK_WIDTH - bracket_width) / 2, y + BLOCK_LABEL_HEIGHT + 0.4 * DPI)
        frame = shelf_projection.template_frame(anchor=anchor)
        page.rect(anchor[0], anchor[1], frame.to_output_length(self.bracket.width),
                  frame.to_output_length(self.bracket.length), 'calibration-bracket')

        for hole in hole_definitions(self.bracket):
            grid = crosshair_grid(hole)
            points = frame.physical_to_output(np.array([(gx, gy) for _, _, gx, gy in grid]))
            for (col_mm, row_mm, _, _), (cx, cy) in zip(grid, points):
                is_zero = abs(col_mm) < 1e-6 and abs(row_mm) < 1e-6
                css_class = 'calibration-crosshair-zero' if is_zero else 'calibration-crosshair'
                page.crosshair(cx, cy, CROSS_HALF_LENGTH, css_class)
        page.group(None)

    def _draw_legend(self, page: TemplatePage, x: float, y: float) -> None:
        steps = '  '.join(f'{index}={mm:+.1f}' for index, mm in enumerate(MM_ADJUSTMENTS, 1))
        lines = [
            'Column 1 is the crosshair nearest the bracket edge; count toward the center.',
            'Rows count the same way; bottom holes start at the bottom edge.',
            'Positive values move the hole inward, toward the bracket center.',
        ]
        page.group('calibration-legend')
        page.text(x, y, 'Legend', 'calibration-legend-label', anchor='start')
        page.text(x, y + 16, f'Index (mm): {steps}', 'calibration-legend-text', anchor='start')
        for index, line in enumerate(lines):
            page.text(x, y + 32 + index * 12, line, 'calibration-instruction', anchor='start')
        page.group(None)

    def _draw_notes_table(self, page: TemplatePage, x: float, y: float,
                          width: float, height: float) -> None:
        row_height = height / NOTES_ROWS
        col_widths = [width * ratio for _, ratio in NOTES_COLUMNS]

        page.group('calibration-notes')
        page.rect(x, y, width, height, 'notes-table')
        for row in range(1, NOTES_ROWS):
            page.line(x, y + row * row_height, x + width, y + row * row_height, 'notes-table')
        offset = x
        for col_width in col_widths[:-1]:
            offset += col_width
            page.line(offset, y, offset, y + height, 'notes-table')

        offset = x
        for (header, _), col_width in zip(NOTES_COLUMNS, col_widths):
            page.text(offset + col_width / 2, y + row_height - 4, header, 'notes-text')
            offset += col_width
        for row, name in enumerate(HOLE_NAMES.values(), 1):
            page.text(x + col_widths[0] / 2, y + (row + 1) * row_height - 4, name, 'notes-text')
        page.group(None)

    def save_svg(self, filepath: Path) -> None:
        self.build_page().save_svg(filepath)
        print(f"  Exported SVG: {filepath}")

    def save_pdf(self, filepath: Path) -> None:
        template_page.save_pdf([self.build_page()], filepath, title=CALIBRATION_TITLE)
        print(f"  Exported PDF: {filepath}")
