"""Tests for template_generator and template_page modules."""
import xml.etree.ElementTree as ET
from datetime import datetime

import ezdxf
import pytest
from ezdxf import units

import template_generator
from bracket_layout import BracketLayout
from fixture_config import SpacingInput
from shelf_projection import POINTS_PER_INCH
from shelf_units import to_inches
from template_generator import TemplateGenerator, template_filename
from template_page import TemplatePage

SVG_NS = "{http://www.w3.org/2000/svg}"


def _circles(page, group):
    return [p for p in page.primitives if p.kind == 'circle' and p.group == group]


class TestFilename:

    def test_format(self):
        stamp = datetime(2026, 1, 2, 3, 4, 5)
        assert template_filename(28.96875, 'pdf', stamp) == 'shelf-template-28-969-20260102-030405.pdf'


class TestPage:

    def test_parallel_has_one_page(self, layout):
        assert TemplateGenerator(layout).positions == ['front']

    def test_tapered_has_two_pages(self, tapered_layout):
        generator = TemplateGenerator(tapered_layout)
        assert generator.positions == ['front', 'back']
        assert len(generator.pages()) == 2

    def test_title(self, layout):
        assert TemplateGenerator(layout, shelf_number='3').title() == 'Shelf 3 Bracket Drilling Template'
        assert TemplateGenerator(layout).title() == 'Bracket Drilling Template'

    def test_four_holes_per_corner(self, layout):
        page = TemplateGenerator(layout).build_page()
        assert len(_circles(page, 'left-corner')) == 4
        assert len(_circles(page, 'right-corner')) == 4

    def test_holes_at_true_scale(self, layout, geometry):
        """Hole spacing on paper equals the physical hole spacing at 72pt/in."""
        page = TemplateGenerator(layout).build_page()
        holes = _circles(page, 'left-corner')
        xs = sorted({round(h.params['cx'], 6) for h in holes})
        ys = sorted({round(h.params['cy'], 6) for h in holes})
        b = geometry.bracket
        assert xs[1] - xs[0] == pytest.approx(2 * b.hole_offset * POINTS_PER_INCH, abs=1e-4)
        expected_rows = (b.length - b.hole_insets.top - b.hole_insets.bottom) * POINTS_PER_INCH
        assert ys[1] - ys[0] == pytest.approx(expected_rows, abs=1e-4)
        assert holes[0].params['r'] == pytest.approx(b.hole_diameter / 2 * POINTS_PER_INCH)

    def test_outer_hole_distance_from_corner(self, layout):
        """Left corner mark is at CORNER x; outer holes sit outside it by the guide distance."""
        page = TemplateGenerator(layout).build_page()
        corner_x = page.width / 2 - template_generator.CORNER_OFFSET_X
        outer_x = min(h.params['cx'] for h in _circles(page, 'left-corner'))
        guide = layout.placement_guide('front')
        assert corner_x - outer_x == pytest.approx(guide.outer_hole_from_shelf_edge * POINTS_PER_INCH)

    def test_bracket_inset_from_edge(self, layout):
        page = TemplateGenerator(layout).build_page()
        rect = next(p for p in page.primitives if p.kind == 'rect' and p.group == 'right-corner')
        inset_pt = rect.params['y'] - template_generator.CORNER_Y
        assert inset_pt == pytest.approx(layout.depth.inset * POINTS_PER_INCH)

    def test_measurements_listed(self, layout):
        texts = TemplateGenerator(layout).build_page().texts()
        assert any(t.startswith('Shift from pipe center: 0.3340"') for t in texts)
        assert any('Nut-to-pipe gap: 1.0mm' in t for t in texts)
        assert not any(t.startswith('WARNING') for t in texts)

    def test_conflict_warning(self, geometry):
        layout = BracketLayout(geometry, SpacingInput(front=28.0, nut_clearance=0.04))
        texts = TemplateGenerator(layout).build_page().texts()
        assert any(t.startswith('WARNING') for t in texts)

    def test_warnings_clear_of_instructions(self, geometry):
        layout = BracketLayout(geometry, SpacingInput(front=28.0, nut_clearance=to_inches(0.5)))
        page = TemplateGenerator(layout).build_page()
        warning_ys = [p.params['y'] for p in page.primitives
                      if p.kind == 'text' and p.text.startswith('WARNING')]
        instruction_ys = [p.params['y'] for p in page.primitives
                          if p.kind == 'text' and p.group == 'instructions']
        assert len(warning_ys) == 2
        assert max(warning_ys) < min(instruction_ys)
        assert max(instruction_ys) < page.height

    def test_scale_reference_is_one_inch(self, layout):
        page = TemplateGenerator(layout).build_page()
        square = next(p for p in page.primitives
                      if p.kind == 'rect' and p.group == 'scale-reference')
        assert square.params['width'] == POINTS_PER_INCH
        assert square.params['height'] == POINTS_PER_INCH

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            TemplatePage('x').line(0, 0, 1, 1, 'no-such-style')


class TestExport:

    def test_svg(self, tmp_path, layout):
        path = tmp_path / "template.svg"
        TemplateGenerator(layout, shelf_number='2').save_svg(path)
        root = ET.parse(path).getroot()
        assert root.get('viewBox') == '0 0 612 792'
        groups = {g.get('id') for g in root.iter(f'{SVG_NS}g')}
        assert {'left-corner', 'right-corner', 'scale-reference', 'measurements'} <= groups
        circles = list(root.iter(f'{SVG_NS}circle'))
        assert len(circles) == 8

    def test_pdf(self, tmp_path, tapered_layout):
        path = tmp_path / "out" / "template.pdf"
        TemplateGenerator(tapered_layout).save_pdf(path)
        data = path.read_bytes()
        assert data.startswith(b"%PDF")
        assert b"Shelf Bracket Drilling Template" in data

    def test_dxf(self, tmp_path, layout):
        path = tmp_path / "template.dxf"
        TemplateGenerator(layout).save_dxf(path)
        doc = ezdxf.readfile(path)
        msp = doc.modelspace()
        assert len(msp.query('CIRCLE')) == 16
        assert len(msp.query('LWPOLYLINE[layer=="BRACKETS"]')) == 4
        assert len(msp.query('LINE[layer=="PIPES"]')) == 2
        assert doc.units == units.IN
