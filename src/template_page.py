"""
Printable page model shared by the drilling template and calibration sheet.

A page is a list of drawing primitives in output points (72 per inch, y
down). The same list is written to SVG with svgwrite and to PDF with
matplotlib, so both files carry identical coordinates.
"""

from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
import svgwrite

from shelf_projection import LETTER_PAGE, POINTS_PER_INCH

SANS = 'sans-serif'
MONO = 'monospace'

STYLES: Dict[str, Dict[str, Any]] = {
    # Drilling template
    'bracket': {'stroke': '#444', 'stroke_width': 1},
    'drill-hole': {'stroke': '#000', 'stroke_width': 1.5},
    'crosshair': {'stroke': '#000', 'stroke_width': 0.75},
    'scale-box': {'stroke': '#000', 'stroke_width': 1.5},
    'dimension-line': {'stroke': '#666', 'stroke_width': 0.75},
    'corner-mark': {'stroke': '#000', 'stroke_width': 3},
    'title': {'fill': '#333', 'font_size': 14, 'font_weight': 'bold'},
    'label': {'fill': '#333', 'font_size': 11, 'font_weight': 'bold'},
    'dimension-text': {'fill': '#333', 'font_size': 9},
    'info-text': {'fill': '#555', 'font_size': 8},
    'warning-text': {'fill': '#c62828', 'font_size': 9, 'font_weight': 'bold'},
    # Calibration sheet
    'calibration-title': {'fill': '#333', 'font_size': 16, 'font_weight': 'bold'},
    'calibration-subtitle': {'fill': '#444', 'font_size': 10},
    'calibration-block': {'stroke': '#bbb', 'stroke_width': 1},
    'calibration-block-label': {'fill': '#000', 'font_size': 12, 'font_weight': 'bold'},
    'calibration-bracket': {'stroke': '#222', 'stroke_width': 1},
    'calibration-crosshair': {'stroke': '#000', 'stroke_width': 0.65},
    'calibration-crosshair-zero': {'stroke': '#d32f2f', 'stroke_width': 1.2},
    'calibration-instruction': {'fill': '#333', 'font_size': 9},
    'calibration-legend-label': {'fill': '#222', 'font_size': 10, 'font_weight': 'bold'},
    'calibration-legend-text': {'fill': '#333', 'font_size': 10, 'font_family': MONO},
    'notes-table': {'stroke': '#000', 'stroke_width': 1},
    'notes-text': {'fill': '#333', 'font_size': 9},
}

_ANCHORS = {'start': 'left', 'middle': 'center', 'end': 'right'}


class Primitive(NamedTuple):
    kind: str
    params: Dict[str, float]
    css_class: str
    group: Optional[str] = None
    text: str = ''
    anchor: str = 'middle'


class TemplatePage:
    """One printable page of primitives."""

    def __init__(self, title: str, width: float = LETTER_PAGE[0] * POINTS_PER_INCH,
                 height: float = LETTER_PAGE[1] * POINTS_PER_INCH):
        self.title = title
        self.width = width
        self.height = height
        self.primitives: List[Primitive] = []
        self._group: Optional[str] = None

    def group(self, name: Optional[str]) -> 'TemplatePage':
        """Tag the primitives added next (SVG <g id=...>)."""
        self._group = name
        return self

    def _add(self, kind: str, css_class: str, text: str = '', anchor: str = 'middle',
             **params: float) -> None:
        if css_class not in STYLES:
            raise ValueError(f"Unknown style class: {css_class}")
        params = {key: float(value) for key, value in params.items()}
        self.primitives.append(Primitive(kind, params, css_class, self._group, text, anchor))

    def line(self, x1, y1, x2, y2, css_class: str) -> None:
        self._add('line', css_class, x1=x1, y1=y1, x2=x2, y2=y2)

    def circle(self, cx, cy, r, css_class: str) -> None:
        self._add('circle', css_class, cx=cx, cy=cy, r=r)

    def rect(self, x, y, width, height, css_class: str) -> None:
        self._add('rect', css_class, x=x, y=y, width=width, height=height)

    def text(self, x, y, text: str, css_class: str, anchor: str = 'middle') -> None:
        self._add('text', css_class, text=text, anchor=anchor, x=x, y=y)

    def crosshair(self, cx, cy, half_length, css_class: str) -> None:
        self.line(cx - half_length, cy, cx + half_length, cy, css_class)
        self.line(cx, cy - half_length, cx, cy + half_length, css_class)

    def scale_reference(self, x, y, css_class: str = 'scale-box',
                        caption: str = '1" x 1" (verify scale)',
                        caption_class: str = 'info-text') -> None:
        """One-inch square for checking print scale."""
        size = POINTS_PER_INCH
        self.group('scale-reference')
        self.rect(x, y, size, size, css_class)
        self.text(x + size / 2, y + size + 12, caption, caption_class)
        self.group(None)

    def texts(self) -> List[str]:
        return [p.text for p in self.primitives if p.kind == 'text']

    # ---- SVG ----

    def to_svg(self) -> svgwrite.Drawing:
        """Build an svgwrite drawing with a 1 point = 1 unit viewBox."""
        dwg = svgwrite.Drawing(size=(f'{self.width:g}pt', f'{self.height:g}pt'),
                               viewBox=f'0 0 {self.width:g} {self.height:g}')
        dwg.add(dwg.rect(insert=(0, 0), size=(self.width, self.height), fill='white'))

        containers: Dict[str, Any] = {}
        for primitive in self.primitives:
            parent = dwg
            if primitive.group is not None:
                if primitive.group not in containers:
                    containers[primitive.group] = dwg.add(dwg.g(id=primitive.group))
                parent = containers[primitive.group]
            parent.add(self._svg_element(dwg, primitive))
        return dwg

    def _svg_element(self, dwg: svgwrite.Drawing, primitive: Primitive):
        style = STYLES[primitive.css_class]
        p = primitive.params

        if primitive.kind == 'text':
            return dwg.text(primitive.text, insert=(p['x'], p['y']),
                            class_=primitive.css_class,
                            text_anchor=primitive.anchor,
                            font_family=style.get('font_family', SANS),
                            font_size=style['font_size'],
                            font_weight=style.get('font_weight', 'normal'),
                            fill=style['fill'])

        stroke = {'class_': primitive.css_class, 'stroke': style['stroke'],
                  'stroke_width': style['stroke_width'], 'fill': 'none'}
        if primitive.kind == 'line':
            return dwg.line(start=(p['x1'], p['y1']), end=(p['x2'], p['y2']), **stroke)
        if primitive.kind == 'circle':
            return dwg.circle(center=(p['cx'], p['cy']), r=p['r'], **stroke)
        return dwg.rect(insert=(p['x'], p['y']), size=(p['width'], p['height']), **stroke)

    def svg_string(self) -> str:
        return self.to_svg().tostring()

    def save_svg(self, filepath: Path) -> None:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        self.to_svg().saveas(str(filepath), pretty=True)

    # ---- PDF ----

    def draw(self, fig: plt.Figure) -> None:
        """Draw onto a figure sized to the page, axes spanning it in points."""
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.axis('off')

        for primitive in self.primitives:
            style = STYLES[primitive.css_class]
            p = primitive.params
            if primitive.kind == 'text':
                ax.text(p['x'], p['y'], primitive.text,
                        ha=_ANCHORS[primitive.anchor], va='baseline',
                        fontsize=style['font_size'],
                        fontweight=style.get('font_weight', 'normal'),
                        family=style.get('font_family', SANS),
                        color=style['fill'])
            elif primitive.kind == 'line':
                ax.plot([p['x1'], p['x2']], [p['y1'], p['y2']], color=style['stroke'],
                        linewidth=style['stroke_width'], solid_capstyle='butt')
            elif primitive.kind == 'circle':
                ax.add_patch(plt.Circle((p['cx'], p['cy']), p['r'], fill=False,
                                        edgecolor=style['stroke'],
                                        linewidth=style['stroke_width']))
            else:
                ax.add_patch(plt.Rectangle((p['x'], p['y']), p['width'], p['height'],
                                           fill=False, edgecolor=style['stroke'],
                                           linewidth=style['stroke_width']))


def save_pdf(pages: Sequence[TemplatePage], filepath: Path, title: str,
             subject: str = 'Print at 100% scale - do not fit to page') -> None:
    """
    Write pages to a PDF at true scale.

    Args:
        pages: Pages to write, in order
        filepath: Output path
        title: Document title metadata
        subject: Document subject metadata
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    metadata = {'Title': title, 'Subject': subject, 'Creator': 'shelf-bracket-layout'}
    with PdfPages(filepath, metadata=metadata) as pdf:
        for page in pages:
            fig = plt.figure(figsize=(page.width / POINTS_PER_INCH,
                                      page.height / POINTS_PER_INCH))
            page.draw(fig)
            # No bbox_inches='tight': cropping would change the print scale
            pdf.savefig(fig)
            plt.close(fig)
