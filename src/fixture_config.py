"""
Configuration management for shelf bracket fixtures.
Handles loading, saving, and validating JSON configuration files, and builds
the validated dimensional model the solver works from.
"""

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Any, Optional

from shelf_units import MM_PER_INCH, to_inches

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2

SPACING_MODES = ('center', 'inner')
DEPTH_POSITIONS = ('front', 'back')

# Canvas padding and minimum size for screen views, in pixels
DISPLAY_DEFAULTS = {
    "padding": 40,
    "min_canvas_width": 600,
    "min_canvas_height": 300,
}


def _require_positive(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ValueError(f"{owner}.{name} must be > 0, got {value}")


def _require_non_negative(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not value >= 0:
            raise ValueError(f"{owner}.{name} must be >= 0, got {value}")


@dataclass(frozen=True)
class ShelfDimensions:
    width: float
    depth: float
    thickness: float

    def __post_init__(self):
        _require_positive('shelf', width=self.width, depth=self.depth,
                          thickness=self.thickness)


@dataclass(frozen=True)
class PipeDimensions:
    diameter: float
    length: float
    overhang: float

    def __post_init__(self):
        _require_positive('pipe', diameter=self.diameter, length=self.length,
                          overhang=self.overhang)

    @property
    def radius(self) -> float:
        return self.diameter / 2


@dataclass(frozen=True)
class HoleInsets:
    """Hole center distance from each bracket edge."""

    left: float
    right: float
    top: float
    bottom: float


@dataclass(frozen=True)
class BracketDimensions:
    width: float
    length: float
    thickness: float
    hole_insets: HoleInsets
    hole_diameter: float
    edge_clearance: float

    def __post_init__(self):
        insets = self.hole_insets
        _require_positive('bracket', width=self.width, length=self.length,
                          thickness=self.thickness, hole_diameter=self.hole_diameter,
                          edge_clearance=self.edge_clearance)
        _require_positive('bracket.hole_insets', left=insets.left, right=insets.right,
                          top=insets.top, bottom=insets.bottom)

        for name, inset, limit in (('left', insets.left, self.width / 2),
                                   ('right', insets.right, self.width / 2),
                                   ('top', insets.top, self.length / 2),
                                   ('bottom', insets.bottom, self.length / 2)):
            if inset >= limit:
                raise ValueError(
                    f"bracket.hole_insets.{name} ({inset}) must be less than "
                    f"half the bracket dimension ({limit})"
                )

        if not math.isclose(insets.left, insets.right, rel_tol=0, abs_tol=1e-9):
            raise ValueError(
                f"bracket.hole_insets left ({insets.left}) and right "
                f"({insets.right}) must match"
            )

    @property
    def hole_offset(self) -> float:
        """Distance from the bracket center to either hole column."""
        return self.width / 2 - self.hole_insets.left


@dataclass(frozen=True)
class FastenerDimensions:
    screw_head_diameter: float
    screw_head_height: float
    nut_across_flats: float
    nut_across_corners: float
    nut_height: float

    def __post_init__(self):
        _require_positive('fastener', screw_head_diameter=self.screw_head_diameter,
                          screw_head_height=self.screw_head_height,
                          nut_across_flats=self.nut_across_flats,
                          nut_across_corners=self.nut_across_corners,
                          nut_height=self.nut_height)
        if self.nut_across_corners < self.nut_across_flats:
            raise ValueError("fastener.nut_across_corners must be >= nut_across_flats")


@dataclass(frozen=True)
class NutClearance:
    """Nut-to-pipe air gap, in inches."""

    target: float
    minimum: float

    def __post_init__(self):
        _require_non_negative('nut_clearance', target=self.target, minimum=self.minimum)


@dataclass(frozen=True)
class FixtureGeometry:
    """Every physical dimension the solver and renderers need, in inches."""

    shelf: ShelfDimensions
    pipe: PipeDimensions
    bracket: BracketDimensions
    fastener: FastenerDimensions
    nut_clearance: NutClearance
    depth_mode: str = 'golden'
    phi: float = GOLDEN_RATIO

    def __post_init__(self):
        if self.depth_mode not in ('golden', 'flush'):
            raise ValueError(f"Unknown layout mode: {self.depth_mode}")
        _require_positive('layout', phi=self.phi)


@dataclass(frozen=True)
class SpacingInput:
    """
    Pipe spacing and nut gap for one query.

    Attributes:
        front: Pipe-to-pipe spacing at the front brackets
        back: Spacing at the back brackets (same as front for parallel pipes)
        nut_clearance: Required nut-to-pipe air gap
        mode: 'center' (center-to-center) or 'inner' (inner edge to inner edge)
    """

    front: float
    nut_clearance: float
    back: Optional[float] = None
    mode: str = 'center'

    def __post_init__(self):
        if self.back is None:
            object.__setattr__(self, 'back', self.front)
        _require_positive('spacing', front=self.front, back=self.back)
        _require_non_negative('spacing', nut_clearance=self.nut_clearance)
        if self.mode not in SPACING_MODES:
            raise ValueError(f"Unknown spacing mode: {self.mode}. Valid modes: {SPACING_MODES}")

    @property
    def is_parallel(self) -> bool:
        return self.front == self.back

    def spacing_for(self, position: str) -> float:
        """Raw spacing at a depth position ('front' or 'back')."""
        if position not in DEPTH_POSITIONS:
            raise ValueError(f"Unknown position: {position}")
        return self.front if position == 'front' else self.back

    def center_to_center(self, position: str, pipe_diameter: float) -> float:
        """Spacing at a depth position converted to center-to-center."""
        spacing = self.spacing_for(position)
        if self.mode == 'inner':
            return spacing + pipe_diameter
        return spacing


class FixtureConfig:
    """Manages fixture configuration data."""

    def __init__(self, config_data: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_data: Configuration dictionary. If None, creates default config.
        """
        if config_data is None:
            self.data = self._create_default_config()
        else:
            self.data = config_data
            self.validate()

    @staticmethod
    def _create_default_config() -> Dict[str, Any]:
        """Create the default configuration (M4 hardware, 30" shelf)."""
        return {
            "config_version": "0000",
            "shelf": {
                "width": 30.0,
                "depth": 12.0,
                "thickness": 1.0
            },
            "pipe": {
                "diameter": 1.0743,
                "length": 13.0,
                "overhang": 0.5  # Pipe extends past the shelf front/back
            },
            "bracket": {
                "width": 38 / MM_PER_INCH,
                "length": 60 / MM_PER_INCH,   # Along the pipe
                "thickness": 1.5 / MM_PER_INCH,
                "holes": {
                    "left": 9 / MM_PER_INCH,
                    "right": 9 / MM_PER_INCH,
                    "top": 9 / MM_PER_INCH,
                    "bottom": 9 / MM_PER_INCH
                },
                "hole_diameter": 4.5 / MM_PER_INCH,
                "hole_clearance": 1 / 16
            },
            "hardware": {
                # M4-0.7 x 8mm ISO 7380 button head cap screw
                "button_screw": {
                    "head_diameter": 7.6 / MM_PER_INCH,
                    "head_height": 2.2 / MM_PER_INCH
                },
                # M4 brass hex cap nut
                "hex_cap_nut": {
                    "across_flats": 4.9 / MM_PER_INCH,
                    "across_corners": 7.9 / MM_PER_INCH,
                    "height": 9.3 / MM_PER_INCH
                },
                "nut_pipe_clearance": {
                    "target": 1 / MM_PER_INCH,
                    "minimum": 1 / MM_PER_INCH
                }
            },
            "layout": {
                "mode": "golden",
                "phi": GOLDEN_RATIO
            },
            "solver": {
                "bounds": "standard",
                "spacing_mode": "center",
                "default_spacing": 28.96875
            },
            "display": dict(DISPLAY_DEFAULTS),
            "colors": {
                "shelf": "#d4a574",
                "shelf_stroke": "#8b6914",
                "pipe": "#6b7b8a",
                "pipe_stroke": "#3d4a54",
                "bracket": "#2d2d2d",
                "bracket_stroke": "#1a1a1a",
                "bracket_hole": "#ffffff",
                "background": "#ffffff",
                "button_screw_head": "#4a4a4a",
                "button_screw_head_stroke": "#2d2d2d",
                "button_screw_socket": "#1a1a1a",
                "hex_nut": "#b8860b",
                "hex_nut_stroke": "#8b6914"
            },
            "precision": 5
        }

    @classmethod
    def from_file(cls, filepath: Path) -> 'FixtureConfig':
        """
        Load configuration from JSON file.

        Args:
            filepath: Path to JSON configuration file

        Returns:
            FixtureConfig instance
        """
        with open(filepath, 'r') as f:
            config_data = json.load(f)
        return cls(config_data)

    def to_file(self, filepath: Path) -> None:
        """
        Save configuration to JSON file.

        Args:
            filepath: Path to save JSON configuration
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(self.data, f, indent=2)

    def validate(self) -> bool:
        """
        Validate configuration data structure.

        Sections that only affect rendering (layout, solver, display, colors)
        fall back to defaults when missing.

        Returns:
            True if valid

        Raises:
            ValueError: If configuration is invalid
        """
        required_keys = ['shelf', 'pipe', 'bracket', 'hardware']
        for key in required_keys:
            if key not in self.data:
                raise ValueError(f"Missing required key: {key}")

        # Older files stored the hole inset as a single value
        if 'hole_center' in self.data['bracket']:
            inset = self.data['bracket'].pop('hole_center')
            self.data['bracket']['holes'] = {
                'left': inset, 'right': inset, 'top': inset, 'bottom': inset
            }

        required_section_keys = {
            'shelf': ['width', 'depth', 'thickness'],
            'pipe': ['diameter', 'length', 'overhang'],
            'bracket': ['width', 'length', 'thickness', 'holes', 'hole_diameter',
                        'hole_clearance'],
            'hardware': ['button_screw', 'hex_cap_nut', 'nut_pipe_clearance'],
        }
        for section, keys in required_section_keys.items():
            for key in keys:
                if key not in self.data[section]:
                    raise ValueError(f"Missing required {section} key: {key}")

        required_nested_keys = {
            ('bracket', 'holes'): ['left', 'right', 'top', 'bottom'],
            ('hardware', 'button_screw'): ['head_diameter', 'head_height'],
            ('hardware', 'hex_cap_nut'): ['across_flats', 'across_corners', 'height'],
            ('hardware', 'nut_pipe_clearance'): ['target', 'minimum'],
        }
        for (section, part), keys in required_nested_keys.items():
            for key in keys:
                if key not in self.data[section][part]:
                    raise ValueError(f"Missing required {section}.{part} key: {key}")

        defaults = self._create_default_config()
        for key in ['config_version', 'layout', 'solver', 'display', 'colors', 'precision']:
            self.data.setdefault(key, defaults[key])

        if self.data['solver'].get('spacing_mode', 'center') not in SPACING_MODES:
            raise ValueError(f"Unknown spacing mode: {self.data['solver']['spacing_mode']}")

        return True

    def geometry(self) -> FixtureGeometry:
        """
        Build the validated dimensional model.

        Raises:
            ValueError: If any dimension violates the fixture invariants
        """
        b = self.bracket
        hw = self.hardware
        holes = b['holes']
        layout = self.layout
        return FixtureGeometry(
            shelf=ShelfDimensions(**{k: self.shelf[k] for k in ('width', 'depth', 'thickness')}),
            pipe=PipeDimensions(**{k: self.pipe[k] for k in ('diameter', 'length', 'overhang')}),
            bracket=BracketDimensions(
                width=b['width'],
                length=b['length'],
                thickness=b['thickness'],
                hole_insets=HoleInsets(holes['left'], holes['right'],
                                       holes['top'], holes['bottom']),
                hole_diameter=b['hole_diameter'],
                edge_clearance=b['hole_clearance'],
            ),
            fastener=FastenerDimensions(
                screw_head_diameter=hw['button_screw']['head_diameter'],
                screw_head_height=hw['button_screw']['head_height'],
                nut_across_flats=hw['hex_cap_nut']['across_flats'],
                nut_across_corners=hw['hex_cap_nut']['across_corners'],
                nut_height=hw['hex_cap_nut']['height'],
            ),
            nut_clearance=NutClearance(
                target=hw['nut_pipe_clearance']['target'],
                minimum=hw['nut_pipe_clearance']['minimum'],
            ),
            depth_mode=layout.get('mode', 'golden'),
            phi=layout.get('phi', GOLDEN_RATIO),
        )

    def default_spacing(self, front: Optional[float] = None,
                        back: Optional[float] = None,
                        nut_clearance_mm: Optional[float] = None) -> SpacingInput:
        """
        Build a SpacingInput from the configured defaults.

        Args:
            front: Front spacing override in inches
            back: Back spacing override (defaults to front)
            nut_clearance_mm: Required nut gap override in millimetres
        """
        front = self.solver.get('default_spacing', 28.96875) if front is None else front
        if nut_clearance_mm is None:
            nut_clearance = self.hardware['nut_pipe_clearance']['target']
        else:
            nut_clearance = to_inches(nut_clearance_mm)
        return SpacingInput(front=front, back=back, nut_clearance=nut_clearance,
                            mode=self.solver.get('spacing_mode', 'center'))

    def bound_names(self) -> List[str]:
        """Name of the configured lower-bound policy, or an explicit list of bounds."""
        bounds = self.solver.get('bounds', 'standard')
        return [bounds] if isinstance(bounds, str) else list(bounds)

    @property
    def shelf(self) -> Dict[str, float]:
        """Get shelf dimensions."""
        return self.data['shelf']

    @property
    def pipe(self) -> Dict[str, float]:
        """Get pipe dimensions."""
        return self.data['pipe']

    @property
    def bracket(self) -> Dict[str, Any]:
        """Get bracket dimensions."""
        return self.data['bracket']

    @property
    def hardware(self) -> Dict[str, Any]:
        """Get fastener dimensions."""
        return self.data['hardware']

    @property
    def layout(self) -> Dict[str, Any]:
        return self.data.get('layout', {})

    @property
    def solver(self) -> Dict[str, Any]:
        return self.data.get('solver', {})

    @property
    def display(self) -> Dict[str, float]:
        return self.data.get('display', self._create_default_config()['display'])

    @property
    def colors(self) -> Dict[str, str]:
        return self.data.get('colors', self._create_default_config()['colors'])

    @property
    def version(self) -> str:
        """Get configuration version."""
        return self.data['config_version']

    @version.setter
    def version(self, value: str) -> None:
        """Set configuration version."""
        self.data['config_version'] = value

    def get_next_version_number(self, config_dir: Path) -> str:
        """
        Get the next sequential version number based on existing configs.

        Args:
            config_dir: Directory containing config files

        Returns:
            Next version number as 4-digit string (e.g., "0001")
        """
        if not config_dir.exists():
            return "0000"

        existing_configs = list(config_dir.glob("fixture_*.json"))
        if not existing_configs:
            return "0000"

        max_version = -1
        for config_path in existing_configs:
            try:
                version_str = config_path.stem.split('_')[1]
                version_num = int(version_str)
                max_version = max(max_version, version_num)
            except (IndexError, ValueError):
                continue

        return f"{max_version + 1:04d}"
