"""
Saved pipe spacings, kept in a JSON file.
"""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fixture_config import SpacingInput
from shelf_units import to_mm

DEFAULT_FAVORITES_FILE = Path('favorites.json')


class FavoritesStore:
    """List of saved spacing entries backed by a JSON file."""

    def __init__(self, path: Path = DEFAULT_FAVORITES_FILE):
        self.path = Path(path)

    def get_all(self) -> List[Dict[str, Any]]:
        """All saved entries, oldest first (empty when the file does not exist)."""
        if not self.path.exists():
            return []
        with open(self.path, 'r') as f:
            entries = json.load(f)
        if not isinstance(entries, list):
            raise ValueError(f"Favorites file must hold a list: {self.path}")
        return entries

    def _write(self, entries: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(entries, f, indent=2)

    def save(self, spacing: SpacingInput, shelf_number: str = '') -> Dict[str, Any]:
        """
        Append an entry for a spacing.

        Args:
            spacing: Spacing input to store
            shelf_number: Optional shelf label

        Returns:
            The stored entry
        """
        entry = {
            'id': str(uuid.uuid4()),
            'shelf_number': shelf_number or '',
            'pipe_distance': spacing.front,
            'pipe_distance_back': spacing.back,
            'spacing_mode': spacing.mode,
            'nut_clearance': spacing.nut_clearance,
            'created_at': datetime.now(timezone.utc).isoformat(),
        }
        entries = self.get_all()
        entries.append(entry)
        self._write(entries)
        return entry

    def delete(self, entry_id: str) -> bool:
        """Remove an entry. Returns False when no entry has that id."""
        entries = self.get_all()
        kept = [entry for entry in entries if entry['id'] != entry_id]
        if len(kept) == len(entries):
            return False
        self._write(kept)
        return True

    def find(self, entry_id: str) -> Optional[Dict[str, Any]]:
        for entry in self.get_all():
            if entry['id'] == entry_id:
                return entry
        return None

    def load(self, entry_id: str) -> Optional[SpacingInput]:
        """
        Rebuild the spacing input of a saved entry.

        Returns:
            SpacingInput, or None when no entry has that id
        """
        entry = self.find(entry_id)
        if entry is None:
            return None
        return SpacingInput(
            front=entry['pipe_distance'],
            back=entry.get('pipe_distance_back'),
            nut_clearance=entry['nut_clearance'],
            mode=entry.get('spacing_mode', 'center'),
        )

    def table_rows(self) -> List[Dict[str, str]]:
        """Display rows: shelf, distance to 5 places, nut gap in mm to 1 place."""
        rows = []
        for entry in self.get_all():
            distance = f"{entry['pipe_distance']:.5f}"
            back = entry.get('pipe_distance_back')
            if back is not None and back != entry['pipe_distance']:
                distance = f"{distance} / {back:.5f}"
            rows.append({
                'id': entry['id'],
                'shelf': entry.get('shelf_number') or '-',
                'distance': distance,
                'gap_mm': f"{to_mm(entry['nut_clearance']):.1f}",
            })
        return rows
