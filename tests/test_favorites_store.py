"""Tests for favorites_store module."""
import json

import pytest

from favorites_store import FavoritesStore
from fixture_config import SpacingInput
from shelf_units import to_inches


@pytest.fixture
def store(tmp_path):
    return FavoritesStore(tmp_path / "favorites.json")


def test_empty_store(store):
    assert store.get_all() == []
    assert store.table_rows() == []


def test_save_and_load(store, spacing):
    entry = store.save(spacing, shelf_number='4')
    assert entry['shelf_number'] == '4'
    assert len(store.get_all()) == 1
    assert store.load(entry['id']) == spacing


def test_entries_keep_order(store):
    first = store.save(SpacingInput(front=28.0, nut_clearance=0.04))
    second = store.save(SpacingInput(front=29.0, nut_clearance=0.04))
    assert [e['id'] for e in store.get_all()] == [first['id'], second['id']]
    assert first['id'] != second['id']


def test_load_tapered(store):
    spacing = SpacingInput(front=28.0, back=28.5, nut_clearance=0.05, mode='inner')
    entry = store.save(spacing)
    assert store.load(entry['id']) == spacing


def test_load_missing(store):
    assert store.load('nope') is None


def test_delete(store, spacing):
    entry = store.save(spacing)
    assert store.delete(entry['id'])
    assert store.get_all() == []
    assert not store.delete(entry['id'])


def test_table_rows(store):
    store.save(SpacingInput(front=28.96875, nut_clearance=to_inches(1.5)))
    store.save(SpacingInput(front=28.0, back=28.25, nut_clearance=to_inches(1.0)), '7')
    rows = store.table_rows()
    assert rows[0]['shelf'] == '-'
    assert rows[0]['distance'] == '28.96875'
    assert rows[0]['gap_mm'] == '1.5'
    assert rows[1]['shelf'] == '7'
    assert rows[1]['distance'] == '28.00000 / 28.25000'


def test_file_is_json(store, spacing):
    store.save(spacing)
    data = json.loads(store.path.read_text())
    assert set(data[0]) == {'id', 'shelf_number', 'pipe_distance', 'pipe_distance_back',
                            'spacing_mode', 'nut_clearance', 'created_at'}


def test_rejects_non_list(store):
    store.path.write_text(json.dumps({'id': 'x'}))
    with pytest.raises(ValueError):
        store.get_all()
