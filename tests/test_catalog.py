from __future__ import annotations

import json

import pytest
from conftest import make_game

from patch_tracker.errors import StoreFailure
from patch_tracker.storage.catalog import DEFAULT_CATALOG, CatalogStore


def test_missing_file_seeds_and_persists_default_catalog(tmp_path):
    path = tmp_path / "data" / "games.json"
    store = CatalogStore(path)

    games = store.load()

    assert [g.name for g in games] == ["Fortnite", "Valorant", "Rust", "Apex Legends"]
    assert [g.has_placeholder_version for g in games] == [True, False, True, False]
    assert path.exists()

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk[1] == {
        "name": "Valorant",
        "accentColor": "red",
        "version": "11.10",
        "lastUpdated": "November 11, 2025",
        "description": DEFAULT_CATALOG[1].description,
        "sources": [{"name": "playvalorant.com", "url": "https://playvalorant.com/en-us/news/"}],
    }


def test_save_replaces_whole_catalog_pretty_printed(tmp_path):
    path = tmp_path / "games.json"
    store = CatalogStore(path)
    store.load()

    store.save([make_game("Rust", "2.0")])

    assert [g.name for g in store.load()] == ["Rust"]
    assert path.read_text(encoding="utf-8").startswith('[\n  {\n    "name": "Rust"')
    assert not (tmp_path / "games.json.tmp").exists()


def test_load_preserves_order_and_extra_sources(tmp_path):
    path = tmp_path / "games.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "B",
                    "accentColor": "red",
                    "version": "1.0",
                    "lastUpdated": "x",
                    "description": "y",
                    "sources": [{"name": "one", "url": "https://one"}, {"name": "two", "url": "https://two"}],
                },
                {"name": "A", "accentColor": "", "version": "Pending", "lastUpdated": "", "description": "", "sources": []},
            ]
        ),
        encoding="utf-8",
    )

    games = CatalogStore(path).load()

    assert [g.name for g in games] == ["B", "A"]
    assert len(games[0].sources) == 2
    assert games[0].source_url == "https://one"
    assert games[1].source_url == ""


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"name": "Rust"}),
        json.dumps([{"version": "1.0"}]),
        json.dumps([{"name": "Rust"}, {"name": "Rust"}]),
    ],
)
def test_unreadable_catalog_is_a_store_failure(tmp_path, content):
    path = tmp_path / "games.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(StoreFailure):
        CatalogStore(path).load()

    # never silently replaced by defaults
    assert path.read_text(encoding="utf-8") == content


def test_save_failure_is_a_store_failure(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(StoreFailure):
        CatalogStore(blocker / "games.json").save([make_game("Rust")])
