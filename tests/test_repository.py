"""Tests for player repositories."""

import json
from pathlib import Path

from eloranker.models import Player
from eloranker.repository import InMemoryPlayerRepository, JsonFilePlayerRepository


class TestInMemoryPlayerRepository:
    """Tests for InMemoryPlayerRepository."""

    def test_save_and_find(self) -> None:
        """Test a saved player can be found by id."""
        repository = InMemoryPlayerRepository()
        repository.save(Player(id="alice", rating=1200))
        assert repository.find_by_id("alice") == Player(id="alice", rating=1200)
        assert repository.find_by_id("bob") is None

    def test_save_replaces_and_keeps_order(self) -> None:
        """Test saving an existing id updates it in place."""
        repository = InMemoryPlayerRepository()
        repository.save(Player(id="alice", rating=1200))
        repository.save(Player(id="bob", rating=1200))
        repository.save(Player(id="alice", rating=1216))

        assert repository.list_all() == [
            Player(id="alice", rating=1216),
            Player(id="bob", rating=1200),
        ]
        assert repository.count() == 2


class TestJsonFilePlayerRepository:
    """Tests for JsonFilePlayerRepository."""

    def test_save_writes_file(self, tmp_path: Path) -> None:
        """Test players are written to the JSON file."""
        path = tmp_path / "players.json"
        repository = JsonFilePlayerRepository(path)

        repository.save(Player(id="alice", rating=1216))
        repository.save(Player(id="bob", rating=1184))

        assert json.loads(path.read_text()) == {"alice": 1216, "bob": 1184}

    def test_loads_existing_file(self, tmp_path: Path) -> None:
        """Test players are loaded back from an existing file."""
        path = tmp_path / "players.json"
        path.write_text(json.dumps({"alice": 1216, "bob": 1184}))

        repository = JsonFilePlayerRepository(path)

        assert repository.count() == 2
        assert repository.find_by_id("bob") == Player(id="bob", rating=1184)

    def test_missing_file_starts_empty(self, tmp_path: Path) -> None:
        """Test a missing file gives an empty repository."""
        repository = JsonFilePlayerRepository(tmp_path / "missing.json")
        assert repository.list_all() == []
