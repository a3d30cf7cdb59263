"""Player persistence for eloranker."""

import json
import logging
from pathlib import Path
from typing import Protocol

from .models import Player


logger = logging.getLogger("eloranker:repository")


class PlayerRepository(Protocol):
    """Storage the ranking store reads and writes players through."""

    def find_by_id(self, id: str) -> Player | None: ...

    def save(self, player: Player) -> Player: ...

    def list_all(self) -> list[Player]: ...

    def count(self) -> int: ...


class InMemoryPlayerRepository:
    """Players kept in a dict, in registration order."""

    def __init__(self, players: list[Player] | None = None):
        self._players: dict[str, Player] = {}
        for player in players or []:
            self._players[player.id] = player

    def find_by_id(self, id: str) -> Player | None:
        return self._players.get(id)

    def save(self, player: Player) -> Player:
        self._players[player.id] = player
        return player

    def list_all(self) -> list[Player]:
        return list(self._players.values())

    def count(self) -> int:
        return len(self._players)


class JsonFilePlayerRepository(InMemoryPlayerRepository):
    """In-memory players mirrored to a JSON file.

    The file maps player id to rating and is rewritten on every save.
    """

    def __init__(self, path: Path):
        """Load players from path if it exists.

        Args:
            path: JSON file holding {"id": rating, ...}
        """
        self.path = Path(path)
        players: list[Player] = []
        if self.path.exists():
            data = json.loads(self.path.read_text())
            players = [Player(id=id, rating=rating) for id, rating in data.items()]
            logger.info(f"Loaded {len(players)} players from {self.path}")
        super().__init__(players)

    def save(self, player: Player) -> Player:
        super().save(player)
        self._write()
        return player

    def _write(self) -> None:
        data = {player.id: player.rating for player in self.list_all()}
        self.path.write_text(json.dumps(data, indent=2))
