"""Ranking store: players, match log and rating updates."""

import logging
import threading
from datetime import datetime, timezone

from .broadcaster import Broadcaster
from .elo import EloRank
from .errors import DuplicatePlayerError, InvalidInputError, PlayerNotFoundError
from .models import MatchRecord, MatchResult, Player
from .repository import InMemoryPlayerRepository, PlayerRepository


logger = logging.getLogger("eloranker:store")


class RankingStore:
    """Applies Elo results to the player table and announces every change."""

    def __init__(
        self,
        repository: PlayerRepository | None = None,
        broadcaster: Broadcaster | None = None,
        elo: EloRank | None = None,
    ):
        """Initialize the store.

        Args:
            repository: Player storage (default: in-memory)
            broadcaster: Where rating changes are published
            elo: Rating system (default: K=32)
        """
        self.repository = repository if repository is not None else InMemoryPlayerRepository()
        self.broadcaster = broadcaster if broadcaster is not None else Broadcaster()
        self.elo = elo if elo is not None else EloRank()
        self._lock = threading.Lock()
        self._matches: list[MatchRecord] = []

    def create_player(self, id: str) -> Player:
        """Register a new player at the mean rating of existing players.

        Args:
            id: Unique player id

        Returns:
            The new player

        Raises:
            InvalidInputError: If id is blank
            DuplicatePlayerError: If id is already registered
        """
        if not isinstance(id, str) or not id.strip():
            raise InvalidInputError("Player id must be a non-empty string")

        with self._lock:
            if self.repository.find_by_id(id) is not None:
                logger.warning(f"Rejected duplicate player {id}")
                raise DuplicatePlayerError(id)

            ratings = [player.rating for player in self.repository.list_all()]
            player = Player(id=id, rating=self.elo.initial_rating(ratings))
            self.repository.save(player)

        logger.info(f"Created player {player.id} with rating {player.rating}")
        return player

    def get_player(self, id: str) -> Player | None:
        return self.repository.find_by_id(id)

    def list_players(self) -> list[Player]:
        """All players by rating, highest first. Equal ratings keep registration order."""
        return sorted(
            self.repository.list_all(),
            key=lambda player: player.rating,
            reverse=True,
        )

    def player_count(self) -> int:
        return self.repository.count()

    def process_match(
        self,
        winner_id: str,
        loser_id: str,
        is_draw: bool = False,
    ) -> MatchResult:
        """Record a match and update both ratings.

        Both expected scores are taken from the ratings before the match.
        Nothing is changed unless both players exist.

        Args:
            winner_id: Winning player (or first player on a draw)
            loser_id: Losing player (or second player on a draw)
            is_draw: Whether the match was drawn

        Returns:
            Both players with their new ratings

        Raises:
            PlayerNotFoundError: If either player is not registered
            InvalidInputError: If a player is matched against themselves
        """
        with self._lock:
            winner = self.repository.find_by_id(winner_id)
            loser = self.repository.find_by_id(loser_id)
            if winner is None or loser is None:
                missing = list(dict.fromkeys(
                    id for id, player in ((winner_id, winner), (loser_id, loser))
                    if player is None
                ))
                logger.warning(f"Rejected match {winner_id} vs {loser_id}: unknown {missing}")
                raise PlayerNotFoundError(missing)

            if winner_id == loser_id:
                logger.warning(f"Rejected match of {winner_id} against themselves")
                raise InvalidInputError(
                    "A player cannot play against themselves",
                    context={"player_id": winner_id},
                )

            winner_actual = 0.5 if is_draw else 1
            loser_actual = 0.5 if is_draw else 0

            winner_expected = self.elo.get_expected(winner.rating, loser.rating)
            loser_expected = self.elo.get_expected(loser.rating, winner.rating)

            updated_winner = winner.model_copy(update={
                "rating": self.elo.update_rating(winner.rating, winner_expected, winner_actual),
            })
            updated_loser = loser.model_copy(update={
                "rating": self.elo.update_rating(loser.rating, loser_expected, loser_actual),
            })

            self.repository.save(updated_winner)
            self.repository.save(updated_loser)
            self._matches.append(MatchRecord(
                winner_id=winner_id,
                loser_id=loser_id,
                is_draw=is_draw,
                timestamp=datetime.now(timezone.utc),
            ))

            logger.info(
                f"Match {winner_id} {'drew' if is_draw else 'beat'} {loser_id}: "
                f"{winner.rating}->{updated_winner.rating}, "
                f"{loser.rating}->{updated_loser.rating}"
            )
            # subscribers see matches in the order they were applied
            self.broadcaster.publish(updated_winner)
            self.broadcaster.publish(updated_loser)

        return MatchResult(winner=updated_winner, loser=updated_loser)

    def match_history(self) -> list[MatchRecord]:
        """Copy of the match log, oldest first."""
        with self._lock:
            return list(self._matches)

    def match_count(self) -> int:
        return len(self._matches)
