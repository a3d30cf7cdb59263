"""HTTP client for the eloranker API."""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from .models import MatchHistory, MatchResult, Player, RankingUpdate


logger = logging.getLogger("eloranker:client")

ROOT = "http://localhost:3001"


class RankerClient:
    """Client for interacting with an eloranker server."""

    def __init__(self, root: str = ROOT):
        """Initialize the client.

        Args:
            root: Base URL of the server
        """
        self.root = root.rstrip("/")

    async def _request(
        self,
        method: str,
        path: str,
        data: Any = None,
    ) -> Any:
        """Make an HTTP request."""
        async with httpx.AsyncClient() as client:
            response = await client.request(
                method=method.upper(),
                url=f"{self.root}{path}",
                json=data,
            )
            response.raise_for_status()
            return response.json()

    async def create_player(self, id: str) -> Player:
        """Register a player."""
        result = await self._request("post", "/api/player", data={"id": id})
        return Player.model_validate(result)

    async def get_player(self, id: str) -> Player:
        """Get a player by ID."""
        result = await self._request("get", f"/api/player/{id}")
        return Player.model_validate(result)

    async def get_ranking(self) -> list[Player]:
        """Get the current ranking, highest first."""
        result = await self._request("get", "/api/ranking")
        return [Player.model_validate(item) for item in result]

    async def report_match(
        self,
        winner: str,
        loser: str,
        draw: bool = False,
    ) -> MatchResult:
        """Report a match result."""
        result = await self._request(
            "post",
            "/api/match",
            data={"winner": winner, "loser": loser, "draw": draw},
        )
        return MatchResult.model_validate(result)

    async def get_match_history(self) -> MatchHistory:
        """Get all processed matches."""
        result = await self._request("get", "/api/match")
        return MatchHistory.model_validate(result)

    async def ranking_updates(self) -> AsyncIterator[RankingUpdate]:
        """Yield ranking updates from the server-sent event stream.

        Runs until the server closes the stream or the caller stops iterating.
        """
        timeout = httpx.Timeout(10.0, read=None)
        async with httpx.AsyncClient(timeout=timeout) as client:
            async with client.stream("GET", f"{self.root}/api/ranking/events") as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    payload = json.loads(line[len("data:"):].strip())
                    logger.debug(f"Ranking update: {payload}")
                    yield RankingUpdate.model_validate(payload)
