"""
eloranker error hierarchy

All errors raised by the ranking core inherit from RankerError. They are
deterministic input failures, never transient, and are mapped to HTTP
status codes at the API boundary.

Usage:
    from eloranker.errors import DuplicatePlayerError

    try:
        store.create_player("alice")
    except DuplicatePlayerError as e:
        logger.warning(f"Rejected: {e.message}")
"""

from typing import Any

__all__ = [
    "DuplicatePlayerError",
    "InvalidInputError",
    "NotFoundError",
    "PlayerNotFoundError",
    "RankerError",
]


class RankerError(Exception):
    """Base exception for all eloranker errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "RANKER_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class DuplicatePlayerError(RankerError):
    """A player with the requested id is already registered."""
    code: str = "DUPLICATE_PLAYER"
    status_code: int = 409

    def __init__(self, player_id: str):
        super().__init__(
            f'Player "{player_id}" already exists',
            context={"player_id": player_id},
        )
        self.player_id = player_id


class PlayerNotFoundError(RankerError):
    """A match referenced players that are not registered.

    Attributes:
        missing: Ids that could not be found, in request order
    """
    code: str = "PLAYER_NOT_FOUND"
    status_code: int = 422

    def __init__(self, missing: list[str]):
        super().__init__(
            "One of the given players does not exist",
            context={"missing": ",".join(missing)},
        )
        self.missing = missing


class InvalidInputError(RankerError):
    """Malformed input such as a blank player id."""
    code: str = "INVALID_INPUT"
    status_code: int = 400


class NotFoundError(RankerError):
    """A requested resource, such as a player or the ranking, does not exist."""
    code: str = "NOT_FOUND"
    status_code: int = 404
