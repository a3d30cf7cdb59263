"""eloranker server entry point."""

import logging

import uvicorn

from .api import create_app
from .broadcaster import Broadcaster
from .config import Settings, load_settings
from .repository import InMemoryPlayerRepository, JsonFilePlayerRepository, PlayerRepository
from .store import RankingStore


logger = logging.getLogger("eloranker:main")


def build_repository(settings: Settings) -> PlayerRepository:
    """Pick the player repository the settings ask for."""
    if settings.store_path is None:
        return InMemoryPlayerRepository()
    logger.info(f"Persisting players to {settings.store_path}")
    return JsonFilePlayerRepository(settings.store_path)


def run() -> None:
    """Main entry point."""
    settings = load_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level,
        format='%(name)s: %(message)s'
    )

    store = RankingStore(build_repository(settings), Broadcaster())
    app = create_app(store, settings)

    logger.info(f"Serving on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
