"""
eloranker HTTP API - FastAPI Application
Player registration, match reporting, ranking and live ranking events
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from .config import Settings
from .errors import NotFoundError, RankerError
from .models import (
    CreateMatchRequest,
    CreatePlayerRequest,
    MatchHistory,
    MatchResult,
    Player,
)
from .store import RankingStore


logger = logging.getLogger("eloranker:api")

VERSION = "1.0.0"


async def ranking_event_stream(
    store: RankingStore,
    keepalive_seconds: float | None = None,
) -> AsyncIterator[str]:
    """Yield server-sent event frames for ranking updates.

    The subscription is opened when iteration starts and removed from
    the broadcaster when the generator is closed, which happens when the
    client disconnects. The stream ends if the broadcaster closes it.

    Args:
        store: Store whose broadcaster publishes the updates
        keepalive_seconds: Idle time before a keep-alive comment is sent
    """
    subscription = store.broadcaster.subscribe()
    try:
        while True:
            event = await subscription.next_event(keepalive_seconds)
            if subscription.closed:
                return
            if event is None:
                yield ": keep-alive\n\n"
                continue
            yield f"data: {event.model_dump_json()}\n\n"
    finally:
        store.broadcaster.unsubscribe(subscription)


def create_app(
    store: RankingStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the FastAPI application around a ranking store.

    Args:
        store: Ranking store to serve (default: fresh in-memory store)
        settings: Server settings (default: built-in defaults)

    Returns:
        Configured FastAPI app, with the store available as app.state.store
    """
    store = store if store is not None else RankingStore()
    settings = settings if settings is not None else Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # end open event streams
        store.broadcaster.close()

    app = FastAPI(
        title="eloranker",
        description="Elo player ranking with live updates",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RankerError)
    async def ranker_error_handler(request: Request, exc: RankerError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"detail": {
                "code": "INVALID_INPUT",
                "message": "Request body is invalid",
                "context": {"errors": jsonable_errors(exc)},
            }},
        )

    @app.get("/")
    async def root():
        """Service info"""
        return {
            "name": "eloranker",
            "version": VERSION,
            "endpoints": {
                "player": {
                    "POST /api/player": "Register a new player",
                    "GET /api/player/{id}": "Get a player",
                },
                "match": {
                    "POST /api/match": "Report a match result",
                    "GET /api/match": "Match history",
                },
                "ranking": {
                    "GET /api/ranking": "Current ranking",
                    "GET /api/ranking/events": "Server-sent ranking updates",
                },
            },
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    @app.post("/api/player", response_model=Player)
    async def create_player(request: CreatePlayerRequest):
        return store.create_player(request.id)

    @app.get("/api/player/{player_id}", response_model=Player)
    async def get_player(player_id: str):
        player = store.get_player(player_id)
        if player is None:
            raise NotFoundError(
                f'Player "{player_id}" not found',
                context={"player_id": player_id},
            )
        return player

    @app.get("/api/ranking", response_model=list[Player])
    async def get_ranking():
        """Ranking, highest rating first. 404 while nobody is registered."""
        players = store.list_players()
        if not players:
            raise NotFoundError("No ranking available because no player exists")
        store.broadcaster.update_cache(players)
        return players

    @app.get("/api/ranking/events")
    async def ranking_events():
        return StreamingResponse(
            ranking_event_stream(store, settings.keepalive_seconds),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache"},
        )

    @app.post("/api/match", response_model=MatchResult)
    async def create_match(request: CreateMatchRequest):
        return store.process_match(request.winner, request.loser, request.draw)

    @app.get("/api/match", response_model=MatchHistory)
    async def match_history():
        matches = store.match_history()
        return MatchHistory(count=len(matches), matches=matches)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Reduce validation errors to location and message."""
    return [
        {
            "loc": ".".join(str(part) for part in error.get("loc", ())),
            "msg": str(error.get("msg", "")),
        }
        for error in exc.errors()
    ]
