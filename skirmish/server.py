"""FastAPI application exposing the arena over websockets."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
import uuid
from typing import AsyncIterator, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from starlette.websockets import WebSocketState

from .config import GameConfig
from .game.state import GameState
from .protocol import MalformedCommand, clean_name, decode_message, init_message, state_message

logger = logging.getLogger(__name__)

SEND_ERRORS = (RuntimeError, OSError, WebSocketDisconnect)


def now_ms() -> float:
    return time.time() * 1000.0


def create_app(config: Optional[GameConfig] = None, seed: Optional[int] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    game = GameState(config or GameConfig.from_env(), seed=seed)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        tasks = [
            asyncio.create_task(_simulation_loop(app)),
            asyncio.create_task(_broadcast_loop(app)),
        ]
        logger.info(
            "arena running at %d ticks/s, broadcasting at %d Hz",
            game.config.tick_rate,
            game.config.broadcast_rate,
        )
        try:
            yield
        finally:
            for task in tasks:
                task.cancel()
            for task in tasks:
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(title="Skirmish", description="Authoritative top-down arena shooter", lifespan=lifespan)
    app.state.game = game
    app.state.connections: Dict[str, WebSocket] = {}

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        """Readiness probe reporting live entity counts."""

        return JSONResponse({"status": "ok", "players": len(game.registry), "bullets": len(game.projectiles)})

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket, name: Optional[str] = None) -> None:
        await websocket.accept()
        session_id = uuid.uuid4().hex
        game.connect(session_id, clean_name(name))
        try:
            await websocket.send_json(init_message(session_id))
            app.state.connections[session_id] = websocket
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    break
                raw = frame.get("text")
                if raw is None:
                    raw = (frame.get("bytes") or b"").decode("utf-8", "replace")
                try:
                    message = decode_message(raw)
                except MalformedCommand as exc:
                    logger.warning("dropping command from %s: %s (payload=%r)", session_id, exc, raw[:200])
                    continue
                game.submit(session_id, message, now_ms())
        except WebSocketDisconnect:
            pass
        finally:
            await _disconnect(app, session_id)

    return app


async def _simulation_loop(app: FastAPI) -> None:
    game: GameState = app.state.game
    interval = game.config.tick_seconds
    while True:
        started = time.monotonic()
        try:
            for event in game.tick(now_ms()):
                logger.debug("tick %d: %s", game.tick_count, event)
        except Exception:
            logger.exception("tick %d failed", game.tick_count)
        await asyncio.sleep(max(0.0, interval - (time.monotonic() - started)))


async def _broadcast_loop(app: FastAPI) -> None:
    game: GameState = app.state.game
    interval = game.config.broadcast_seconds
    while True:
        await asyncio.sleep(interval)
        if app.state.connections:
            await _broadcast(app, state_message(game.snapshot(now_ms())))


async def _broadcast(app: FastAPI, message: dict) -> None:
    stale = []
    for session_id, websocket in list(app.state.connections.items()):
        try:
            await websocket.send_json(message)
        except SEND_ERRORS:
            stale.append(session_id)
    for session_id in stale:
        await _disconnect(app, session_id)


async def _disconnect(app: FastAPI, session_id: str) -> None:
    websocket = app.state.connections.pop(session_id, None)
    app.state.game.disconnect(session_id)
    if websocket is None:
        return
    if websocket.client_state == WebSocketState.CONNECTED and websocket.application_state == WebSocketState.CONNECTED:
        with contextlib.suppress(*SEND_ERRORS):
            await websocket.close()


app = create_app()


__all__ = ["app", "create_app"]
