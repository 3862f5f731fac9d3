import json
import logging
import sqlite3
from fastapi import APIRouter, WebSocket
from starlette.concurrency import run_in_threadpool
from realtime import ConnectionRegistry
from routes.deps import sync_from_claims

logger = logging.getLogger(__name__)

router = APIRouter()

AUTH_ERROR = {"type": "auth_error"}

def identity_from_auth_message(strategy, message: dict):
    """Resolve {"type": "auth", "token": ...} (or a claimed identity in fallback mode)."""
    claimed = message.get("identity") or message.get("userId")
    if isinstance(claimed, dict):
        claimed = claimed.get("id") or claimed.get("userId")
    return strategy.authenticate(token=message.get("token"), claimed_user_id=claimed)

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    registry: ConnectionRegistry = websocket.app.state.registry
    strategy = websocket.app.state.identity
    await registry.connect(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            raw = frame.get("text")
            if raw is None:
                logger.debug("Ignoring binary socket frame")
                continue
            try:
                message = json.loads(raw)
            except ValueError:
                logger.debug("Ignoring non-JSON socket message")
                continue
            if not isinstance(message, dict) or message.get("type") != "auth":
                continue
            # Token checks may hit the network for signing keys
            identity = await run_in_threadpool(identity_from_auth_message, strategy, message)
            if identity is None:
                await registry.send(websocket, AUTH_ERROR)
                continue
            try:
                await run_in_threadpool(sync_from_claims, identity)
            except sqlite3.IntegrityError:
                logger.warning("Socket auth for %s refused: email belongs to another account", identity.user_id)
                await registry.send(websocket, AUTH_ERROR)
                continue
            await registry.authenticate(websocket, identity)
    finally:
        registry.disconnect(websocket)
