"""In-process registry of live WebSocket connections.

Each connection moves CONNECTED -> AUTHENTICATED -> CLOSED and owns a bounded
outbox drained by its own writer task. Broadcasting only enqueues, in one pass
on the event loop, so every socket sees events in the same order and a slow or
stalled socket never holds up the caller or the other sockets.
"""
import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder

from auth import Identity

logger = logging.getLogger(__name__)

CONNECTED = "connected"
AUTHENTICATED = "authenticated"
CLOSED = "closed"

SEND_TIMEOUT_SECONDS = 5.0
OUTBOX_SIZE = 100


class Connection:
    def __init__(self, websocket, outbox_size: int = OUTBOX_SIZE):
        self.websocket = websocket
        self.identity: Optional[Identity] = None
        self.state = CONNECTED
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self.writer: Optional[asyncio.Task] = None

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.user_id if self.identity else None

    def discard_pending(self):
        while not self.outbox.empty():
            self.outbox.get_nowait()
            self.outbox.task_done()


class ConnectionRegistry:
    def __init__(self, send_timeout: float = SEND_TIMEOUT_SECONDS, outbox_size: int = OUTBOX_SIZE):
        self.send_timeout = send_timeout
        self.outbox_size = outbox_size
        self._connections: Dict[Any, Connection] = {}

    def __len__(self):
        return len(self._connections)

    def __contains__(self, websocket):
        return websocket in self._connections

    def get(self, websocket) -> Optional[Connection]:
        return self._connections.get(websocket)

    async def connect(self, websocket) -> Connection:
        await websocket.accept()
        return self.register(websocket)

    def register(self, websocket) -> Connection:
        """Track a socket and start its writer. Must be called on the event loop."""
        connection = Connection(websocket, self.outbox_size)
        connection.writer = asyncio.create_task(self._write_loop(connection))
        self._connections[websocket] = connection
        logger.debug("Connection registered (%d open)", len(self._connections))
        return connection

    async def authenticate(self, websocket, identity: Identity) -> bool:
        connection = self._connections.get(websocket)
        if connection is None:
            return False
        connection.identity = identity
        connection.state = AUTHENTICATED
        logger.debug("Connection authenticated as %s", identity.user_id)
        self._enqueue(connection, json.dumps({"type": "auth_success"}))
        return True

    async def send(self, websocket, event: dict) -> bool:
        """Queue an event for a single socket."""
        connection = self._connections.get(websocket)
        if connection is None:
            return False
        return self._enqueue(connection, json.dumps(jsonable_encoder(event)))

    def disconnect(self, websocket):
        connection = self._connections.pop(websocket, None)
        if connection is None:
            return
        connection.state = CLOSED
        if connection.writer is not None and connection.writer is not asyncio.current_task():
            connection.writer.cancel()
        connection.discard_pending()
        logger.debug("Connection closed (%d open)", len(self._connections))

    async def broadcast(self, event: dict):
        """Queue one event for every registered connection, authenticated or not.

        Serialized once and never waits on a socket write. A connection whose
        outbox is full is dropped; nothing is raised to the caller.
        """
        try:
            data = json.dumps(jsonable_encoder(event))
        except (TypeError, ValueError):
            logger.exception("Could not serialize %s event", event.get("type"))
            return
        for connection in list(self._connections.values()):
            self._enqueue(connection, data)

    async def drain(self):
        """Wait until every queued event has been written or discarded."""
        await asyncio.gather(*(c.outbox.join() for c in list(self._connections.values())))

    def _enqueue(self, connection: Connection, data: str) -> bool:
        try:
            connection.outbox.put_nowait(data)
            return True
        except asyncio.QueueFull:
            logger.warning("Dropping connection %s: outbox full", connection.user_id or "<anonymous>")
            self.disconnect(connection.websocket)
            return False

    async def _write_loop(self, connection: Connection):
        while True:
            data = await connection.outbox.get()
            try:
                await asyncio.wait_for(connection.websocket.send_text(data), self.send_timeout)
            except asyncio.TimeoutError:
                logger.warning("Dropping connection %s: write timed out", connection.user_id or "<anonymous>")
                break
            except Exception as exc:
                logger.warning("Dropping connection %s after failed write: %s", connection.user_id or "<anonymous>", exc)
                break
            finally:
                connection.outbox.task_done()
        self.disconnect(connection.websocket)


def chat_message_event(message: dict) -> dict:
    return {"type": "chat_message", "message": message}
