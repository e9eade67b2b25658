from __future__ import annotations

import asyncio
import itertools
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Set

import websockets
from websockets.asyncio.server import ServerConnection, serve

from setgame.errors import RoomError
from setgame.models import Event
from setgame.registry import RoomRegistry

LOGGER = logging.getLogger("set_lobby")

# LobbyServer glues the room registry to WebSocket clients.
# Every network concern lives here; the registry stays socket-free.
# Outbound messages are queued per session under the room lock and written
# by one writer task per session; nothing awaits a socket while a lock is held.


@dataclass
class ClientSession:
    user_id: str
    websocket: ServerConnection
    rooms: Set[str] = field(default_factory=set)
    outbox: Deque[str] = field(default_factory=deque)
    writer: Optional[asyncio.Task] = None


class LobbyServer:
    def __init__(self, registry: RoomRegistry) -> None:
        self.registry = registry
        self.sessions: Dict[str, ClientSession] = {}
        self._ids = itertools.count(1)

    async def start(self, host: str = "0.0.0.0", port: int = 3001) -> None:
        async with serve(self._handle_connection, host, port):
            LOGGER.info("Lobby server listening on %s:%s", host, port)
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        session = self.open_session(websocket)
        LOGGER.info("Connection %s opened", session.user_id)
        try:
            async for raw in websocket:
                await self.handle_message(session, self._decode(raw))
        except websockets.ConnectionClosed:
            pass
        finally:
            await self.close_session(session)
        LOGGER.info("Connection %s closed", session.user_id)

    def open_session(self, websocket: Any) -> ClientSession:
        session = ClientSession(user_id=f"u-{next(self._ids)}", websocket=websocket)
        self.sessions[session.user_id] = session
        return session

    async def close_session(self, session: ClientSession) -> None:
        self.sessions.pop(session.user_id, None)
        for room_name in sorted(session.rooms):
            async with self.registry.transaction(room_name):
                try:
                    events = self.registry.leave(room_name, session.user_id)
                except RoomError:
                    continue
                self._broadcast_events(room_name, events)
        session.rooms.clear()
        session.outbox.clear()
        if session.writer is not None and not session.writer.done():
            session.writer.cancel()

    async def handle_message(self, session: ClientSession, message: Dict[str, object]) -> None:
        if not message:
            self._send_error(session, code="BAD_SCHEMA", msg="Expected a JSON object")
            return
        msg_type = message.get("type")
        if not isinstance(msg_type, str):
            self._send_error(session, code="BAD_SCHEMA", msg="type required")
            return
        handler = {
            "joinRoom": self._handle_join,
            "setGameType": self._handle_set_game_type,
            "startGame": self._handle_start_game,
            "verifySet": self._handle_verify_set,
            "leaveRoom": self._handle_leave,
        }.get(msg_type)
        if handler is None:
            self._send_error(session, code="UNKNOWN_TYPE", msg="Unsupported message type")
            return

        room_name = message.get("roomName")
        if not isinstance(room_name, str) or not room_name.strip():
            self._send_error(session, code="BAD_SCHEMA", msg="roomName required")
            return

        try:
            await handler(session, room_name.strip(), message)
        except RoomError as exc:
            LOGGER.warning(
                "Rejected %s from %s in room %s: %s",
                msg_type,
                session.user_id,
                room_name,
                exc.msg,
            )
            self._send_error(session, code=exc.code, msg=exc.msg)

    async def _handle_join(self, session: ClientSession, room_name: str, message: Dict[str, object]) -> None:
        username = message.get("username")
        if not isinstance(username, str) or not username.strip():
            self._send_error(session, code="BAD_SCHEMA", msg="username required")
            return
        async with self.registry.transaction(room_name):
            events = self.registry.join(room_name, session.user_id, username.strip())
            session.rooms.add(room_name)
            self._broadcast_events(room_name, events)

    async def _handle_leave(self, session: ClientSession, room_name: str, message: Dict[str, object]) -> None:
        async with self.registry.transaction(room_name):
            events = self.registry.leave(room_name, session.user_id)
            session.rooms.discard(room_name)
            self._broadcast_events(room_name, events)

    async def _handle_set_game_type(self, session: ClientSession, room_name: str, message: Dict[str, object]) -> None:
        game_type = message.get("gameType")
        if not isinstance(game_type, str) or not game_type:
            self._send_error(session, code="BAD_SCHEMA", msg="gameType required")
            return
        async with self.registry.transaction(room_name):
            events = self.registry.set_game_type(room_name, game_type)
            self._broadcast_events(room_name, events)

    async def _handle_start_game(self, session: ClientSession, room_name: str, message: Dict[str, object]) -> None:
        async with self.registry.transaction(room_name):
            events = self.registry.start_game(room_name)
            self._broadcast_events(room_name, events)

    async def _handle_verify_set(self, session: ClientSession, room_name: str, message: Dict[str, object]) -> None:
        selected = message.get("selected")
        if not isinstance(selected, list) or not all(isinstance(label, str) for label in selected):
            self._send_error(session, code="BAD_SCHEMA", msg="selected must be a list of card ids")
            return
        async with self.registry.transaction(room_name):
            events = self.registry.verify_selection(room_name, session.user_id, selected)
            self._broadcast_events(room_name, events)

    def _broadcast_events(self, room_name: str, events: List[Event]) -> None:
        for event in events:
            self._broadcast(room_name, event.ev, event.data)

    def _broadcast(self, room_name: str, msg_type: str, payload: Dict[str, object]) -> None:
        targets = [
            self.sessions[user_id]
            for user_id in self.registry.members(room_name)
            if user_id in self.sessions
        ]
        if not targets:
            return
        message = self._envelope(msg_type, payload)
        for session in targets:
            self._enqueue(session, message)

    def _send_json(self, session: ClientSession, msg_type: str, payload: Dict[str, object]) -> None:
        self._enqueue(session, self._envelope(msg_type, payload))

    def _send_error(self, session: ClientSession, code: str, msg: str) -> None:
        self._send_json(session, "error", {"code": code, "msg": msg})

    def _enqueue(self, session: ClientSession, message: str) -> None:
        session.outbox.append(message)
        if session.writer is None or session.writer.done():
            session.writer = asyncio.create_task(self._drain(session))

    async def _drain(self, session: ClientSession) -> None:
        while session.outbox:
            message = session.outbox.popleft()
            try:
                await session.websocket.send(message)
            except websockets.ConnectionClosed:
                session.outbox.clear()
                return

    async def flush(self) -> None:
        """Wait until every queued outbound message has been written."""
        writers = [
            session.writer
            for session in list(self.sessions.values())
            if session.writer is not None and not session.writer.done()
        ]
        if writers:
            await asyncio.gather(*writers, return_exceptions=True)

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)

    def _decode(self, raw: Any) -> Dict[str, object]:
        try:
            message = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            return {}
        return message if isinstance(message, dict) else {}
