#!/usr/bin/env python3
"""
Sample Set player for the lobby server.

Usage:
    python sample_bot.py --name alice --room R1 --url ws://127.0.0.1:3001/
    # Host a room: pick the game type and deal the first board
    python sample_bot.py --name alice --room R1 --host-game

The bot joins the room, waits for `updateGame` broadcasts and, whenever the
board holds a set, submits the first one it finds after a short delay.
Replace `choose_selection` with your own strategy.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import websockets

from setgame.cards import cards_to_labels, parse_cards
from setgame.evaluator import find_sets

LOGGER = logging.getLogger("sample_bot")
STREAM_HANDLER = logging.StreamHandler()
STREAM_HANDLER.setFormatter(logging.Formatter("%(message)s"))
if not LOGGER.handlers:
    LOGGER.addHandler(STREAM_HANDLER)
LOGGER.propagate = False


def choose_selection(board: List[str]) -> Optional[List[str]]:
    """Return three card ids forming a set, or None when the board has none."""
    sets = find_sets(parse_cards(board))
    if not sets:
        return None
    return cards_to_labels(sets[0])


async def play_room(websocket: Any, room: str, think_time: float) -> None:
    """Listen for room broadcasts and answer every new board with a set."""

    async for raw in websocket:
        message: Dict[str, Any] = json.loads(raw)
        msg_type = message.get("type")

        if msg_type == "users":
            standings = ", ".join(f"{user['name']}={user['points']}" for user in message.get("users", []))
            LOGGER.info("[users] %s", standings or "--")
            continue

        if msg_type == "setGameType":
            LOGGER.info("[game type] %s", message.get("gameType"))
            continue

        if msg_type == "updateGame":
            state = message.get("gameState") or {}
            board = state.get("board") or []
            LOGGER.info("[board] sets=%s cards=%s", state.get("numberOfSets"), " ".join(board))
            selection = choose_selection(board)
            if selection is None:
                if not board:
                    LOGGER.info("[done] board is empty")
                    break
                LOGGER.info("[stuck] no set on the board")
                continue
            await asyncio.sleep(think_time)
            await websocket.send(json.dumps({"type": "verifySet", "roomName": room, "selected": selection}))
            continue

        if msg_type == "error":
            LOGGER.warning("[error] %s: %s", message.get("code"), message.get("msg"))
            continue

        LOGGER.debug("Ignoring message type=%s", msg_type)


async def run_bot(name: str, room: str, url: str, host_game: bool = False, think_time: float = 1.0) -> None:
    async with websockets.connect(url) as ws:
        await ws.send(json.dumps({"type": "joinRoom", "roomName": room, "username": name}))
        LOGGER.info("[connect] %s as %s in room %s", url, name, room)
        if host_game:
            await ws.send(json.dumps({"type": "setGameType", "roomName": room, "gameType": "set"}))
            await ws.send(json.dumps({"type": "startGame", "roomName": room}))
        await play_room(ws, room, think_time)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sample Set bot client")
    parser.add_argument("--name", required=True, help="Display name shown to the room")
    parser.add_argument("--room", required=True, help="Room to join (created on first join)")
    parser.add_argument("--url", default="ws://127.0.0.1:3001/", help="WebSocket URL")
    parser.add_argument("--host-game", action="store_true", help="Choose the game type and start the round")
    parser.add_argument("--think-time", type=float, default=1.0, help="Seconds to wait before submitting")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    LOGGER.setLevel(getattr(logging, args.log_level.upper(), logging.INFO))
    asyncio.run(run_bot(args.name, args.room, args.url, host_game=args.host_game, think_time=args.think_time))


if __name__ == "__main__":
    main()
