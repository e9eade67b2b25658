from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional, Sequence

from .board import initial_board, update_board
from .cards import Card, build_deck, parse_label
from .errors import InvalidSelectionError, RoomNotFoundError, UserNotFoundError
from .evaluator import SET_SIZE, is_valid_set
from .models import Event, GameConfig, GameState, Phase, Room, Selection, User

LOGGER = logging.getLogger("set_lobby")

# RoomRegistry owns every room and applies transitions synchronously. No
# sockets live here; callers broadcast the returned events themselves.


@dataclass
class _RoomLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class RoomRegistry:
    """Authoritative state for every Set room in the process."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.rooms: Dict[str, Room] = {}
        self._locks: Dict[str, _RoomLock] = {}

    # Serialization ---------------------------------------------------

    @contextlib.asynccontextmanager
    async def transaction(self, room_name: str) -> AsyncIterator[None]:
        """Hold the room's lock so transitions and their broadcasts stay ordered."""
        slot = self._locks.get(room_name)
        if slot is None:
            slot = self._locks[room_name] = _RoomLock()
        slot.holders += 1
        try:
            async with slot.lock:
                yield
        finally:
            slot.holders -= 1
            if slot.holders == 0 and room_name not in self.rooms:
                self._locks.pop(room_name, None)

    # Lookups ---------------------------------------------------------

    def get_room(self, room_name: str) -> Room:
        room = self.rooms.get(room_name)
        if room is None:
            raise RoomNotFoundError(f"Room {room_name!r} does not exist")
        return room

    def _get_user(self, room: Room, user_id: str) -> User:
        user = room.users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id!r} is not in room {room.name!r}")
        return user

    def room_names(self) -> List[str]:
        return list(self.rooms)

    def members(self, room_name: str) -> List[str]:
        room = self.rooms.get(room_name)
        return list(room.users) if room else []

    def phase(self, room_name: str) -> Phase:
        room = self.rooms.get(room_name)
        return room.phase if room else Phase.EMPTY

    def users_payload(self, room: Room) -> Dict[str, object]:
        return {"users": [user.public() for user in room.users.values()]}

    def game_state_payload(self, state: GameState) -> Dict[str, object]:
        return {"gameState": state.public(expose_deck=self.config.expose_deck)}

    # Transitions -----------------------------------------------------

    def join(self, room_name: str, user_id: str, name: str) -> List[Event]:
        room = self.rooms.get(room_name)
        if room is None:
            room = self.rooms[room_name] = Room(name=room_name)
            LOGGER.info("Room %s created", room_name)

        existing = room.users.get(user_id)
        if existing is not None and not self.config.rejoin_resets_points:
            existing.name = name
        else:
            room.users[user_id] = User(user_id=user_id, name=name)
        LOGGER.info("User %s joined room %s as %s", user_id, room_name, name)
        return [Event("users", self.users_payload(room))]

    def leave(self, room_name: str, user_id: str) -> List[Event]:
        room = self.get_room(room_name)
        if room.users.pop(user_id, None) is None:
            return []
        LOGGER.info("User %s left room %s", user_id, room_name)
        if not room.users:
            del self.rooms[room_name]
            LOGGER.info("Room %s is empty; dropped", room_name)
            return []
        return [Event("users", self.users_payload(room))]

    def set_game_type(self, room_name: str, game_type: str) -> List[Event]:
        room = self.get_room(room_name)
        if room.game_state is not None:
            return []
        room.game_type = game_type
        return [Event("setGameType", {"gameType": game_type})]

    def start_game(self, room_name: str) -> List[Event]:
        room = self.get_room(room_name)
        if room.game_state is not None:
            return []
        deck = build_deck(self.config.seed)
        board, remaining = initial_board(deck, self.config.board_size)
        room.game_state = GameState(deck=remaining, board=board, number_of_sets=0)
        LOGGER.info("Game started in room %s with %s players", room_name, len(room.users))
        return [Event("updateGame", self.game_state_payload(room.game_state))]

    def verify_selection(self, room_name: str, user_id: str, selected: Sequence[str]) -> List[Event]:
        room = self.get_room(room_name)
        user = self._get_user(room, user_id)
        state = room.game_state
        if state is None:
            return []

        cards = self._resolve_selection(state, selected)
        valid = is_valid_set(cards)
        state.previous_selection = Selection(user=user.name, valid=valid, cards=cards)
        if not valid:
            user.points -= 1
            LOGGER.debug("Room %s: %s missed with %s", room_name, user.name, list(selected))
            # A miss leaves the board alone, so the selection rides on the users update.
            payload = self.users_payload(room)
            payload["previousSelection"] = state.previous_selection.public()
            return [Event("users", payload)]

        new_state = update_board(
            state.deck,
            state.board,
            state.number_of_sets + 1,
            removed=cards,
            board_size=self.config.board_size,
        )
        new_state.previous_selection = state.previous_selection
        room.game_state = new_state
        user.points += 1
        LOGGER.debug(
            "Room %s: %s found set %s (sets=%s, deck=%s)",
            room_name,
            user.name,
            list(selected),
            new_state.number_of_sets,
            len(new_state.deck),
        )
        return [
            Event("updateGame", self.game_state_payload(new_state)),
            Event("users", self.users_payload(room)),
        ]

    def _resolve_selection(self, state: GameState, selected: Sequence[str]) -> List[Card]:
        if len(selected) != SET_SIZE:
            raise InvalidSelectionError(f"Select exactly {SET_SIZE} cards")
        if len(set(selected)) != len(selected):
            raise InvalidSelectionError("Selection contains duplicate cards")
        cards: List[Card] = []
        for label in selected:
            try:
                card = parse_label(label)
            except ValueError as exc:
                raise InvalidSelectionError(str(exc)) from exc
            if card not in state.board:
                raise InvalidSelectionError(f"Card {label} is not on the board")
            cards.append(card)
        return cards
