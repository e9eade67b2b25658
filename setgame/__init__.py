"""Set card engine and room state machine shared by the lobby server and bots."""

from .board import initial_board, update_board
from .cards import Card, build_deck, deal, parse_cards, parse_label
from .errors import InvalidSelectionError, RoomError, RoomNotFoundError, UserNotFoundError
from .evaluator import complete_set, find_sets, is_valid_set
from .models import Event, GameConfig, GameState, Phase, Room, User
from .registry import RoomRegistry

__all__ = [
    "Card",
    "build_deck",
    "deal",
    "parse_cards",
    "parse_label",
    "is_valid_set",
    "complete_set",
    "find_sets",
    "initial_board",
    "update_board",
    "RoomRegistry",
    "RoomError",
    "RoomNotFoundError",
    "UserNotFoundError",
    "InvalidSelectionError",
    "Event",
    "GameConfig",
    "GameState",
    "Phase",
    "Room",
    "User",
]
