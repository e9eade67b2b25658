from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .cards import Card, cards_to_labels


class Phase(str, Enum):
    EMPTY = "EMPTY"
    HAS_USERS = "HAS_USERS"
    TYPE_CHOSEN = "TYPE_CHOSEN"
    IN_ROUND = "IN_ROUND"


@dataclass
class GameConfig:
    board_size: int = 12
    expose_deck: bool = True
    # Re-joining a room starts the player over at zero points.
    rejoin_resets_points: bool = True
    seed: Optional[int] = None


@dataclass
class User:
    user_id: str
    name: str
    points: int = 0

    def public(self) -> Dict[str, object]:
        return {"name": self.name, "points": self.points}


@dataclass(frozen=True)
class Selection:
    user: str
    valid: bool
    cards: List[Card]

    def public(self) -> Dict[str, object]:
        return {"user": self.user, "valid": self.valid, "selection": cards_to_labels(self.cards)}


@dataclass
class GameState:
    deck: List[Card]
    board: List[Card]
    number_of_sets: int = 0
    previous_selection: Optional[Selection] = None

    def public(self, expose_deck: bool = True) -> Dict[str, object]:
        return {
            "deck": cards_to_labels(self.deck) if expose_deck else len(self.deck),
            "board": cards_to_labels(self.board),
            "numberOfSets": self.number_of_sets,
            "previousSelection": self.previous_selection.public() if self.previous_selection else None,
        }


@dataclass
class Room:
    name: str
    game_type: Optional[str] = None
    users: Dict[str, User] = field(default_factory=dict)
    game_state: Optional[GameState] = None

    @property
    def phase(self) -> Phase:
        if self.game_state is not None:
            return Phase.IN_ROUND
        if self.game_type is not None:
            return Phase.TYPE_CHOSEN
        if self.users:
            return Phase.HAS_USERS
        return Phase.EMPTY


@dataclass
class Event:
    ev: str
    data: Dict[str, object] = field(default_factory=dict)
