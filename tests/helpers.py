from __future__ import annotations

import itertools
from typing import Iterable, List, Optional, Sequence, Tuple

from setgame.cards import Card, build_deck, cards_to_labels
from setgame.evaluator import complete_set, find_sets, is_valid_set
from setgame.models import GameConfig
from setgame.registry import RoomRegistry


def create_registry(players: Iterable[str] = ("alice", "bob"), room: str = "R1", **config) -> RoomRegistry:
    """Instantiate a registry with one room populated by ``players`` (user ids == names)."""
    registry = RoomRegistry(GameConfig(**config))
    for name in players:
        registry.join(room, name, name)
    return registry


def stacked_deck(top: Sequence[Card], seed: int = 7) -> List[Card]:
    """Full deck with ``top`` dealt first and the rest in seeded order."""
    rest = [card for card in build_deck(seed) if card not in top]
    return list(top) + rest


def deck_with_set_on_top(seed: int = 7) -> Tuple[List[Card], Tuple[Card, Card, Card]]:
    shuffled = build_deck(seed)
    first, second = shuffled[0], shuffled[1]
    triple = (first, second, complete_set(first, second))
    return stacked_deck(triple, seed), triple


def disjoint_sets(count: int, seed: int = 7) -> List[Tuple[Card, Card, Card]]:
    """Return ``count`` sets that share no card."""
    used: List[Card] = []
    sets: List[Tuple[Card, Card, Card]] = []
    for first, second in itertools.combinations(build_deck(seed), 2):
        if len(sets) == count:
            break
        third = complete_set(first, second)
        if any(card in used for card in (first, second, third)):
            continue
        sets.append((first, second, third))
        used.extend((first, second, third))
    return sets


def use_deck(monkeypatch, deck: List[Card]) -> None:
    monkeypatch.setattr("setgame.registry.build_deck", lambda seed=None: list(deck))


def board_labels(registry: RoomRegistry, room: str = "R1") -> List[str]:
    state = registry.get_room(room).game_state
    assert state is not None
    return cards_to_labels(state.board)


def first_set_labels(registry: RoomRegistry, room: str = "R1") -> Optional[List[str]]:
    state = registry.get_room(room).game_state
    assert state is not None
    sets = find_sets(state.board)
    return cards_to_labels(sets[0]) if sets else None


def first_miss_labels(registry: RoomRegistry, room: str = "R1") -> List[str]:
    state = registry.get_room(room).game_state
    assert state is not None
    for combo in itertools.combinations(state.board, 3):
        if not is_valid_set(combo):
            return cards_to_labels(combo)
    raise AssertionError("Board has no invalid triple")
