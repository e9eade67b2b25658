from __future__ import annotations

import itertools
from typing import List, Sequence, Tuple

from .cards import ALPHABETS, Card

SET_SIZE = 3


def is_valid_set(cards: Sequence[Card]) -> bool:
    """Return True when every attribute is all-same or all-different across three cards."""
    if len(cards) != SET_SIZE:
        raise ValueError(f"A set needs exactly {SET_SIZE} cards, got {len(cards)}")
    if len(set(cards)) != SET_SIZE:
        return False
    for values in zip(*(card.values for card in cards)):
        # Two distinct values out of three is the only losing shape.
        if len(set(values)) == 2:
            return False
    return True


def complete_set(first: Card, second: Card) -> Card:
    """Return the only card that forms a set with ``first`` and ``second``."""
    if first == second:
        raise ValueError("Cards must be distinct")
    values = []
    for alphabet, a, b in zip(ALPHABETS, first.values, second.values):
        if a == b:
            values.append(a)
        else:
            values.append(next(value for value in alphabet if value not in (a, b)))
    return Card(*values)


def find_sets(board: Sequence[Card]) -> List[Tuple[Card, Card, Card]]:
    return [combo for combo in itertools.combinations(board, SET_SIZE) if is_valid_set(combo)]
