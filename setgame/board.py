from __future__ import annotations

from typing import Iterable, List, Tuple

from .cards import Card, deal
from .models import GameState

# Board replenishment only refills to the window size; it does not try to
# guarantee that the refilled board holds a set.

BOARD_SIZE = 12


def initial_board(deck: List[Card], board_size: int = BOARD_SIZE) -> Tuple[List[Card], List[Card]]:
    remaining = list(deck)
    board = deal(remaining, min(board_size, len(remaining)))
    return board, remaining


def remove_cards(board: List[Card], removed: Iterable[Card]) -> List[Card]:
    remaining = list(board)
    for card in removed:
        if card not in remaining:
            raise ValueError(f"Card {card.label} is not on the board")
        remaining.remove(card)
    return remaining


def update_board(
    deck: List[Card],
    board: List[Card],
    number_of_sets: int,
    removed: Iterable[Card] = (),
    board_size: int = BOARD_SIZE,
) -> GameState:
    new_board = remove_cards(board, removed)
    new_deck = list(deck)
    while len(new_board) < board_size and new_deck:
        new_board.extend(deal(new_deck, 1))
    return GameState(deck=new_deck, board=new_board, number_of_sets=number_of_sets)
