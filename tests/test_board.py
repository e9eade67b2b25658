import pytest

from setgame.board import BOARD_SIZE, initial_board, remove_cards, update_board
from setgame.cards import DECK_SIZE, build_deck


def test_initial_board_draws_window_from_front_of_deck():
    deck = build_deck(3)
    board, remaining = initial_board(deck)
    assert board == deck[:BOARD_SIZE]
    assert remaining == deck[BOARD_SIZE:]
    assert len(deck) == DECK_SIZE  # input untouched


def test_initial_board_honours_custom_size():
    board, remaining = initial_board(build_deck(3), board_size=15)
    assert len(board) == 15
    assert len(remaining) == DECK_SIZE - 15


def test_update_board_refills_removed_cards_in_deck_order():
    board, deck = initial_board(build_deck(8))
    removed = [board[0], board[5], board[11]]
    state = update_board(deck, board, 3, removed=removed)

    assert len(state.board) == BOARD_SIZE
    assert state.board[:9] == [card for card in board if card not in removed]
    assert state.board[9:] == deck[:3]
    assert state.deck == deck[3:]
    assert state.number_of_sets == 3
    assert not set(removed) & set(state.board)


def test_update_board_without_removals_is_a_no_op():
    board, deck = initial_board(build_deck(8))
    state = update_board(deck, board, 4)
    assert state.board == board
    assert state.deck == deck
    assert state.number_of_sets == 4


def test_update_board_seeds_a_round_from_an_empty_board():
    deck = build_deck(8)
    state = update_board(deck, [], 0)
    assert state.board == deck[:BOARD_SIZE]
    assert len(state.deck) == DECK_SIZE - BOARD_SIZE
    assert state.number_of_sets == 0


def test_board_shrinks_once_deck_is_exhausted():
    board, deck = initial_board(build_deck(8))
    state = update_board(deck[:1], board, 10, removed=board[:3])
    assert len(state.board) == BOARD_SIZE - 2
    assert state.deck == []


def test_board_and_deck_account_for_every_undiscarded_card():
    board, deck = initial_board(build_deck(12))
    discarded = 0
    while len(board) >= 3:
        state = update_board(deck, board, 0, removed=board[:3])
        discarded += 3
        board, deck = state.board, state.deck
        assert len(board) + len(deck) == DECK_SIZE - discarded
        assert len(board) == min(BOARD_SIZE, DECK_SIZE - discarded)


def test_removing_card_not_on_board_raises():
    deck = build_deck(8)
    board, remaining = initial_board(deck)
    with pytest.raises(ValueError, match="not on the board"):
        remove_cards(board, [remaining[0]])
    with pytest.raises(ValueError, match="not on the board"):
        update_board(remaining, board, 1, removed=[remaining[0]])
