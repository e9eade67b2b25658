from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

NUMBERS = (1, 2, 3)
COLORS = ("red", "green", "purple")
SHAPES = ("oval", "squiggle", "diamond")
SHADINGS = ("solid", "striped", "open")

ALPHABETS = (NUMBERS, COLORS, SHAPES, SHADINGS)
DECK_SIZE = 81


@dataclass(frozen=True)
class Card:
    number: int
    color: str
    shape: str
    shading: str

    def __post_init__(self) -> None:
        if self.number not in NUMBERS:
            raise ValueError(f"Invalid number: {self.number}")
        if self.color not in COLORS:
            raise ValueError(f"Invalid color: {self.color}")
        if self.shape not in SHAPES:
            raise ValueError(f"Invalid shape: {self.shape}")
        if self.shading not in SHADINGS:
            raise ValueError(f"Invalid shading: {self.shading}")

    @property
    def values(self) -> Tuple[object, object, object, object]:
        return (self.number, self.color, self.shape, self.shading)

    @property
    def label(self) -> str:
        # One digit per attribute: the value's index in its alphabet.
        return "".join(str(alphabet.index(value)) for alphabet, value in zip(ALPHABETS, self.values))


def build_deck(seed: Optional[int] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = [
        Card(number, color, shape, shading)
        for number in NUMBERS
        for color in COLORS
        for shape in SHAPES
        for shading in SHADINGS
    ]
    rng.shuffle(deck)
    return deck


def deal(deck: List[Card], count: int) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    cards = deck[:count]
    del deck[:count]
    return cards


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if not isinstance(label, str) or len(label) != len(ALPHABETS):
        raise ValueError(f"Invalid card label: {label!r}")
    values = []
    for alphabet, digit in zip(ALPHABETS, label):
        if digit not in "012":
            raise ValueError(f"Invalid card label: {label!r}")
        values.append(alphabet[int(digit)])
    return Card(*values)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
