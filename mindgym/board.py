"""Tile deck generation for the memory game."""

import random
from collections.abc import Iterable
from dataclasses import dataclass

# 18 symbols, one per pair in the full-size game
TOKENS = (
    "star", "heart", "feather", "cloud", "zap", "coffee",
    "tractor", "anchor", "palette", "gift", "moon", "sun",
    "ball", "diamond", "bone", "car", "bike", "plane",
)


class InvalidConfiguration(ValueError):
    """Raised when a game cannot be set up from the given settings."""


@dataclass
class Tile:
    position: int
    token: str
    revealed: bool = True
    matched: bool = False


Board = list[Tile]


def generate_board(tokens: Iterable[str], pairs_per_token: int = 2,
                   rng: random.Random | None = None) -> Board:
    """Build a shuffled board with every token placed pairs_per_token times.

    All tiles start face-up for the preview phase.
    """
    unique = list(dict.fromkeys(tokens))
    if not unique:
        raise InvalidConfiguration("token set is empty")
    if pairs_per_token < 1:
        raise InvalidConfiguration("pairs_per_token must be positive")

    rng = rng or random.Random()
    deck = [tok for tok in unique for _ in range(pairs_per_token)]

    # Fisher-Yates over the whole deck, duplicates included
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]

    return [Tile(position=i, token=tok) for i, tok in enumerate(deck)]


def unmatched_count(board: Board) -> int:
    return sum(1 for tile in board if not tile.matched)
