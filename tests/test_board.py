"""Tests for deck generation."""

import random
from collections import Counter

import pytest

from mindgym.board import TOKENS, InvalidConfiguration, Tile, generate_board, unmatched_count


def test_every_token_appears_exactly_twice():
    board = generate_board(TOKENS, rng=random.Random(1))
    assert len(board) == 36
    counts = Counter(tile.token for tile in board)
    assert set(counts) == set(TOKENS)
    assert all(n == 2 for n in counts.values())


def test_positions_follow_board_order():
    board = generate_board(["a", "b", "c"], rng=random.Random(2))
    assert [t.position for t in board] == list(range(6))


def test_tiles_start_face_up_and_unmatched():
    board = generate_board(["a", "b"])
    assert all(t.revealed and not t.matched for t in board)


def test_reshuffle_only_permutes_tokens():
    first = generate_board(TOKENS, rng=random.Random(3))
    second = generate_board(TOKENS, rng=random.Random(4))
    assert sorted(t.token for t in first) == sorted(t.token for t in second)
    assert [t.token for t in first] != [t.token for t in second]


def test_pairs_are_not_kept_adjacent():
    """Across many shuffles, some pair must land apart."""
    rng = random.Random(5)
    split = 0
    for _ in range(20):
        board = generate_board(["a", "b", "c", "d"], rng=rng)
        tokens = [t.token for t in board]
        if any(tokens[i] != tokens[i + 1] for i in range(0, len(tokens), 2)):
            split += 1
    assert split > 0


def test_same_seed_same_board():
    a = generate_board(TOKENS, rng=random.Random(9))
    b = generate_board(TOKENS, rng=random.Random(9))
    assert a == b


def test_duplicate_tokens_collapse_to_one_pair():
    board = generate_board(["a", "a", "b"])
    assert len(board) == 4


def test_empty_token_set_is_invalid():
    with pytest.raises(InvalidConfiguration):
        generate_board([])


def test_pairs_per_token_must_be_positive():
    with pytest.raises(InvalidConfiguration):
        generate_board(["a"], pairs_per_token=0)


def test_unmatched_count():
    board = [Tile(0, "a", matched=True), Tile(1, "a", matched=True), Tile(2, "b")]
    assert unmatched_count(board) == 1
