"""Pair resolution for the memory game."""

from dataclasses import dataclass

from mindgym.board import Board, unmatched_count


@dataclass(frozen=True)
class Verdict:
    matched: bool
    positions: tuple[int, int]
    score_delta: int = 0
    unmatched_left: int = 0  # counted after this pair was applied

    @property
    def board_cleared(self) -> bool:
        return self.matched and self.unmatched_left == 0


def resolve(board: Board, selection, award: int) -> Verdict:
    """Compare the two selected tiles and apply a match to the board.

    A mismatch leaves both tiles revealed; hiding them after the settle
    delay is up to the caller.
    """
    if len(selection) != 2:
        raise ValueError(f"need exactly two positions, got {len(selection)}")
    p1, p2 = selection
    if p1 == p2:
        raise ValueError(f"positions must differ, got {p1} twice")
    for pos in (p1, p2):
        if not 0 <= pos < len(board):
            raise ValueError(f"position {pos} is off the board")
        if board[pos].matched:
            raise ValueError(f"tile {pos} is already matched")

    a, b = board[p1], board[p2]
    if a.token != b.token:
        return Verdict(matched=False, positions=(p1, p2),
                       unmatched_left=unmatched_count(board))

    for tile in (a, b):
        tile.matched = True
        tile.revealed = True
    return Verdict(matched=True, positions=(p1, p2), score_delta=award,
                   unmatched_left=unmatched_count(board))
