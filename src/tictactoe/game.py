"""Board state and outcome detection for a 3×3 tic-tac-toe game."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"

EMPTY = " "
HUMAN: Player = "X"
COMPUTER: Player = "O"

# Outcome statuses
ONGOING, WIN, DRAW = "ongoing", "win", "draw"

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def other(player: Player) -> Player:
    return COMPUTER if player == HUMAN else HUMAN


# ---------- Outcome ----------


@dataclass(frozen=True)
class Outcome:
    status: str = ONGOING
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != ONGOING


def detect(cells: Sequence[str]) -> Outcome:
    """Return the first winning line in ``WINNING_LINES`` order, else draw/ongoing."""
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return Outcome(status=WIN, winner=v, line=(a, b, c))
    if all(c != EMPTY for c in cells):
        return Outcome(status=DRAW)
    return Outcome()


# ---------- Board ----------


@dataclass(frozen=True)
class Board:
    # 'X', 'O', or ' ' (space) for empty, row-major
    cells: Tuple[str, ...] = field(default_factory=lambda: (EMPTY,) * 9)
    current_player: Player = HUMAN

    @property
    def outcome(self) -> Outcome:
        return detect(self.cells)

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def is_legal(self, index: int, player: Player) -> bool:
        if not 0 <= index < 9:
            return False
        if player != self.current_player:
            return False
        if self.cells[index] != EMPTY:
            return False
        return not self.outcome.is_terminal


def reset() -> Board:
    """Fresh board: all cells empty, X to move."""
    return Board()


def apply_move(board: Board, index: int, player: Player) -> Board:
    """Place ``player`` at ``index`` and flip the turn.

    Illegal moves (out of range, occupied cell, wrong turn, finished game)
    are rejected by returning ``board`` itself unchanged.
    """
    if not board.is_legal(index, player):
        return board
    cells = list(board.cells)
    cells[index] = player
    return replace(board, cells=tuple(cells), current_player=other(player))
