"""Computer move selection: uniform random (easy) and exhaustive minimax (hard)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import math
import random

from .game import COMPUTER, DRAW, EMPTY, HUMAN, Board, detect


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"


# Terminal scores from O's point of view
SCORES = {COMPUTER: 1, HUMAN: -1, DRAW: 0}


def _check_playable(board: Board) -> None:
    if board.outcome.is_terminal:
        raise ValueError("Game already finished")
    if not board.empty_cells():
        raise ValueError("No valid moves available")


# ---------- easy ----------


def select_random(board: Board, rng: Optional[random.Random] = None) -> int:
    _check_playable(board)
    return (rng or random).choice(board.empty_cells())


# ---------- hard ----------


def minimax(cells: List[str], maximizing: bool) -> int:
    """Score ``cells`` by full game-tree search; O maximizes, X minimizes.

    ``cells`` is mutated during the search and restored before returning.
    """
    outcome = detect(cells)
    if outcome.is_terminal:
        return SCORES[outcome.winner or DRAW]

    if maximizing:
        best = -math.inf
        for i in range(9):
            if cells[i] == EMPTY:
                cells[i] = COMPUTER
                best = max(best, minimax(cells, False))
                cells[i] = EMPTY
    else:
        best = math.inf
        for i in range(9):
            if cells[i] == EMPTY:
                cells[i] = HUMAN
                best = min(best, minimax(cells, True))
                cells[i] = EMPTY
    return int(best)


def select_optimal(board: Board) -> int:
    """Best cell for O; ties go to the lowest index."""
    _check_playable(board)
    cells = list(board.cells)
    best_score = -math.inf
    move: Optional[int] = None
    for i in range(9):
        if cells[i] != EMPTY:
            continue
        cells[i] = COMPUTER
        score = minimax(cells, False)
        cells[i] = EMPTY
        if score > best_score:
            best_score, move = score, i
    assert move is not None
    return move


# ---------- player ----------


@dataclass
class ComputerPlayer:
    """Computer opponent picking moves for the configured difficulty."""

    difficulty: Difficulty = Difficulty.EASY
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Board) -> int:
        if board.current_player != COMPUTER:
            raise ValueError("It is not the computer's turn")
        if self.difficulty is Difficulty.HARD:
            return select_optimal(board)
        return select_random(board, self.rng)
