"""Turn orchestration for one human-vs-computer game."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .ai import ComputerPlayer, Difficulty
from .game import COMPUTER, HUMAN, WIN, Board, Outcome, Player, apply_move
from .game import reset as new_board

logger = logging.getLogger(__name__)

Observer = Callable[["GameSession"], None]


@dataclass
class GameSession:
    """Owns the board, the difficulty and the pending computer move.

    A computer reply is marked pending under the current generation token;
    ``reset`` and ``set_difficulty`` bump the generation so a reply that
    was scheduled before them is dropped when it finally fires.
    """

    difficulty: Difficulty = Difficulty.EASY
    board: Board = field(default_factory=new_board)
    computer: ComputerPlayer = field(default_factory=ComputerPlayer)
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    last_move: Optional[int] = None
    generation: int = 0
    pending_token: Optional[int] = None
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _observers: List[Observer] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.difficulty = Difficulty(self.difficulty)
        self.computer.difficulty = self.difficulty

    # ---- reads ----

    @property
    def current_board(self) -> Board:
        return self.board

    @property
    def current_outcome(self) -> Outcome:
        return self.board.outcome

    @property
    def whose_turn(self) -> Player:
        return self.board.current_player

    @property
    def computer_pending(self) -> bool:
        return self.pending_token is not None

    @property
    def status(self) -> str:
        outcome = self.current_outcome
        if outcome.status == WIN:
            return f"Winner: {outcome.winner}"
        if outcome.is_terminal:
            return "Draw!"
        if self.whose_turn == HUMAN:
            return "Your turn (X)"
        return "Computer's turn (O)"

    # ---- observers ----

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call ``observer(session)`` after every accepted state change."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self)

    # ---- mutations ----

    def apply_human_move(self, index: int) -> bool:
        """Play X at ``index``; returns False (and changes nothing) if not allowed."""
        with self.lock:
            if not self._play(index, HUMAN):
                logger.debug("Rejected human move at %s", index)
                return False
            if not self.board.outcome.is_terminal:
                self.pending_token = self.generation
        self._notify()
        return True

    def play_computer_move(self, token: int) -> Optional[int]:
        """Apply the pending computer reply scheduled under ``token``.

        Returns the chosen cell, or None when the reply is stale or no
        longer applicable.
        """
        with self.lock:
            if token != self.generation or self.pending_token != token:
                logger.debug("Discarding stale computer move (token %s)", token)
                return None
            self.pending_token = None
            if self.board.outcome.is_terminal or self.whose_turn != COMPUTER:
                return None
            index = self.computer.choose(self.board)
            self._play(index, COMPUTER)
        self._notify()
        return index

    def reset(self) -> None:
        with self.lock:
            self._reset()
        self._notify()

    def set_difficulty(self, level: Difficulty | str) -> None:
        with self.lock:
            self.difficulty = Difficulty(level)
            self.computer.difficulty = self.difficulty
            logger.info("Difficulty set to %s", self.difficulty.value)
            self._reset()
        self._notify()

    # ---- helpers ----

    def _play(self, index: int, player: Player) -> bool:
        updated = apply_move(self.board, index, player)
        if updated is self.board:
            return False
        self.board = updated
        self.last_move = index
        self.move_log.append({"player": player, "index": index})
        outcome = updated.outcome
        if outcome.is_terminal:
            logger.info("Game over: %s %s", outcome.status, outcome.winner or "")
        return True

    def _reset(self) -> None:
        self.generation += 1
        self.pending_token = None
        self.board = new_board()
        self.move_log = []
        self.last_move = None
        logger.debug("Board reset (generation %s)", self.generation)
