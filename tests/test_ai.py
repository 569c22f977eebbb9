"""Tests for the random and minimax computer players."""

import random

import pytest

from tictactoe.ai import ComputerPlayer, Difficulty, select_optimal, select_random
from tictactoe.game import WIN, Board, apply_move, reset


def board_from(text, current_player="O"):
    return Board(
        cells=tuple(" " if c == "." else c for c in text), current_player=current_player
    )


def test_random_picks_an_empty_cell():
    board = board_from("XOX.O.X..")
    rng = random.Random(3)
    for _ in range(50):
        assert select_random(board, rng) in board.empty_cells()


def test_random_reaches_every_empty_cell():
    board = board_from("X........")
    rng = random.Random(11)
    seen = {select_random(board, rng) for _ in range(500)}
    assert seen == set(range(1, 9))


def test_selectors_refuse_finished_boards():
    won = board_from("XXXOO....")
    with pytest.raises(ValueError):
        select_random(won)
    with pytest.raises(ValueError):
        select_optimal(won)


def test_optimal_takes_immediate_win():
    assert select_optimal(board_from("OO.XX.X..")) == 2


def test_optimal_blocks_immediate_threat():
    assert select_optimal(board_from("XX..O....")) == 2


def test_optimal_answers_center_with_first_corner():
    assert select_optimal(apply_move(reset(), 4, "X")) == 0


def test_optimal_answers_corner_with_center():
    assert select_optimal(apply_move(reset(), 0, "X")) == 4


def test_optimal_pinned_move_with_two_corners():
    # O holds 0 and 8, X holds the center: taking 1 forces a winning fork.
    assert select_optimal(board_from("O...X...O")) == 1


def test_optimal_does_not_touch_callers_board():
    board = board_from("X...O...X")
    before = board.cells
    select_optimal(board)
    assert board.cells == before


def test_hard_computer_never_loses():
    cache = {}

    def reply(board):
        if board.cells not in cache:
            cache[board.cells] = select_optimal(board)
        return cache[board.cells]

    def explore(board):
        outcome = board.outcome
        if outcome.is_terminal:
            assert not (outcome.status == WIN and outcome.winner == "X")
            return
        if board.current_player == "X":
            for index in board.empty_cells():
                explore(apply_move(board, index, "X"))
        else:
            explore(apply_move(board, reply(board), "O"))

    explore(reset())


def test_computer_player_dispatches_on_difficulty():
    board = board_from("OO.XX.X..")
    assert ComputerPlayer(difficulty=Difficulty.HARD).choose(board) == 2
    easy = ComputerPlayer(difficulty=Difficulty.EASY, rng=random.Random(0))
    assert easy.choose(board) in board.empty_cells()


def test_computer_player_refuses_out_of_turn():
    with pytest.raises(ValueError):
        ComputerPlayer().choose(reset())
