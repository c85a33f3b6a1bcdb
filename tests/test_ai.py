from __future__ import annotations

import time
from math import inf

import pytest

from checkers import AIPlayer, Board, Evaluator, Piece, Player
from checkers.ai import DEFAULT_DEPTH
from checkers.rules import Move, all_legal_moves, apply_move


def board_with(*placements):
    board = Board.empty()
    for row, col, owner, king in placements:
        board.place(row, col, Piece(owner, king))
    return board


def exhaustive_minimax(board: Board, depth: int, maximizing: bool, player: Player) -> float:
    if depth == 0:
        return Evaluator.score_for(board, player)
    to_move = player if maximizing else player.opponent
    moves = all_legal_moves(board, to_move)
    if not moves:
        return Evaluator.score_for(board, player)
    scores = [
        exhaustive_minimax(apply_move(board.clone(), m)[0], depth - 1, not maximizing, player)
        for m in moves
    ]
    return max(scores) if maximizing else min(scores)


def midgame_board() -> Board:
    return board_with(
        (0, 1, Player.AI, False),
        (1, 4, Player.AI, False),
        (2, 3, Player.AI, False),
        (2, 7, Player.AI, False),
        (3, 2, Player.AI, True),
        (4, 5, Player.HUMAN, False),
        (5, 0, Player.HUMAN, False),
        (5, 4, Player.HUMAN, False),
        (6, 3, Player.HUMAN, True),
        (7, 6, Player.HUMAN, False),
    )


def test_evaluate_starting_position_is_balanced():
    assert Evaluator.evaluate(Board.initial()) == pytest.approx(0.0)


def test_evaluate_sign_convention():
    assert Evaluator.evaluate(board_with((0, 1, Player.HUMAN, True))) == pytest.approx(3.0)
    assert Evaluator.evaluate(board_with((2, 1, Player.AI, False))) == pytest.approx(-0.5)
    assert Evaluator.evaluate(board_with((5, 0, Player.HUMAN, False))) == pytest.approx(0.5)
    board = board_with((5, 0, Player.HUMAN, False))
    assert Evaluator.score_for(board, Player.AI) == pytest.approx(-0.5)


@pytest.mark.parametrize("maximizing", [True, False])
def test_minimax_depth_zero_is_static_evaluation(maximizing):
    ai = AIPlayer()
    board = midgame_board()
    assert ai.minimax(board, 0, -inf, inf, maximizing, Player.HUMAN) == Evaluator.evaluate(board)
    assert ai.minimax(board, 0, -inf, inf, maximizing, Player.AI) == Evaluator.score_for(board, Player.AI)


@pytest.mark.parametrize("depth", [1, 2, 3, 4])
def test_alphabeta_matches_exhaustive_minimax(depth):
    ai = AIPlayer()
    board = midgame_board()
    result = ai.search(board, Player.AI, depth)

    expected = max(
        exhaustive_minimax(apply_move(board.clone(), m)[0], depth - 1, False, Player.AI)
        for m in all_legal_moves(board, Player.AI)
    )
    assert result.best_move is not None
    assert result.score == pytest.approx(expected)
    chosen = exhaustive_minimax(
        apply_move(board.clone(), result.best_move)[0], depth - 1, False, Player.AI
    )
    assert chosen == pytest.approx(expected)


def test_alphabeta_matches_exhaustive_from_opening():
    ai = AIPlayer()
    board = Board.initial()
    apply_move(board, Move(5, 2, 4, 3))
    result = ai.search(board, Player.AI, 3)
    for move, score in result.scored_moves:
        exact = exhaustive_minimax(apply_move(board.clone(), move)[0], 2, False, Player.AI)
        assert score == pytest.approx(exact)


def test_search_does_not_touch_the_live_board():
    board = midgame_board()
    before = board.clone()
    AIPlayer().choose_move(board, Player.AI, depth=3)
    assert board == before


def test_choose_move_returns_none_without_legal_moves():
    ai = AIPlayer(depth=2)
    assert ai.choose_move(board_with((5, 0, Player.HUMAN, False)), Player.AI) is None

    blocked = board_with(
        (0, 1, Player.AI, False),
        (1, 0, Player.HUMAN, False),
        (1, 2, Player.HUMAN, False),
        (2, 3, Player.HUMAN, False),
    )
    assert ai.choose_move(blocked, Player.AI) is None


def test_choose_move_plays_forced_capture():
    board = board_with(
        (2, 1, Player.AI, False),
        (0, 5, Player.AI, False),
        (3, 2, Player.HUMAN, False),
        (7, 6, Player.HUMAN, False),
    )
    move = AIPlayer(depth=3).choose_move(board, Player.AI)
    assert move == Move(2, 1, 4, 3, True, 3, 2)


def test_first_move_wins_ties():
    board = board_with((2, 1, Player.AI, False), (7, 6, Player.HUMAN, False))
    move = AIPlayer().choose_move(board, Player.AI, depth=1)
    assert move == Move(2, 1, 3, 0)


def test_candidates_restrict_root_moves():
    board = board_with(
        (2, 1, Player.AI, False),
        (2, 5, Player.AI, False),
        (7, 6, Player.HUMAN, False),
    )
    only = Move(2, 5, 3, 6)
    assert AIPlayer().choose_move(board, Player.AI, depth=2, candidates=[only]) == only


def test_ai_takes_free_king():
    # Capturing the king outweighs any quiet move
    board = board_with(
        (2, 3, Player.AI, False),
        (3, 4, Player.HUMAN, True),
        (7, 0, Player.HUMAN, False),
        (0, 7, Player.AI, False),
    )
    move = AIPlayer(depth=2).choose_move(board, Player.AI)
    assert move.is_jump
    assert (move.captured_row, move.captured_col) == (3, 4)


def test_default_depth_responds_quickly():
    board = Board.initial()
    apply_move(board, Move(5, 2, 4, 3))
    start = time.time()
    move = AIPlayer(depth=DEFAULT_DEPTH).choose_move(board, Player.AI)
    assert move is not None
    assert move.from_row == 2
    assert time.time() - start < 20.0


def test_minimax_default_is_oriented_to_ai():
    board = board_with((5, 0, Player.HUMAN, False))
    ai = AIPlayer()
    assert ai.minimax(board, 0, -inf, inf, True) == pytest.approx(-0.5)
    assert ai.minimax(board, 0, -inf, inf, True, Player.HUMAN) == pytest.approx(0.5)
