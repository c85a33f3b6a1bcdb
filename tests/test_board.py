from __future__ import annotations

from checkers import Board, Piece, Player


def test_initial_board_layout():
    board = Board.initial()
    assert board.count(Player.AI) == 12
    assert board.count(Player.HUMAN) == 12
    for row, col, piece in board.pieces():
        assert (row + col) % 2 == 1
        assert not piece.king
        if piece.owner is Player.AI:
            assert row < 3
        else:
            assert row > 4
    for row in (3, 4):
        assert all(board.piece_at(row, col) is None for col in range(8))


def test_is_on_board_bounds():
    assert Board.is_on_board(0, 0)
    assert Board.is_on_board(7, 7)
    assert not Board.is_on_board(-1, 3)
    assert not Board.is_on_board(3, 8)
    assert not Board.is_on_board(8, 0)


def test_player_negation_flips_owner():
    assert Player.HUMAN.opponent is Player.AI
    assert Player.AI.opponent is Player.HUMAN
    assert Player(-Player.HUMAN) is Player.AI
    assert Player.HUMAN.forward == -1
    assert Player.AI.far_row == 7


def test_clone_is_deep_and_independent():
    board = Board.initial()
    copy = board.clone()
    assert copy == board
    assert copy.piece_at(5, 0) is not board.piece_at(5, 0)

    copy.piece_at(5, 0).promote()
    copy.remove(2, 1)
    assert not board.piece_at(5, 0).king
    assert board.piece_at(2, 1) is not None


def test_to_grid_is_renderable():
    board = Board.empty()
    board.place(3, 4, Piece(Player.AI, king=True))
    grid = board.to_grid()
    assert grid[3][4] == {"owner": "ai", "king": True}
    assert sum(1 for row in grid for cell in row if cell) == 1
