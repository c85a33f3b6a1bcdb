from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .board import Board, Piece, Player

COLUMN_STEPS = (-1, 1)


@dataclass(frozen=True)
class Move:
    """One ply: a slide, or a single jump over the piece at (captured_row, captured_col)."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    is_jump: bool = False
    captured_row: Optional[int] = None
    captured_col: Optional[int] = None

    @property
    def origin(self) -> Tuple[int, int]:
        return self.from_row, self.from_col

    @property
    def destination(self) -> Tuple[int, int]:
        return self.to_row, self.to_col

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "from": [self.from_row, self.from_col],
            "to": [self.to_row, self.to_col],
            "is_jump": self.is_jump,
        }
        if self.is_jump:
            data["captured"] = [self.captured_row, self.captured_col]
        return data


def row_directions(piece: Piece) -> Tuple[int, ...]:
    if piece.king:
        return (-1, 1)
    return (piece.owner.forward,)


def jumps_from(board: Board, row: int, col: int) -> List[Move]:
    piece = board.piece_at(row, col)
    if piece is None:
        return []

    jumps: List[Move] = []
    for d_row in row_directions(piece):
        for d_col in COLUMN_STEPS:
            land_row, land_col = row + 2 * d_row, col + 2 * d_col
            if not board.is_on_board(land_row, land_col):
                continue
            if board.piece_at(land_row, land_col) is not None:
                continue
            mid_row, mid_col = row + d_row, col + d_col
            over = board.piece_at(mid_row, mid_col)
            if over is None or over.owner == piece.owner:
                continue
            jumps.append(
                Move(row, col, land_row, land_col, True, mid_row, mid_col)
            )
    return jumps


def moves_from(board: Board, row: int, col: int) -> List[Move]:
    """Legal moves for the piece on (row, col), ignoring the rest of its side.

    Jumps strictly dominate slides: if the piece can capture, only captures
    are returned. Kings slide any distance along an open diagonal; men take
    a single forward step.
    """
    piece = board.piece_at(row, col)
    if piece is None:
        return []

    jumps = jumps_from(board, row, col)
    if jumps:
        return jumps

    slides: List[Move] = []
    for d_row in row_directions(piece):
        for d_col in COLUMN_STEPS:
            to_row, to_col = row + d_row, col + d_col
            while board.is_on_board(to_row, to_col) and board.piece_at(to_row, to_col) is None:
                slides.append(Move(row, col, to_row, to_col))
                if not piece.king:
                    break
                to_row += d_row
                to_col += d_col
    return slides


def all_mandatory_jumps(board: Board, player: Player) -> List[Move]:
    jumps: List[Move] = []
    for row, col, _ in board.pieces(player):
        jumps.extend(jumps_from(board, row, col))
    return jumps


def all_legal_moves(board: Board, player: Player) -> List[Move]:
    """Every legal move for ``player``; captures only when any capture exists."""
    jumps = all_mandatory_jumps(board, player)
    if jumps:
        return jumps
    moves: List[Move] = []
    for row, col, _ in board.pieces(player):
        moves.extend(moves_from(board, row, col))
    return moves


def legal_moves_for_piece(board: Board, row: int, col: int) -> List[Move]:
    """Moves the owner of (row, col) may actually play with that piece this turn."""
    piece = board.piece_at(row, col)
    if piece is None:
        return []
    if all_mandatory_jumps(board, piece.owner):
        return jumps_from(board, row, col)
    return moves_from(board, row, col)


def apply_move(board: Board, move: Move) -> Tuple[Board, Optional[Piece]]:
    """Apply ``move`` to ``board`` in place.

    Returns the board and the captured piece, if any. The moving piece is
    crowned when it lands on its owner's far row; a king stays a king.
    """
    piece = board.remove(move.from_row, move.from_col)
    if piece is None:
        raise ValueError(f"No piece at {move.origin}")
    board.place(move.to_row, move.to_col, piece)

    captured: Optional[Piece] = None
    if move.is_jump:
        captured = board.remove(move.captured_row, move.captured_col)

    if move.to_row == piece.owner.far_row:
        piece.promote()

    return board, captured


def follow_up_jumps(board: Board, move: Move) -> List[Move]:
    """Chain-capture continuations after ``move`` has been applied to ``board``."""
    if not move.is_jump:
        return []
    return jumps_from(board, move.to_row, move.to_col)


def has_any_legal_move(board: Board, player: Player) -> bool:
    for row, col, _ in board.pieces(player):
        if moves_from(board, row, col):
            return True
    return False


def winner(board: Board, to_move: Player) -> Optional[Player]:
    if has_any_legal_move(board, to_move):
        return None
    return to_move.opponent
