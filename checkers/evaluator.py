from __future__ import annotations

from .board import BOARD_SIZE, Board, Player


class Evaluator:
    """Static evaluation for checkers positions.

    Positive scores favor the human, negative scores favor the AI. A man is
    worth 1, a king 3, plus a small bonus for every row a piece has advanced
    toward the opponent's back rank.
    """

    MAN_VALUE = 1.0
    KING_VALUE = 3.0
    ADVANCE_WEIGHT = 0.1

    @classmethod
    def evaluate(cls, board: Board) -> float:
        score = 0.0
        for row, _, piece in board.pieces():
            value = cls.KING_VALUE if piece.king else cls.MAN_VALUE
            score += piece.owner.value * value
            if piece.owner is Player.AI:
                score += cls.ADVANCE_WEIGHT * (BOARD_SIZE - 1 - row)
            else:
                score -= cls.ADVANCE_WEIGHT * row
        return score

    @classmethod
    def score_for(cls, board: Board, player: Player) -> float:
        """Evaluation seen from ``player``'s side: higher is better for them."""
        return player.value * cls.evaluate(board)
