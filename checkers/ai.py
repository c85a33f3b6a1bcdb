from __future__ import annotations

import logging
from dataclasses import dataclass, field
from math import inf
from typing import List, Optional, Sequence, Tuple

from .board import Board, Player
from .evaluator import Evaluator
from .rules import Move, all_legal_moves, apply_move

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 5


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: float
    nodes: int
    scored_moves: List[Tuple[Move, float]] = field(default_factory=list)


class AIPlayer:
    """Minimax with alpha-beta pruning over cloned boards.

    Scores are taken from the searching player's side, so ``maximizing`` is
    True whenever that player is the one to move.
    """

    def __init__(self, depth: int = DEFAULT_DEPTH, evaluator: type = Evaluator) -> None:
        self.depth = depth
        self.evaluator = evaluator

    def choose_move(
        self,
        board: Board,
        player: Player = Player.AI,
        depth: Optional[int] = None,
        candidates: Optional[Sequence[Move]] = None,
    ) -> Optional[Move]:
        """Pick the best move for ``player``, or None when it has no legal move.

        ``candidates`` restricts the root moves, e.g. to the jumps that continue
        a capture chain from the square the last jump landed on.
        """
        result = self.search(board, player, self.depth if depth is None else depth, candidates)
        if result.best_move is None:
            logger.info("%s has no legal move", player.label)
        else:
            logger.info(
                "%s plays %s score=%.2f nodes=%d",
                player.label,
                result.best_move.to_dict(),
                result.score,
                result.nodes,
            )
        return result.best_move

    def search(
        self,
        board: Board,
        player: Player,
        depth: int,
        candidates: Optional[Sequence[Move]] = None,
    ) -> SearchResult:
        moves = list(candidates) if candidates is not None else all_legal_moves(board, player)
        best_score = -inf
        best_move: Optional[Move] = None
        nodes = 0
        scored_moves: List[Tuple[Move, float]] = []

        for move in moves:
            child, _ = apply_move(board.clone(), move)
            score, sub_nodes = self._alphabeta(
                child, depth - 1, -inf, inf, False, player
            )
            nodes += sub_nodes + 1
            scored_moves.append((move, score))
            # Strict comparison: the first of equally scored moves wins
            if score > best_score:
                best_score = score
                best_move = move

        if best_move is None:
            best_score = self.evaluator.score_for(board, player)

        return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)

    def minimax(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        player: Player = Player.AI,
    ) -> float:
        """Alpha-beta value of ``board`` searched ``depth`` plies deep.

        The value is oriented to ``player``: higher is better for them, and
        ``maximizing`` means ``player`` is the side to move. At depth 0 this is
        ``Evaluator.score_for(board, player)``, which equals
        ``Evaluator.evaluate(board)`` only when ``player is Player.HUMAN``.
        """
        score, _ = self._alphabeta(board, depth, alpha, beta, maximizing, player)
        return score

    def _alphabeta(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        maximizing: bool,
        player: Player,
    ) -> Tuple[float, int]:
        if depth <= 0:
            return self.evaluator.score_for(board, player), 1

        to_move = player if maximizing else player.opponent
        moves = all_legal_moves(board, to_move)
        if not moves:
            # A blocked side is scored statically, not as a forced loss
            return self.evaluator.score_for(board, player), 1

        nodes = 0
        if maximizing:
            value = -inf
            for move in moves:
                child, _ = apply_move(board.clone(), move)
                score, child_nodes = self._alphabeta(
                    child, depth - 1, alpha, beta, False, player
                )
                nodes += child_nodes + 1
                value = max(value, score)
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value, nodes
        else:
            value = inf
            for move in moves:
                child, _ = apply_move(board.clone(), move)
                score, child_nodes = self._alphabeta(
                    child, depth - 1, alpha, beta, True, player
                )
                nodes += child_nodes + 1
                value = min(value, score)
                beta = min(beta, value)
                if beta <= alpha:
                    break
            return value, nodes
