"""Checkers engine package providing the board model, rules, and AI search.

Modules:
- board: Players, pieces, and the 8x8 board
- rules: Move generation, mandatory captures, and move application
- evaluator: Heuristic evaluation function for positions
- ai: Minimax with alpha-beta pruning over cloned boards
- game: Game session and turn-resolution state machine
- scheduler: Deferred, cancellable AI moves
"""

from .board import Board, Piece, Player
from .rules import Move
from .evaluator import Evaluator
from .ai import AIPlayer, SearchResult
from .game import GameSession, RenderableState, TurnState
from .scheduler import AIMoveScheduler

__all__ = [
    "Board",
    "Piece",
    "Player",
    "Move",
    "Evaluator",
    "AIPlayer",
    "SearchResult",
    "GameSession",
    "RenderableState",
    "TurnState",
    "AIMoveScheduler",
]
