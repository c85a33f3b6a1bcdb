from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .ai import DEFAULT_DEPTH, AIPlayer
from .board import Board, Player
from .rules import (
    Move,
    apply_move,
    follow_up_jumps,
    legal_moves_for_piece,
    winner,
)

logger = logging.getLogger(__name__)

STATUS_HUMAN_TURN = "Your turn"
STATUS_AI_THINKING = "AI thinking..."
STATUS_HUMAN_WINS = "Game over: you win"
STATUS_AI_WINS = "Game over: AI wins"

Square = Tuple[int, int]


class TurnState(str, Enum):
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_DESTINATION = "awaiting_destination"
    CHAIN_CAPTURE = "chain_capture"
    AI_TURN = "ai_turn"
    GAME_OVER = "game_over"


@dataclass
class RenderableState:
    grid: List[List[Optional[Dict[str, object]]]]
    highlighted_destinations: List[Square]
    selected_square: Optional[Square]
    status_text: str
    state: TurnState
    current_player: Player
    game_over: bool = False
    winner: Optional[Player] = None
    last_move: Optional[Move] = None
    generation: int = 0

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "grid": self.grid,
            "highlighted_destinations": [list(sq) for sq in self.highlighted_destinations],
            "selected_square": list(self.selected_square) if self.selected_square else None,
            "status_text": self.status_text,
            "state": self.state.value,
            "current_player": self.current_player.label,
            "game_over": self.game_over,
            "winner": self.winner.label if self.winner is not None else None,
            "last_move": self.last_move.to_dict() if self.last_move else None,
            "generation": self.generation,
        }
        return data


class GameSession:
    """One human-versus-AI game and its turn-resolution state machine.

    The session owns its board exclusively. Human input arrives through
    ``on_cell_activated``; once the human's turn resolves (including any chain
    capture) the session sits in ``AI_TURN`` until ``run_ai_turn`` is called,
    either directly or from a deferred scheduler.
    """

    def __init__(self, ai: Optional[AIPlayer] = None, depth: int = DEFAULT_DEPTH) -> None:
        self.id = uuid.uuid4().hex
        self.ai = ai or AIPlayer(depth=depth)
        self.lock = threading.RLock()
        self.generation = 0
        # Bumped whenever a turn ends or the game restarts
        self.turn = 0
        self._start_position()

    def _start_position(self) -> None:
        self.board = Board.initial()
        self.current_player = Player.HUMAN
        self.selection: Optional[Square] = None
        self.legal_moves_for_selection: List[Move] = []
        self.state = TurnState.AWAITING_SELECTION
        self.winner: Optional[Player] = None
        self.last_move: Optional[Move] = None

    def reset(self) -> RenderableState:
        with self.lock:
            # Bumping the generation invalidates any AI move still pending
            self.generation += 1
            self.turn += 1
            self._start_position()
            logger.info("Session %s reset (generation %d)", self.id, self.generation)
            return self.get_renderable_state()

    on_reset_requested = reset

    def on_cell_activated(self, row: int, col: int) -> RenderableState:
        with self.lock:
            if not self._handle_click(row, col):
                logger.debug("Ignored click at (%d, %d) in state %s", row, col, self.state.value)
            return self.get_renderable_state()

    def _handle_click(self, row: int, col: int) -> bool:
        if not Board.is_on_board(row, col):
            return False

        if self.state is TurnState.CHAIN_CAPTURE:
            return self._try_destination(row, col)

        if self.state not in (TurnState.AWAITING_SELECTION, TurnState.AWAITING_DESTINATION):
            return False

        piece = self.board.piece_at(row, col)
        if piece is not None and piece.owner is Player.HUMAN:
            moves = legal_moves_for_piece(self.board, row, col)
            if not moves:
                return False
            self.selection = (row, col)
            self.legal_moves_for_selection = moves
            self.state = TurnState.AWAITING_DESTINATION
            return True

        if self.state is TurnState.AWAITING_DESTINATION:
            return self._try_destination(row, col)
        return False

    def _try_destination(self, row: int, col: int) -> bool:
        for move in self.legal_moves_for_selection:
            if move.destination == (row, col):
                self._apply_human_move(move)
                return True
        return False

    def _apply_human_move(self, move: Move) -> None:
        apply_move(self.board, move)
        self.last_move = move
        continuations = follow_up_jumps(self.board, move)
        if continuations:
            self.selection = move.destination
            self.legal_moves_for_selection = continuations
            self.state = TurnState.CHAIN_CAPTURE
            return
        self._end_turn(Player.HUMAN)

    def _end_turn(self, player: Player) -> None:
        self.turn += 1
        self.current_player = player.opponent
        self.selection = None
        self.legal_moves_for_selection = []
        self.winner = winner(self.board, self.current_player)
        if self.winner is not None:
            self.state = TurnState.GAME_OVER
            logger.info("Session %s over: %s wins", self.id, self.winner.label)
        elif self.current_player is Player.AI:
            self.state = TurnState.AI_TURN
        else:
            self.state = TurnState.AWAITING_SELECTION

    def plan_ai_turn(self, board: Board) -> List[Move]:
        """Moves the AI plays from ``board``: one move plus any chain continuation.

        ``board`` is advanced as the moves are chosen, so pass a copy.
        """
        plan: List[Move] = []
        move = self.ai.choose_move(board, Player.AI)
        while move is not None:
            apply_move(board, move)
            plan.append(move)
            continuations = follow_up_jumps(board, move)
            if not continuations:
                break
            move = self.ai.choose_move(board, Player.AI, candidates=continuations)
        return plan

    def run_ai_turn(
        self,
        expected_generation: Optional[int] = None,
        expected_turn: Optional[int] = None,
    ) -> RenderableState:
        """Compute and apply the AI's move when the session is waiting for it.

        The search runs on a copy outside the lock so the "thinking" state stays
        readable. The result is discarded if the session was reset or moved on
        meanwhile, or if ``expected_generation`` or ``expected_turn`` no longer
        matches.
        """
        with self.lock:
            if self.state is not TurnState.AI_TURN:
                return self.get_renderable_state()
            generation = self.generation
            turn = self.turn
            if expected_generation is not None and expected_generation != generation:
                return self.get_renderable_state()
            if expected_turn is not None and expected_turn != turn:
                return self.get_renderable_state()
            board = self.board.clone()

        plan = self.plan_ai_turn(board)

        with self.lock:
            if (
                self.generation != generation
                or self.turn != turn
                or self.state is not TurnState.AI_TURN
            ):
                logger.info("Discarding stale AI move for session %s", self.id)
                return self.get_renderable_state()
            if not plan:
                self.winner = Player.HUMAN
                self.state = TurnState.GAME_OVER
                return self.get_renderable_state()
            for move in plan:
                apply_move(self.board, move)
                self.last_move = move
            self._end_turn(Player.AI)
            return self.get_renderable_state()

    def status_text(self) -> str:
        if self.state is TurnState.GAME_OVER:
            return STATUS_HUMAN_WINS if self.winner is Player.HUMAN else STATUS_AI_WINS
        if self.state is TurnState.AI_TURN:
            return STATUS_AI_THINKING
        return STATUS_HUMAN_TURN

    def get_renderable_state(self) -> RenderableState:
        with self.lock:
            return RenderableState(
                grid=self.board.to_grid(),
                highlighted_destinations=[m.destination for m in self.legal_moves_for_selection],
                selected_square=self.selection,
                status_text=self.status_text(),
                state=self.state,
                current_player=self.current_player,
                game_over=self.state is TurnState.GAME_OVER,
                winner=self.winner,
                last_move=self.last_move,
                generation=self.generation,
            )
