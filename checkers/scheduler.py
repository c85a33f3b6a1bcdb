from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Tuple

from .game import GameSession, TurnState

logger = logging.getLogger(__name__)

DEFAULT_AI_DELAY = 0.5

# (generation, turn) a pending move belongs to
TurnKey = Tuple[int, int]


class AIMoveScheduler:
    """Runs the AI's reply a short moment after the human's turn resolves.

    Each pending move remembers the session generation and turn it was
    scheduled for. A reset or a finished turn in the meantime changes them,
    and the move is dropped. With a delay of zero the AI plays synchronously
    in the caller.
    """

    def __init__(self, delay: float = DEFAULT_AI_DELAY) -> None:
        self.delay = delay
        self._timers: Dict[str, Tuple[threading.Timer, TurnKey]] = {}
        self._lock = threading.Lock()

    def schedule(self, session: GameSession) -> Optional[threading.Timer]:
        with session.lock:
            if session.state is not TurnState.AI_TURN:
                return None
            key = (session.generation, session.turn)

        if self.delay <= 0:
            session.run_ai_turn()
            return None

        with self._lock:
            pending = self._timers.get(session.id)
            if pending is not None:
                timer, scheduled_for = pending
                if scheduled_for == key and not timer.finished.is_set():
                    return timer
                timer.cancel()
            timer = threading.Timer(self.delay, self._fire, args=(session, key))
            timer.daemon = True
            self._timers[session.id] = (timer, key)
        timer.start()
        return timer

    def cancel(self, session: GameSession) -> bool:
        with self._lock:
            pending = self._timers.pop(session.id, None)
        if pending is None:
            return False
        pending[0].cancel()
        return True

    def is_pending(self, session: GameSession) -> bool:
        with self._lock:
            return session.id in self._timers

    def _fire(self, session: GameSession, key: TurnKey) -> None:
        generation, turn = key
        try:
            session.run_ai_turn(expected_generation=generation, expected_turn=turn)
        except Exception:  # noqa: BLE001
            logger.exception("AI move failed for session %s", session.id)
        finally:
            with self._lock:
                pending = self._timers.get(session.id)
                if pending is not None and pending[0] is threading.current_thread():
                    del self._timers[session.id]
