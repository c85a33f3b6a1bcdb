from __future__ import annotations

import logging
import sys
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from flask import Flask, jsonify, request

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from checkers import AIMoveScheduler, GameSession
from checkers.ai import DEFAULT_DEPTH
from checkers.scheduler import DEFAULT_AI_DELAY

DEFAULT_MAX_SESSIONS = 256

logger = logging.getLogger(__name__)


class SessionStore:
    """In-memory registry of game sessions keyed by session id.

    Holds at most ``max_sessions``; creating one more evicts the least
    recently used session and hands it to ``on_evict``.
    """

    def __init__(
        self,
        depth: int,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        on_evict: Optional[Callable[[GameSession], None]] = None,
    ) -> None:
        self.depth = depth
        self.max_sessions = max(1, max_sessions)
        self.on_evict = on_evict
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> GameSession:
        session = GameSession(depth=self.depth)
        evicted = []
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                _, oldest = self._sessions.popitem(last=False)
                evicted.append(oldest)
        logger.info("Created session %s (depth %d)", session.id, self.depth)
        for oldest in evicted:
            logger.info("Evicted session %s", oldest.id)
            if self.on_evict is not None:
                self.on_evict(oldest)
        return session

    def get(self, session_id: Optional[str]) -> Optional[GameSession]:
        if not session_id or not isinstance(session_id, str):
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def create_app(config: Optional[Mapping[str, object]] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(
        SEARCH_DEPTH=DEFAULT_DEPTH,
        AI_MOVE_DELAY=DEFAULT_AI_DELAY,
        MAX_SESSIONS=DEFAULT_MAX_SESSIONS,
    )
    # CHECKERS_SEARCH_DEPTH=6, CHECKERS_AI_MOVE_DELAY=0 and so on
    app.config.from_prefixed_env("CHECKERS")
    if config:
        app.config.update(config)

    scheduler = AIMoveScheduler(delay=float(app.config["AI_MOVE_DELAY"]))
    store = SessionStore(
        depth=int(app.config["SEARCH_DEPTH"]),
        max_sessions=int(app.config["MAX_SESSIONS"]),
        on_evict=scheduler.cancel,
    )
    app.extensions["checkers.sessions"] = store
    app.extensions["checkers.scheduler"] = scheduler

    def snapshot(session: GameSession) -> Dict[str, object]:
        snap = session.get_renderable_state().to_dict()
        snap["session_id"] = session.id
        snap["ai_pending"] = scheduler.is_pending(session)
        return snap

    def session_not_found(session_id: Optional[str]):
        return jsonify({"error": f"Unknown session: {session_id}"}), 404

    def bad_payload():
        return jsonify({"error": "Request body must be a JSON object"}), 400

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return bad_payload()
        session_id = data.get("session_id")

        if session_id:
            session = store.get(session_id)
            if session is None:
                return session_not_found(session_id)
            scheduler.cancel(session)
            session.on_reset_requested()
        else:
            session = store.create()

        return jsonify(snapshot(session))

    @app.post("/api/click")
    def api_click():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return bad_payload()
        session_id = payload.get("session_id")
        session = store.get(session_id)
        if session is None:
            return session_not_found(session_id)

        try:
            row = int(payload["row"])
            col = int(payload["col"])
        except (KeyError, TypeError, ValueError):
            return jsonify({"error": "row and col must be integers"}), 400

        session.on_cell_activated(row, col)
        scheduler.schedule(session)
        return jsonify(snapshot(session))

    @app.get("/api/state")
    def api_state():
        session_id = request.args.get("session_id")
        session = store.get(session_id)
        if session is None:
            return session_not_found(session_id)
        return jsonify(snapshot(session))

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(host="0.0.0.0", port=5000, debug=True)
