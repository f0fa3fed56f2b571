from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.session import PlaySession
    from .actions.base import Registry
    from .systems.pathfinding import SearchStep

from ..core.primitives import Pos
from ..models.api import Action, EvaluateResponse
from .actions.place import PlaceHandler
from .actions.remove import RemoveHandler
from .actions.rotate import RotateHandler
from .logging.logger import log_check, log_error, log_illegal
from .systems.pathfinding import resolve_path

default_handlers: Registry = {
    PlaceHandler.action_type: PlaceHandler(),
    RemoveHandler.action_type: RemoveHandler(),
    RotateHandler.action_type: RotateHandler(),
}


class PuzzleEngine:
    def __init__(self, handlers: Registry | None = None):
        self.handlers: Registry = handlers or default_handlers

    def evaluate(self, sess: PlaySession, action: Action) -> EvaluateResponse:
        h = self.handlers.get(type(action))
        if not h:
            return EvaluateResponse(legal=False, explanation="unknown action")
        ok, why = h.evaluate(sess, action)
        return EvaluateResponse(legal=ok, explanation=why)

    def process_action(self, sess: PlaySession, action: Action):
        ev = self.evaluate(sess, action)
        if not ev.legal:
            log_illegal(sess, action, ev.explanation)
            return ev, None
        try:
            new_sess = self.handlers[type(action)].apply(sess, action)
            return ev, new_sess
        except Exception as e:
            log_error(sess, action, e)
            raise

    def check(self, sess: PlaySession, trace: list[SearchStep] | None = None) -> list[Pos]:
        """Resolve the session's board and record whether it is solved."""
        path = resolve_path(
            sess.grid,
            sess.overrides(),
            trace=trace.append if trace is not None else None,
        )
        sess.solved = bool(path)
        sess.last_path = path
        log_check(sess, sess.solved, len(path))
        return path
