from __future__ import annotations

from ...models.api import RotateAction
from ...models.enums import ActionLogResult
from ...models.session import PlaySession
from ..logging.logger import log_event
from ..systems.catalog import lookup, ordered, rotate_clockwise, rotate_counter_clockwise
from ..systems.pathfinding import effective_openings
from .base import ActionHandler, editable


class RotateHandler(ActionHandler):
    action_type = RotateAction

    def evaluate(self, sess, action: RotateAction):
        ok, why = editable(sess, action.at)
        if not ok:
            return False, why
        key = sess.piece_at(action.at)
        if key is None:
            return False, "cell is empty"
        piece = lookup(key)
        if piece is None:
            return False, "unknown piece"
        if not piece.rotatable:
            return False, "piece cannot be rotated"
        return True, "ok"

    def apply(self, sess: PlaySession, action: RotateAction):
        current = effective_openings(sess.grid, sess.overrides(), action.at.coord) or frozenset()
        turn = rotate_clockwise if action.clockwise else rotate_counter_clockwise
        sess.set_override(action.at, ordered(turn(current)))
        sess.solved = False
        sess.last_path = []
        log_event(sess, action, ActionLogResult.APPLIED)
        return sess
