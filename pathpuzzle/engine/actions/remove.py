from __future__ import annotations

from ...models.api import RemoveAction
from ...models.enums import ActionLogResult
from ...models.session import PlaySession
from ..logging.logger import log_event
from .base import ActionHandler, editable


class RemoveHandler(ActionHandler):
    action_type = RemoveAction

    def evaluate(self, sess, action: RemoveAction):
        ok, why = editable(sess, action.at)
        if not ok:
            return False, why
        if sess.piece_at(action.at) is None:
            return False, "cell is already empty"
        return True, "ok"

    def apply(self, sess: PlaySession, action: RemoveAction):
        sess.grid[action.at.row][action.at.col] = None
        sess.set_override(action.at, None)
        sess.solved = False
        sess.last_path = []
        log_event(sess, action, ActionLogResult.APPLIED)
        return sess
