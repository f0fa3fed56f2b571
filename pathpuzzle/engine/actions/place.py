from __future__ import annotations

from ...models.api import PlaceAction
from ...models.enums import ActionLogResult
from ...models.session import PlaySession
from ..logging.logger import log_event
from ..systems.catalog import lookup, ordered
from .base import ActionHandler, editable


class PlaceHandler(ActionHandler):
    action_type = PlaceAction

    def evaluate(self, sess, action: PlaceAction):
        piece = lookup(action.piece)
        if piece is None:
            return False, "unknown piece"
        ok, why = editable(sess, action.to)
        if not ok:
            return False, why
        allowed = sess.level.available_pieces
        if action.source is None and allowed and piece.key not in allowed:
            return False, "piece not available in this level"
        if action.source is not None and action.source != action.to:
            ok, why = editable(sess, action.source)
            if not ok:
                return False, f"source {why}"
            if sess.piece_at(action.source) != piece.key:
                return False, "source does not hold this piece"
        return True, "ok"

    def apply(self, sess: PlaySession, action: PlaceAction):
        carried = None
        if action.source is not None and action.source != action.to:
            carried = sess.overrides().get(action.source.coord)
            sess.grid[action.source.row][action.source.col] = None
            sess.set_override(action.source, None)
        sess.grid[action.to.row][action.to.col] = action.piece
        sess.set_override(action.to, ordered(carried) if carried is not None else None)
        sess.solved = False
        sess.last_path = []
        log_event(sess, action, ActionLogResult.APPLIED)
        return sess
