from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ...core.primitives import Pos
    from ...models.api import Action
    from ...models.session import PlaySession


class ActionHandler(Protocol):
    action_type: type

    def evaluate(self, sess: PlaySession, action: Action) -> tuple[bool, str]: ...

    def apply(self, sess: PlaySession, action: Action) -> PlaySession: ...


Registry = dict[type, ActionHandler]


def editable(sess: PlaySession, p: Pos) -> tuple[bool, str]:
    """Common checks for a cell the player wants to change."""
    if not sess.in_bounds(p):
        return False, "cell out of bounds"
    if sess.level.is_locked(p):
        return False, "cell is locked"
    return True, "ok"
