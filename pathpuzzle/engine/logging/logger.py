from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...models.session import PlaySession

from ...events import ActionEvent, PathCheckEvent, event_bus
from ...models.api import Action
from ...models.enums import ActionLogResult


def log_event(
    sess: PlaySession,
    action: Action,
    result: ActionLogResult,
    message: str | None = None,
) -> None:
    event_bus.emit(
        ActionEvent(
            session_id=sess.id,
            action=action,
            result=result,
            message=message,
        )
    )


def log_illegal(sess: PlaySession, action: Action, explanation: str) -> None:
    log_event(sess, action, ActionLogResult.ILLEGAL, explanation)


def log_error(sess: PlaySession, action: Action, error: Exception) -> None:
    log_event(sess, action, ActionLogResult.ERROR, str(error))


def log_check(sess: PlaySession | None, found: bool, length: int) -> None:
    event_bus.emit(
        PathCheckEvent(
            session_id=sess.id if sess else None,
            found=found,
            length=length,
            level_id=sess.level.id if sess else None,
        )
    )
