from __future__ import annotations

import logging

from . import storage
from .events import ActionEvent, PathCheckEvent, event_bus
from .models.api import ActionLogEntry

logger = logging.getLogger(__name__)


def _on_action_event(ev: ActionEvent) -> None:
    # Convert event to ActionLogEntry JSON for persistence
    entry = ActionLogEntry(
        session_id=ev.session_id,
        action=ev.action,
        result=ev.result,
        message=ev.message,
    )
    storage.logs.append(ev.session_id, entry.model_dump_json())
    logger.debug("[%s] %s %s %s", ev.session_id, ev.action.kind, ev.result.value, ev.message or "")


def _on_path_check(ev: PathCheckEvent) -> None:
    if ev.found:
        logger.info("path found (session=%s level=%s, %d cells)", ev.session_id, ev.level_id, ev.length)
    else:
        logger.info("no path (session=%s level=%s)", ev.session_id, ev.level_id)


def register_listeners() -> None:
    event_bus.subscribe(ActionEvent, _on_action_event)
    event_bus.subscribe(PathCheckEvent, _on_path_check)
