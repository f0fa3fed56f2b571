from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import TypeAdapter, ValidationError

from . import storage
from .core.primitives import Explanation
from .engine.core import PuzzleEngine
from .engine.logging.logger import log_check
from .engine.systems import catalog
from .engine.systems.connections import Connection, connection_report, verify_path
from .engine.systems.pathfinding import SearchStep, resolve_path
from .levels.builtin import builtin_levels, get_default_level, get_level_by_id
from .levels.validation import ensure_valid_level, validate_level
from .logging_listeners import register_listeners
from .models.api import (
    ActionLogEntry,
    ActionLogResponse,
    ApplyActionRequest,
    ApplyActionResponse,
    CheckPathRequest,
    CheckPathResponse,
    CreateSessionRequest,
    PieceListResponse,
    RotateRequest,
    RotateResponse,
    SessionView,
    VerifyPathRequest,
)
from .models.level import Level
from .models.pieces import PieceDefinition
from .models.session import PlaySession, overrides_of

logger = logging.getLogger(__name__)

FOUND_MESSAGE = "Bravo ! Il existe un chemin valide du Petit Chaperon Rouge à la maison."
NOT_FOUND_MESSAGE = "Pas de chemin valide trouvé. Essayez encore !"

app = FastAPI(title="Path Puzzle")
engine = PuzzleEngine()
register_listeners()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _step_json(step: SearchStep) -> dict[str, Any]:
    out = asdict(step)
    if step.direction is not None:
        out["direction"] = step.direction.value
    return {k: v for k, v in out.items() if v is not None}


def _check_response(path, trace: list[SearchStep] | None) -> CheckPathResponse:
    return CheckPathResponse(
        found=bool(path),
        path=path,
        message=FOUND_MESSAGE if path else NOT_FOUND_MESSAGE,
        trace=[_step_json(s) for s in trace] if trace is not None else None,
    )


@app.get("/health")
def health() -> dict[str, Any]:
    ok = True
    redis_connected = None
    if storage.r is not None:
        try:
            storage.r.ping()
            redis_connected = True
        except Exception:
            redis_connected = False
            ok = False
    return {"ok": ok, "storage": storage.backend_name(), "redis_connected": redis_connected}


# ----- Pieces -----


@app.get("/pieces", response_model=PieceListResponse)
def list_pieces():
    return PieceListResponse(pieces=catalog.all_pieces())


@app.get("/pieces/{key}", response_model=PieceDefinition)
def get_piece(key: str):
    piece = catalog.lookup(key)
    if piece is None:
        raise HTTPException(404, "piece not found")
    return piece


@app.post("/pieces/rotate", response_model=RotateResponse)
def rotate_openings(req: RotateRequest):
    turn = catalog.rotate_clockwise if req.clockwise else catalog.rotate_counter_clockwise
    return RotateResponse(openings=catalog.ordered(turn(req.openings)))


# ----- Stateless path checks -----


@app.post("/path/check", response_model=CheckPathResponse)
def check_path(req: CheckPathRequest):
    trace: list[SearchStep] | None = [] if req.trace else None
    path = resolve_path(
        req.grid,
        overrides_of(req.cell_directions),
        trace=trace.append if trace is not None else None,
    )
    log_check(None, bool(path), len(path))
    return _check_response(path, trace)


@app.post("/path/connections", response_model=list[Connection])
def connections(req: CheckPathRequest):
    return connection_report(req.grid, overrides_of(req.cell_directions))


@app.post("/path/verify", response_model=Explanation)
def verify(req: VerifyPathRequest):
    return verify_path(req.grid, req.path, overrides_of(req.cell_directions))


# ----- Built-in levels -----


@app.get("/levels", response_model=list[Level])
def list_levels():
    return builtin_levels()


@app.get("/levels/{level_id}", response_model=Level)
def get_level(level_id: int):
    level = get_level_by_id(level_id)
    if not level:
        raise HTTPException(404, "level not found")
    return level


# ----- Custom levels -----


def _validated(raw: dict[str, Any]) -> Level:
    errors = validate_level(raw)
    if errors:
        raise HTTPException(400, {"errors": errors})
    try:
        return ensure_valid_level({k: v for k, v in raw.items() if k not in ("id", "published")})
    except ValidationError as e:
        raise HTTPException(
            400, {"errors": [f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()]}
        ) from e


@app.get("/custom-levels", response_model=list[Level])
def list_custom_levels():
    return sorted(storage.levels.list_all(), key=lambda lv: lv.id or 0)


@app.post("/custom-levels", response_model=Level, status_code=201)
def create_custom_level(raw: dict[str, Any] = Body(...)):
    level = _validated(raw).model_copy(update={"id": storage.levels.next_id()})
    storage.levels.save(str(level.id), level)
    logger.info("custom level %s created: %s", level.id, level.name)
    return level


@app.get("/custom-levels/{level_id}", response_model=Level)
def get_custom_level(level_id: int):
    level = storage.levels.get(str(level_id))
    if not level:
        raise HTTPException(404, "level not found")
    return level


@app.put("/custom-levels/{level_id}", response_model=Level)
def update_custom_level(level_id: int, raw: dict[str, Any] = Body(...)):
    if not storage.levels.get(str(level_id)):
        raise HTTPException(404, "level not found")
    level = _validated(raw).model_copy(update={"id": level_id})
    storage.levels.save(str(level_id), level)
    return level


@app.delete("/custom-levels/{level_id}", status_code=204)
def delete_custom_level(level_id: int):
    if not storage.levels.delete(str(level_id)):
        raise HTTPException(404, "level not found")
    return None


# ----- Play sessions -----


@app.post("/sessions", response_model=SessionView)
def create_session(req: CreateSessionRequest):
    if req.custom_level_id is not None:
        level = storage.levels.get(str(req.custom_level_id))
    elif req.level_id is not None:
        level = get_level_by_id(req.level_id)
    else:
        level = get_default_level()
    if not level:
        raise HTTPException(404, "level not found")
    sess = PlaySession(
        id=str(uuid4()),
        level=level,
        grid=[list(row) for row in level.grid],
    )
    storage.sessions.save(sess.id, sess)
    return SessionView(id=sess.id, session=sess)


@app.get("/sessions/{sid}", response_model=SessionView)
def get_session(sid: str):
    sess = storage.sessions.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    return SessionView(id=sess.id, session=sess)


@app.post("/sessions/{sid}/action", response_model=ApplyActionResponse)
def apply_action(sid: str, req: ApplyActionRequest):
    sess = storage.sessions.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    ev, new_sess = engine.process_action(sess, req.action)
    if not ev.legal:
        raise HTTPException(400, ev.explanation)
    storage.sessions.save(new_sess.id, new_sess)
    return ApplyActionResponse(
        applied=True,
        explanation=ev.explanation,
        session=SessionView(id=new_sess.id, session=new_sess),
    )


@app.post("/sessions/{sid}/check", response_model=CheckPathResponse)
def check_session(sid: str, trace: bool = False):
    sess = storage.sessions.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    steps: list[SearchStep] | None = [] if trace else None
    path = engine.check(sess, steps)
    storage.sessions.save(sess.id, sess)
    return _check_response(path, steps)


@app.get("/sessions/{sid}/log", response_model=ActionLogResponse)
def get_action_log(sid: str, limit: int = Query(50, ge=1, le=1000)):
    sess = storage.sessions.get(sid)
    if not sess:
        raise HTTPException(404, "session not found")
    entries: list[ActionLogEntry] = []
    ta = TypeAdapter(ActionLogEntry)
    for s in storage.logs.list(sid, limit):
        try:
            entries.append(ta.validate_json(s))
        except Exception:
            # Skip malformed entries rather than failing the whole response
            logger.warning("skipping malformed log entry for session %s", sid)
            continue
    return ActionLogResponse(entries=entries)
