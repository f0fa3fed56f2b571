# tests/utils/helpers.py
import json

import requests

from pathpuzzle.core.primitives import Pos
from pathpuzzle.models.level import Level
from pathpuzzle.models.session import PlaySession


def make_session(grid, locked=(), available=(), sid: str = "test-session") -> PlaySession:
    """Session over an ad-hoc level; ``locked`` is a list of (row, col)."""
    level = Level(
        id=99,
        name="test",
        grid=[list(row) for row in grid],
        locked_cells=[Pos(row=r, col=c) for r, c in locked],
        available_pieces=list(available),
    )
    return PlaySession(id=sid, level=level, grid=[list(row) for row in grid])


def coords(path) -> list[tuple[int, int]]:
    return [(p.row, p.col) for p in path]


# ---------- HTTP helpers (show server error bodies) ----------
def _post(url: str, payload: dict, *, timeout=5) -> dict:
    r = requests.post(url, json=payload, timeout=timeout)
    if r.status_code >= 400:
        try:
            body = r.json()
        except Exception:
            body = r.text
        raise requests.HTTPError(
            f"{r.status_code} {r.reason} for {url}\n"
            f"Payload:\n{json.dumps(payload, indent=2)}\n"
            f"Response:\n{body}",
            response=r,
        )
    return r.json()


def _get(url: str, *, timeout=5) -> dict:
    r = requests.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def _create_session(base_url: str, **body) -> str:
    return _post(f"{base_url}/sessions", body)["id"]


def _act(base_url: str, sid: str, action: dict) -> dict:
    return _post(f"{base_url}/sessions/{sid}/action", {"action": action})
