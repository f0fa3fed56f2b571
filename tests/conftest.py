# Test configuration to spin up the FastAPI app with a real uvicorn server
# and provide helper fixtures.

import os
import sys
import socket
import subprocess
import time
from contextlib import closing
from pathlib import Path
from typing import Iterator

import pytest
import logging
import requests

from pathpuzzle.levels.validation import create_grid
from pathpuzzle.models.session import PlaySession
from tests.utils.helpers import make_session

ROOT = Path(__file__).resolve().parents[1]
logger = logging.getLogger(__name__)


def _get_free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def base_url() -> Iterator[str]:
    env = os.environ.copy()
    # in-memory stores unless a test run explicitly opts into Redis
    if os.environ.get("TEST_REDIS_URL"):
        env["REDIS_URL"] = os.environ["TEST_REDIS_URL"]
    else:
        env.pop("REDIS_URL", None)

    port = _get_free_port()

    # Start uvicorn pointing to our app module
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "pathpuzzle.app:app",
        "--host",
        "127.0.0.1",
        "--port",
        str(port),
        "--log-level",
        "warning",
    ]
    proc = subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    logger.info("[tests] Started uvicorn (pid=%s) on port %s", proc.pid, port)

    # Wait for health endpoint
    url = f"http://127.0.0.1:{port}"
    for _ in range(120):
        try:
            r = requests.get(url + "/health", timeout=1.0)
            if r.status_code == 200:
                break
        except Exception:
            pass
        # If process died early, surface logs
        if proc.poll() is not None:
            out, err = proc.communicate(timeout=2)
            raise RuntimeError(f"Server exited early (code={proc.returncode}). STDOUT:\n{out}\nSTDERR:\n{err}")
        time.sleep(0.25)
    else:
        try:
            out, err = proc.communicate(timeout=2)
        except Exception:
            out, err = ("", "")
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
        raise RuntimeError(f"Server did not start in time. STDOUT:\n{out}\nSTDERR:\n{err}")

    try:
        yield url
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()


@pytest.fixture()
def open_session() -> PlaySession:
    """Empty 3x5 board with start at (0,0), end at (0,4), nothing locked."""
    grid = create_grid(3, 5)
    grid[0][0] = "debut_1"
    grid[0][4] = "fin_1"
    return make_session(grid)
