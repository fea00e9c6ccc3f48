# server/main.py
from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, Header, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from simplefs import SimpleShell
from simplefs.errors import FSError
from simplefs.limits import MAX_INPUT_CHARS, SESSION_TTL_SEC

logger = logging.getLogger(__name__)


# -----------------------------
# App setup
# -----------------------------
app = FastAPI(title="SimpleFS API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

MAX_BATCH_LINES = 500


# -----------------------------
# Error handling (envelope)
# -----------------------------
class APIError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}


@app.exception_handler(APIError)
async def api_error_handler(_, exc: APIError):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "ok": False,
            "error": {"code": exc.code, "message": exc.message, "details": exc.details},
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "ok": False,
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request body or parameters are invalid.",
                "details": {"errors": exc.errors()},
            },
        },
    )


def ok(data: Any):
    return {"ok": True, "data": data}


# -----------------------------
# In-memory session store
# -----------------------------
# token -> session dict; each session owns one tree and the lock that serializes commands on it
_sessions: Dict[str, Dict[str, Any]] = {}
_sessions_lock = threading.Lock()


def _now() -> float:
    return time.time()


def _new_token() -> str:
    return secrets.token_urlsafe(32)


def _purge_expired() -> None:
    now = _now()
    with _sessions_lock:
        expired = [token for token, s in _sessions.items() if s["expiresAt"] < now]
        for token in expired:
            _sessions.pop(token, None)
    if expired:
        logger.info("expired %d session(s)", len(expired))


def _get_session(authorization: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise APIError("UNAUTHORIZED", "Authorization: Bearer <token> header is required.", 401)

    token = authorization.split(" ", 1)[1].strip()
    with _sessions_lock:
        s = _sessions.get(token)
        if not s:
            raise APIError("UNAUTHORIZED", "Unknown or closed session. Call /api/v1/session again.", 401)
        if s["expiresAt"] < _now():
            _sessions.pop(token, None)
            raise APIError("UNAUTHORIZED", "Session expired. Call /api/v1/session again.", 401)
        s["lastSeenAt"] = _now()
    return token, s


def _close_session(token: str) -> None:
    with _sessions_lock:
        _sessions.pop(token, None)
    logger.info("session closed")


# -----------------------------
# Request models
# -----------------------------
class SessionCreateReq(BaseModel):
    tree: Optional[Dict[str, Any]] = None


class TerminalExecReq(BaseModel):
    command: str = Field(..., min_length=1, max_length=MAX_INPUT_CHARS)


class TerminalBatchReq(BaseModel):
    commands: List[str] = Field(..., min_length=1, max_length=MAX_BATCH_LINES)


# -----------------------------
# Routes
# -----------------------------
@app.get("/")
def root():
    return ok(
        {
            "service": "SimpleFS API",
            "docs": "/docs",
            "openapi": "/openapi.json",
            "health": "/api/v1/health",
        }
    )


@app.get("/api/v1/health")
def health():
    return ok({"status": "ok"})


@app.post("/api/v1/session")
def create_session(req: SessionCreateReq = SessionCreateReq()):
    _purge_expired()
    try:
        shell = SimpleShell(fs_tree=req.tree)
    except FSError as exc:
        raise APIError(
            "INVALID_TREE",
            "Initial tree was rejected.",
            400,
            {"reason": exc.message, "kind": exc.kind.value},
        )

    token = _new_token()
    s = {
        "token": token,
        "createdAt": _now(),
        "lastSeenAt": _now(),
        "expiresAt": _now() + SESSION_TTL_SEC,
        "shell": shell,
        "lock": threading.Lock(),
    }
    with _sessions_lock:
        _sessions[token] = s
    logger.info("session created (%d node(s))", shell.fs.count())
    return ok({"sessionToken": token, "expiresInSec": SESSION_TTL_SEC})


@app.delete("/api/v1/session")
def delete_session(authorization: Optional[str] = Header(None)):
    token, _ = _get_session(authorization)
    _close_session(token)
    return ok({"closed": True})


@app.post("/api/v1/terminal/exec")
def terminal_exec(req: TerminalExecReq, authorization: Optional[str] = Header(None)):
    token, session = _get_session(authorization)
    shell: SimpleShell = session["shell"]

    with session["lock"]:
        stdout, stderr, exit_code = shell.execute(req.command)
        closed = shell.closed

    if closed:
        _close_session(token)
    return ok(
        {
            "output": stdout.splitlines(),
            "stderr": stderr,
            "exitCode": exit_code,
            "closed": closed,
        }
    )


@app.post("/api/v1/terminal/batch")
def terminal_batch(req: TerminalBatchReq, authorization: Optional[str] = Header(None)):
    token, session = _get_session(authorization)
    shell: SimpleShell = session["shell"]

    too_long = [i for i, line in enumerate(req.commands) if len(line) > MAX_INPUT_CHARS]
    if too_long:
        raise APIError(
            "VALIDATION_ERROR",
            f"command too long (max {MAX_INPUT_CHARS})",
            422,
            {"lines": too_long},
        )

    with session["lock"]:
        output = shell.run_batch(req.commands)
        closed = shell.closed

    if closed:
        _close_session(token)
    return ok({"output": output, "closed": closed})


@app.get("/api/v1/tree")
def get_tree(authorization: Optional[str] = Header(None)):
    _, session = _get_session(authorization)
    shell: SimpleShell = session["shell"]
    with session["lock"]:
        snapshot = shell.fs.snapshot()
        count = shell.fs.count()
    return ok({"tree": snapshot, "nodeCount": count})


@app.get("/api/v1/tree/find")
def find_in_tree(
    name: str = Query(..., min_length=1, description="Exact node name to search for"),
    authorization: Optional[str] = Header(None),
):
    _, session = _get_session(authorization)
    shell: SimpleShell = session["shell"]
    with session["lock"]:
        paths = shell.fs.find(name)
    return ok({"paths": paths})
