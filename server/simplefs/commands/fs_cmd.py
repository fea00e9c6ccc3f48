from __future__ import annotations

import logging
from typing import Any, Tuple

from ..errors import FSError
from ..filesystem import NodeKind

logger = logging.getLogger(__name__)

RES_OK = "ok\n"
RES_FAIL = "no\n"


def _fail(cmd: str, message: str) -> Tuple[str, str, int]:
    logger.debug("%s rejected: %s", cmd, message)
    return RES_FAIL, f"{cmd}: {message}", 1


def _fs_error(cmd: str, exc: FSError) -> Tuple[str, str, int]:
    return _fail(cmd, f"{exc.message} [{exc.kind.value}]")


def _create(cmd: str, args: list[str], ctx: Any, kind: NodeKind) -> Tuple[str, str, int]:
    if not args:
        return _fail(cmd, "path required")
    try:
        ctx.fs.create(args[0], kind)
    except FSError as exc:
        return _fs_error(cmd, exc)
    return RES_OK, "", 0


def run_create(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    return _create("create", args, ctx, NodeKind.FILE)


def run_create_dir(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    return _create("create_dir", args, ctx, NodeKind.DIR)


def run_read(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    if not args:
        return _fail("read", "path required")
    try:
        content = ctx.fs.read_file(args[0])
    except FSError as exc:
        return _fs_error("read", exc)
    return f"contenuto {content}\n", "", 0


def run_write(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    if not args:
        return _fail("write", "path required")
    if len(args) < 2 or not args[1]:
        return _fail("write", "content required")
    try:
        size = ctx.fs.write_file(args[0], args[1])
    except FSError as exc:
        return _fs_error("write", exc)
    return f"ok {size}\n", "", 0


def run_delete(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    if not args:
        return _fail("delete", "path required")
    try:
        ctx.fs.delete(args[0])
    except FSError as exc:
        return _fs_error("delete", exc)
    return RES_OK, "", 0


def run_delete_r(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    if not args:
        return _fail("delete_r", "path required")
    try:
        ctx.fs.delete_recursive(args[0])
    except FSError as exc:
        return _fs_error("delete_r", exc)
    return RES_OK, "", 0


def run_find(args: list[str], ctx: Any) -> Tuple[str, str, int]:
    if not args:
        return _fail("find", "name required")
    paths = ctx.fs.find(args[0])
    if not paths:
        return _fail("find", f"no match for {args[0]}")
    return "".join(f"ok {path}\n" for path in paths), "", 0
