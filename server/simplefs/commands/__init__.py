from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from .fs_cmd import (
    run_create,
    run_create_dir,
    run_delete,
    run_delete_r,
    run_find,
    run_read,
    run_write,
)

CommandFunc = Callable[[list[str], Any], Tuple[str, str, int]]

COMMANDS: Dict[str, CommandFunc] = {
    "create": run_create,
    "create_dir": run_create_dir,
    "read": run_read,
    "write": run_write,
    "delete": run_delete,
    "delete_r": run_delete_r,
    "find": run_find,
}

EXIT_COMMAND = "exit"

# regular arguments before the rest of the line is taken as one argument
RAW_TAIL_COMMANDS: Dict[str, int] = {
    "write": 1,
}
