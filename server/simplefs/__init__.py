from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, TextIO

from .commands import COMMANDS, EXIT_COMMAND, RAW_TAIL_COMMANDS
from .filesystem import NodeKind, VirtualFS
from .limits import Limits
from .parser import parse_command_line

__all__ = ["Limits", "NodeKind", "ShellContext", "SimpleShell", "VirtualFS"]

logger = logging.getLogger(__name__)


@dataclass
class ShellContext:
    fs: VirtualFS
    closed: bool = False


class SimpleShell:
    def __init__(self, fs_tree: Optional[Dict] = None, limits: Optional[Limits] = None):
        self.fs = VirtualFS(fs_tree, limits=limits)
        self.ctx = ShellContext(fs=self.fs)

    @property
    def closed(self) -> bool:
        return self.ctx.closed

    def execute(self, line: str) -> tuple[str, str, int]:
        """Run one protocol line and return ``(stdout, stderr, exit_code)``.

        A blank line or ``exit`` closes the shell; further lines are ignored.
        """
        if self.ctx.closed:
            return "", "shell closed", 1

        command = parse_command_line(line, RAW_TAIL_COMMANDS)
        if command is None:
            self.ctx.closed = True
            return "", "", 0
        if command.name == EXIT_COMMAND:
            self.ctx.closed = True
            return "", "", 0

        runner = COMMANDS.get(command.name)
        if not runner:
            logger.debug("ignoring unknown command %r", command.name)
            return "", f"command not found: {command.name}", 127
        stdout, stderr, code = runner(command.args, self.ctx)
        return stdout or "", stderr or "", int(code)

    def run(self, lines: Iterable[str], out: TextIO) -> int:
        """Feed ``lines`` through the shell until it closes; returns the number of lines consumed."""
        consumed = 0
        for line in lines:
            consumed += 1
            stdout, _, _ = self.execute(line)
            if stdout:
                out.write(stdout)
            if self.ctx.closed:
                break
        out.flush()
        return consumed

    def run_batch(self, lines: Iterable[str]) -> List[str]:
        output: List[str] = []
        for line in lines:
            stdout, _, _ = self.execute(line)
            output.extend(stdout.splitlines())
            if self.ctx.closed:
                break
        return output
