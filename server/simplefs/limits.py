from __future__ import annotations

import os
from dataclasses import dataclass

MAX_NODES = int(os.getenv("SIMPLEFS_MAX_NODES", "1024"))
MAX_NAMELENGTH = int(os.getenv("SIMPLEFS_MAX_NAMELENGTH", "255"))
MAX_DEPTH = int(os.getenv("SIMPLEFS_MAX_DEPTH", "255"))
MAX_INPUT_CHARS = int(os.getenv("SIMPLEFS_MAX_INPUT_CHARS", "4096"))
SESSION_TTL_SEC = int(os.getenv("SIMPLEFS_SESSION_TTL_SEC", "3600"))

# delete_recursive and iter_nodes recurse once per level
MAX_DEPTH_CEILING = 512


@dataclass(frozen=True)
class Limits:
    max_nodes: int = MAX_NODES
    max_namelength: int = MAX_NAMELENGTH
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        for name in ("max_nodes", "max_namelength", "max_depth"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.max_depth > MAX_DEPTH_CEILING:
            raise ValueError(f"max_depth must be <= {MAX_DEPTH_CEILING}")


DEFAULT_LIMITS = Limits()
