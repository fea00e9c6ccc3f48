from __future__ import annotations

import logging
import re
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .errors import (
    AlreadyExists,
    CapacityExceeded,
    InvalidName,
    NotEmpty,
    NotFound,
    WrongKind,
)
from .limits import DEFAULT_LIMITS, Limits

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[/\s]+")


class NodeKind(str, Enum):
    DIR = "dir"
    FILE = "file"


@dataclass(eq=False)
class Node:
    """A directory or a file.

    Directories carry ``children`` and files carry ``content``; the other field
    stays ``None``. The parent is held through a weak reference so the only
    owner of a node is its parent's ``children`` dict.
    """

    name: str
    kind: NodeKind
    depth: int = 1
    children: Optional[Dict[str, "Node"]] = None
    content: Optional[str] = None
    _parent_ref: Optional["weakref.ReferenceType[Node]"] = field(default=None, init=False, repr=False)

    @property
    def parent(self) -> Optional["Node"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIR

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE


def new_root() -> Node:
    return Node(name="", kind=NodeKind.DIR, depth=1, children={})


def split_path(path: str) -> List[str]:
    return [part for part in _SEPARATORS.split(path or "") if part]


def _name_length(name: str) -> int:
    return len(name.encode("utf-8"))


def find_in_dir(parent: Node, name: str) -> Optional[Node]:
    if not parent.is_dir:
        raise WrongKind(f"not a directory: {get_path(parent)}")
    return parent.children.get(name)


def create(parent: Node, name: str, kind: NodeKind, limits: Limits = DEFAULT_LIMITS) -> Node:
    if not parent.is_dir:
        raise WrongKind(f"not a directory: {get_path(parent)}")
    if not name or _SEPARATORS.search(name):
        raise InvalidName(f"invalid name: {name!r}")
    if name in parent.children:
        raise AlreadyExists(f"already exists: {name}")
    if len(parent.children) >= limits.max_nodes:
        raise CapacityExceeded(f"directory full (max {limits.max_nodes}): {get_path(parent)}")
    if _name_length(name) > limits.max_namelength:
        raise CapacityExceeded(f"name too long (max {limits.max_namelength})")
    if parent.depth >= limits.max_depth:
        raise CapacityExceeded(f"max depth reached ({limits.max_depth})")

    child = Node(name=name, kind=kind, depth=parent.depth + 1)
    if kind is NodeKind.DIR:
        child.children = {}
    else:
        child.content = ""
    child._parent_ref = weakref.ref(parent)
    parent.children[name] = child
    logger.debug("created %s %s", kind.value, get_path(child))
    return child


def _detach(parent: Node, node: Node) -> None:
    del parent.children[node.name]
    node.children = None
    node.content = None
    node._parent_ref = None


def delete(node: Node) -> None:
    parent = node.parent
    if parent is None:
        raise NotFound("the root directory cannot be removed")
    if node.is_dir and node.children:
        raise NotEmpty(f"directory not empty: {get_path(node)}")
    logger.debug("deleting %s %s", node.kind.value, get_path(node))
    _detach(parent, node)


def delete_recursive(node: Node) -> int:
    """Remove ``node`` and everything below it, returning the number of removed nodes."""
    if node.parent is None:
        raise NotFound("the root directory cannot be removed")
    removed = 0
    if node.is_dir:
        # Each pass takes whichever child is left; no iterator survives a removal.
        while node.children:
            child = next(iter(node.children.values()))
            removed += delete_recursive(child)
    delete(node)
    return removed + 1


def resolve_path(
    root: Node, path: str, allow_missing_last: bool = False
) -> Tuple[Node, Optional[str]]:
    """Walk ``path`` from ``root``.

    Returns ``(node, None)`` when every segment resolves. With
    ``allow_missing_last``, a missing final segment yields
    ``(enclosing_dir, missing_name)`` instead of raising ``NotFound``.
    """
    parts = split_path(path)
    if not parts:
        raise NotFound("empty path")
    node = root
    last = len(parts) - 1
    for idx, part in enumerate(parts):
        if not node.is_dir:
            raise NotFound(f"not a directory: {get_path(node)}")
        child = node.children.get(part)
        if child is None:
            if allow_missing_last and idx == last:
                return node, part
            raise NotFound(f"no such file or directory: {path.strip()}")
        node = child
    return node, None


def get_path(node: Node) -> str:
    names: List[str] = []
    while node.parent is not None:
        names.append(node.name)
        node = node.parent
    if not names:
        return "/"
    return "".join("/" + name for name in reversed(names))


def get_file_content(node: Node) -> Optional[str]:
    if not node.is_file:
        return None
    return node.content


def set_file_content(node: Node, content: str) -> None:
    if not node.is_file:
        raise WrongKind(f"not a file: {get_path(node)}")
    node.content = str(content)


def iter_nodes(node: Node) -> Iterator[Node]:
    """Pre-order walk of every node below ``node`` (``node`` excluded)."""
    if not node.is_dir:
        return
    for child in list(node.children.values()):
        yield child
        yield from iter_nodes(child)


def find_by_name(root: Node, name: str) -> List[Node]:
    return [node for node in iter_nodes(root) if node.name == name]


def find_paths(root: Node, name: str) -> List[str]:
    paths = [get_path(node) for node in find_by_name(root, name)]
    paths.sort()
    return paths


def count_nodes(node: Node) -> int:
    return 1 + sum(1 for _ in iter_nodes(node))


class VirtualFS:
    """Path-level front for a single tree and its limits."""

    def __init__(self, tree: Optional[Mapping[str, Any]] = None, limits: Optional[Limits] = None):
        self.limits = limits or DEFAULT_LIMITS
        self._root = new_root()
        if tree:
            self._load_tree(self._root, tree)

    @property
    def root(self) -> Node:
        return self._root

    def _load_tree(self, parent: Node, tree: Mapping[str, Any]) -> None:
        for raw_name, value in tree.items():
            name = raw_name.strip("/")
            if isinstance(value, Mapping):
                existing = parent.children.get(name)
                if existing is not None and existing.is_dir:
                    child = existing
                else:
                    child = create(parent, name, NodeKind.DIR, self.limits)
                self._load_tree(child, value)
                continue
            child = create(parent, name, NodeKind.FILE, self.limits)
            set_file_content(child, str(value))

    def snapshot(self, node: Optional[Node] = None) -> Dict[str, Any]:
        """Nested dict of the tree: directories map to dicts, files to their content."""
        node = node or self._root
        out: Dict[str, Any] = {}
        for name in sorted(node.children):
            child = node.children[name]
            out[name] = self.snapshot(child) if child.is_dir else child.content
        return out

    def resolve(self, path: str) -> Node:
        node, _ = resolve_path(self._root, path)
        return node

    def exists(self, path: str) -> bool:
        try:
            self.resolve(path)
        except NotFound:
            return False
        return True

    def create(self, path: str, kind: NodeKind) -> Node:
        parent, name = resolve_path(self._root, path, allow_missing_last=True)
        if name is None:
            raise AlreadyExists(f"already exists: {get_path(parent)}")
        return create(parent, name, kind, self.limits)

    def read_file(self, path: str) -> str:
        node = self.resolve(path)
        content = get_file_content(node)
        if content is None:
            raise WrongKind(f"not a file: {get_path(node)}")
        return content

    def write_file(self, path: str, content: str) -> int:
        node = self.resolve(path)
        set_file_content(node, content)
        return len(content.encode("utf-8"))

    def delete(self, path: str) -> None:
        delete(self.resolve(path))

    def delete_recursive(self, path: str) -> int:
        removed = delete_recursive(self.resolve(path))
        logger.debug("removed %d node(s) under %s", removed, path)
        return removed

    def find(self, name: str) -> List[str]:
        return find_paths(self._root, name)

    def count(self) -> int:
        return count_nodes(self._root)
