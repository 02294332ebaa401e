from __future__ import annotations

import logging
from typing import Iterable, Sequence

from pydantic import BaseModel, Field

from .fs import FileSystem
from .matching import has_wildcard, matches, normalize_pattern, wildcard_base
from .resolver import OwnerIndex

logger = logging.getLogger(__name__)


class PathNode(BaseModel):
    label: str
    full_path: str
    is_directly_owned: bool = False
    is_file: bool = False
    children: list["PathNode"] = Field(default_factory=list)


def _list(fs: FileSystem, path: str, *, recursive: bool) -> list[str]:
    try:
        return fs.list_directory(path, recursive=recursive)
    except (OSError, ValueError) as exc:
        logger.warning("cannot list %s: %s", path or ".", exc)
        return []


def _is_directory(fs: FileSystem, path: str) -> bool:
    try:
        return fs.is_directory(path)
    except (OSError, ValueError) as exc:
        logger.warning("cannot stat %s: %s", path, exc)
        return False


def expand_wildcard(pattern: str, fs: FileSystem) -> list[str]:
    base, recursive = wildcard_base(pattern)
    listed = _list(fs, base, recursive=recursive)
    out = [p for p in listed if matches(p, pattern)]
    logger.debug("expanded %s to %d path(s) under %s", pattern, len(out), base or ".")
    if base and _is_directory(fs, base):
        out.append(base)
    return out


def expand_patterns(patterns: Iterable[str], fs: FileSystem) -> list[str]:
    """Flatten owner patterns into concrete paths, sorted and de-duplicated."""
    working: list[str] = []
    for raw in patterns:
        pattern = normalize_pattern(raw)
        if not pattern:
            continue
        if has_wildcard(pattern):
            working.extend(expand_wildcard(pattern, fs))
            continue
        working.append(pattern)
        if _is_directory(fs, pattern):
            files = _list(fs, pattern, recursive=True)
            logger.debug("expanded directory %s to %d file(s)", pattern, len(files))
            working.extend(files)
    return sorted(set(working))


def _sort_key(node: PathNode) -> tuple[bool, str, str]:
    return node.is_file, node.label.casefold(), node.label


def sort_nodes(nodes: list[PathNode]) -> None:
    nodes.sort(key=_sort_key)
    for node in nodes:
        sort_nodes(node.children)


def nodes_from_paths(paths: Sequence[str], fs: FileSystem) -> list[PathNode]:
    by_path: dict[str, PathNode] = {}
    roots: list[PathNode] = []

    for path in paths:
        try:
            path_is_file = fs.is_file(path)
        except (OSError, ValueError) as exc:
            logger.warning("skipping %s: %s", path, exc)
            continue

        segments = [s for s in path.split("/") if s]
        parent: PathNode | None = None
        current = ""
        for idx, segment in enumerate(segments):
            current = f"{current}/{segment}" if current else segment
            node = by_path.get(current)
            if node is None:
                node = PathNode(label=segment, full_path=current)
                by_path[current] = node
                (parent.children if parent is not None else roots).append(node)
            if idx == len(segments) - 1:
                node.is_directly_owned = True
                node.is_file = node.is_file or path_is_file
            parent = node

    sort_nodes(roots)
    return roots


def build_tree(
    owner_patterns: Sequence[str],
    owner_index: OwnerIndex,
    current_owner: str,
    fs: FileSystem,
) -> list[PathNode]:
    """Build the sorted tree of paths `current_owner` ends up owning."""
    paths = expand_patterns(owner_patterns, fs)
    kept = [p for p in paths if owner_index.resolves_to(p, current_owner)]
    dropped = len(paths) - len(kept)
    if dropped:
        logger.debug("%d path(s) resolve to other owners than %s", dropped, current_owner)
    return nodes_from_paths(kept, fs)
