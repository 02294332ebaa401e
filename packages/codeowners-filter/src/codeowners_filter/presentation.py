from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel
from rich.markup import escape
from rich.tree import Tree

from .tree import PathNode

OWNED_MARKER = "(directly owned)"


class TreeItem(BaseModel):
    """Display record for one PathNode, referenced by `full_path` only."""

    label: str
    full_path: str
    description: str = ""
    tooltip: str = ""
    collapsible: bool = False
    is_file: bool = False


def index_nodes(nodes: Iterable[PathNode]) -> dict[str, PathNode]:
    out: dict[str, PathNode] = {}
    stack = list(nodes)
    while stack:
        node = stack.pop()
        out[node.full_path] = node
        stack.extend(node.children)
    return out


def tree_item(node: PathNode) -> TreeItem:
    marker = OWNED_MARKER if node.is_directly_owned else ""
    return TreeItem(
        label=node.label,
        full_path=node.full_path,
        description=marker,
        tooltip=f"{node.full_path} {marker}".rstrip(),
        collapsible=bool(node.children),
        is_file=node.is_file,
    )


def child_items(
    roots: list[PathNode],
    index: dict[str, PathNode],
    parent: TreeItem | None = None,
) -> list[TreeItem]:
    if parent is None:
        return [tree_item(n) for n in roots]
    node = index.get(parent.full_path)
    if node is None:
        return []
    return [tree_item(n) for n in node.children]


def _add(branch: Tree, node: PathNode) -> None:
    name = escape(node.label)
    label = name if node.is_file else f"[bold]{name}/[/bold]"
    if node.is_directly_owned:
        label = f"{label} [dim]{OWNED_MARKER}[/dim]"
    child = branch.add(label)
    for sub in node.children:
        _add(child, sub)


def render_tree(nodes: Iterable[PathNode], *, title: str) -> Tree:
    root = Tree(title)
    for node in nodes:
        _add(root, node)
    return root
