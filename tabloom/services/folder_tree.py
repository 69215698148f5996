"""Build the folder forest from flat folder rows.

Pure functions over plain data: no session, no side effects.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class FolderNode:
    """One folder in the forest, with its sorted children."""

    id: str
    name: str
    parent_id: Optional[str]
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    children: List["FolderNode"] = field(default_factory=list)
    bookmarks: List[Any] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "FolderNode":
        return cls(
            id=row.id,
            name=row.name,
            parent_id=row.parent_id,
            sort_order=row.sort_order or 0,
            created_at=getattr(row, "created_at", None),
            updated_at=getattr(row, "updated_at", None),
        )


def _break_cycles(order: List[str], parents: Dict[str, Optional[str]]) -> None:
    """Detach one member of every parent cycle, in place.

    Walks parent pointers from each node in arrival order. When a walk runs
    into a node already on its own path, the cycle members are known; the
    member that arrived first in the input loses its parent.
    """
    position = {node_id: i for i, node_id in enumerate(order)}
    done = set()

    for start in order:
        path: List[str] = []
        on_path = set()
        current: Optional[str] = start
        while current is not None and current not in done:
            if current in on_path:
                cycle = path[path.index(current):]
                cut = min(cycle, key=position.__getitem__)
                logger.warning(
                    "Folder parent cycle detected; promoting folder to root",
                    extra={"folder_id": cut, "cycle": cycle},
                )
                parents[cut] = None
                break
            path.append(current)
            on_path.add(current)
            current = parents.get(current)
        done.update(path)


def build_folder_tree(rows: Iterable[Any]) -> List[FolderNode]:
    """Turn flat folder rows into a forest sorted by ``sort_order``.

    A row whose parent is missing from *rows* (deleted, filtered out or
    unknown) becomes a root. Sorting is stable, so siblings with equal
    ``sort_order`` keep their input order. Every row appears exactly once,
    even when stored parent pointers form a cycle.
    """
    nodes: Dict[str, FolderNode] = {}
    for row in rows:
        node = FolderNode.from_row(row)
        nodes[node.id] = node
    order = list(nodes)

    parents: Dict[str, Optional[str]] = {
        node_id: node.parent_id if node.parent_id in nodes else None
        for node_id, node in nodes.items()
    }
    _break_cycles(order, parents)

    roots: List[FolderNode] = []
    for node_id in order:
        parent_id = parents[node_id]
        if parent_id is None:
            roots.append(nodes[node_id])
        else:
            nodes[parent_id].children.append(nodes[node_id])

    roots.sort(key=lambda n: n.sort_order)
    for node in _walk(roots):
        node.children.sort(key=lambda n: n.sort_order)
    return roots


def _walk(forest: List[FolderNode]):
    stack = list(forest)
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children)


def index_forest(forest: List[FolderNode]) -> Dict[str, FolderNode]:
    """Every node of *forest* keyed by id."""
    return {node.id: node for node in _walk(forest)}
