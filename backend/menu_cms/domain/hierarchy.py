# menu_cms/domain/hierarchy.py
"""
Page tree materialisation and flattening.

Pages are stored flat: each row carries a nullable ``parent_id`` and an
``order`` among its siblings, scoped by ``menu_type_id``. The admin UI works
on the nested form. This module converts between the two and holds no
database or Flask dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set

from .exceptions import InvalidInput


@dataclass(frozen=True)
class PageRef:
    """
    Closed view of a stored page, as far as the hierarchy is concerned.

    Built from ORM rows by a single mapping function so that nothing else
    leaks into tree building.
    """
    id: str
    title: str
    menu_type_id: str
    parent_id: Optional[str] = None
    order: int = 0
    enabled: bool = True
    slug: str = ""


class ParentResolution(str, Enum):
    # Root by intent, or attached under its real parent
    RESOLVED = "resolved"
    # Parent missing, in another menu type, itself, or part of a stored
    # cycle; shown at the top level so the tree stays renderable
    ORPHANED_TO_ROOT = "orphaned_to_root"


@dataclass(eq=False)
class TreeNode:
    id: str
    title: str
    order: int = 0
    slug: str = ""
    enabled: bool = True
    resolution: ParentResolution = ParentResolution.RESOLVED
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def orphaned(self) -> bool:
        return self.resolution is ParentResolution.ORPHANED_TO_ROOT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "order": self.order,
            "enabled": self.enabled,
            "orphaned": self.orphaned,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class Assignment:
    page_id: str
    parent_id: Optional[str]
    order: int


# ------------------------
# Flat -> nested
# ------------------------

def build_tree(pages: Iterable[PageRef], menu_type_id: str) -> List[TreeNode]:
    """
    Materialise the forest of one menu type.

    Every in-scope page appears exactly once. Pages whose parent cannot be
    resolved inside the scope are promoted to the top level and marked
    ``ORPHANED_TO_ROOT``. Siblings are sorted by ascending ``order``.
    """
    scoped = [p for p in pages if p.menu_type_id == menu_type_id]

    # Pass 1: id-keyed lookup
    nodes: Dict[str, TreeNode] = {
        p.id: TreeNode(id=p.id, title=p.title, order=p.order, slug=p.slug, enabled=p.enabled)
        for p in scoped
    }
    parent_of: Dict[str, Optional[str]] = {}

    # Pass 2: attach
    roots: List[TreeNode] = []
    for page in scoped:
        node = nodes[page.id]
        parent = nodes.get(page.parent_id) if page.parent_id is not None else None

        if page.parent_id is None:
            roots.append(node)
        elif parent is None or parent is node:
            node.resolution = ParentResolution.ORPHANED_TO_ROOT
            roots.append(node)
        else:
            parent.children.append(node)
            parent_of[page.id] = page.parent_id

    _detach_cycles(scoped, nodes, parent_of, roots)
    _sort_siblings(roots)
    return roots


def _detach_cycles(
    scoped: List[PageRef],
    nodes: Dict[str, TreeNode],
    parent_of: Dict[str, Optional[str]],
    roots: List[TreeNode],
) -> None:
    """Promote one member of each stored parent cycle so no page goes missing."""
    reached: Set[str] = set()
    for root in roots:
        _mark_reached(root, reached)

    if len(reached) == len(nodes):
        return

    for page in scoped:
        if page.id in reached:
            continue

        # Walk up until a node repeats; that node sits on the cycle
        seen: Set[str] = set()
        current = page.id
        while current not in seen:
            seen.add(current)
            current = parent_of[current]

        cycle_node = nodes[current]
        nodes[parent_of[current]].children.remove(cycle_node)
        del parent_of[current]
        cycle_node.resolution = ParentResolution.ORPHANED_TO_ROOT
        roots.append(cycle_node)
        _mark_reached(cycle_node, reached)


def _mark_reached(node: TreeNode, reached: Set[str]) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.id in reached:
            continue
        reached.add(current.id)
        stack.extend(current.children)


def _sort_siblings(siblings: List[TreeNode]) -> None:
    stack = [siblings]
    while stack:
        group = stack.pop()
        group.sort(key=lambda n: (n.order, n.id))
        stack.extend(n.children for n in group if n.children)


def iter_nodes(forest: Iterable[TreeNode]) -> Iterator[TreeNode]:
    """Pre-order walk over a forest."""
    for node in forest:
        yield node
        yield from iter_nodes(node.children)


def count_nodes(forest: Iterable[TreeNode]) -> int:
    return sum(1 for _ in iter_nodes(forest))


def prune_disabled(forest: Iterable[TreeNode]) -> List[TreeNode]:
    """Copy of the forest without disabled pages; their subtrees go with them."""
    return [
        replace(node, children=prune_disabled(node.children))
        for node in forest
        if node.enabled
    ]


def descendant_ids(pages: Iterable[PageRef], page_id: str) -> Set[str]:
    """Ids of every page below ``page_id`` by stored parent references."""
    children: Dict[str, List[str]] = {}
    for page in pages:
        if page.parent_id is not None:
            children.setdefault(page.parent_id, []).append(page.id)

    found: Set[str] = set()
    stack = list(children.get(page_id, []))
    while stack:
        current = stack.pop()
        if current in found or current == page_id:
            continue
        found.add(current)
        stack.extend(children.get(current, []))
    return found


# ------------------------
# Nested -> flat
# ------------------------

def flatten_tree(tree: Any, known_ids: Optional[Set[str]] = None) -> List[Assignment]:
    """
    Turn a client-edited tree back into (page_id, parent_id, order) rows.

    Depth-first pre-order. Siblings get orders 1..k by position and each
    node's parent is the node it was nested under (None at the top level).
    Nothing is trusted: malformed nodes, repeated ids and, when
    ``known_ids`` is given, ids outside that set raise ``InvalidInput``.
    """
    if not isinstance(tree, list):
        raise InvalidInput("Tree must be a list of nodes")

    assignments: List[Assignment] = []
    seen: Set[str] = set()
    _flatten_level(tree, None, assignments, seen)

    if known_ids is not None:
        unknown = [a.page_id for a in assignments if a.page_id not in known_ids]
        if unknown:
            raise InvalidInput(
                "Tree references pages that do not belong to this menu",
                errors=[{"field": "tree", "message": f"Unknown page id: {page_id}"} for page_id in unknown],
            )

    return assignments


def _flatten_level(
    level: List[Any],
    parent_id: Optional[str],
    out: List[Assignment],
    seen: Set[str],
) -> None:
    for position, raw in enumerate(level, start=1):
        page_id, children = _read_node(raw)

        if page_id in seen:
            raise InvalidInput(
                "Tree contains the same page more than once",
                errors=[{"field": "tree", "message": f"Duplicate page id: {page_id}"}],
            )
        seen.add(page_id)

        out.append(Assignment(page_id=page_id, parent_id=parent_id, order=position))
        _flatten_level(children, page_id, out, seen)


def _read_node(raw: Any):
    if isinstance(raw, TreeNode):
        return raw.id, raw.children

    if not isinstance(raw, Mapping):
        raise InvalidInput("Each tree node must be an object")

    page_id = raw.get("id")
    # bool is an int subclass; reject it explicitly
    if isinstance(page_id, bool) or not isinstance(page_id, (str, int)):
        raise InvalidInput("Each tree node needs an id")

    page_id = str(page_id).strip()
    if not page_id:
        raise InvalidInput("Each tree node needs an id")

    children = raw.get("children")
    if children is None:
        children = []
    if not isinstance(children, list):
        raise InvalidInput(f"Children of page {page_id} must be a list")

    return page_id, children
