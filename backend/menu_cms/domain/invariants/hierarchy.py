from typing import Mapping, Optional, Set
from .exceptions import InvariantViolation


def assert_forest(parent_by_id: Mapping[str, Optional[str]]) -> None:
    """
    Every parent chain must end (at None or at an id outside the map)
    without revisiting a page.
    """
    terminates: Set[str] = set()

    for start in parent_by_id:
        path = []
        on_path: Set[str] = set()
        current = start

        while current is not None and current in parent_by_id and current not in terminates:
            if current in on_path:
                raise InvariantViolation(f"Page {current} would become its own ancestor")
            on_path.add(current)
            path.append(current)
            current = parent_by_id[current]

        terminates.update(path)


def assert_not_own_ancestor(page_id: str, new_parent_id: Optional[str], parent_by_id: Mapping[str, Optional[str]]) -> None:
    """Moving ``page_id`` under ``new_parent_id`` must keep the menu a forest."""
    if new_parent_id is None:
        return

    merged = dict(parent_by_id)
    merged[page_id] = new_parent_id
    assert_forest(merged)
