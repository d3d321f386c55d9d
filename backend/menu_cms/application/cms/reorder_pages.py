# menu_cms/application/cms/reorder_pages.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from flask import current_app
from sqlalchemy import update
from menu_cms.extensions import db
from menu_cms.models.base import utc_now
from menu_cms.models.page import CmsPage
from menu_cms.domain.exceptions import InvalidInput
from menu_cms.domain.hierarchy import Assignment, flatten_tree
from menu_cms.domain.invariants.hierarchy import assert_forest
from menu_cms.utils.transaction import transactional
from .content import ensure_menu_type


@dataclass
class ReorderResult:
    menu_type_id: str
    applied: List[str] = field(default_factory=list)
    # Pages that disappeared between validation and write
    failed: List[str] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "menu_type_id": self.menu_type_id,
            "applied": len(self.applied),
            "failed": self.failed,
        }


def _resolve_menu_type(assignments: List[Assignment], menu_type_id: Optional[str]) -> str:
    if menu_type_id is not None and not isinstance(menu_type_id, str):
        raise InvalidInput.for_field("menu_type_id", "menu_type_id must be a string")

    if menu_type_id:
        return ensure_menu_type(menu_type_id).id

    first = db.session.get(CmsPage, assignments[0].page_id)
    if first is None:
        raise InvalidInput(
            "Tree references pages that do not exist",
            errors=[{"field": "tree", "message": f"Unknown page id: {assignments[0].page_id}"}],
        )
    return first.menu_type_id


def reorder_pages(
    *,
    tree: Any,
    actor_id: str,
    menu_type_id: Optional[str] = None,
) -> ReorderResult:
    """
    Persist a drag-and-drop edited tree of one menu type.

    Responsibilities:
    - Reject malformed trees and ids outside the menu before any write
    - Check the resulting parent graph is still a forest
    - Apply every (parent_id, order) pair in one transaction, one idempotent
      row update each; rows deleted meanwhile are reported, not retried

    Concurrent reorders of the same menu are not serialised: the last
    commit wins row by row.
    """
    if not isinstance(tree, list) or not tree:
        raise InvalidInput("Tree payload is required")

    # Structure first, so a malformed payload never reaches the store
    assignments = flatten_tree(tree)
    menu_type_id = _resolve_menu_type(assignments, menu_type_id)

    pages = CmsPage.query.filter_by(menu_type_id=menu_type_id).all()
    assignments = flatten_tree(tree, known_ids={p.id for p in pages})

    parent_by_id = {p.id: p.parent_id for p in pages}
    parent_by_id.update({a.page_id: a.parent_id for a in assignments})
    assert_forest(parent_by_id)

    result = ReorderResult(menu_type_id=menu_type_id)
    now = utc_now()

    with transactional():
        for assignment in assignments:
            outcome = db.session.execute(
                update(CmsPage)
                .where(CmsPage.id == assignment.page_id)
                .values(
                    parent_id=assignment.parent_id,
                    order=assignment.order,
                    updated_by=actor_id,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            if outcome.rowcount:
                result.applied.append(assignment.page_id)
            else:
                result.failed.append(assignment.page_id)

    if result.partial:
        current_app.logger.warning(
            "Reorder of menu %s by %s skipped %d missing page(s): %s",
            menu_type_id, actor_id, len(result.failed), ", ".join(result.failed),
        )
    else:
        current_app.logger.info(
            "Menu %s reordered by %s (%d pages)", menu_type_id, actor_id, len(result.applied)
        )

    return result
