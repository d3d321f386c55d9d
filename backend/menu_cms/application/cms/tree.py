# menu_cms/application/cms/tree.py
from typing import List
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage
from menu_cms.models.menu_type import MenuType
from menu_cms.domain.exceptions import NotFoundError
from menu_cms.domain.hierarchy import PageRef, TreeNode, build_tree, prune_disabled
from flask import current_app


def to_page_ref(page: CmsPage) -> PageRef:
    """The one place where stored rows become hierarchy entities."""
    return PageRef(
        id=page.id,
        title=page.title,
        menu_type_id=page.menu_type_id,
        parent_id=page.parent_id or None,
        order=page.order or 0,
        enabled=bool(page.enabled),
        slug=page.slug,
    )


def get_menu_tree(menu_type_id: str, *, public: bool = False) -> List[TreeNode]:
    """
    Nested pages of one menu type.

    ``public`` drops disabled pages together with everything below them.
    """
    if db.session.get(MenuType, menu_type_id) is None:
        raise NotFoundError("Menu type not found")

    pages = CmsPage.query.filter_by(menu_type_id=menu_type_id).all()
    forest = build_tree([to_page_ref(p) for p in pages], menu_type_id)

    orphaned = [n.id for n in forest if n.orphaned]
    if orphaned:
        current_app.logger.warning(
            "Menu %s has %d page(s) with unresolvable parents: %s",
            menu_type_id, len(orphaned), ", ".join(orphaned),
        )

    if public:
        return prune_disabled(forest)

    return forest
