# menu_cms/application/cms/queries.py
from typing import Optional, Set
from sqlalchemy import or_
from menu_cms.extensions import db
from menu_cms.models.page import CmsPage
from menu_cms.domain.exceptions import NotFoundError
from menu_cms.domain.hierarchy import descendant_ids
from .tree import to_page_ref

ROOT_PARENT_VALUES = {"null", "none", "root"}


def get_page(page_id: str) -> CmsPage:
    page = db.session.get(CmsPage, page_id)
    if page is None:
        raise NotFoundError("Page not found")
    return page


def get_page_by_slug(slug: str, *, enabled_only: bool = True) -> CmsPage:
    """Public lookup. Disabled pages are treated as missing."""
    query = CmsPage.query.filter_by(slug=slug.strip().lower())
    if enabled_only:
        query = query.filter_by(enabled=True)

    page = query.first()
    if page is None:
        raise NotFoundError("Page not found")
    return page


def list_pages(
    *,
    search: str = "",
    menu_type_id: Optional[str] = None,
    parent_id: Optional[str] = None,
    enabled: Optional[bool] = None,
    page: int = 1,
    limit: int = 10,
):
    """
    Filtered admin listing, offset-paginated.

    ``parent_id`` may be "null"/"root" to list top-level pages only.
    """
    query = CmsPage.query

    if search:
        query = query.filter(
            or_(
                CmsPage.title.icontains(search, autoescape=True),
                CmsPage.slug.icontains(search, autoescape=True),
            )
        )

    if menu_type_id:
        query = query.filter(CmsPage.menu_type_id == menu_type_id)

    if parent_id:
        if parent_id.lower() in ROOT_PARENT_VALUES:
            query = query.filter(CmsPage.parent_id.is_(None))
        else:
            query = query.filter(CmsPage.parent_id == parent_id)

    if enabled is not None:
        query = query.filter(CmsPage.enabled.is_(enabled))

    return query.order_by(CmsPage.order.asc(), CmsPage.created_at.desc()).paginate(
        page=page, per_page=limit, error_out=False
    )


def list_dropdown_pages():
    return (
        db.session.query(CmsPage.id, CmsPage.title)
        .filter(CmsPage.enabled.is_(True))
        .order_by(CmsPage.title.asc())
        .all()
    )


def list_parent_choices(menu_type_id: str, *, exclude_id: Optional[str] = None):
    """
    Enabled pages a page of ``menu_type_id`` may be nested under.

    When editing, the page itself and everything below it are left out so
    the choice can never create a cycle.
    """
    pages = CmsPage.query.filter_by(menu_type_id=menu_type_id).all()

    excluded: Set[str] = set()
    if exclude_id:
        excluded = descendant_ids((to_page_ref(p) for p in pages), exclude_id)
        excluded.add(exclude_id)

    choices = [p for p in pages if p.enabled and p.id not in excluded]
    return sorted(choices, key=lambda p: (p.order, p.title))


def parent_titles(pages) -> dict:
    """id -> title for the parents referenced by ``pages`` (one query)."""
    ids = {p.parent_id for p in pages if p.parent_id}
    if not ids:
        return {}

    rows = db.session.query(CmsPage.id, CmsPage.title).filter(CmsPage.id.in_(ids)).all()
    return {row.id: row.title for row in rows}
