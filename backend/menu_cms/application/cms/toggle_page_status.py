from flask import current_app
from menu_cms.models.page import CmsPage
from menu_cms.utils.transaction import transactional
from .queries import get_page


def toggle_page_status(
    *,
    page_id: str,
    actor_id: str,
) -> CmsPage:
    """Flip ``enabled``. Disabled pages vanish from public menus and parent choices."""
    page = get_page(page_id)

    with transactional():
        page.enabled = not page.enabled
        page.updated_by = actor_id

    current_app.logger.info(
        "Page %s %s by %s", page.id, "enabled" if page.enabled else "disabled", actor_id
    )
    return page
