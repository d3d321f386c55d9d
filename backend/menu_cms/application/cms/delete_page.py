from flask import current_app
from menu_cms.extensions import db
from menu_cms.utils.media import delete_file
from menu_cms.utils.transaction import transactional
from .queries import get_page


def delete_page(
    *,
    page_id: str,
    actor_id: str,
) -> None:
    """
    Hard-delete a page.

    Notes:
    - Child pages are left in place with a dangling parent_id; the tree
      builder shows them as orphaned roots
    - The attached file is removed after the commit, best-effort
    """
    page = get_page(page_id)
    file_path = page.file_path

    with transactional():
        db.session.delete(page)

    current_app.logger.info("Page %s deleted by %s", page_id, actor_id)

    if file_path:
        delete_file(file_path)
