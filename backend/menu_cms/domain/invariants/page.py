from menu_cms.models.page import CONTENT, EXTERNAL_LINK, FILE
from .exceptions import InvariantViolation


def assert_parent_in_menu(page, parent):
    if parent is None:
        return

    if parent.id == page.id:
        raise InvariantViolation("A page cannot be its own parent.")

    if parent.menu_type_id != page.menu_type_id:
        raise InvariantViolation(
            "Parent page must belong to the same menu type."
        )


def assert_content_kind(page):
    """Exactly the payload matching content_kind may be set."""
    if page.content_kind == EXTERNAL_LINK:
        if not page.external_url:
            raise InvariantViolation("External link pages must have a URL.")
        if page.file_path:
            raise InvariantViolation("External link pages cannot carry a file.")

    elif page.content_kind == FILE:
        if not page.file_path:
            raise InvariantViolation("File pages must have an attached file.")
        if page.external_url:
            raise InvariantViolation("File pages cannot carry an external URL.")

    elif page.content_kind == CONTENT:
        if page.external_url or page.file_path:
            raise InvariantViolation(
                "Content pages cannot carry an external URL or a file."
            )

    else:
        raise InvariantViolation(f"Unknown content kind: {page.content_kind}")


def assert_page(page, parent=None):
    assert_content_kind(page)
    assert_parent_in_menu(page, parent)
