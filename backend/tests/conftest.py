import pytest

from menu_cms import create_app
from menu_cms.extensions import db
from menu_cms.models.menu_type import MenuType
from menu_cms.models.page import CmsPage
from menu_cms.application.cms.create_page import create_page


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", {"UPLOAD_FOLDER": str(tmp_path / "uploads")})

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upload_dir(app):
    return app.config["UPLOAD_FOLDER"]


def _menu_type(name):
    menu_type = MenuType()
    menu_type.name = name
    db.session.add(menu_type)
    db.session.commit()
    return menu_type


@pytest.fixture
def header(app):
    return _menu_type("Header")


@pytest.fixture
def footer(app):
    return _menu_type("Footer")


@pytest.fixture
def make_page(app, header):
    """Create pages through the real use case; defaults to the Header menu."""

    def factory(title, **fields):
        data = {"title": title, "menu_type_id": header.id}
        data.update(fields)
        return create_page(actor_id="tester", data=data)

    return factory


@pytest.fixture
def insert_page(app, header):
    """Write a row directly, bypassing validation (for corrupted data)."""

    def factory(title, **fields):
        page = CmsPage()
        page.title = title
        page.slug = fields.pop("slug", title.lower().replace(" ", "-"))
        page.menu_type_id = fields.pop("menu_type_id", header.id)
        page.created_by = page.updated_by = "fixture"
        for key, value in fields.items():
            setattr(page, key, value)
        db.session.add(page)
        db.session.commit()
        return page

    return factory
