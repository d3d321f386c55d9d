from menu_cms.extensions import db
from .base import BaseModel
from .audit_mixin import AuditMixin

CONTENT = "content"
EXTERNAL_LINK = "external_link"
FILE = "file"
CONTENT_KINDS = (CONTENT, EXTERNAL_LINK, FILE)

TITLE_MAX = 200
SLUG_MAX = 200
URL_MAX = 500
WINDOW_TITLE_MAX = 100
META_KEYWORDS_MAX = 500
META_DESCRIPTION_MAX = 300

FILE_FIELDS = ("file_name", "original_file_name", "file_size", "file_mime_type", "file_path")


class CmsPage(BaseModel, AuditMixin):
    __tablename__ = "cms_pages"

    title = db.Column(db.String(TITLE_MAX), nullable=False)
    slug = db.Column(db.String(SLUG_MAX), nullable=False, index=True)

    menu_type_id = db.Column(
        db.String(36), db.ForeignKey("menu_types.id"), nullable=False, index=True
    )
    # No FK: deleting a parent leaves children pointing at it
    parent_id = db.Column(db.String(36), nullable=True, index=True)
    order = db.Column(db.Integer, nullable=False, default=0, index=True)

    content_kind = db.Column(db.String(20), nullable=False, default=CONTENT)
    body = db.Column(db.Text, nullable=False, default="")
    external_url = db.Column(db.String(URL_MAX), nullable=True)
    open_in_new_window = db.Column(db.Boolean, nullable=False, default=False)

    # Attached file (content_kind == "file")
    file_name = db.Column(db.String(255), nullable=True)
    original_file_name = db.Column(db.String(255), nullable=True)
    file_size = db.Column(db.Integer, nullable=True)
    file_mime_type = db.Column(db.String(120), nullable=True)
    file_path = db.Column(db.String(512), nullable=True)

    enabled = db.Column(db.Boolean, nullable=False, default=True, index=True)

    # SEO
    window_title = db.Column(db.String(WINDOW_TITLE_MAX), nullable=True)
    meta_keywords = db.Column(db.String(META_KEYWORDS_MAX), nullable=True)
    meta_description = db.Column(db.String(META_DESCRIPTION_MAX), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("slug", name="uq_cms_page_slug"),
        db.Index("idx_cms_page_menu_parent_order", "menu_type_id", "parent_id", "order"),
    )

    menu_type = db.relationship("MenuType", back_populates="pages")

    @property
    def has_file(self):
        return self.content_kind == FILE and bool(self.file_path)

    @property
    def file_url(self):
        if self.has_file:
            return f"/api/v1/cms-pages/file/{self.id}"
        return None

    def clear_file(self):
        for field in FILE_FIELDS:
            setattr(self, field, None)
