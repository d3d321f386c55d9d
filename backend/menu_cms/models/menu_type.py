from menu_cms.extensions import db
from .base import BaseModel

MENU_TYPE_NAME_MAX = 50


class MenuType(BaseModel):
    __tablename__ = "menu_types"

    name = db.Column(db.String(MENU_TYPE_NAME_MAX), unique=True, nullable=False)

    pages = db.relationship("CmsPage", back_populates="menu_type", lazy="dynamic")
