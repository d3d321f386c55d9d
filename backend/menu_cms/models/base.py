from datetime import datetime, timezone
import uuid
from menu_cms.extensions import db


def utc_now():
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """uuid primary key plus UTC creation and modification times."""

    __abstract__ = True

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, index=True)
