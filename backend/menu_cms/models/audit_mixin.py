from menu_cms.extensions import db


class AuditMixin:
    """Who created / last touched the row. Filled from the caller's actor id."""

    created_by = db.Column(db.String(100), nullable=False)
    updated_by = db.Column(db.String(100), nullable=False)
