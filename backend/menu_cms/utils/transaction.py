from contextlib import contextmanager
from flask import current_app
from menu_cms.extensions import db


@contextmanager
def transactional():
    """
    Unit of work around the current session.

    Commits when the block exits cleanly. Any exception, including an
    InvariantViolation raised mid-block, rolls back every pending change
    and propagates to the caller.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as exc:
        db.session.rollback()
        current_app.logger.debug("Transaction rolled back: %s", exc.__class__.__name__)
        raise
