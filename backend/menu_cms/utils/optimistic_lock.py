from datetime import timezone
from flask import abort, request
from dateutil.parser import parse, ParserError


def as_utc(ts):
    """Naive timestamps (SQLite drops tzinfo) are taken as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Honour an If-Unmodified-Since header on writes.

    The header has second precision, so the stored timestamp is truncated
    before comparing. 409 when the row changed after the client's copy.
    """
    header = request.headers.get("If-Unmodified-Since")
    if not header or entity.updated_at is None:
        return

    try:
        client_ts = as_utc(parse(header))
    except (ParserError, OverflowError, ValueError):
        abort(400, description="Invalid If-Unmodified-Since header")

    server_ts = as_utc(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(409, description="Conflict detected. Page has been modified.")
