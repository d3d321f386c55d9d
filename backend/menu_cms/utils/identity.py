from flask import current_app
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request


def current_actor() -> str:
    """
    Identity recorded in created_by / updated_by.

    Taken from the request's JWT when one is sent; otherwise the configured
    stand-in actor. Authentication itself happens outside this service.
    """
    verify_jwt_in_request(optional=True)
    identity = get_jwt_identity()

    if isinstance(identity, dict):
        identity = identity.get("user_id") or identity.get("email")

    return str(identity) if identity else current_app.config["DEFAULT_ACTOR"]
