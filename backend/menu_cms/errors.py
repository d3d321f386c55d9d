from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException
from menu_cms.domain.exceptions import CmsError
from menu_cms.domain.invariants.exceptions import InvariantViolation


def error_response(message, status_code, errors=None, error=None):
    body = {
        "success": False,
        "message": message,
    }
    if error:
        body["error"] = error
    if errors:
        body["errors"] = errors

    response = jsonify(body)
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(CmsError)
    def handle_cms_error(error):
        return error_response(error.message, error.status_code, error.errors)

    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return error_response(str(error), 400, error="InvariantViolation")

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code == 413:
            max_mb = current_app.config["MAX_FILE_SIZE"] // (1024 * 1024)
            return error_response(f"File too large. Maximum size allowed is {max_mb}MB.", 400)
        return error_response(error.description or error.name, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        # Detail stays in the server log
        current_app.logger.exception("Unhandled error: %s", error)
        return error_response("Internal server error", 500)
