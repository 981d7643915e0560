from flask import current_app, jsonify
from sqlalchemy.exc import DBAPIError
from werkzeug.exceptions import HTTPException

from navtree.domain.exceptions import ConcurrencyConflictError, NavigationError

# SQLSTATE raised by Postgres when a SERIALIZABLE transaction loses a race
SERIALIZATION_FAILURE = "40001"


def _is_serialization_failure(error: DBAPIError) -> bool:
    return getattr(error.orig, "pgcode", None) == SERIALIZATION_FAILURE


def register_error_handlers(app):
    @app.errorhandler(NavigationError)
    def handle_navigation_error(error):
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(DBAPIError)
    def handle_database_error(error):
        if _is_serialization_failure(error):
            return handle_navigation_error(
                ConcurrencyConflictError(
                    "Concurrent update detected. Refresh and try again."
                )
            )

        current_app.logger.error("Database error: %s", error)
        response = jsonify({
            "error": "DatabaseError",
            "message": "Unexpected database error",
        })
        response.status_code = 500
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name.replace(" ", ""),
            "message": error.description,
        })
        response.status_code = error.code
        return response
