"""
Error Handling Middleware
Centralized error handling and logging
"""
import logging
from flask import request, jsonify
from google.api_core import exceptions as google_exceptions
from werkzeug.exceptions import HTTPException

from planboard.utils.errors import PlanboardError
from planboard.utils.validators import Helpers

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling service"""

    @staticmethod
    def handle_domain_error(error: PlanboardError) -> tuple:
        """Handle errors raised by the model layer"""
        if error.status_code >= 500:
            logger.error(f"{error.code} on {request.method} {request.path}: {error.message}")
        else:
            logger.info(f"{error.code} on {request.method} {request.path}: {error.message}")

        return jsonify(Helpers.build_error_response(
            message=error.message,
            code=error.code,
            details=error.details
        )), error.status_code

    @staticmethod
    def handle_firestore_error(error: Exception) -> tuple:
        """Handle Firestore errors that escaped the model layer"""
        logger.error(f"Firestore error: {error}")

        return jsonify(Helpers.build_error_response(
            message="Database operation failed",
            code="TRANSPORT_ERROR"
        )), 503

    @staticmethod
    def handle_http_error(error: HTTPException) -> tuple:
        return jsonify(Helpers.build_error_response(
            message=error.description or error.name,
            code=error.name.upper().replace(" ", "_")
        )), error.code

    @staticmethod
    def handle_generic_error(error: Exception) -> tuple:
        """Handle generic errors"""
        logger.exception(f"Unexpected error: {error}")

        return jsonify(Helpers.build_error_response(
            message="An unexpected error occurred",
            code="INTERNAL_ERROR"
        )), 500


def register_error_handlers(app):
    """Register error handlers with Flask app"""

    @app.errorhandler(PlanboardError)
    def handle_planboard_error(error):
        return ErrorHandler.handle_domain_error(error)

    @app.errorhandler(google_exceptions.GoogleAPIError)
    def handle_google_error(error):
        return ErrorHandler.handle_firestore_error(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return ErrorHandler.handle_http_error(error)

    @app.errorhandler(Exception)
    def handle_unhandled_exception(error):
        return ErrorHandler.handle_generic_error(error)
