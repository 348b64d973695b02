import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import request, jsonify
from firebase_admin import auth as firebase_auth
from firebase_admin import firestore

from planboard.utils.validators import Helpers

logger = logging.getLogger(__name__)


def load_profile(db, decoded_token: Dict[str, Any]) -> Dict[str, Any]:
    """Firestore profile for a verified token, or a member profile built from the token"""
    uid = decoded_token["uid"]
    doc = db.collection("users").document(uid).get()
    if doc.exists:
        return {"user_id": uid, **(doc.to_dict() or {})}
    email = decoded_token.get("email", "")
    return {
        "user_id": uid,
        "email": email,
        "name": decoded_token.get("name", email.split("@")[0]),
        "role": "member",
    }


class AuthMiddleware:
    """Authentication middleware for Firebase ID tokens"""

    @staticmethod
    def verify_token(f):
        """Decorator to verify the Bearer token and load the caller's profile"""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            auth_header = request.headers.get("Authorization", "")
            parts = auth_header.split(" ")
            if not auth_header:
                return jsonify(Helpers.build_error_response("Token is missing", "AUTHENTICATION_ERROR")), 401
            if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
                return jsonify(Helpers.build_error_response("Invalid token format", "AUTHENTICATION_ERROR")), 401

            try:
                decoded_token = firebase_auth.verify_id_token(parts[1])
            except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError,
                    firebase_auth.RevokedIdTokenError, ValueError) as e:
                logger.warning("Rejected token: %s", e)
                return jsonify(Helpers.build_error_response("Invalid token", "AUTHENTICATION_ERROR")), 401

            request.current_user = decoded_token
            request.current_user_data = load_profile(firestore.client(), decoded_token)
            return f(*args, **kwargs)

        return decorated_function

    @staticmethod
    def get_current_user() -> Optional[Dict[str, Any]]:
        return getattr(request, "current_user_data", None)


class RoleMiddleware:
    """Role-based access control middleware"""

    ROLE_HIERARCHY = {
        'member': 1,
        'admin': 2,
    }

    @staticmethod
    def require_role(required_role: str):
        """Decorator to require a role or higher; apply after verify_token"""
        def decorator(f):
            @wraps(f)
            def decorated_function(*args, **kwargs):
                current_user = AuthMiddleware.get_current_user()
                if not current_user:
                    return jsonify(Helpers.build_error_response("Authentication required", "AUTHENTICATION_ERROR")), 401

                user_level = RoleMiddleware.ROLE_HIERARCHY.get(current_user.get("role", "member"), 0)
                required_level = RoleMiddleware.ROLE_HIERARCHY.get(required_role, 0)
                if user_level < required_level:
                    return jsonify(Helpers.build_error_response("Insufficient permissions", "AUTHORIZATION_ERROR")), 403
                return f(*args, **kwargs)

            return decorated_function
        return decorator

    @staticmethod
    def require_admin():
        return RoleMiddleware.require_role('admin')


def login_required(f):
    return AuthMiddleware.verify_token(f)


def admin_required(f):
    return AuthMiddleware.verify_token(RoleMiddleware.require_admin()(f))
