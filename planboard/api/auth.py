"""
Authentication endpoints for Firebase Auth integration.
Passwords are checked by the Firebase Auth REST API; the backend only hands
back the ID token and the caller's Firestore profile.
"""
import logging

import requests
from flask import request, jsonify
from firebase_admin import auth, firestore

from . import auth_bp
from planboard.config.settings import Settings
from planboard.middleware.auth_middleware import load_profile
from planboard.utils.errors import AuthenticationError, TransportError, ValidationError

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Firebase REST error codes mapped to user-facing messages
SIGN_IN_ERRORS = {
    "EMAIL_NOT_FOUND": "No account found with this email",
    "INVALID_PASSWORD": "Incorrect password",
    "USER_DISABLED": "This account has been disabled",
}


def sign_in_with_password(email, password):
    """Returns the REST response body ({idToken, localId, ...})."""
    if not Settings.FIREBASE_WEB_API_KEY:
        raise TransportError("FIREBASE_WEB_API_KEY is not configured")
    try:
        response = requests.post(
            SIGN_IN_URL,
            params={"key": Settings.FIREBASE_WEB_API_KEY},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=10,
        )
    except requests.RequestException as e:
        logger.error("Authentication service error: %s", e)
        raise TransportError("Authentication service unavailable")

    if not response.ok:
        error_message = (response.json() or {}).get("error", {}).get("message", "")
        for key, message in SIGN_IN_ERRORS.items():
            if key in error_message:
                raise AuthenticationError(message)
        raise AuthenticationError("Invalid credentials")
    return response.json()


@auth_bp.post("/login")
def login_user():
    """
    Login with email and password.
    Expected payload: {email: "...", password: "..."}
    Returns: {user: {...}, firebaseToken: "..."}
    """
    db = firestore.client()
    payload = request.get_json(force=True) or {}

    email = (payload.get("email") or "").strip().lower()
    password = (payload.get("password") or "").strip()
    if not email or not password:
        raise ValidationError("Email and password are required")

    firebase_data = sign_in_with_password(email, password)
    user = load_profile(db, {"uid": firebase_data["localId"], "email": email})
    logger.info("User %s logged in", user["user_id"])
    return jsonify({"user": user, "firebaseToken": firebase_data.get("idToken")}), 200


@auth_bp.post("/verify")
def verify_token():
    """
    Verify a Firebase token and return user data.
    Expected payload: {firebase_token: "..."}
    """
    db = firestore.client()
    payload = request.get_json(force=True) or {}

    firebase_token = (payload.get("firebase_token") or "").strip()
    if not firebase_token:
        return jsonify({"error": "Firebase token is required", "valid": False}), 400

    try:
        decoded_token = auth.verify_id_token(firebase_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError, ValueError):
        return jsonify({"error": "Invalid or expired token", "valid": False}), 401

    return jsonify({"user": load_profile(db, decoded_token), "valid": True}), 200
