"""Firebase credential loading and app initialisation."""
import json
import logging
import os
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)

EMULATOR_PROJECT_ID = "demo-planboard"

# Checked in order; each may hold a JSON string or a path to a JSON file
CREDENTIAL_ENV_VARS = (
    "FIREBASE_CREDENTIALS_JSON",
    "FIREBASE_CREDENTIALS_PATH",
    "GOOGLE_APPLICATION_CREDENTIALS",
)


def _load_json_source(value: str) -> Optional[Dict[str, Any]]:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        pass
    if os.path.exists(value):
        with open(value, "r") as f:
            return json.load(f)
    return None


def _credentials_from_fields() -> Optional[Dict[str, Any]]:
    if not os.getenv("FIREBASE_PRIVATE_KEY") or not os.getenv("FIREBASE_PROJECT_ID"):
        return None
    return {
        "type": "service_account",
        "project_id": os.getenv("FIREBASE_PROJECT_ID"),
        "private_key_id": os.getenv("FIREBASE_PRIVATE_KEY_ID"),
        "private_key": os.getenv("FIREBASE_PRIVATE_KEY", "").replace("\\n", "\n"),
        "client_email": os.getenv("FIREBASE_CLIENT_EMAIL"),
        "client_id": os.getenv("FIREBASE_CLIENT_ID"),
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
        "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
        "client_x509_cert_url": os.getenv("FIREBASE_CLIENT_CERT_URL"),
        "universe_domain": "googleapis.com",
    }


def get_firebase_credentials() -> Dict[str, Any]:
    """
    Service account credentials from the environment.

    Sources, first match wins: FIREBASE_CREDENTIALS_JSON,
    FIREBASE_CREDENTIALS_PATH, GOOGLE_APPLICATION_CREDENTIALS, then the
    individual FIREBASE_* fields.

    Raises:
        ValueError: If no source yields credentials
    """
    for var in CREDENTIAL_ENV_VARS:
        value = os.getenv(var)
        if not value:
            continue
        creds = _load_json_source(value)
        if creds is not None:
            logger.debug("Loaded Firebase credentials from %s", var)
            return creds
        logger.warning("%s is set but is neither JSON nor a readable file", var)

    creds = _credentials_from_fields()
    if creds is not None:
        return creds

    raise ValueError(
        "Firebase credentials not found. Set FIREBASE_CREDENTIALS_JSON, "
        "FIREBASE_CREDENTIALS_PATH, GOOGLE_APPLICATION_CREDENTIALS, or the "
        "individual FIREBASE_* variables."
    )


def init_firebase(dev_mode: bool = False) -> bool:
    """Initialise the default Firebase app. Returns False when the service
    should run without Firestore (dev mode or missing credentials)."""
    if dev_mode:
        logger.info("Running in DEV_MODE - Firebase disabled")
        return False
    if firebase_admin._apps:
        return True

    if os.getenv("FIRESTORE_EMULATOR_HOST") or os.getenv("FIREBASE_AUTH_EMULATOR_HOST"):
        project_id = os.environ.setdefault("GCLOUD_PROJECT", EMULATOR_PROJECT_ID)
        firebase_admin.initialize_app(options={"projectId": project_id})
        logger.info("Firebase initialised against emulators (project %s)", project_id)
        return True

    try:
        cred = credentials.Certificate(get_firebase_credentials())
    except ValueError as e:
        logger.warning("%s", e)
        return False
    firebase_admin.initialize_app(cred)
    logger.info("Firebase initialised (cloud)")
    return True
