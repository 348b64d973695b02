"""Create the owner (admin) account.

Usage:
  planboard-create-owner --email owner@example.com --password ... [--name Owner]

Creates the Firebase Auth user, then a users/<uid> profile with role admin.
If the profile write fails the Auth user is removed again.
"""
import argparse
import logging
import sys

from firebase_admin import auth as firebase_auth
from firebase_admin import firestore

from planboard.config.settings import configure_logging
from planboard.firebase_utils import init_firebase
from planboard.utils.validators import Helpers, Validators

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def create_owner(db, email: str, password: str, name: str = None) -> dict:
    email = (email or "").strip().lower()
    if not Validators.validate_email(email):
        raise ValueError("A valid email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    name = (name or "").strip() or email.split("@")[0]

    firebase_user = firebase_auth.create_user(email=email, password=password, display_name=name)
    profile = {
        "user_id": firebase_user.uid,
        "email": email,
        "name": name,
        "role": "admin",
        "created_at": Helpers.now_iso(),
    }
    try:
        db.collection("users").document(firebase_user.uid).set(profile)
        firebase_auth.set_custom_user_claims(firebase_user.uid, {"role": "admin"})
    except Exception:
        firebase_auth.delete_user(firebase_user.uid)
        raise
    logger.info("Owner account %s created for %s", firebase_user.uid, email)
    return profile


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the planboard owner account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default=None, help="Display name (defaults to the email's local part)")
    args = parser.parse_args(argv)

    configure_logging()
    if not init_firebase():
        logger.error("Firebase is not configured; cannot create the owner")
        return 1
    try:
        profile = create_owner(firestore.client(), args.email, args.password, args.name)
    except (ValueError, firebase_auth.EmailAlreadyExistsError) as e:
        logger.error("Could not create owner: %s", e)
        return 1
    print(f"Owner created: {profile['email']} ({profile['user_id']})")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
