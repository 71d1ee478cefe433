"""Firebase Admin SDK initialization."""

import logging
import os

import firebase_admin
from firebase_admin import credentials, db

from phe_diary.config import Settings, normalize_private_key

logger = logging.getLogger(__name__)

APP_NAME = "phe-diary"
AUTH_EMULATOR_HOST = "localhost:9099"
DATABASE_EMULATOR_HOST = "localhost:9000"


def initialize_firebase(settings: Settings) -> firebase_admin.App:
    """Return the named Admin app, creating it on first use."""
    try:
        return firebase_admin.get_app(APP_NAME)
    except ValueError:
        pass

    options = {
        "projectId": settings.firebase_project_id,
        "databaseURL": settings.firebase_database_url,
    }
    if settings.uses_emulators:
        # The SDK reads these variables when it builds its clients.
        os.environ.setdefault("FIREBASE_AUTH_EMULATOR_HOST", AUTH_EMULATOR_HOST)
        os.environ.setdefault(
            "FIREBASE_DATABASE_EMULATOR_HOST", DATABASE_EMULATOR_HOST
        )
        logger.info(
            "Using Firebase emulators for project %s", settings.firebase_project_id
        )
        return firebase_admin.initialize_app(options=options, name=APP_NAME)

    if not (
        settings.firebase_admin_client_email and settings.firebase_admin_private_key
    ):
        raise RuntimeError(
            "Firebase Admin credentials not configured. Set "
            "FIREBASE_ADMIN_CLIENT_EMAIL and FIREBASE_ADMIN_PRIVATE_KEY."
        )
    credential = credentials.Certificate(
        {
            "type": "service_account",
            "project_id": settings.firebase_project_id,
            "client_email": settings.firebase_admin_client_email,
            "private_key": normalize_private_key(settings.firebase_admin_private_key),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    )
    return firebase_admin.initialize_app(
        credential=credential, options=options, name=APP_NAME
    )


def database_root(app: firebase_admin.App) -> db.Reference:
    """Return a reference to the database root."""
    return db.reference("/", app=app)
