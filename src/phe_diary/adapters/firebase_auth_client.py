"""Firebase Auth implementation of the identity provider."""

import logging
from dataclasses import dataclass

import firebase_admin
from firebase_admin import auth

from phe_diary.errors import AuthenticationError
from phe_diary.services.account import IdentityProvider

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


@dataclass
class FirebaseAuthClient(IdentityProvider):
    """Verifies ID tokens and manages users through the Admin SDK."""

    app: firebase_admin.App

    def verify_id_token(self, token: str) -> str:
        """Return the uid of a valid token or raise AuthenticationError."""
        try:
            decoded = auth.verify_id_token(token, app=self.app, check_revoked=True)
        except (
            auth.RevokedIdTokenError,
            auth.InvalidIdTokenError,
            auth.UserDisabledError,
            ValueError,
        ) as exc:
            logger.warning("Token verification failed: %s", type(exc).__name__)
            raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc
        return str(decoded["uid"])

    def delete_user(self, user_id: str) -> None:
        """Delete the user's Firebase Auth account."""
        try:
            auth.delete_user(user_id, app=self.app)
        except auth.UserNotFoundError:
            logger.warning("Auth user %s already gone", user_id[:8])
