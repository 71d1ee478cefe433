"""Account-wide operations: data resets and account deletion."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from phe_diary.services.community import CommunityFoodService

logger = logging.getLogger(__name__)


class DataCollection(StrEnum):
    """User data subtrees that can be reset independently."""

    DIARY = "diary"
    LAB_VALUES = "labValues"
    OWN_FOOD = "ownFood"


class AccountRepository(Protocol):
    """Bulk deletion of a user's stored data."""

    def delete_collection(self, user_id: str, collection: DataCollection) -> None:
        """Remove one data subtree of a user."""

    def delete_user_data(self, user_id: str) -> None:
        """Remove everything stored under a user."""


class IdentityProvider(Protocol):
    """Authentication provider holding user accounts."""

    def verify_id_token(self, token: str) -> str:
        """Return the user id of a valid ID token or raise AuthenticationError."""

    def delete_user(self, user_id: str) -> None:
        """Delete the user's sign-in account."""


@dataclass
class AccountService:
    """Application service for destructive account actions."""

    repository: AccountRepository
    identity_provider: IdentityProvider
    community_service: CommunityFoodService

    def reset(self, user_id: str, collection: DataCollection) -> None:
        """Wipe one kind of data; shared foods leave with their own foods."""
        if collection is DataCollection.OWN_FOOD:
            self.community_service.remove_contributions(user_id)
        self.repository.delete_collection(user_id, collection)
        logger.info("Reset %s for %s", collection, user_id[:8])

    def delete_account(self, user_id: str) -> None:
        """Delete all user data and then the sign-in account."""
        removed = self.community_service.remove_contributions(user_id)
        self.repository.delete_user_data(user_id)
        self.identity_provider.delete_user(user_id)
        logger.info(
            "Deleted account %s with %d community foods", user_id[:8], removed
        )
