"""Own food service, including sharing into the community database."""

import logging
from dataclasses import dataclass
from typing import Protocol

from phe_diary.domain.foods import DEFAULT_LANGUAGE, FoodDetails, OwnFood
from phe_diary.errors import NotFoundError
from phe_diary.services.community import CommunityFoodService

logger = logging.getLogger(__name__)


class OwnFoodRepository(Protocol):
    """Persistence interface for own foods."""

    def list_foods(self, user_id: str) -> list[OwnFood]:
        """Return all own foods of a user."""

    def get_food(self, user_id: str, key: str) -> OwnFood | None:
        """Return an own food by key, if present."""

    def create_food(self, user_id: str, details: FoodDetails, shared: bool) -> OwnFood:
        """Create an own food and return it."""

    def save_food(self, user_id: str, food: OwnFood) -> None:
        """Overwrite an existing own food."""

    def delete_food(self, user_id: str, key: str) -> None:
        """Remove an own food."""


@dataclass
class OwnFoodService:
    """Application service for a user's custom foods."""

    repository: OwnFoodRepository
    community_service: CommunityFoodService

    def list_foods(self, user_id: str) -> list[OwnFood]:
        """Return own foods sorted by name."""
        return sorted(
            self.repository.list_foods(user_id),
            key=lambda food: food.details.name.lower(),
        )

    def create_food(
        self,
        user_id: str,
        details: FoodDetails,
        shared: bool = False,
        language: str | None = None,
    ) -> OwnFood:
        """Create an own food and share it when asked."""
        food = self.repository.create_food(user_id, details, shared)
        logger.info("Created own food %s for %s", food.key, user_id[:8])
        if not shared:
            return food
        community = self.community_service.share(
            user_id, food.key, details, language or DEFAULT_LANGUAGE
        )
        linked = OwnFood(
            key=food.key, details=details, shared=True, community_key=community.key
        )
        self.repository.save_food(user_id, linked)
        return linked

    def update_food(
        self,
        user_id: str,
        key: str,
        details: FoodDetails,
        shared: bool,
        language: str | None = None,
    ) -> OwnFood:
        """Update an own food and keep its community copy in step."""
        existing = self.repository.get_food(user_id, key)
        if existing is None:
            raise NotFoundError("Own food entry not found")

        community_key = existing.community_key
        if shared and community_key:
            self.community_service.update_shared(community_key, details)
        elif shared:
            community_key = self.community_service.share(
                user_id, key, details, language or DEFAULT_LANGUAGE
            ).key
        elif community_key:
            self.community_service.unshare(community_key)
            community_key = None

        updated = OwnFood(
            key=key, details=details, shared=shared, community_key=community_key
        )
        self.repository.save_food(user_id, updated)
        return updated

    def delete_food(self, user_id: str, key: str) -> None:
        """Delete an own food together with its community copy."""
        existing = self.repository.get_food(user_id, key)
        if existing is None:
            raise NotFoundError("Own food entry not found")
        if existing.community_key:
            self.community_service.unshare(existing.community_key)
        self.repository.delete_food(user_id, key)
        logger.info("Deleted own food %s for %s", key, user_id[:8])
