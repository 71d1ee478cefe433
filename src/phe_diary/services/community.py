"""Community food database: sharing, voting and usage tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from phe_diary.domain.foods import CommunityFood, FoodDetails, VoteTally
from phe_diary.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

LIKE = 1
DISLIKE = -1


class CommunityFoodRepository(Protocol):
    """Persistence interface for community foods."""

    def get_food(self, key: str) -> CommunityFood | None:
        """Return a community food by key, if present."""

    def list_foods(self, language: str | None) -> list[CommunityFood]:
        """Return community foods, optionally filtered by language."""

    def list_keys_by_contributor(self, contributor_id: str) -> list[str]:
        """Return keys of the foods a user contributed."""

    def create_food(  # noqa: PLR0913
        self,
        details: FoodDetails,
        language: str,
        contributor_id: str,
        own_food_key: str,
        created_at: int,
    ) -> CommunityFood:
        """Create a community food with zeroed counters and return it."""

    def update_details(self, key: str, details: FoodDetails, updated_at: int) -> None:
        """Overwrite the contributor-editable fields of a community food."""

    def delete_food(self, key: str) -> None:
        """Remove a community food."""

    def get_vote(self, key: str, voter_id: str) -> int | None:
        """Return the stored vote of a user, if any."""

    def set_vote(self, key: str, voter_id: str, vote: int | None) -> None:
        """Store a user's vote, or remove it when `vote` is None."""

    def save_tally(self, key: str, tally: VoteTally) -> None:
        """Persist likes, dislikes, score and the derived hidden flag."""

    def increment_usage(self, key: str) -> bool:
        """Increment the usage counter; return False when the food is gone."""


def _now_millis() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


@dataclass
class CommunityFoodService:
    """Application service for the moderated community food database."""

    repository: CommunityFoodRepository
    clock: Callable[[], int] = field(default=_now_millis)

    def list_foods(
        self, language: str | None = None, include_hidden: bool = False
    ) -> list[CommunityFood]:
        """List community foods ranked by score, then usage."""
        foods = self.repository.list_foods(language)
        if not include_hidden:
            foods = [food for food in foods if not food.hidden]
        return sorted(
            foods, key=lambda food: (food.score, food.usage_count), reverse=True
        )

    def share(
        self, user_id: str, own_food_key: str, details: FoodDetails, language: str
    ) -> CommunityFood:
        """Publish an own food to the community database."""
        food = self.repository.create_food(
            details=details,
            language=language,
            contributor_id=user_id,
            own_food_key=own_food_key,
            created_at=self.clock(),
        )
        logger.info("Shared own food %s as %s", own_food_key, food.key)
        return food

    def update_shared(self, key: str, details: FoodDetails) -> None:
        """Propagate contributor edits to a shared food."""
        self.repository.update_details(key, details, updated_at=self.clock())

    def unshare(self, key: str) -> None:
        """Remove a shared food from the community database."""
        self.repository.delete_food(key)
        logger.info("Removed community food %s", key)

    def remove_contributions(self, user_id: str) -> int:
        """Delete every community food a user contributed."""
        keys = self.repository.list_keys_by_contributor(user_id)
        for key in keys:
            self.repository.delete_food(key)
        return len(keys)

    def vote(self, user_id: str, key: str, vote: int) -> VoteTally:
        """Register, switch or toggle off a user's vote and refresh the tally."""
        food = self.repository.get_food(key)
        if food is None:
            raise NotFoundError("Community food not found")
        if food.contributor_id == user_id:
            raise ForbiddenError("Cannot vote on your own food")

        existing = self.repository.get_vote(key, user_id)
        like_delta, dislike_delta = _vote_deltas(existing, vote)
        self.repository.set_vote(key, user_id, None if existing == vote else vote)

        likes = max(0, food.likes + like_delta)
        dislikes = max(0, food.dislikes + dislike_delta)
        tally = VoteTally(likes=likes, dislikes=dislikes, score=likes - dislikes)
        self.repository.save_tally(key, tally)
        if tally.hidden and not food.hidden:
            logger.info("Community food %s hidden at score %d", key, tally.score)
        return tally

    def record_use(self, key: str) -> None:
        """Bump the usage counter; failures never block the caller."""
        try:
            self.repository.increment_usage(key)
        except Exception:
            logger.exception("Failed to record community food use", extra={"key": key})


def _vote_deltas(existing: int | None, vote: int) -> tuple[int, int]:
    """Return (like_delta, dislike_delta) for a vote given the stored one."""
    if existing == vote:
        return (-1, 0) if vote == LIKE else (0, -1)
    if existing is None:
        return (1, 0) if vote == LIKE else (0, 1)
    return (1, -1) if vote == LIKE else (-1, 1)
