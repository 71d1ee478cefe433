"""Realtime Database implementation for community foods."""

from dataclasses import dataclass

from firebase_admin import db

from phe_diary.adapters.firebase_records import (
    children,
    community_food_from_record,
    details_to_record,
)
from phe_diary.domain.foods import CommunityFood, FoodDetails, VoteTally
from phe_diary.services.community import CommunityFoodRepository


@dataclass
class FirebaseCommunityFoodRepository(CommunityFoodRepository):
    """Stores community foods under /communityFoods, shared by all users."""

    root: db.Reference

    def _foods(self) -> db.Reference:
        return self.root.child("communityFoods")

    def get_food(self, key: str) -> CommunityFood | None:
        """Return a community food by key, if present."""
        row = self._foods().child(key).get()
        if not isinstance(row, dict) or "contributorId" not in row:
            return None
        return community_food_from_record(key, row)

    def list_foods(self, language: str | None) -> list[CommunityFood]:
        """Return community foods, optionally filtered by language."""
        if language:
            snapshot = self._foods().order_by_child("language").equal_to(language).get()
        else:
            snapshot = self._foods().get()
        return [
            community_food_from_record(key, row)
            for key, row in children(snapshot).items()
        ]

    def list_keys_by_contributor(self, contributor_id: str) -> list[str]:
        """Return keys of the foods a user contributed."""
        snapshot = (
            self._foods().order_by_child("contributorId").equal_to(contributor_id).get()
        )
        return list(snapshot or {})

    def create_food(  # noqa: PLR0913
        self,
        details: FoodDetails,
        language: str,
        contributor_id: str,
        own_food_key: str,
        created_at: int,
    ) -> CommunityFood:
        """Push a community food with zeroed counters and return it."""
        ref = self._foods().push(
            {
                **details_to_record(details),
                "language": language,
                "contributorId": contributor_id,
                "ownFoodKey": own_food_key,
                "createdAt": created_at,
                "likes": 0,
                "dislikes": 0,
                "score": 0,
                "usageCount": 0,
                "hidden": False,
            }
        )
        return CommunityFood(
            key=ref.key,
            details=details,
            language=language,
            contributor_id=contributor_id,
            own_food_key=own_food_key,
            created_at=created_at,
        )

    def update_details(self, key: str, details: FoodDetails, updated_at: int) -> None:
        """Overwrite the contributor-editable fields of a community food."""
        self._foods().child(key).update(
            {**details_to_record(details), "updatedAt": updated_at}
        )

    def delete_food(self, key: str) -> None:
        """Remove a community food."""
        self._foods().child(key).delete()

    def get_vote(self, key: str, voter_id: str) -> int | None:
        """Return the stored vote of a user, if any."""
        vote = self._foods().child(key).child("voterIds").child(voter_id).get()
        return int(vote) if vote is not None else None

    def set_vote(self, key: str, voter_id: str, vote: int | None) -> None:
        """Store a user's vote, or remove it when `vote` is None."""
        ref = self._foods().child(key).child("voterIds").child(voter_id)
        if vote is None:
            ref.delete()
        else:
            ref.set(vote)

    def save_tally(self, key: str, tally: VoteTally) -> None:
        """Persist likes, dislikes, score and the derived hidden flag."""
        self._foods().child(key).update(
            {
                "likes": tally.likes,
                "dislikes": tally.dislikes,
                "score": tally.score,
                "hidden": tally.hidden,
            }
        )

    def increment_usage(self, key: str) -> bool:
        """Increment the usage counter in a transaction."""
        food_ref = self._foods().child(key)
        if food_ref.child("contributorId").get() is None:
            return False
        food_ref.child("usageCount").transaction(lambda current: (current or 0) + 1)
        return True
