"""Realtime Database implementation for own foods."""

from dataclasses import dataclass

from firebase_admin import db

from phe_diary.adapters.firebase_records import (
    children,
    own_food_from_record,
    own_food_to_record,
)
from phe_diary.domain.foods import FoodDetails, OwnFood
from phe_diary.services.own_food import OwnFoodRepository


@dataclass
class FirebaseOwnFoodRepository(OwnFoodRepository):
    """Stores own foods under /{uid}/ownFood."""

    root: db.Reference

    def _foods(self, user_id: str) -> db.Reference:
        return self.root.child(user_id).child("ownFood")

    def list_foods(self, user_id: str) -> list[OwnFood]:
        rows = children(self._foods(user_id).get())
        return [own_food_from_record(key, row) for key, row in rows.items()]

    def get_food(self, user_id: str, key: str) -> OwnFood | None:
        row = self._foods(user_id).child(key).get()
        if not isinstance(row, dict):
            return None
        return own_food_from_record(key, row)

    def create_food(self, user_id: str, details: FoodDetails, shared: bool) -> OwnFood:
        draft = OwnFood(key="", details=details, shared=shared)
        ref = self._foods(user_id).push(own_food_to_record(draft))
        return OwnFood(key=ref.key, details=details, shared=shared)

    def save_food(self, user_id: str, food: OwnFood) -> None:
        self._foods(user_id).child(food.key).update(own_food_to_record(food))

    def delete_food(self, user_id: str, key: str) -> None:
        self._foods(user_id).child(key).delete()
