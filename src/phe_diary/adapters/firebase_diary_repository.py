"""Realtime Database implementation for diary days."""

from dataclasses import dataclass
from datetime import date

from firebase_admin import db

from phe_diary.adapters.firebase_records import (
    children,
    day_from_record,
    day_to_record,
    item_to_record,
)
from phe_diary.domain.diary import DiaryDay, FoodLogItem
from phe_diary.services.diary import DiaryRepository


@dataclass
class FirebaseDiaryRepository(DiaryRepository):
    """Stores diary days under /{uid}/pheDiary."""

    root: db.Reference

    def _diary(self, user_id: str) -> db.Reference:
        return self.root.child(user_id).child("pheDiary")

    def list_days(self, user_id: str) -> list[DiaryDay]:
        """Return all diary days of a user."""
        rows = children(self._diary(user_id).get())
        return [day_from_record(key, row) for key, row in rows.items()]

    def get_day(self, user_id: str, key: str) -> DiaryDay | None:
        """Return a diary day by key, if present."""
        row = self._diary(user_id).child(key).get()
        if not isinstance(row, dict):
            return None
        return day_from_record(key, row)

    def find_days_by_date(self, user_id: str, day: date) -> list[DiaryDay]:
        """Return the diary days stored for a date."""
        rows = children(
            self._diary(user_id).order_by_child("date").equal_to(day.isoformat()).get()
        )
        return [day_from_record(key, row) for key, row in rows.items()]

    def count_days(self, user_id: str, limit: int) -> int:
        """Count diary days without reading more than `limit` of them."""
        rows = self._diary(user_id).order_by_key().limit_to_first(limit).get()
        return len(rows or {})

    def create_day(
        self,
        user_id: str,
        day: date,
        log: list[FoodLogItem],
        totals: tuple[float, float],
    ) -> DiaryDay:
        """Push a new diary day and return it."""
        phe, kcal = totals
        ref = self._diary(user_id).push(
            {
                "date": day.isoformat(),
                "phe": phe,
                "kcal": kcal,
                "log": [item_to_record(item) for item in log],
            }
        )
        return DiaryDay(key=ref.key, date=day, phe=phe, kcal=kcal, log=list(log))

    def save_day(self, user_id: str, day: DiaryDay) -> None:
        """Write date, totals and log of a day in one multi-field update."""
        self._diary(user_id).child(day.key).update(day_to_record(day))

    def delete_day(self, user_id: str, key: str) -> None:
        """Remove a diary day."""
        self._diary(user_id).child(key).delete()
