"""Realtime Database implementation for lab values."""

from dataclasses import dataclass
from datetime import date

from firebase_admin import db

from phe_diary.adapters.firebase_records import (
    children,
    lab_value_from_record,
    lab_value_to_record,
)
from phe_diary.domain.lab_values import LabValue
from phe_diary.services.lab_values import LabValueRepository


@dataclass
class FirebaseLabValueRepository(LabValueRepository):
    """Stores lab values under /{uid}/labValues."""

    root: db.Reference

    def _values(self, user_id: str) -> db.Reference:
        return self.root.child(user_id).child("labValues")

    def list_values(self, user_id: str) -> list[LabValue]:
        rows = children(self._values(user_id).get())
        return [lab_value_from_record(key, row) for key, row in rows.items()]

    def get_value(self, user_id: str, key: str) -> LabValue | None:
        row = self._values(user_id).child(key).get()
        if not isinstance(row, dict):
            return None
        return lab_value_from_record(key, row)

    def find_keys_by_date(self, user_id: str, day: date) -> list[str]:
        rows = (
            self._values(user_id).order_by_child("date").equal_to(day.isoformat()).get()
        )
        return list(rows or {})

    def create_value(
        self, user_id: str, day: date, phe: float | None, tyrosine: float | None
    ) -> LabValue:
        value = LabValue(key="", date=day, phe=phe, tyrosine=tyrosine)
        ref = self._values(user_id).push(lab_value_to_record(value))
        return LabValue(key=ref.key, date=day, phe=phe, tyrosine=tyrosine)

    def save_value(self, user_id: str, value: LabValue) -> None:
        self._values(user_id).child(value.key).update(lab_value_to_record(value))

    def delete_value(self, user_id: str, key: str) -> None:
        self._values(user_id).child(key).delete()
