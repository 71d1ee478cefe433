"""Lab value service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from phe_diary.domain.lab_values import LabValue
from phe_diary.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DUPLICATE_DATE_MESSAGE = (
    "An entry with this date already exists. Please edit the existing entry instead."
)


class LabValueRepository(Protocol):
    """Persistence interface for lab values."""

    def list_values(self, user_id: str) -> list[LabValue]:
        """Return all lab values of a user."""

    def get_value(self, user_id: str, key: str) -> LabValue | None:
        """Return a lab value by key, if present."""

    def find_keys_by_date(self, user_id: str, day: date) -> list[str]:
        """Return keys of lab values measured on a date."""

    def create_value(
        self, user_id: str, day: date, phe: float | None, tyrosine: float | None
    ) -> LabValue:
        """Create a lab value and return it."""

    def save_value(self, user_id: str, value: LabValue) -> None:
        """Overwrite an existing lab value."""

    def delete_value(self, user_id: str, key: str) -> None:
        """Remove a lab value."""


@dataclass
class LabValueService:
    """Application service for blood lab values."""

    repository: LabValueRepository

    def list_values(self, user_id: str) -> list[LabValue]:
        """Return lab values ordered by date."""
        return sorted(self.repository.list_values(user_id), key=lambda value: value.date)

    def create_value(
        self, user_id: str, day: date, phe: float | None, tyrosine: float | None
    ) -> LabValue:
        """Store a new lab value; one entry per date."""
        if self.repository.find_keys_by_date(user_id, day):
            raise ConflictError(DUPLICATE_DATE_MESSAGE)
        value = self.repository.create_value(user_id, day, phe, tyrosine)
        logger.info("Created lab value %s for %s", value.key, user_id[:8])
        return value

    def update_value(
        self,
        user_id: str,
        key: str,
        day: date,
        phe: float | None,
        tyrosine: float | None,
    ) -> LabValue:
        """Update a lab value, refusing a date another entry already uses."""
        existing = self.repository.get_value(user_id, key)
        if existing is None:
            raise NotFoundError("Lab value entry not found")
        if day != existing.date:
            keys = self.repository.find_keys_by_date(user_id, day)
            if any(other != key for other in keys):
                raise ConflictError(DUPLICATE_DATE_MESSAGE)
        updated = LabValue(key=key, date=day, phe=phe, tyrosine=tyrosine)
        self.repository.save_value(user_id, updated)
        return updated

    def delete_value(self, user_id: str, key: str) -> None:
        """Delete a lab value."""
        if self.repository.get_value(user_id, key) is None:
            raise NotFoundError("Lab value entry not found")
        self.repository.delete_value(user_id, key)
        logger.info("Deleted lab value %s for %s", key, user_id[:8])
