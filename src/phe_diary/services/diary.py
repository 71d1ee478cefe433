"""Diary day service: day CRUD, food-log items and totals."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol

from phe_diary.domain.diary import DiaryDay, FoodLogItem, manual_entry
from phe_diary.errors import BadRequestError, ConflictError, NotFoundError, TierLimitError
from phe_diary.services.community import CommunityFoodService
from phe_diary.services.license import LicenseService

logger = logging.getLogger(__name__)

DUPLICATE_DATE_MESSAGE = (
    "An entry with this date already exists. Please edit the existing entry instead."
)
DIARY_LIMIT_MESSAGE = "Diary limit reached. Upgrade to premium for unlimited entries."


class DiaryRepository(Protocol):
    """Persistence interface for diary days."""

    def list_days(self, user_id: str) -> list[DiaryDay]:
        """Return all diary days of a user."""

    def get_day(self, user_id: str, key: str) -> DiaryDay | None:
        """Return a diary day by key, if present."""

    def find_days_by_date(self, user_id: str, day: date) -> list[DiaryDay]:
        """Return the diary days stored for a date."""

    def count_days(self, user_id: str, limit: int) -> int:
        """Count diary days, stopping once `limit` is reached."""

    def create_day(
        self,
        user_id: str,
        day: date,
        log: list[FoodLogItem],
        totals: tuple[float, float],
    ) -> DiaryDay:
        """Create a diary day and return it."""

    def save_day(self, user_id: str, day: DiaryDay) -> None:
        """Overwrite date, totals and log of an existing day."""

    def delete_day(self, user_id: str, key: str) -> None:
        """Remove a diary day."""


@dataclass(frozen=True)
class AddItemResult:
    """Outcome of adding a food item to a date."""

    day: DiaryDay
    created: bool


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class DiaryService:
    """Keeps diary days consistent: one day per date, totals equal to the log."""

    repository: DiaryRepository
    license_service: LicenseService
    community_service: CommunityFoodService
    free_day_limit: int = 14
    today: Callable[[], date] = field(default=_utc_today)

    def list_days(self, user_id: str) -> list[DiaryDay]:
        """Return diary days ordered by date."""
        return sorted(self.repository.list_days(user_id), key=lambda day: day.date)

    def create_day(self, user_id: str, day: date, phe: float, kcal: float) -> DiaryDay:
        """Create a day holding totals entered by hand."""
        if self.repository.find_days_by_date(user_id, day):
            logger.warning("Duplicate diary date %s for %s", day, user_id[:8])
            raise ConflictError(DUPLICATE_DATE_MESSAGE)
        self._ensure_day_quota(user_id)
        log = [manual_entry(phe, kcal)] if phe or kcal else []
        created = self.repository.create_day(user_id, day, log, _sum_totals(log))
        logger.info("Created diary day %s for %s", created.key, user_id[:8])
        return created

    def update_day(
        self,
        user_id: str,
        key: str,
        phe: float,
        kcal: float,
        day: date | None = None,
        log: list[FoodLogItem] | None = None,
    ) -> DiaryDay:
        """Update the date, totals or log of a day.

        Supplied totals only stick when the day has no real food items; they
        are carried by a manual entry. Otherwise totals follow the log.
        """
        existing = self._require_day(user_id, key)
        new_date = existing.date
        if day is not None and day != existing.date:
            duplicates = self.repository.find_days_by_date(user_id, day)
            if any(other.key != key for other in duplicates):
                logger.warning("Duplicate diary date %s for %s", day, user_id[:8])
                raise ConflictError(DUPLICATE_DATE_MESSAGE)
            new_date = day

        if log is not None:
            new_log = list(log)
        elif all(item.manual for item in existing.log):
            new_log = [manual_entry(phe, kcal)] if phe or kcal else []
        else:
            new_log = list(existing.log)

        updated = _with_log(replace(existing, date=new_date), new_log)
        self.repository.save_day(user_id, updated)
        logger.info("Updated diary day %s for %s", key, user_id[:8])
        return updated

    def delete_day(self, user_id: str, key: str) -> None:
        """Delete a diary day."""
        self._require_day(user_id, key)
        self.repository.delete_day(user_id, key)
        logger.info("Deleted diary day %s for %s", key, user_id[:8])

    def add_item(
        self, user_id: str, item: FoodLogItem, day: date | None = None
    ) -> AddItemResult:
        """Append a food item to the day of `day`, creating the day if needed."""
        target = day or self.today()
        matches = self.repository.find_days_by_date(user_id, target)
        if not matches:
            self._ensure_day_quota(user_id)
        if item.community_food_key:
            self.community_service.record_use(item.community_food_key)

        if matches:
            existing = matches[0]
            updated = _with_log(existing, [*existing.log, item])
            self.repository.save_day(user_id, updated)
            logger.info("Added food to diary day %s for %s", existing.key, user_id[:8])
            return AddItemResult(day=updated, created=False)

        # Two concurrent first items for the same date can both land here.
        created = self.repository.create_day(user_id, target, [item], _sum_totals([item]))
        logger.info("Created diary day %s for %s", created.key, user_id[:8])
        return AddItemResult(day=created, created=True)

    def update_item(
        self, user_id: str, key: str, log_index: int, item: FoodLogItem
    ) -> DiaryDay:
        """Replace the food item at `log_index`."""
        existing = self._require_day(user_id, key)
        if log_index >= len(existing.log):
            raise BadRequestError("Log index out of range")
        new_log = list(existing.log)
        new_log[log_index] = item
        updated = _with_log(existing, new_log)
        self.repository.save_day(user_id, updated)
        return updated

    def delete_item(self, user_id: str, key: str, log_index: int) -> DiaryDay:
        """Remove the food item at `log_index`."""
        existing = self._require_day(user_id, key)
        if log_index >= len(existing.log):
            raise BadRequestError("Invalid log item index")
        new_log = [item for i, item in enumerate(existing.log) if i != log_index]
        updated = _with_log(existing, new_log)
        self.repository.save_day(user_id, updated)
        return updated

    def _require_day(self, user_id: str, key: str) -> DiaryDay:
        existing = self.repository.get_day(user_id, key)
        if existing is None:
            raise NotFoundError("Diary entry not found")
        return existing

    def _ensure_day_quota(self, user_id: str) -> None:
        if self.license_service.is_premium(user_id):
            return
        count = self.repository.count_days(user_id, limit=self.free_day_limit)
        if count >= self.free_day_limit:
            logger.warning("Diary limit reached for %s", user_id[:8])
            raise TierLimitError(DIARY_LIMIT_MESSAGE)


def _sum_totals(items: list[FoodLogItem]) -> tuple[float, float]:
    """Sum phe and kcal across food items."""
    return sum(item.phe for item in items), sum(item.kcal for item in items)


def _with_log(day: DiaryDay, log: list[FoodLogItem]) -> DiaryDay:
    phe, kcal = _sum_totals(log)
    return replace(day, log=log, phe=phe, kcal=kcal)
