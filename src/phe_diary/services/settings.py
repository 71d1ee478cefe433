"""User settings service: limits, license key, consent and onboarding."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from phe_diary.domain.settings import (
    CONSENT_HISTORY_LIMIT,
    ConsentAction,
    ConsentEvent,
    UserSettings,
)
from phe_diary.services.license import LicenseService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"max_phe", "max_kcal", "lab_unit", "license"})


class SettingsRepository(Protocol):
    """Persistence interface for user settings."""

    def get_settings(self, user_id: str) -> UserSettings:
        """Return stored settings merged over the defaults."""

    def update_settings(self, user_id: str, changes: dict[str, object]) -> None:
        """Write the given settings fields, keyed by UserSettings attribute."""


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class SettingsService:
    """Application service for per-user settings."""

    repository: SettingsRepository
    license_service: LicenseService
    today: Callable[[], date] = field(default=_utc_today)

    def get_settings(self, user_id: str) -> UserSettings:
        """Return the user's settings."""
        return self.repository.get_settings(user_id)

    def update(self, user_id: str, changes: dict[str, object]) -> None:
        """Write limit, unit and license fields; None clears a field."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Settings fields are not editable: {sorted(unknown)}")
        if not changes:
            return
        self.repository.update_settings(user_id, changes)
        if "license" in changes:
            self.license_service.invalidate(user_id)
        logger.info("Updated settings %s for %s", sorted(changes), user_id[:8])

    def record_consent(
        self,
        user_id: str,
        health_data_consent: bool | None = None,
        email_consent: bool | None = None,
    ) -> None:
        """Store consent flags and append them to their bounded history logs."""
        current = self.repository.get_settings(user_id)
        today = self.today()
        changes: dict[str, object] = {}

        if health_data_consent is not None:
            changes["health_data_consent"] = health_data_consent
            changes["health_data_consent_date"] = today
            changes["health_data_consent_history"] = _append_consent(
                current.health_data_consent_history,
                previous_flag=current.health_data_consent,
                previous_date=current.health_data_consent_date,
                given=health_data_consent,
                today=today,
            )

        if email_consent is not None:
            changes["email_consent"] = email_consent
            changes["email_consent_date"] = today if email_consent else None
            changes["email_consent_history"] = _append_consent(
                current.email_consent_history,
                previous_flag=current.email_consent,
                previous_date=current.email_consent_date,
                given=email_consent,
                today=today,
            )

        if changes:
            self.repository.update_settings(user_id, changes)
            logger.info("Recorded consent for %s", user_id[:8])

    def set_getting_started(self, user_id: str, completed: bool) -> None:
        """Mark the onboarding guide as completed or not."""
        self.repository.update_settings(
            user_id, {"getting_started_completed": completed}
        )


def _append_consent(  # noqa: PLR0913
    history: list[ConsentEvent],
    *,
    previous_flag: bool,
    previous_date: date | None,
    given: bool,
    today: date,
) -> list[ConsentEvent]:
    """Return the history with a new entry, keeping the most recent ones."""
    events = list(history)
    if not events and previous_date is not None:
        # Accounts from before history tracking only stored the last decision.
        events.append(ConsentEvent(action=_action(previous_flag), date=previous_date))
    events.append(ConsentEvent(action=_action(given), date=today))
    return events[-CONSENT_HISTORY_LIMIT:]


def _action(given: bool) -> ConsentAction:
    return ConsentAction.GIVEN if given else ConsentAction.REVOKED
