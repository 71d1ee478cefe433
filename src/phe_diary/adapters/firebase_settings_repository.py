"""Realtime Database implementation for settings and bulk account data."""

from dataclasses import dataclass
from datetime import date

from firebase_admin import db

from phe_diary.adapters.firebase_records import as_list
from phe_diary.domain.settings import (
    ConsentAction,
    ConsentEvent,
    LabUnit,
    UserSettings,
)
from phe_diary.services.account import AccountRepository, DataCollection
from phe_diary.services.license import LicenseRepository
from phe_diary.services.settings import SettingsRepository

_COLUMNS = {
    "max_phe": "maxPhe",
    "max_kcal": "maxKcal",
    "lab_unit": "labUnit",
    "license": "license",
    "health_data_consent": "healthDataConsent",
    "health_data_consent_date": "healthDataConsentDate",
    "health_data_consent_history": "healthDataConsentHistory",
    "email_consent": "emailConsent",
    "email_consent_date": "emailConsentDate",
    "email_consent_history": "emailConsentHistory",
    "getting_started_completed": "gettingStartedCompleted",
    "estimation_count": "estimationCount",
    "estimation_date": "estimationDate",
}

_COLLECTION_PATHS = {
    DataCollection.DIARY: "pheDiary",
    DataCollection.LAB_VALUES: "labValues",
    DataCollection.OWN_FOOD: "ownFood",
}


@dataclass
class FirebaseSettingsRepository(
    SettingsRepository, LicenseRepository, AccountRepository
):
    """Reads and writes /{uid}/settings and removes user subtrees."""

    root: db.Reference

    def _settings(self, user_id: str) -> db.Reference:
        return self.root.child(user_id).child("settings")

    def get_settings(self, user_id: str) -> UserSettings:
        """Return stored settings merged over the defaults."""
        row = self._settings(user_id).get()
        if not isinstance(row, dict):
            return UserSettings()
        return _parse_settings(row)

    def update_settings(self, user_id: str, changes: dict[str, object]) -> None:
        """Write the given fields; None values delete the stored key."""
        payload = {_COLUMNS[name]: _serialize(value) for name, value in changes.items()}
        self._settings(user_id).update(payload)

    def get_license(self, user_id: str) -> str | None:
        """Return the license key stored in a user's settings."""
        value = self._settings(user_id).child("license").get()
        return str(value) if value is not None else None

    def delete_collection(self, user_id: str, collection: DataCollection) -> None:
        """Remove one data subtree of a user."""
        self.root.child(user_id).child(_COLLECTION_PATHS[collection]).delete()

    def delete_user_data(self, user_id: str) -> None:
        """Remove everything stored under a user."""
        self.root.child(user_id).delete()


def _serialize(value: object) -> object:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, ConsentEvent):
        return {"action": str(value.action), "date": value.date.isoformat()}
    if isinstance(value, list):
        return [_serialize(entry) for entry in value]
    if isinstance(value, LabUnit):
        return str(value)
    return value


def _parse_settings(row: dict[str, object]) -> UserSettings:
    defaults = UserSettings()
    return UserSettings(
        max_phe=_optional_float(row.get("maxPhe")),
        max_kcal=_optional_float(row.get("maxKcal")),
        lab_unit=LabUnit(row.get("labUnit") or defaults.lab_unit),
        license=row.get("license"),
        health_data_consent=bool(row.get("healthDataConsent", False)),
        health_data_consent_date=_optional_date(row.get("healthDataConsentDate")),
        health_data_consent_history=_parse_history(
            row.get("healthDataConsentHistory")
        ),
        email_consent=bool(row.get("emailConsent", False)),
        email_consent_date=_optional_date(row.get("emailConsentDate")),
        email_consent_history=_parse_history(row.get("emailConsentHistory")),
        getting_started_completed=bool(row.get("gettingStartedCompleted", False)),
        estimation_count=int(row.get("estimationCount") or 0),
        estimation_date=_optional_date(row.get("estimationDate")),
    )


def _parse_history(raw: object) -> list[ConsentEvent]:
    events: list[ConsentEvent] = []
    for entry in as_list(raw):
        if not isinstance(entry, dict) or not entry.get("date"):
            continue
        events.append(
            ConsentEvent(
                action=ConsentAction(entry.get("action", ConsentAction.REVOKED)),
                date=date.fromisoformat(str(entry["date"])[:10]),
            )
        )
    return events


def _optional_date(raw: object) -> date | None:
    if not raw:
        return None
    return date.fromisoformat(str(raw)[:10])


def _optional_float(raw: object) -> float | None:
    if raw is None:
        return None
    return float(raw)
