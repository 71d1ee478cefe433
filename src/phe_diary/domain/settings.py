"""Domain models for per-user settings and licensing."""

from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

CONSENT_HISTORY_LIMIT = 10


class LicenseTier(StrEnum):
    """Usage tiers unlocked by a license key."""

    FREE = "free"
    PREMIUM = "premium"
    PREMIUM_AI = "premium_ai"

    @property
    def is_premium(self) -> bool:
        return self is not LicenseTier.FREE


class LabUnit(StrEnum):
    MGDL = "mgdl"
    UMOLL = "umoll"


class ConsentAction(StrEnum):
    GIVEN = "given"
    REVOKED = "revoked"


@dataclass(frozen=True)
class ConsentEvent:
    """One entry in a consent history log."""

    action: ConsentAction
    date: date


@dataclass(frozen=True)
class UserSettings:
    """Per-user settings with the defaults new accounts start from."""

    max_phe: float | None = None
    max_kcal: float | None = None
    lab_unit: LabUnit = LabUnit.MGDL
    license: str | None = None
    health_data_consent: bool = False
    health_data_consent_date: date | None = None
    health_data_consent_history: list[ConsentEvent] = field(default_factory=list)
    email_consent: bool = False
    email_consent_date: date | None = None
    email_consent_history: list[ConsentEvent] = field(default_factory=list)
    getting_started_completed: bool = False
    estimation_count: int = 0
    estimation_date: date | None = None
