"""Daily AI estimate quota."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from phe_diary.services.license import LicenseService
from phe_diary.services.settings import SettingsRepository

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
PRO_MODEL = "gemini-2.5-pro"


@dataclass(frozen=True)
class QuotaDecision:
    """Whether an estimate may run and how many are left today."""

    allowed: bool
    remaining: int
    reset_at: date


def _utc_today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class EstimateQuotaService:
    """Hands out daily AI estimate credits per license tier."""

    settings_repository: SettingsRepository
    license_service: LicenseService
    free_daily_credits: int = 2
    premium_daily_credits: int = 20
    pro_cost: int = 10
    today: Callable[[], date] = field(default=_utc_today)

    def check_and_consume(self, user_id: str, model: str | None = None) -> QuotaDecision:
        """Consume credits for one estimate when the daily budget allows it."""
        settings = self.settings_repository.get_settings(user_id)
        today = self.today()
        used = settings.estimation_count if settings.estimation_date == today else 0

        if self.license_service.is_premium(user_id):
            daily_credits = self.premium_daily_credits
            cost = self.pro_cost if (model or DEFAULT_MODEL) == PRO_MODEL else 1
        else:
            daily_credits = self.free_daily_credits
            cost = 1

        allowed = used + cost <= daily_credits
        remaining = max(0, daily_credits - used) // cost
        if allowed:
            self.settings_repository.update_settings(
                user_id,
                {"estimation_count": used + cost, "estimation_date": today},
            )
        else:
            logger.warning("AI estimate quota exhausted for %s", user_id[:8])
        return QuotaDecision(allowed=allowed, remaining=remaining, reset_at=today)
