"""License checks deciding a user's usage tier."""

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

from phe_diary.domain.settings import LicenseTier
from phe_diary.services.cache import Cache

logger = logging.getLogger(__name__)


class LicenseRepository(Protocol):
    """Read access to stored license keys."""

    def get_license(self, user_id: str) -> str | None:
        """Return the license key stored in a user's settings."""


@dataclass
class LicenseService:
    """Compares license keys against the server-held secrets."""

    repository: LicenseRepository
    cache: Cache
    license_key: str
    premium_ai_license_key: str | None = None
    cache_ttl_seconds: int = 300

    def tier_for_key(self, license_key: str | None) -> LicenseTier:
        """Return the tier a license key unlocks."""
        if not license_key:
            return LicenseTier.FREE
        if self.premium_ai_license_key and _matches(
            license_key, self.premium_ai_license_key
        ):
            return LicenseTier.PREMIUM_AI
        if _matches(license_key, self.license_key):
            return LicenseTier.PREMIUM
        return LicenseTier.FREE

    def get_tier(self, user_id: str) -> LicenseTier:
        """Return the user's tier, cached for a few minutes."""
        cache_key = _cache_key(user_id)
        cached = self.cache.get(cache_key)
        if isinstance(cached, LicenseTier):
            return cached
        tier = self.tier_for_key(self.repository.get_license(user_id))
        self.cache.set(cache_key, tier, self.cache_ttl_seconds)
        logger.debug("Resolved license tier %s for %s", tier, user_id[:8])
        return tier

    def is_premium(self, user_id: str) -> bool:
        """Return True for any paid tier."""
        return self.get_tier(user_id).is_premium

    def invalidate(self, user_id: str) -> None:
        """Forget the cached tier after the user's license changed."""
        self.cache.delete(_cache_key(user_id))


def _cache_key(user_id: str) -> str:
    return f"license:tier:{user_id}"


def _matches(candidate: str, secret: str) -> bool:
    return hmac.compare_digest(candidate.encode(), secret.encode())
