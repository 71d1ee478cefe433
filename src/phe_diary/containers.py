"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

import firebase_admin

from phe_diary.adapters.firebase_app import database_root, initialize_firebase
from phe_diary.adapters.firebase_auth_client import FirebaseAuthClient
from phe_diary.adapters.firebase_community_repository import (
    FirebaseCommunityFoodRepository,
)
from phe_diary.adapters.firebase_diary_repository import FirebaseDiaryRepository
from phe_diary.adapters.firebase_lab_value_repository import (
    FirebaseLabValueRepository,
)
from phe_diary.adapters.firebase_own_food_repository import FirebaseOwnFoodRepository
from phe_diary.adapters.firebase_settings_repository import FirebaseSettingsRepository
from phe_diary.config import Settings
from phe_diary.services.account import AccountService, IdentityProvider
from phe_diary.services.cache import InMemoryCache
from phe_diary.services.community import CommunityFoodService
from phe_diary.services.diary import DiaryService
from phe_diary.services.estimates import EstimateQuotaService
from phe_diary.services.lab_values import LabValueService
from phe_diary.services.license import LicenseService
from phe_diary.services.own_food import OwnFoodService
from phe_diary.services.settings import SettingsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    license_service: LicenseService
    community_service: CommunityFoodService
    diary_service: DiaryService
    lab_value_service: LabValueService
    own_food_service: OwnFoodService
    settings_service: SettingsService
    estimate_service: EstimateQuotaService
    account_service: AccountService
    close_resources: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    firebase_app = initialize_firebase(resolved_settings)
    root = database_root(firebase_app)

    settings_repository = FirebaseSettingsRepository(root)
    identity_provider = FirebaseAuthClient(firebase_app)
    license_service = LicenseService(
        repository=settings_repository,
        cache=InMemoryCache(),
        license_key=resolved_settings.license_key,
        premium_ai_license_key=resolved_settings.premium_ai_license_key,
        cache_ttl_seconds=resolved_settings.license_cache_ttl_seconds,
    )
    community_service = CommunityFoodService(FirebaseCommunityFoodRepository(root))
    diary_service = DiaryService(
        repository=FirebaseDiaryRepository(root),
        license_service=license_service,
        community_service=community_service,
        free_day_limit=resolved_settings.free_diary_limit,
    )
    lab_value_service = LabValueService(FirebaseLabValueRepository(root))
    own_food_service = OwnFoodService(
        repository=FirebaseOwnFoodRepository(root),
        community_service=community_service,
    )
    settings_service = SettingsService(
        repository=settings_repository,
        license_service=license_service,
    )
    estimate_service = EstimateQuotaService(
        settings_repository=settings_repository,
        license_service=license_service,
        free_daily_credits=resolved_settings.free_daily_estimate_credits,
        premium_daily_credits=resolved_settings.premium_daily_estimate_credits,
        pro_cost=resolved_settings.pro_estimate_cost,
    )
    account_service = AccountService(
        repository=settings_repository,
        identity_provider=identity_provider,
        community_service=community_service,
    )

    def close_resources() -> None:
        firebase_admin.delete_app(firebase_app)

    return AppContainer(
        settings=resolved_settings,
        identity_provider=identity_provider,
        license_service=license_service,
        community_service=community_service,
        diary_service=diary_service,
        lab_value_service=lab_value_service,
        own_food_service=own_food_service,
        settings_service=settings_service,
        estimate_service=estimate_service,
        account_service=account_service,
        close_resources=close_resources,
    )
