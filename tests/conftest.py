"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import date
from itertools import count

import pytest
from fastapi.testclient import TestClient

from phe_diary.api.app import create_app
from phe_diary.config import Settings
from phe_diary.containers import AppContainer
from phe_diary.domain.diary import DiaryDay, FoodLogItem
from phe_diary.domain.foods import CommunityFood, FoodDetails, OwnFood, VoteTally
from phe_diary.domain.lab_values import LabValue
from phe_diary.domain.settings import UserSettings
from phe_diary.errors import AuthenticationError
from phe_diary.services.account import (
    AccountRepository,
    AccountService,
    DataCollection,
    IdentityProvider,
)
from phe_diary.services.cache import InMemoryCache
from phe_diary.services.community import CommunityFoodRepository, CommunityFoodService
from phe_diary.services.diary import DiaryRepository, DiaryService
from phe_diary.services.estimates import EstimateQuotaService
from phe_diary.services.lab_values import LabValueRepository, LabValueService
from phe_diary.services.license import LicenseRepository, LicenseService
from phe_diary.services.own_food import OwnFoodRepository, OwnFoodService
from phe_diary.services.settings import SettingsRepository, SettingsService

TODAY = date(2026, 3, 10)
PREMIUM_KEY = "PKU-PREMIUM-2026"
PREMIUM_AI_KEY = "PKU-PREMIUM-AI-2026"
ALICE = "alice-uid-0001"
BOB = "bob-uid-0002"
TOKENS = {"alice-token": ALICE, "bob-token": BOB}

_push_ids = count(1)


def next_key() -> str:
    return f"-Nkey{next(_push_ids):05d}"


def fixed_today() -> date:
    return TODAY


@dataclass
class InMemoryDiaryRepository(DiaryRepository):
    """In-memory diary repository for tests."""

    days: dict[str, dict[str, DiaryDay]] = field(default_factory=dict)

    def _user_days(self, user_id: str) -> dict[str, DiaryDay]:
        return self.days.setdefault(user_id, {})

    def list_days(self, user_id: str) -> list[DiaryDay]:
        return list(self._user_days(user_id).values())

    def get_day(self, user_id: str, key: str) -> DiaryDay | None:
        return self._user_days(user_id).get(key)

    def find_days_by_date(self, user_id: str, day: date) -> list[DiaryDay]:
        return [entry for entry in self.list_days(user_id) if entry.date == day]

    def count_days(self, user_id: str, limit: int) -> int:
        return min(len(self._user_days(user_id)), limit)

    def create_day(
        self,
        user_id: str,
        day: date,
        log: list[FoodLogItem],
        totals: tuple[float, float],
    ) -> DiaryDay:
        phe, kcal = totals
        created = DiaryDay(key=next_key(), date=day, phe=phe, kcal=kcal, log=list(log))
        self._user_days(user_id)[created.key] = created
        return created

    def save_day(self, user_id: str, day: DiaryDay) -> None:
        self._user_days(user_id)[day.key] = day

    def delete_day(self, user_id: str, key: str) -> None:
        self._user_days(user_id).pop(key, None)

    def seed(self, user_id: str, *dates: date) -> list[DiaryDay]:
        return [self.create_day(user_id, day, [], (0.0, 0.0)) for day in dates]


@dataclass
class InMemoryLabValueRepository(LabValueRepository):
    """In-memory lab value repository for tests."""

    values: dict[str, dict[str, LabValue]] = field(default_factory=dict)

    def _user_values(self, user_id: str) -> dict[str, LabValue]:
        return self.values.setdefault(user_id, {})

    def list_values(self, user_id: str) -> list[LabValue]:
        return list(self._user_values(user_id).values())

    def get_value(self, user_id: str, key: str) -> LabValue | None:
        return self._user_values(user_id).get(key)

    def find_keys_by_date(self, user_id: str, day: date) -> list[str]:
        return [
            key for key, value in self._user_values(user_id).items() if value.date == day
        ]

    def create_value(
        self, user_id: str, day: date, phe: float | None, tyrosine: float | None
    ) -> LabValue:
        value = LabValue(key=next_key(), date=day, phe=phe, tyrosine=tyrosine)
        self._user_values(user_id)[value.key] = value
        return value

    def save_value(self, user_id: str, value: LabValue) -> None:
        self._user_values(user_id)[value.key] = value

    def delete_value(self, user_id: str, key: str) -> None:
        self._user_values(user_id).pop(key, None)


@dataclass
class InMemoryOwnFoodRepository(OwnFoodRepository):
    """In-memory own food repository for tests."""

    foods: dict[str, dict[str, OwnFood]] = field(default_factory=dict)

    def _user_foods(self, user_id: str) -> dict[str, OwnFood]:
        return self.foods.setdefault(user_id, {})

    def list_foods(self, user_id: str) -> list[OwnFood]:
        return list(self._user_foods(user_id).values())

    def get_food(self, user_id: str, key: str) -> OwnFood | None:
        return self._user_foods(user_id).get(key)

    def create_food(self, user_id: str, details: FoodDetails, shared: bool) -> OwnFood:
        food = OwnFood(key=next_key(), details=details, shared=shared)
        self._user_foods(user_id)[food.key] = food
        return food

    def save_food(self, user_id: str, food: OwnFood) -> None:
        self._user_foods(user_id)[food.key] = food

    def delete_food(self, user_id: str, key: str) -> None:
        self._user_foods(user_id).pop(key, None)


@dataclass
class InMemoryCommunityFoodRepository(CommunityFoodRepository):
    """In-memory community food repository for tests."""

    foods: dict[str, CommunityFood] = field(default_factory=dict)
    fail_usage: bool = False

    def get_food(self, key: str) -> CommunityFood | None:
        return self.foods.get(key)

    def list_foods(self, language: str | None) -> list[CommunityFood]:
        return [
            food
            for food in self.foods.values()
            if language is None or food.language == language
        ]

    def list_keys_by_contributor(self, contributor_id: str) -> list[str]:
        return [
            key
            for key, food in self.foods.items()
            if food.contributor_id == contributor_id
        ]

    def create_food(  # noqa: PLR0913
        self,
        details: FoodDetails,
        language: str,
        contributor_id: str,
        own_food_key: str,
        created_at: int,
    ) -> CommunityFood:
        food = CommunityFood(
            key=next_key(),
            details=details,
            language=language,
            contributor_id=contributor_id,
            own_food_key=own_food_key,
            created_at=created_at,
        )
        self.foods[food.key] = food
        return food

    def update_details(self, key: str, details: FoodDetails, updated_at: int) -> None:
        self.foods[key] = replace(self.foods[key], details=details, updated_at=updated_at)

    def delete_food(self, key: str) -> None:
        self.foods.pop(key, None)

    def get_vote(self, key: str, voter_id: str) -> int | None:
        return self.foods[key].voter_ids.get(voter_id)

    def set_vote(self, key: str, voter_id: str, vote: int | None) -> None:
        voters = dict(self.foods[key].voter_ids)
        if vote is None:
            voters.pop(voter_id, None)
        else:
            voters[voter_id] = vote
        self.foods[key] = replace(self.foods[key], voter_ids=voters)

    def save_tally(self, key: str, tally: VoteTally) -> None:
        self.foods[key] = replace(
            self.foods[key],
            likes=tally.likes,
            dislikes=tally.dislikes,
            score=tally.score,
        )

    def increment_usage(self, key: str) -> bool:
        if self.fail_usage:
            raise RuntimeError("database unavailable")
        food = self.foods.get(key)
        if food is None:
            return False
        self.foods[key] = replace(food, usage_count=food.usage_count + 1)
        return True

    def seed(self, contributor_id: str, name: str, **counters: object) -> CommunityFood:
        food = CommunityFood(
            key=next_key(),
            details=FoodDetails(name=name, phe=50.0, kcal=80.0),
            language=str(counters.pop("language", "en")),
            contributor_id=contributor_id,
            own_food_key=next_key(),
            created_at=1_700_000_000_000,
            **counters,
        )
        self.foods[food.key] = food
        return food


@dataclass
class InMemorySettingsRepository(
    SettingsRepository, LicenseRepository, AccountRepository
):
    """In-memory settings repository that also records bulk deletions."""

    settings: dict[str, UserSettings] = field(default_factory=dict)
    deleted_collections: list[tuple[str, DataCollection]] = field(default_factory=list)
    deleted_users: list[str] = field(default_factory=list)
    license_reads: int = 0

    def get_settings(self, user_id: str) -> UserSettings:
        return self.settings.get(user_id, UserSettings())

    def update_settings(self, user_id: str, changes: dict[str, object]) -> None:
        self.settings[user_id] = replace(self.get_settings(user_id), **changes)

    def get_license(self, user_id: str) -> str | None:
        self.license_reads += 1
        return self.get_settings(user_id).license

    def delete_collection(self, user_id: str, collection: DataCollection) -> None:
        self.deleted_collections.append((user_id, collection))

    def delete_user_data(self, user_id: str) -> None:
        self.settings.pop(user_id, None)
        self.deleted_users.append(user_id)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Maps fixed tokens to user ids and records account deletions."""

    tokens: dict[str, str] = field(default_factory=lambda: dict(TOKENS))
    deleted: list[str] = field(default_factory=list)

    def verify_id_token(self, token: str) -> str:
        try:
            return self.tokens[token]
        except KeyError:
            raise AuthenticationError("Invalid or expired token") from None

    def delete_user(self, user_id: str) -> None:
        self.deleted.append(user_id)


def make_license_service(
    repository: InMemorySettingsRepository | None = None,
) -> LicenseService:
    return LicenseService(
        repository=repository or InMemorySettingsRepository(),
        cache=InMemoryCache(),
        license_key=PREMIUM_KEY,
        premium_ai_license_key=PREMIUM_AI_KEY,
    )


def make_premium(repository: InMemorySettingsRepository, user_id: str) -> None:
    repository.update_settings(user_id, {"license": PREMIUM_KEY})


def auth_headers(token: str = "alice-token") -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        firebase_project_id="demo-phe-diary",
        firebase_database_url="https://demo-phe-diary-default-rtdb.firebaseio.com",
        license_key=PREMIUM_KEY,
        premium_ai_license_key=PREMIUM_AI_KEY,
        environment="test",
    )


@pytest.fixture
def settings_repository() -> InMemorySettingsRepository:
    return InMemorySettingsRepository()


@pytest.fixture
def community_repository() -> InMemoryCommunityFoodRepository:
    return InMemoryCommunityFoodRepository()


@pytest.fixture
def diary_repository() -> InMemoryDiaryRepository:
    return InMemoryDiaryRepository()


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def container(
    settings: Settings,
    settings_repository: InMemorySettingsRepository,
    community_repository: InMemoryCommunityFoodRepository,
    diary_repository: InMemoryDiaryRepository,
    identity_provider: FakeIdentityProvider,
) -> AppContainer:
    license_service = LicenseService(
        repository=settings_repository,
        cache=InMemoryCache(),
        license_key=settings.license_key,
        premium_ai_license_key=settings.premium_ai_license_key,
        cache_ttl_seconds=settings.license_cache_ttl_seconds,
    )
    community_service = CommunityFoodService(
        community_repository, clock=lambda: 1_700_000_000_000
    )
    diary_service = DiaryService(
        repository=diary_repository,
        license_service=license_service,
        community_service=community_service,
        free_day_limit=settings.free_diary_limit,
        today=fixed_today,
    )
    own_food_service = OwnFoodService(
        repository=InMemoryOwnFoodRepository(),
        community_service=community_service,
    )
    settings_service = SettingsService(
        repository=settings_repository,
        license_service=license_service,
        today=fixed_today,
    )
    estimate_service = EstimateQuotaService(
        settings_repository=settings_repository,
        license_service=license_service,
        free_daily_credits=settings.free_daily_estimate_credits,
        premium_daily_credits=settings.premium_daily_estimate_credits,
        pro_cost=settings.pro_estimate_cost,
        today=fixed_today,
    )
    account_service = AccountService(
        repository=settings_repository,
        identity_provider=identity_provider,
        community_service=community_service,
    )

    def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        identity_provider=identity_provider,
        license_service=license_service,
        community_service=community_service,
        diary_service=diary_service,
        lab_value_service=LabValueService(InMemoryLabValueRepository()),
        own_food_service=own_food_service,
        settings_service=settings_service,
        estimate_service=estimate_service,
        account_service=account_service,
        close_resources=close_resources,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
