"""Request bodies and response shaping for the JSON API."""

import datetime as dt
from typing import Annotated, Literal

from fastapi import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from phe_diary.domain.diary import DiaryDay, FoodLogItem
from phe_diary.domain.foods import CommunityFood, FoodDetails, OwnFood
from phe_diary.domain.lab_values import LabValue
from phe_diary.domain.settings import ConsentEvent, LabUnit, UserSettings
from phe_diary.services.account import DataCollection

Language = Literal["en", "de", "es", "fr"]
NonNegative = Annotated[float, Field(ge=0)]
Positive = Annotated[float, Field(gt=0)]

# Realtime Database keys may not contain path separators or ". # $ [ ]".
RECORD_KEY_PATTERN = r"^[^/.#$\[\]]+$"
RecordKey = Annotated[str, Field(min_length=1, pattern=RECORD_KEY_PATTERN)]
KeyPath = Annotated[str, Path(pattern=RECORD_KEY_PATTERN)]


class ApiModel(BaseModel):
    """Base model accepting camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FoodLogItemIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    emoji: str | None = None
    icon: str | None = None
    phe_reference: NonNegative | None = None
    kcal_reference: NonNegative | None = None
    weight: float = Field(gt=0, le=10000)
    phe: NonNegative
    kcal: NonNegative
    note: str | None = Field(default=None, max_length=500)
    community_food_key: RecordKey | None = None
    manual: bool = False

    def to_domain(self) -> FoodLogItem:
        return FoodLogItem(
            name=self.name,
            weight=self.weight,
            phe=self.phe,
            kcal=self.kcal,
            emoji=self.emoji,
            icon=self.icon,
            phe_reference=self.phe_reference,
            kcal_reference=self.kcal_reference,
            note=self.note,
            community_food_key=self.community_food_key,
            manual=self.manual,
        )


class AddFoodItemIn(FoodLogItemIn):
    date: dt.date | None = None


class CreateDayIn(ApiModel):
    date: dt.date
    phe: NonNegative
    kcal: NonNegative


class UpdateDayIn(ApiModel):
    date: dt.date | None = None
    phe: NonNegative
    kcal: NonNegative
    log: list[FoodLogItemIn] | None = None


class UpdateFoodItemIn(ApiModel):
    log_index: int = Field(ge=0)
    entry: FoodLogItemIn


class DeleteFoodItemIn(ApiModel):
    log_index: int = Field(ge=0)


class LabValueIn(ApiModel):
    date: dt.date
    phe: Positive | None = None
    tyrosine: Positive | None = None

    @model_validator(mode="after")
    def _require_measurement(self) -> "LabValueIn":
        if self.phe is None and self.tyrosine is None:
            raise ValueError("Either Phe or Tyrosine must be provided")
        return self


class OwnFoodIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    icon: str | None = None
    phe: NonNegative
    kcal: NonNegative
    note: str | None = Field(default=None, max_length=500)
    shared: bool = False

    def details(self) -> FoodDetails:
        return FoodDetails(
            name=self.name, phe=self.phe, kcal=self.kcal, icon=self.icon, note=self.note
        )


class OwnFoodSaveIn(OwnFoodIn):
    locale: Language | None = None


class OwnFoodUpdateIn(ApiModel):
    locale: Language | None = None
    data: OwnFoodIn


class VoteIn(ApiModel):
    community_food_key: RecordKey
    vote: Literal[1, -1]


class SettingsUpdateIn(ApiModel):
    max_phe: NonNegative | None = None
    max_kcal: NonNegative | None = None
    lab_unit: LabUnit | None = None
    license: str | None = None

    @field_validator("lab_unit")
    @classmethod
    def _lab_unit_not_null(cls, value: LabUnit | None) -> LabUnit:
        if value is None:
            raise ValueError("labUnit cannot be null")
        return value


class ConsentIn(ApiModel):
    health_data_consent: bool | None = None
    email_consent: bool | None = None


class GettingStartedIn(ApiModel):
    completed: bool


class ResetIn(ApiModel):
    type: DataCollection


class LicenseValidateIn(ApiModel):
    license: str | None = None


class EstimateCheckIn(ApiModel):
    model: str | None = None


def item_out(item: FoodLogItem) -> dict[str, object]:
    return {
        "name": item.name,
        "emoji": item.emoji,
        "icon": item.icon,
        "pheReference": item.phe_reference,
        "kcalReference": item.kcal_reference,
        "weight": item.weight,
        "phe": item.phe,
        "kcal": item.kcal,
        "note": item.note,
        "communityFoodKey": item.community_food_key,
        "manual": item.manual,
    }


def day_out(day: DiaryDay) -> dict[str, object]:
    return {
        "key": day.key,
        "date": day.date.isoformat(),
        "phe": day.phe,
        "kcal": day.kcal,
        "log": [item_out(item) for item in day.log],
    }


def lab_value_out(value: LabValue) -> dict[str, object]:
    return {
        "key": value.key,
        "date": value.date.isoformat(),
        "phe": value.phe,
        "tyrosine": value.tyrosine,
    }


def _details_out(details: FoodDetails) -> dict[str, object]:
    return {
        "name": details.name,
        "icon": details.icon,
        "phe": details.phe,
        "kcal": details.kcal,
        "note": details.note,
    }


def own_food_out(food: OwnFood) -> dict[str, object]:
    return {
        "key": food.key,
        **_details_out(food.details),
        "shared": food.shared,
        "communityKey": food.community_key,
    }


def community_food_out(food: CommunityFood, user_id: str) -> dict[str, object]:
    return {
        "key": food.key,
        **_details_out(food.details),
        "language": food.language,
        "contributorId": food.contributor_id,
        "createdAt": food.created_at,
        "updatedAt": food.updated_at,
        "likes": food.likes,
        "dislikes": food.dislikes,
        "score": food.score,
        "usageCount": food.usage_count,
        "hidden": food.hidden,
        "myVote": food.voter_ids.get(user_id),
    }


def _history_out(history: list[ConsentEvent]) -> list[dict[str, str]]:
    return [
        {"action": str(event.action), "date": event.date.isoformat()}
        for event in history
    ]


def _iso(value: dt.date | None) -> str | None:
    return value.isoformat() if value else None


def settings_out(settings: UserSettings) -> dict[str, object]:
    return {
        "maxPhe": settings.max_phe,
        "maxKcal": settings.max_kcal,
        "labUnit": str(settings.lab_unit),
        "license": settings.license,
        "healthDataConsent": settings.health_data_consent,
        "healthDataConsentDate": _iso(settings.health_data_consent_date),
        "healthDataConsentHistory": _history_out(settings.health_data_consent_history),
        "emailConsent": settings.email_consent,
        "emailConsentDate": _iso(settings.email_consent_date),
        "emailConsentHistory": _history_out(settings.email_consent_history),
        "gettingStartedCompleted": settings.getting_started_completed,
        "estimationCount": settings.estimation_count,
        "estimationDate": _iso(settings.estimation_date),
    }
