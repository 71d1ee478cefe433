"""Conversion between Realtime Database JSON and domain models.

The database stores camelCase keys and ISO dates. Arrays come back either as
lists or, once an index was removed, as dicts keyed by position.
"""

from datetime import date

from phe_diary.domain.diary import DiaryDay, FoodLogItem
from phe_diary.domain.foods import CommunityFood, FoodDetails, OwnFood
from phe_diary.domain.lab_values import LabValue

_ITEM_FIELDS = {
    "name": "name",
    "weight": "weight",
    "phe": "phe",
    "kcal": "kcal",
    "emoji": "emoji",
    "icon": "icon",
    "phe_reference": "pheReference",
    "kcal_reference": "kcalReference",
    "note": "note",
    "community_food_key": "communityFoodKey",
    "manual": "manual",
}


def as_list(raw: object) -> list[object]:
    """Normalize a stored array into a list."""
    if raw is None:
        return []
    if isinstance(raw, list):
        return [entry for entry in raw if entry is not None]
    if isinstance(raw, dict):
        return [raw[index] for index in sorted(raw, key=int)]
    return []


def children(raw: object) -> dict[str, dict[str, object]]:
    """Return the keyed child records of a collection snapshot."""
    if not isinstance(raw, dict):
        return {}
    return {key: value for key, value in raw.items() if isinstance(value, dict)}


def item_to_record(item: FoodLogItem) -> dict[str, object]:
    return {column: getattr(item, attr) for attr, column in _ITEM_FIELDS.items()}


def item_from_record(row: dict[str, object]) -> FoodLogItem:
    return FoodLogItem(
        name=str(row.get("name", "")),
        weight=float(row.get("weight") or 0.0),
        phe=float(row.get("phe") or 0.0),
        kcal=float(row.get("kcal") or 0.0),
        emoji=row.get("emoji"),
        icon=row.get("icon"),
        phe_reference=_optional_float(row.get("pheReference")),
        kcal_reference=_optional_float(row.get("kcalReference")),
        note=row.get("note"),
        community_food_key=row.get("communityFoodKey"),
        manual=row.get("manual") is True,
    )


def day_to_record(day: DiaryDay) -> dict[str, object]:
    return {
        "date": day.date.isoformat(),
        "phe": day.phe,
        "kcal": day.kcal,
        "log": [item_to_record(item) for item in day.log],
    }


def day_from_record(key: str, row: dict[str, object]) -> DiaryDay:
    return DiaryDay(
        key=key,
        date=date.fromisoformat(str(row["date"])),
        phe=float(row.get("phe") or 0.0),
        kcal=float(row.get("kcal") or 0.0),
        log=[
            item_from_record(entry)
            for entry in as_list(row.get("log"))
            if isinstance(entry, dict)
        ],
    )


def lab_value_to_record(value: LabValue) -> dict[str, object]:
    return {
        "date": value.date.isoformat(),
        "phe": value.phe,
        "tyrosine": value.tyrosine,
    }


def lab_value_from_record(key: str, row: dict[str, object]) -> LabValue:
    return LabValue(
        key=key,
        date=date.fromisoformat(str(row["date"])),
        phe=_optional_float(row.get("phe")),
        tyrosine=_optional_float(row.get("tyrosine")),
    )


def details_to_record(details: FoodDetails) -> dict[str, object]:
    return {
        "name": details.name,
        "icon": details.icon,
        "phe": details.phe,
        "kcal": details.kcal,
        "note": details.note,
    }


def details_from_record(row: dict[str, object]) -> FoodDetails:
    return FoodDetails(
        name=str(row.get("name", "")),
        phe=float(row.get("phe") or 0.0),
        kcal=float(row.get("kcal") or 0.0),
        icon=row.get("icon"),
        note=row.get("note"),
    )


def own_food_to_record(food: OwnFood) -> dict[str, object]:
    return {
        **details_to_record(food.details),
        "shared": food.shared,
        "communityKey": food.community_key,
    }


def own_food_from_record(key: str, row: dict[str, object]) -> OwnFood:
    return OwnFood(
        key=key,
        details=details_from_record(row),
        shared=bool(row.get("shared", False)),
        community_key=row.get("communityKey"),
    )


def community_food_from_record(key: str, row: dict[str, object]) -> CommunityFood:
    return CommunityFood(
        key=key,
        details=details_from_record(row),
        language=str(row.get("language", "")),
        contributor_id=str(row.get("contributorId", "")),
        own_food_key=str(row.get("ownFoodKey", "")),
        created_at=int(row.get("createdAt") or 0),
        updated_at=row.get("updatedAt"),
        likes=int(row.get("likes") or 0),
        dislikes=int(row.get("dislikes") or 0),
        score=int(row.get("score") or 0),
        usage_count=int(row.get("usageCount") or 0),
        voter_ids=_voter_ids(row.get("voterIds")),
    )


def _optional_float(raw: object) -> float | None:
    if raw is None:
        return None
    return float(raw)


def _voter_ids(raw: object) -> dict[str, int]:
    """Read the vote map, ignoring anything but +1/-1 entries."""
    if not isinstance(raw, dict):
        return {}
    return {
        str(voter): vote
        for voter, vote in raw.items()
        if type(vote) is int and vote in (1, -1)
    }
