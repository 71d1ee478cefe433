"""Domain models for the phe diary."""

from dataclasses import dataclass, field
from datetime import date

MANUAL_ENTRY_NAME = "Manual Entry"
MANUAL_ENTRY_WEIGHT = 100.0


@dataclass(frozen=True)
class FoodLogItem:
    """A single food logged on a diary day."""

    name: str
    weight: float
    phe: float
    kcal: float
    emoji: str | None = None
    icon: str | None = None
    phe_reference: float | None = None
    kcal_reference: float | None = None
    note: str | None = None
    community_food_key: str | None = None
    manual: bool = False


@dataclass(frozen=True)
class DiaryDay:
    """A date-scoped aggregate of logged food items."""

    key: str
    date: date
    phe: float
    kcal: float
    log: list[FoodLogItem] = field(default_factory=list)


def manual_entry(phe: float, kcal: float) -> FoodLogItem:
    """Build the placeholder item that carries totals entered by hand."""
    return FoodLogItem(
        name=MANUAL_ENTRY_NAME,
        weight=MANUAL_ENTRY_WEIGHT,
        phe=phe,
        kcal=kcal,
        manual=True,
    )
