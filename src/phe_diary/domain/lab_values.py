"""Domain models for blood lab values."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class LabValue:
    """Phe and tyrosine blood levels measured on a given day."""

    key: str
    date: date
    phe: float | None
    tyrosine: float | None
