"""Domain models for own and community foods."""

from dataclasses import dataclass, field

COMMUNITY_FOOD_HIDE_THRESHOLD = -3
SUPPORTED_LANGUAGES = ("en", "de", "es", "fr")
DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class FoodDetails:
    """Nutrition details shared by own foods and community foods."""

    name: str
    phe: float
    kcal: float
    icon: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class OwnFood:
    """A custom food created by a user."""

    key: str
    details: FoodDetails
    shared: bool
    community_key: str | None = None


@dataclass(frozen=True)
class CommunityFood:
    """A user-submitted food in the shared, vote-ranked database."""

    key: str
    details: FoodDetails
    language: str
    contributor_id: str
    own_food_key: str
    created_at: int
    updated_at: int | None = None
    likes: int = 0
    dislikes: int = 0
    score: int = 0
    usage_count: int = 0
    voter_ids: dict[str, int] = field(default_factory=dict)

    @property
    def hidden(self) -> bool:
        return is_hidden(self.score)


@dataclass(frozen=True)
class VoteTally:
    """Vote counters after a vote was applied."""

    likes: int
    dislikes: int
    score: int

    @property
    def hidden(self) -> bool:
        return is_hidden(self.score)


def is_hidden(score: int) -> bool:
    """Return True when a community food scored low enough to be hidden."""
    return score < COMMUNITY_FOOD_HIDE_THRESHOLD
