"""Domain entities and value objects for the recommendation engine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID


class Genre(str, Enum):
    """Book genres. Declaration order is the genre strategy's walk order."""

    FICTION = "FICTION"
    NON_FICTION = "NON_FICTION"
    MYSTERY = "MYSTERY"
    ROMANCE = "ROMANCE"
    SCIENCE_FICTION = "SCIENCE_FICTION"
    FANTASY = "FANTASY"
    BIOGRAPHY = "BIOGRAPHY"
    HISTORY = "HISTORY"
    SELF_HELP = "SELF_HELP"
    BUSINESS = "BUSINESS"
    TECHNOLOGY = "TECHNOLOGY"
    HEALTH = "HEALTH"
    COOKING = "COOKING"
    TRAVEL = "TRAVEL"
    CHILDREN = "CHILDREN"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``SCIENCE_FICTION`` -> ``science fiction``."""
        return self.value.lower().replace("_", " ")


class RecommendationStrategy(str, Enum):
    TOP_RATED = "TOP_RATED"
    GENRE_SIMILARITY = "GENRE_SIMILARITY"
    FAVORITES_SIMILARITY = "FAVORITES_SIMILARITY"  # reserved, no strategy produces it
    AI_POWERED = "AI_POWERED"


@dataclass(frozen=True)
class CandidateBook:
    """Read-only projection of a catalog book."""

    id: UUID
    title: str
    author: str
    genres: frozenset[Genre] = frozenset()
    average_rating: float = 0.0
    total_reviews: int = 0
    description: Optional[str] = None
    published_year: Optional[int] = None


@dataclass(frozen=True)
class UserProfile:
    """Read-only projection of a user for recommendation purposes.

    ``preferred_genres`` are declared by the user; ``favorite_genres`` are
    derived from the genres of the books the user has favorited.
    """

    id: UUID
    preferred_genres: frozenset[Genre] = frozenset()
    favorite_genres: frozenset[Genre] = frozenset()
    bio: Optional[str] = None


@dataclass(frozen=True)
class RecommendationRequest:
    """
    Parameters of a single recommendation run.

    Attributes:
        limit:               Maximum recommendations returned; <= 0 yields none.
        min_rating:          Rating floor for the top-rated strategy (0.0-5.0).
        min_review_count:    Review-count floor for top-rated and genre strategies.
        include_top_rated:   Run the top-rated strategy.
        include_genre_based: Run the genre-similarity strategy.
        include_ai_powered:  Run the AI strategy (when the provider is available).
    """

    limit: int = 10
    min_rating: float = 3.5
    min_review_count: int = 5
    include_top_rated: bool = True
    include_genre_based: bool = True
    include_ai_powered: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_rating <= 5.0:
            raise ValueError(f"min_rating must be between 0.0 and 5.0, got {self.min_rating}")
        if self.min_review_count < 0:
            raise ValueError(
                f"min_review_count must be non-negative, got {self.min_review_count}"
            )


@dataclass(frozen=True)
class Recommendation:
    """A single recommended book, built fresh per request and never persisted."""

    user_id: Optional[UUID]
    book: CandidateBook
    strategy: RecommendationStrategy
    reason: str
    score: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
