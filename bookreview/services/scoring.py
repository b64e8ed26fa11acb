"""
Confidence scorers for the recommendation strategies.

All scores fall in [0, 1]. They are informational: the orchestrator keeps the
order in which each strategy's fetch returned its candidates.
"""

from bookreview.domain.entities import CandidateBook, Genre, UserProfile

MAX_RATING = 5.0

# Top-rated: quality dominates, popularity breaks ties and saturates at 100 reviews
RATING_WEIGHT = 0.7
POPULARITY_WEIGHT = 0.3
POPULARITY_SATURATION = 100.0

PREFERRED_GENRE_BONUS = 0.2
INFERRED_GENRE_BONUS = 0.1

AI_SCORE = 0.9
AI_REASON = "AI-powered recommendation based on your reading history and preferences"


def top_rated_score(book: CandidateBook) -> float:
    """Weighted blend of normalized rating and capped review count."""
    rating_score = book.average_rating / MAX_RATING
    review_score = min(book.total_reviews / POPULARITY_SATURATION, 1.0)
    return RATING_WEIGHT * rating_score + POPULARITY_WEIGHT * review_score


def top_rated_reason(book: CandidateBook) -> str:
    return (
        f"This book has an excellent rating of {book.average_rating:.1f} "
        f"based on {book.total_reviews} reviews"
    )


def genre_score(book: CandidateBook, genre: Genre, profile: UserProfile) -> float:
    """
    Normalized rating plus a flat genre bonus, capped at 1.0.

    Explicitly preferred genres earn a larger bonus than genres inferred from
    the user's favorite books.
    """
    bonus = (
        PREFERRED_GENRE_BONUS
        if genre in profile.preferred_genres
        else INFERRED_GENRE_BONUS
    )
    return min(book.average_rating / MAX_RATING + bonus, 1.0)


def genre_reason(genre: Genre) -> str:
    return f"Based on your interest in {genre.label} books"
