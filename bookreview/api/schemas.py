"""Pydantic request/response schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import HTTPException
from pydantic import BaseModel, Field

from bookreview.config import settings
from bookreview.domain.entities import (
    Genre,
    Recommendation,
    RecommendationRequest,
    RecommendationStrategy,
)


class RecommendationRequestBody(BaseModel):
    limit: int = settings.recommendation_default_limit
    min_rating: float = Field(default=settings.recommendation_min_rating, ge=0.0, le=5.0)
    min_reviews: int = Field(default=settings.recommendation_min_reviews, ge=0)
    include_top_rated: bool = True
    include_genre_based: bool = True
    include_ai_powered: bool = False

    def to_domain(self) -> RecommendationRequest:
        try:
            return RecommendationRequest(
                limit=self.limit,
                min_rating=self.min_rating,
                min_review_count=self.min_reviews,
                include_top_rated=self.include_top_rated,
                include_genre_based=self.include_genre_based,
                include_ai_powered=self.include_ai_powered,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc


class BookResponse(BaseModel):
    id: UUID
    title: str
    author: str
    genres: list[Genre]
    average_rating: float
    total_reviews: int
    description: Optional[str] = None
    published_year: Optional[int] = None


class RecommendationResponse(BaseModel):
    user_id: Optional[UUID]
    book: BookResponse
    strategy: RecommendationStrategy
    reason: str
    score: float
    created_at: datetime

    @classmethod
    def from_domain(cls, rec: Recommendation) -> "RecommendationResponse":
        book = rec.book
        return cls(
            user_id=rec.user_id,
            book=BookResponse(
                id=book.id,
                title=book.title,
                author=book.author,
                genres=[g for g in Genre if g in book.genres],
                average_rating=book.average_rating,
                total_reviews=book.total_reviews,
                description=book.description,
                published_year=book.published_year,
            ),
            strategy=rec.strategy,
            reason=rec.reason,
            score=round(rec.score, 4),
            created_at=rec.created_at,
        )
