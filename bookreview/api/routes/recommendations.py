"""Recommendation routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from bookreview.api.dependencies import get_recommendation_service
from bookreview.api.middleware.auth import get_current_user_id
from bookreview.api.schemas import RecommendationRequestBody, RecommendationResponse
from bookreview.config import settings
from bookreview.services.recommendation import RecommendationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


def recommendation_query(
    limit: int = Query(settings.recommendation_default_limit),
    min_rating: float = Query(settings.recommendation_min_rating, ge=0.0, le=5.0),
    min_reviews: int = Query(settings.recommendation_min_reviews, ge=0),
    include_top_rated: bool = Query(True),
    include_genre_based: bool = Query(True),
    include_ai_powered: bool = Query(False),
) -> RecommendationRequestBody:
    """Collect the recommendation parameters from the query string."""
    return RecommendationRequestBody(
        limit=limit,
        min_rating=min_rating,
        min_reviews=min_reviews,
        include_top_rated=include_top_rated,
        include_genre_based=include_genre_based,
        include_ai_powered=include_ai_powered,
    )


@router.get("/for-me", response_model=list[RecommendationResponse])
async def get_my_recommendations(
    params: RecommendationRequestBody = Depends(recommendation_query),
    user_id: UUID = Depends(get_current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> list[RecommendationResponse]:
    """Personalized recommendations for the authenticated user."""
    results = await service.recommend(user_id, params.to_domain())
    return [RecommendationResponse.from_domain(r) for r in results]


@router.post("/for-me", response_model=list[RecommendationResponse])
async def post_my_recommendations(
    body: RecommendationRequestBody,
    user_id: UUID = Depends(get_current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> list[RecommendationResponse]:
    """Personalized recommendations, parameters supplied as a JSON body."""
    results = await service.recommend(user_id, body.to_domain())
    return [RecommendationResponse.from_domain(r) for r in results]


@router.get("/for-user/{user_id}", response_model=list[RecommendationResponse])
async def get_user_recommendations(
    user_id: UUID,
    params: RecommendationRequestBody = Depends(recommendation_query),
    _caller: UUID = Depends(get_current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
) -> list[RecommendationResponse]:
    """Recommendations for a specific user. Unknown users yield 404."""
    results = await service.recommend(user_id, params.to_domain())
    return [RecommendationResponse.from_domain(r) for r in results]


@router.get("/top-rated", response_model=list[RecommendationResponse])
async def get_top_rated(
    limit: int = Query(10),
    min_rating: float = Query(4.0, ge=0.0, le=5.0),
    min_reviews: int = Query(10, ge=0),
    service: RecommendationService = Depends(get_recommendation_service),
) -> list[RecommendationResponse]:
    """Public top-rated listing; carries no user id."""
    request = RecommendationRequestBody(
        limit=limit,
        min_rating=min_rating,
        min_reviews=min_reviews,
        include_top_rated=True,
        include_genre_based=False,
        include_ai_powered=False,
    ).to_domain()
    results = await service.top_rated(request)
    logger.debug("Top-rated listing returned %d book(s)", len(results))
    return [RecommendationResponse.from_domain(r) for r in results]
