import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.application.results_service import ResultService
from app.infrastructure.config import settings
from app.infrastructure.trivia.trivia_client import TriviaClient
from app.presentation.dependencies import (
    get_current_user,
    get_result_service,
    get_trivia_client,
)
from app.presentation.schemas.quiz_schema import (
    CategoriesResponse,
    QuestionsResponse,
)
from app.presentation.schemas.result_schema import (
    RecentResultOut,
    StatsOut,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/questions", response_model=QuestionsResponse)
def get_questions(
    amount: int = Query(settings.QUIZ_SIZE, ge=1, le=50),
    category: Optional[int] = Query(None, ge=1),
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None,
    current_user: dict = Depends(get_current_user),
    trivia: TriviaClient = Depends(get_trivia_client),
):
    logger.info(
        f"User {current_user['user_id']} requesting {amount} questions "
        f"(category={category}, difficulty={difficulty})"
    )
    batch = trivia.fetch_questions(amount=amount, category=category, difficulty=difficulty)
    return QuestionsResponse(
        questions=batch.questions,
        total_questions=len(batch.questions),
        fallback=batch.fallback,
        message=batch.message,
    )


@router.get("/categories", response_model=CategoriesResponse)
def get_categories(
    current_user: dict = Depends(get_current_user),
    trivia: TriviaClient = Depends(get_trivia_client),
):
    return CategoriesResponse(categories=trivia.fetch_categories())


@router.get("/stats", response_model=StatsResponse)
def get_quiz_stats(
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    try:
        data = service.get_stats(current_user["user_id"])
        return StatsResponse(
            stats=StatsOut(**data["stats"]),
            recent_results=[RecentResultOut.model_validate(r) for r in data["recentResults"]],
        )
    except Exception as e:
        logger.error(
            f"Error fetching quiz stats for user {current_user['user_id']}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=500, detail="Server error while fetching quiz statistics"
        )
