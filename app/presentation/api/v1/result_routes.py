import logging
import math

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from app.application.errors import NotFound
from app.application.results_service import ResultService
from app.infrastructure.db.models.user_model import UserModel
from app.presentation.dependencies import (
    get_current_user,
    get_result_service,
    get_user_profile,
)
from app.presentation.schemas.common import MessageResponse
from app.presentation.schemas.result_schema import (
    LeaderboardEntry,
    LeaderboardResponse,
    MyResultsResponse,
    Pagination,
    RecentResultOut,
    ResultDetailOut,
    ResultResponse,
    ResultSummaryOut,
    SaveResultRequest,
    SaveResultResponse,
    SavedResultSummary,
    StatsOut,
    StatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --------------------------------------------------
# 1. Save a submitted attempt
# --------------------------------------------------
@router.post("/save", response_model=SaveResultResponse, status_code=status.HTTP_201_CREATED)
def save_result(
    data: SaveResultRequest,
    request: Request,
    user: UserModel = Depends(get_user_profile),
    service: ResultService = Depends(get_result_service),
):
    user_id = user.id
    try:
        result = service.save_result(
            user,
            data.questions,
            time_used=data.time_used,
            completed=data.completed,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
        return SaveResultResponse(result=SavedResultSummary.model_validate(result))
    except ValueError as e:
        logger.warning(f"Validation error saving result for user {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error saving result for user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while saving quiz result",
        )


# --------------------------------------------------
# 2. Paginated history (questions omitted)
# --------------------------------------------------
@router.get("/my-results", response_model=MyResultsResponse)
def get_my_results(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: str = Query("-createdAt"),
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    user_id = current_user["user_id"]
    try:
        rows, total = service.list_results(user_id, page=page, limit=limit, sort=sort)
    except ValueError as e:
        logger.warning(f"Invalid result listing request from user {user_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching results for user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching quiz results",
        )

    skip = (page - 1) * limit
    return MyResultsResponse(
        results=[ResultSummaryOut.model_validate(r) for r in rows],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_results=total,
            has_next=skip + len(rows) < total,
            has_prev=page > 1,
        ),
    )


# --------------------------------------------------
# 3. Single result, owner only
# --------------------------------------------------
@router.get("/result/{result_id}", response_model=ResultResponse)
def get_result(
    result_id: int,
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    user_id = current_user["user_id"]
    try:
        result = service.get_result(result_id, user_id)
        return ResultResponse(result=ResultDetailOut.model_validate(result))
    except NotFound as e:
        logger.warning(f"Result {result_id} not found for user {user_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error fetching result {result_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching quiz result",
        )


@router.delete("/result/{result_id}", response_model=MessageResponse)
def delete_result(
    result_id: int,
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    user_id = current_user["user_id"]
    try:
        service.delete_result(result_id, user_id)
        return MessageResponse(message="Quiz result deleted successfully")
    except NotFound as e:
        logger.warning(f"Delete failed: result {result_id} not found for user {user_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting result {result_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while deleting quiz result",
        )


# --------------------------------------------------
# 4. Aggregates
# --------------------------------------------------
@router.get("/stats", response_model=StatsResponse)
def get_user_stats(
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    user_id = current_user["user_id"]
    try:
        data = service.get_stats(user_id)
    except Exception as e:
        logger.error(f"Error fetching statistics for user {user_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching user statistics",
        )

    stats = data["stats"]
    total_time = stats["totalTimeUsed"] or 0
    attempts = stats["totalAttempts"]
    return StatsResponse(
        stats=StatsOut(
            **stats,
            average_time_per_quiz=(2 * total_time + attempts) // (2 * attempts) if attempts else 0,
            total_time_spent=total_time,
        ),
        recent_results=[RecentResultOut.model_validate(r) for r in data["recentResults"]],
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    service: ResultService = Depends(get_result_service),
):
    try:
        entries = service.get_leaderboard(limit=limit)
        return LeaderboardResponse(leaderboard=[LeaderboardEntry(**e) for e in entries])
    except Exception as e:
        logger.error(f"Error fetching leaderboard: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error while fetching leaderboard",
        )
