from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..db.models.quiz_result_model import QuizResultModel
from ..db.models.user_model import UserModel

# Public sort keys accepted by the listing endpoint
SORT_FIELDS = {
    "createdAt": QuizResultModel.created_at,
    "submittedAt": QuizResultModel.submitted_at,
    "score": QuizResultModel.score,
    "timeUsed": QuizResultModel.time_used,
    "correctAnswers": QuizResultModel.correct_answers,
}

EMPTY_STATS = {
    "totalAttempts": 0,
    "averageScore": 0,
    "bestScore": 0,
    "totalTimeUsed": 0,
    "averageTimeUsed": 0,
}


def parse_sort(sort: str):
    """'-score' -> score DESC, 'score' -> score ASC."""
    descending = sort.startswith("-")
    key = sort[1:] if descending else sort
    column = SORT_FIELDS.get(key)
    if column is None:
        raise ValueError(
            f"Unsupported sort field '{key}'. Allowed: {', '.join(SORT_FIELDS)}"
        )
    return column.desc() if descending else column.asc()


class QuizResultRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, result: QuizResultModel) -> QuizResultModel:
        self.db.add(result)
        self.db.commit()
        self.db.refresh(result)
        return result

    def list_for_user(
        self, user_id: int, page: int = 1, limit: int = 10, sort: str = "-createdAt"
    ) -> Tuple[List[QuizResultModel], int]:
        order = parse_sort(sort)
        query = self.db.query(QuizResultModel).filter(QuizResultModel.user_id == user_id)
        total = query.count()
        rows = (
            query.order_by(order, QuizResultModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total

    def get_for_user(self, result_id: int, user_id: int) -> Optional[QuizResultModel]:
        return (
            self.db.query(QuizResultModel)
            .options(selectinload(QuizResultModel.questions))
            .filter(QuizResultModel.id == result_id, QuizResultModel.user_id == user_id)
            .first()
        )

    def delete_for_user(self, result_id: int, user_id: int) -> bool:
        result = (
            self.db.query(QuizResultModel)
            .filter(QuizResultModel.id == result_id, QuizResultModel.user_id == user_id)
            .first()
        )
        if not result:
            return False
        self.db.delete(result)
        self.db.commit()
        return True

    def get_recent_results(self, user_id: int, limit: int = 10) -> List[QuizResultModel]:
        return (
            self.db.query(QuizResultModel)
            .filter(QuizResultModel.user_id == user_id)
            .order_by(QuizResultModel.created_at.desc(), QuizResultModel.id.desc())
            .limit(limit)
            .all()
        )

    # ==========================
    # AGGREGATIONS
    # ==========================

    def get_stats(self, user_id: int) -> Dict:
        row = (
            self.db.query(
                func.count(QuizResultModel.id).label("total_attempts"),
                func.avg(QuizResultModel.score).label("average_score"),
                func.max(QuizResultModel.score).label("best_score"),
                func.sum(QuizResultModel.time_used).label("total_time_used"),
                func.avg(QuizResultModel.time_used).label("average_time_used"),
            )
            .filter(QuizResultModel.user_id == user_id)
            .one()
        )

        if not row.total_attempts:
            return dict(EMPTY_STATS)

        return {
            "totalAttempts": int(row.total_attempts),
            "averageScore": float(row.average_score),
            "bestScore": int(row.best_score),
            "totalTimeUsed": int(row.total_time_used),
            "averageTimeUsed": float(row.average_time_used),
        }

    def get_leaderboard(self, limit: int = 10) -> List[Dict]:
        best_score = func.max(QuizResultModel.score).label("best_score")
        average_score = func.avg(QuizResultModel.score).label("average_score")

        grouped = (
            self.db.query(
                QuizResultModel.user_id.label("user_id"),
                best_score,
                func.count(QuizResultModel.id).label("total_attempts"),
                average_score,
                func.max(QuizResultModel.created_at).label("last_attempt"),
            )
            .group_by(QuizResultModel.user_id)
            .subquery()
        )

        rows = (
            self.db.query(
                grouped.c.user_id,
                UserModel.name,
                UserModel.email,
                grouped.c.best_score,
                grouped.c.total_attempts,
                grouped.c.average_score,
                grouped.c.last_attempt,
            )
            .join(UserModel, UserModel.id == grouped.c.user_id)
            .order_by(grouped.c.best_score.desc(), grouped.c.average_score.desc())
            .limit(limit)
            .all()
        )

        return [
            {
                "userId": r.user_id,
                "name": r.name,
                "email": r.email,
                "bestScore": int(r.best_score),
                "totalAttempts": int(r.total_attempts),
                "averageScore": round(float(r.average_score), 1),
                "lastAttempt": r.last_attempt,
            }
            for r in rows
        ]
