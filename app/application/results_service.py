import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.infrastructure.config import settings
from app.infrastructure.db.models.quiz_result_model import (
    QuizResultModel,
    QuizResultQuestionModel,
)
from app.infrastructure.db.models.user_model import UserModel
from app.infrastructure.repositories.quiz_result_repository import QuizResultRepository

from .errors import InvalidInput, NotFound
from .scoring import score

logger = logging.getLogger(__name__)


class ResultService:
    def __init__(self, db: Session, repo: Optional[QuizResultRepository] = None):
        self.db = db
        self.repo = repo or QuizResultRepository(db)

    def save_result(
        self,
        user: UserModel,
        questions: Sequence[Any],
        time_used: int,
        completed: bool = True,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> QuizResultModel:
        """
        Scores a submitted attempt and stores it as one immutable record.

        The owner's running statistics are refreshed afterwards; that update
        is best-effort and never undoes the saved record.
        """
        if time_used < 0:
            raise InvalidInput("Time used must be a positive number")

        answers = {i: q.user_answer for i, q in enumerate(questions) if q.user_answer is not None}
        scored = score(questions, answers)

        rows = [
            QuizResultQuestionModel(
                order_index=i,
                question=s.question,
                correct_answer=s.correct_answer,
                user_answer=s.user_answer,
                options=list(q.options or []),
                category=q.category,
                difficulty=q.difficulty,
                is_correct=s.is_correct,
            )
            for i, (q, s) in enumerate(zip(questions, scored.per_question))
        ]

        result = QuizResultModel(
            user_id=user.id,
            email=user.email,
            score=scored.score,
            correct_answers=scored.correct_answers,
            total_questions=scored.total_questions,
            time_used=time_used,
            time_limit=settings.QUIZ_TIME_LIMIT_SECONDS,
            completed=completed,
            ip_address=ip_address,
            user_agent=user_agent,
            questions=rows,
        )
        try:
            result = self.repo.create(result)
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Saved quiz result {result.id} for user {user.id}: "
            f"{scored.correct_answers}/{scored.total_questions} ({scored.score}%)"
        )

        self._update_user_stats(user, scored.score)
        return result

    def _update_user_stats(self, user: UserModel, new_score: int) -> None:
        try:
            user.update_stats(new_score)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(
                f"Failed to update statistics for user {user.id} after saving result: {e}",
                exc_info=True,
            )

    def list_results(self, user_id: int, page: int, limit: int, sort: str):
        return self.repo.list_for_user(user_id, page=page, limit=limit, sort=sort)

    def get_result(self, result_id: int, user_id: int) -> QuizResultModel:
        result = self.repo.get_for_user(result_id, user_id)
        if not result:
            raise NotFound("Quiz result not found")
        return result

    def delete_result(self, result_id: int, user_id: int) -> None:
        if not self.repo.delete_for_user(result_id, user_id):
            raise NotFound("Quiz result not found")
        logger.info(f"User {user_id} deleted quiz result {result_id}")

    def get_stats(self, user_id: int, recent: int = 5) -> Dict:
        stats = self.repo.get_stats(user_id)
        recent_results = self.repo.get_recent_results(user_id, limit=recent)
        return {"stats": stats, "recentResults": recent_results}

    def get_leaderboard(self, limit: int = 10) -> List[Dict]:
        return self.repo.get_leaderboard(limit=limit)
