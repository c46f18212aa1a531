from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from ..base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuizResultModel(Base):
    __tablename__ = "quiz_results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False)

    score = Column(Integer, nullable=False)  # 0..100
    correct_answers = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    time_used = Column(Integer, nullable=False)  # seconds
    time_limit = Column(Integer, nullable=False, default=1800)  # seconds
    completed = Column(Boolean, nullable=False, default=True)

    ip_address = Column(String)
    user_agent = Column(String)

    submitted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    # Relationships
    user = relationship("UserModel", back_populates="results")
    questions = relationship(
        "QuizResultQuestionModel",
        back_populates="result",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="QuizResultQuestionModel.order_index",
    )


class QuizResultQuestionModel(Base):
    __tablename__ = "quiz_result_questions"

    id = Column(Integer, primary_key=True, index=True)
    result_id = Column(Integer, ForeignKey("quiz_results.id", ondelete="CASCADE"), nullable=False, index=True)
    order_index = Column(Integer, nullable=False)

    question = Column(Text, nullable=False)
    correct_answer = Column(String, nullable=False)
    user_answer = Column(String, nullable=True)
    options = Column(JSON)  # list of option strings as shown to the user
    category = Column(String)
    difficulty = Column(String)
    is_correct = Column(Boolean, nullable=False, default=False)

    result = relationship("QuizResultModel", back_populates="questions")
