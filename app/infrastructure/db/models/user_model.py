#user_model.py
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from ..base import Base
from sqlalchemy.orm import relationship
from sqlalchemy import UniqueConstraint


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    # Running statistics, refreshed after every saved quiz
    total_quizzes = Column(Integer, nullable=False, default=0)
    best_score = Column(Integer, nullable=False, default=0)
    average_score = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    results = relationship("QuizResultModel", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        UniqueConstraint("email", name="uq_email_user"),
    )

    def update_stats(self, score: int) -> None:
        total = self.total_quizzes or 0
        average = self.average_score or 0.0
        self.average_score = round((average * total + score) / (total + 1), 2)
        self.total_quizzes = total + 1
        self.best_score = max(self.best_score or 0, score)
