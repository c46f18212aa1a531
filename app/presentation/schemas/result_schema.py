from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .common import CamelModel


class SubmittedQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    correct_answer: str = Field(..., validation_alias=AliasChoices("correct_answer", "correctAnswer"))
    user_answer: Optional[str] = Field(None, validation_alias=AliasChoices("user_answer", "userAnswer"))
    options: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    difficulty: Optional[str] = None


class SaveResultRequest(CamelModel):
    questions: List[SubmittedQuestion] = Field(..., min_length=1)
    time_used: int = Field(..., ge=0)
    completed: bool = True


class SavedResultSummary(CamelModel):
    id: int
    score: int
    correct_answers: int
    total_questions: int
    time_used: int
    submitted_at: Optional[datetime] = None


class SaveResultResponse(BaseModel):
    success: bool = True
    message: str = "Quiz result saved successfully"
    result: SavedResultSummary


class ResultQuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    question: str
    correct_answer: str
    user_answer: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    difficulty: Optional[str] = None
    is_correct: bool = Field(False, alias="isCorrect")


class ResultSummaryOut(CamelModel):
    id: int
    email: str
    score: int
    correct_answers: int
    total_questions: int
    time_used: int
    time_limit: int
    completed: bool
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ResultDetailOut(ResultSummaryOut):
    questions: List[ResultQuestionOut]


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_results: int
    has_next: bool
    has_prev: bool


class MyResultsResponse(BaseModel):
    success: bool = True
    results: List[ResultSummaryOut]
    pagination: Pagination


class ResultResponse(BaseModel):
    success: bool = True
    result: ResultDetailOut


class RecentResultOut(CamelModel):
    id: int
    score: int
    correct_answers: int
    total_questions: int
    time_used: int
    submitted_at: Optional[datetime] = None


class StatsOut(CamelModel):
    total_attempts: int = 0
    average_score: float = 0
    best_score: int = 0
    total_time_used: int = 0
    average_time_used: float = 0
    average_time_per_quiz: Optional[int] = None
    total_time_spent: Optional[int] = None


class StatsResponse(CamelModel):
    success: bool = True
    stats: StatsOut
    recent_results: List[RecentResultOut]


class LeaderboardEntry(CamelModel):
    user_id: int
    name: str
    email: str
    best_score: int
    total_attempts: int
    average_score: float
    last_attempt: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    success: bool = True
    leaderboard: List[LeaderboardEntry]
