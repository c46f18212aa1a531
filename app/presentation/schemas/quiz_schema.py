from typing import List, Optional

from pydantic import BaseModel

from .common import CamelModel


class QuestionOut(BaseModel):
    id: int
    question: str
    correct_answer: str
    options: List[str]
    category: str
    difficulty: str


class QuestionsResponse(CamelModel):
    success: bool = True
    questions: List[QuestionOut]
    total_questions: int
    fallback: bool = False
    message: Optional[str] = None


class CategoryOut(BaseModel):
    id: int
    name: str


class CategoriesResponse(BaseModel):
    success: bool = True
    categories: List[CategoryOut]
