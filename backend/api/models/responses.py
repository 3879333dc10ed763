"""
Pydantic response models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any, Union

from models.quiz_models import QuizGenerationResult


class QuestionResponse(BaseModel):
    """One generated question."""
    id: str
    type: str
    question: str
    options: Optional[List[str]] = None
    correct_answer: Union[str, List[str]]
    explanation: str = ""
    difficulty: str = "medium"
    topic: str = "General"
    professionalScenario: Optional[str] = None
    timeLimit: Optional[int] = None
    metadata: Dict[str, Any] = {}


class QuizGenerateResponse(BaseModel):
    """Response model for quiz generation."""
    questions: List[QuestionResponse]
    requested_count: int
    delivered_count: int
    shortfall: int = Field(ge=0, description="Requested minus delivered")
    used_fallback: bool = False
    topics: List[str] = []

    @classmethod
    def from_result(cls, result: QuizGenerationResult) -> "QuizGenerateResponse":
        return cls(
            questions=[QuestionResponse(**q.to_dict()) for q in result.questions],
            requested_count=result.requested_count,
            delivered_count=result.delivered_count,
            shortfall=result.shortfall,
            used_fallback=result.used_fallback,
            topics=list(result.topics),
        )
