"""
Pydantic request models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from models.quiz_models import QuestionType, QuizConfig, QuizDifficulty


class QuizConfigRequest(BaseModel):
    """Quiz generation settings."""
    question_count: int = Field(..., ge=1, description="Number of questions to generate")
    difficulty: QuizDifficulty = Field(default=QuizDifficulty.INTERMEDIATE, description="Target difficulty")
    question_types: List[QuestionType] = Field(..., description="Question types to include")
    time_per_question: Optional[int] = Field(default=None, gt=0, description="Seconds per question")
    professional_scenarios: bool = Field(default=False, description="Wrap questions in workplace scenarios")
    certification_level: bool = Field(default=False, description="Apply the stricter quality threshold")
    cross_topic_integration: bool = Field(default=False, description="Prefer questions spanning topics")
    focus_topics: Optional[List[str]] = Field(default=None, description="Topics to emphasise")

    def to_config(self) -> QuizConfig:
        """Build the domain config; raises ValueError for invalid combinations."""
        return QuizConfig(
            question_count=self.question_count,
            question_types=tuple(self.question_types),
            difficulty=self.difficulty,
            time_per_question=self.time_per_question,
            professional_scenarios=self.professional_scenarios,
            certification_level=self.certification_level,
            cross_topic_integration=self.cross_topic_integration,
            focus_topics=tuple(self.focus_topics or ()),
        )


class QuizGenerateRequest(BaseModel):
    """Request model for quiz generation."""
    document_id: str = Field(..., min_length=1, description="Document identifier")
    content: str = Field(..., min_length=1, description="Raw document text")
    config: QuizConfigRequest


class DocumentProcessRequest(BaseModel):
    """Request model for content processing."""
    document_id: str = Field(..., min_length=1, description="Document identifier")
    content: str = Field(..., min_length=1, description="Raw document text")
