"""
Data models for quiz configuration and generated questions.
"""
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class QuestionType(str, Enum):
    MCQ = "mcq"
    TRUE_FALSE = "true_false"
    FILL_BLANK = "fill_blank"
    MATCHING = "matching"
    SHORT_ANSWER = "short_answer"


class QuizDifficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"
    MIXED = "mixed"


class AnswerDistribution(str, Enum):
    BALANCED = "balanced"
    RANDOM = "random"


Answer = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class QuizConfig:
    """User-supplied generation parameters"""
    question_count: int
    question_types: Tuple[QuestionType, ...]
    difficulty: QuizDifficulty = QuizDifficulty.INTERMEDIATE
    time_per_question: Optional[int] = None  # seconds
    professional_scenarios: bool = False
    certification_level: bool = False
    cross_topic_integration: bool = False
    focus_topics: Tuple[str, ...] = ()

    def __post_init__(self):
        if isinstance(self.question_count, bool) or not isinstance(self.question_count, int):
            raise ValueError("question_count must be an integer")
        if self.question_count < 1:
            raise ValueError(f"question_count must be positive, got {self.question_count}")

        # Normalise to enums, drop duplicates but keep caller order
        types: List[QuestionType] = []
        for raw in self.question_types or ():
            question_type = QuestionType(raw)
            if question_type not in types:
                types.append(question_type)
        if not types:
            raise ValueError("question_types must contain at least one question type")
        object.__setattr__(self, "question_types", tuple(types))
        object.__setattr__(self, "difficulty", QuizDifficulty(self.difficulty))
        object.__setattr__(
            self, "focus_topics", tuple(t.strip() for t in self.focus_topics or () if t and t.strip())
        )

        if self.time_per_question is not None and self.time_per_question <= 0:
            raise ValueError("time_per_question must be positive when set")

    @property
    def questions_per_type(self) -> int:
        return math.ceil(self.question_count / len(self.question_types))


@dataclass(frozen=True)
class QuestionMetadata:
    cross_topic: bool = False
    requires_analysis: bool = False
    answer_distribution: AnswerDistribution = AnswerDistribution.RANDOM


@dataclass(frozen=True)
class AdvancedQuizQuestion:
    """One generated question"""
    id: str
    type: QuestionType
    question: str
    correct_answer: Answer
    explanation: str = ""
    options: Optional[Tuple[str, ...]] = None
    difficulty: str = "medium"  # 'easy' | 'medium' | 'hard' | 'expert'
    topic: str = "General"
    professional_scenario: Optional[str] = None
    time_limit: Optional[int] = None
    metadata: QuestionMetadata = field(default_factory=QuestionMetadata)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        fallback_type: Optional[QuestionType] = None,
        default_id: str = "",
    ) -> Optional["AdvancedQuizQuestion"]:
        """Build a question from an LLM reply item; None if it is unusable."""
        if not isinstance(data, dict):
            return None

        raw_type = data.get("type") or fallback_type
        try:
            question_type = QuestionType(str(getattr(raw_type, "value", raw_type)).strip().lower())
        except ValueError:
            return None

        question_text = _clean_str(data.get("question"))
        correct_answer = _answer(data.get("correct_answer", data.get("correctAnswer")))
        if not question_text or not correct_answer:
            return None

        options = data.get("options")
        if isinstance(options, (list, tuple)):
            options = tuple(_clean_str(o) for o in options if _clean_str(o))
        else:
            options = None

        scenario = _clean_str(
            data.get("professionalScenario")
            or data.get("professional_scenario")
            or data.get("scenario")
        )

        raw_meta = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
        distribution = str(
            raw_meta.get("answerDistribution", raw_meta.get("answer_distribution", "random"))
        ).lower()
        metadata = QuestionMetadata(
            cross_topic=bool(raw_meta.get("crossTopic", raw_meta.get("cross_topic", False))),
            requires_analysis=bool(
                raw_meta.get("requiresAnalysis", raw_meta.get("requires_analysis", False))
            ),
            answer_distribution=(
                AnswerDistribution.BALANCED if distribution == "balanced" else AnswerDistribution.RANDOM
            ),
        )

        time_limit = data.get("timeLimit", data.get("time_limit"))
        return cls(
            id=_clean_str(data.get("id")) or default_id,
            type=question_type,
            question=question_text,
            correct_answer=correct_answer,
            explanation=_clean_str(data.get("explanation")),
            options=options or None,
            difficulty=_clean_str(data.get("difficulty")) or "medium",
            topic=_clean_str(data.get("topic")) or "General",
            professional_scenario=scenario or None,
            time_limit=time_limit if isinstance(time_limit, int) and time_limit > 0 else None,
            metadata=metadata,
        )

    def with_changes(self, **changes) -> "AdvancedQuizQuestion":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "question": self.question,
            "options": list(self.options) if self.options is not None else None,
            "correct_answer": (
                list(self.correct_answer) if isinstance(self.correct_answer, tuple) else self.correct_answer
            ),
            "explanation": self.explanation,
            "difficulty": self.difficulty,
            "topic": self.topic,
            "professionalScenario": self.professional_scenario,
            "timeLimit": self.time_limit,
            "metadata": {
                "crossTopic": self.metadata.cross_topic,
                "requiresAnalysis": self.metadata.requires_analysis,
                "answerDistribution": self.metadata.answer_distribution.value,
            },
        }


@dataclass(frozen=True)
class QualityScore:
    """0-100 composite and its sub-scores"""
    score: float
    clarity: float
    relevance: float
    uniqueness: float
    difficulty: float


@dataclass(frozen=True)
class QuizGenerationResult:
    """What the pipeline hands back to the caller"""
    questions: Tuple[AdvancedQuizQuestion, ...]
    requested_count: int
    used_fallback: bool = False
    topics: Tuple[str, ...] = ()

    @property
    def delivered_count(self) -> int:
        return len(self.questions)

    @property
    def shortfall(self) -> int:
        return max(0, self.requested_count - self.delivered_count)


def _clean_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple)):
        return ""
    return str(value).strip()


def _answer(value: Any) -> Optional[Answer]:
    if isinstance(value, (list, tuple)):
        items = tuple(_clean_str(v) for v in value if _clean_str(v))
        return items or None
    text = _clean_str(value)
    return text or None
