"""
Quality scoring, filtering and balancing for generated questions.
"""
import logging
import random
import re
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from core.config import (
    DUPLICATE_SIMILARITY_THRESHOLD,
    QUALITY_THRESHOLD_CERTIFICATION,
    QUALITY_THRESHOLD_STANDARD,
)
from models.quiz_models import (
    AdvancedQuizQuestion,
    AnswerDistribution,
    QualityScore,
    QuestionType,
    QuizConfig,
)
from services.processing.utils import text_similarity

logger = logging.getLogger(__name__)

OPTION_LETTERS = "ABCDEFGH"
_OPTION_LABEL_RE = re.compile(r"^([A-H])([\).:])\s*")

_DIFFICULTY_SCORES = {"easy": 30, "medium": 60}


def assess_quality(question: AdvancedQuizQuestion) -> QualityScore:
    """
    Score a question from its own fields only.

    clarity:    100, -20 for question text under 20 chars, -50 if it says "the document"
    relevance:  100, -20 for a missing/short (<30 chars) explanation, +10 for a scenario
    uniqueness: always 100; duplicates are handled by remove_near_duplicates
    """
    clarity = 100
    relevance = 100
    uniqueness = 100

    if len(question.question) < 20:
        clarity -= 20
    if "the document" in question.question:
        clarity -= 50

    if not question.explanation or len(question.explanation) < 30:
        relevance -= 20
    if question.professional_scenario:
        relevance += 10

    difficulty = _DIFFICULTY_SCORES.get(question.difficulty.lower(), 90)
    score = (clarity + relevance + uniqueness) / 3

    return QualityScore(
        score=score,
        clarity=clarity,
        relevance=relevance,
        uniqueness=uniqueness,
        difficulty=difficulty,
    )


def quality_threshold(certification_level: bool) -> float:
    return QUALITY_THRESHOLD_CERTIFICATION if certification_level else QUALITY_THRESHOLD_STANDARD


def passes_quality(score: float, certification_level: bool) -> bool:
    return score >= quality_threshold(certification_level)


def filter_by_quality(
    questions: Sequence[AdvancedQuizQuestion],
    config: QuizConfig,
) -> List[AdvancedQuizQuestion]:
    """Keep questions whose score meets the threshold for the config."""
    accepted = []
    for question in questions:
        quality = assess_quality(question)
        if passes_quality(quality.score, config.certification_level):
            accepted.append(question)
        else:
            logger.debug(
                "Rejected %s question %s (score %.1f)",
                question.type.value, question.id, quality.score,
            )
    return accepted


def remove_near_duplicates(
    questions: Sequence[AdvancedQuizQuestion],
    threshold: float = DUPLICATE_SIMILARITY_THRESHOLD,
) -> List[AdvancedQuizQuestion]:
    """Drop questions too similar to an earlier kept question of the same type."""
    kept: List[AdvancedQuizQuestion] = []
    for question in questions:
        duplicate = any(
            other.type == question.type
            and text_similarity(other.question, question.question) >= threshold
            for other in kept
        )
        if duplicate:
            logger.debug("Dropped near-duplicate %s question %s", question.type.value, question.id)
        else:
            kept.append(question)
    return kept


def balance_questions(
    questions: Sequence[AdvancedQuizQuestion],
    config: QuizConfig,
    rng: Optional[random.Random] = None,
) -> List[AdvancedQuizQuestion]:
    """Take up to questions_per_type of each requested type, then shuffle."""
    by_type: Dict[QuestionType, List[AdvancedQuizQuestion]] = {t: [] for t in config.question_types}
    for question in questions:
        if question.type in by_type:
            by_type[question.type].append(question)

    balanced: List[AdvancedQuizQuestion] = []
    for question_type in config.question_types:
        balanced.extend(by_type[question_type][:config.questions_per_type])

    (rng or random).shuffle(balanced)
    return balanced


def balance_answer_distribution(
    questions: Sequence[AdvancedQuizQuestion],
) -> List[AdvancedQuizQuestion]:
    """
    Rotate MCQ options so correct answers cycle through the positions.

    The i-th MCQ whose answer can be located among its options gets the correct
    option at index ``i % len(options)``. Letter answers ("B") are rewritten to
    the new letter; text answers stay as they are. Options labelled "A) ...",
    "B) ..." keep their labels in order.
    """
    result = []
    mcq_index = 0
    for question in questions:
        if question.type != QuestionType.MCQ:
            result.append(question)
            continue

        rotated = _rotate_to_target(question, mcq_index)
        if rotated is not None:
            result.append(rotated)
            mcq_index += 1
        else:
            result.append(question)
    return result


def _rotate_to_target(
    question: AdvancedQuizQuestion, mcq_index: int
) -> Optional[AdvancedQuizQuestion]:
    options = question.options
    if not options or len(options) < 2 or not isinstance(question.correct_answer, str):
        return None

    bodies, separator = _strip_labels(options)
    if bodies is None and any(_OPTION_LABEL_RE.match(option) for option in options):
        # Partly or irregularly labelled; any rotation would scramble the labels
        return None

    current, kind = _locate_answer(options, bodies, question.correct_answer)
    if current is None or (kind == "letter" and len(options) > len(OPTION_LETTERS)):
        return None

    target = mcq_index % len(options)
    shift = target - current
    order = [(i - shift) % len(options) for i in range(len(options))]
    if bodies is None:
        rotated = tuple(options[j] for j in order)
    else:
        rotated = tuple(
            f"{OPTION_LETTERS[i]}{separator} {bodies[j]}" for i, j in enumerate(order)
        )

    if kind == "letter":
        correct_answer = OPTION_LETTERS[target]
    elif kind == "option":
        correct_answer = rotated[target]
    else:
        correct_answer = question.correct_answer
    return question.with_changes(
        options=rotated,
        correct_answer=correct_answer,
        metadata=replace(question.metadata, answer_distribution=AnswerDistribution.BALANCED),
    )


def _strip_labels(options: Sequence[str]):
    """
    Split "A) text" style options into their bodies and the label separator.

    Returns (None, None) unless every option carries its own letter, in order,
    with one shared separator.
    """
    if len(options) > len(OPTION_LETTERS):
        return None, None

    bodies = []
    separators = set()
    for i, option in enumerate(options):
        match = _OPTION_LABEL_RE.match(option.strip())
        if match is None or match.group(1) != OPTION_LETTERS[i]:
            return None, None
        separators.add(match.group(2))
        bodies.append(option.strip()[match.end():])

    if len(separators) != 1:
        return None, None
    return bodies, separators.pop()


def _locate_answer(options: Sequence[str], bodies: Optional[Sequence[str]], answer: str):
    """
    Index of the correct option and how the answer refers to it.

    kind is "option" for the full option text, "body" for the text of a
    labelled option without its label, and "letter" for a bare letter.
    """
    normalized = answer.strip().lower()
    for i, option in enumerate(options):
        if option.strip().lower() == normalized:
            return i, "option"

    for i, body in enumerate(bodies or ()):
        if body.lower() == normalized:
            return i, "body"

    letter = normalized.rstrip(").:").upper()
    if len(letter) == 1 and letter in OPTION_LETTERS[:len(options)]:
        return OPTION_LETTERS.index(letter), "letter"

    return None, None
