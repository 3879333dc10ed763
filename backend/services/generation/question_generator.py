"""
Advanced question generation: one prompt per question type, then filter and balance.
"""
import logging
import random
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import Dict, List, Optional

from core.config import (
    ENABLE_DUPLICATE_FILTER,
    DUPLICATE_SIMILARITY_THRESHOLD,
    LLM_CALL_TIMEOUT,
    MAX_CONCURRENT_LLM_CALLS,
)
from core.llm_client import TextGenerationClient
from core.prompt_manager import PromptManager
from core.response_parser import parse_json_object
from models.content_models import ProcessedContent
from models.quiz_models import AdvancedQuizQuestion, QuestionType, QuizConfig
from services.generation.quality import (
    balance_answer_distribution,
    balance_questions,
    filter_by_quality,
    remove_near_duplicates,
)

logger = logging.getLogger(__name__)

_NONE = "None identified"
_POLL_INTERVAL = 0.05  # seconds


class AdvancedQuestionGenerator:
    """Generates a quality-filtered, type-balanced question set from processed content."""

    def __init__(
        self,
        client: TextGenerationClient,
        prompts: Optional[PromptManager] = None,
        max_workers: int = MAX_CONCURRENT_LLM_CALLS,
        call_timeout: Optional[float] = LLM_CALL_TIMEOUT,
        deduplicate: bool = ENABLE_DUPLICATE_FILTER,
        similarity_threshold: float = DUPLICATE_SIMILARITY_THRESHOLD,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.prompts = prompts or PromptManager()
        self.max_workers = max(1, max_workers)
        self.call_timeout = call_timeout
        self.deduplicate = deduplicate
        self.similarity_threshold = similarity_threshold
        self.rng = rng

    def generate_questions_advanced(
        self,
        content: ProcessedContent,
        config: QuizConfig,
    ) -> List[AdvancedQuizQuestion]:
        """
        Generate questions for every requested type and assemble the final set.

        Steps:
        1. One prompt per question type, dispatched concurrently; a failed type
           contributes nothing and does not affect the others
        2. Quality filter (threshold depends on certification level)
        3. Near-duplicate removal within each type
        4. Balance across types and shuffle
        5. Rotate MCQ answer positions
        6. Truncate to question_count
        """
        logger.info(
            "Generating %d questions for %s (types: %s)",
            config.question_count,
            content.document_id,
            ", ".join(t.value for t in config.question_types),
        )

        generated = self._generate_all_types(content, config)
        all_questions = [q for t in config.question_types for q in generated.get(t, [])]

        filtered = filter_by_quality(all_questions, config)
        if self.deduplicate:
            filtered = remove_near_duplicates(filtered, self.similarity_threshold)

        balanced = balance_questions(filtered, config, self.rng)
        final = balance_answer_distribution(balanced)[:config.question_count]

        logger.info(
            "Question generation complete: generated=%d filtered=%d final=%d",
            len(all_questions), len(filtered), len(final),
        )
        if len(final) < config.question_count:
            logger.warning(
                "Only %d of %d requested questions passed quality checks",
                len(final), config.question_count,
            )
        return final

    def _generate_all_types(
        self,
        content: ProcessedContent,
        config: QuizConfig,
    ) -> Dict[QuestionType, List[AdvancedQuizQuestion]]:
        """
        Run the per-type prompts in parallel and collect whatever succeeds.

        Every type gets its own thread; at most max_workers of them talk to the
        client at once. A call's timeout counts from when it gets a slot, and a
        call that overruns gives its slot up so queued types still run.
        """
        results: Dict[QuestionType, List[AdvancedQuizQuestion]] = {}
        slots = _CallSlots(self.max_workers)

        executor = ThreadPoolExecutor(max_workers=len(config.question_types))
        try:
            pending = {
                executor.submit(slots.run, question_type, self.generate_by_type,
                                question_type, content, config): question_type
                for question_type in config.question_types
            }

            while pending:
                done, _ = wait(
                    pending,
                    timeout=self._next_deadline(slots, pending.values()),
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    question_type = pending.pop(future)
                    try:
                        results[question_type] = future.result()
                    except Exception as e:
                        logger.warning("%s generation failed: %s", question_type.value, e)
                        results[question_type] = []

                for future, question_type in list(pending.items()):
                    if self._overran(slots, question_type):
                        logger.warning("%s generation timed out", question_type.value)
                        results[question_type] = []
                        del pending[future]
                        slots.release(question_type)
        finally:
            # Don't block on calls that already timed out
            executor.shutdown(wait=False, cancel_futures=True)

        return results

    def _overran(self, slots: "_CallSlots", question_type: QuestionType) -> bool:
        started = slots.started_at(question_type)
        if self.call_timeout is None or started is None:
            return False
        return time.monotonic() - started >= self.call_timeout

    def _next_deadline(self, slots: "_CallSlots", question_types) -> Optional[float]:
        """Seconds until the earliest running call overruns."""
        if self.call_timeout is None:
            return None
        now = time.monotonic()
        remaining = [
            slots.started_at(t) + self.call_timeout - now
            for t in question_types
            if slots.started_at(t) is not None
        ]
        # Nothing has a slot yet; look again shortly
        return max(0.0, min(remaining)) if remaining else _POLL_INTERVAL

    def generate_by_type(
        self,
        question_type: QuestionType,
        content: ProcessedContent,
        config: QuizConfig,
    ) -> List[AdvancedQuizQuestion]:
        """Prompt for one question type and parse the reply; [] on any failure."""
        prompt = self.build_prompt(question_type, content, config)

        try:
            response = self.client.generate(prompt)
        except Exception as e:
            logger.warning("%s generation request failed: %s", question_type.value, e)
            return []

        parsed = parse_json_object(response)
        if not parsed.ok:
            logger.warning("%s generation reply unusable: %s", question_type.value, parsed.error.reason)
            return []

        return self._parse_questions(parsed.value.get("questions"), question_type, config)

    def build_prompt(
        self,
        question_type: QuestionType,
        content: ProcessedContent,
        config: QuizConfig,
    ) -> str:
        """Render the type-specific prompt for the content and config."""
        fields = {
            "count": config.questions_per_type,
            "settings": settings_block(config),
        }

        if question_type == QuestionType.MCQ:
            fields.update(
                entities=_lines(
                    f"{e.text} ({e.type.value}): {e.context}"
                    for e in content.entities if e.importance >= 5
                ),
                concepts=_lines(
                    f"{c.name}: {c.description}" for c in content.concepts if c.importance >= 5
                ),
                relationships=_lines(
                    f"{r.as_triple_text()} ({r.kind.value})" for r in content.relationships[:10]
                ),
            )
        elif question_type == QuestionType.TRUE_FALSE:
            fields.update(
                relationships=_lines(
                    f"{r.as_triple_text()} ({r.kind.value})" for r in content.relationships[:15]
                ),
                concepts=", ".join(c.name for c in content.concepts) or _NONE,
            )
        elif question_type == QuestionType.FILL_BLANK:
            fields.update(
                key_terms=", ".join(content.metadata.key_terms[:20]) or _NONE,
                entities=", ".join(e.text for e in content.entities if e.importance >= 6) or _NONE,
            )
        elif question_type == QuestionType.MATCHING:
            fields.update(
                concepts=_lines(f"{c.name}: {c.description}" for c in content.concepts[:10]),
                relationships=_lines(r.as_triple_text() for r in content.relationships[:10]),
            )
        elif question_type == QuestionType.SHORT_ANSWER:
            fields.update(
                concepts=_lines(
                    f"{c.name}: {c.description}" for c in content.concepts if c.importance >= 7
                ),
            )

        return self.prompts.render(f"{question_type.value}_generation", **fields)

    def _parse_questions(
        self,
        items,
        question_type: QuestionType,
        config: QuizConfig,
    ) -> List[AdvancedQuizQuestion]:
        if not isinstance(items, list):
            logger.warning("%s reply has no questions array", question_type.value)
            return []

        questions = []
        for index, item in enumerate(items, start=1):
            question = AdvancedQuizQuestion.from_dict(
                item,
                fallback_type=question_type,
                default_id=f"{question_type.value}_{index}",
            )
            # Items of another type than the prompt asked for are dropped
            if question is None or question.type != question_type:
                continue
            questions.append(
                question.with_changes(
                    id=f"{question_type.value}_{index}",
                    time_limit=config.time_per_question or question.time_limit,
                )
            )
        return questions


def _lines(items) -> str:
    text = "\n".join(items)
    return text or _NONE


def settings_block(config: QuizConfig) -> str:
    lines = [
        f"- Difficulty: {config.difficulty.value}",
        f"- Professional Scenarios: {config.professional_scenarios}",
        f"- Certification Level: {config.certification_level}",
        f"- Cross-Topic Integration: {config.cross_topic_integration}",
    ]
    if config.focus_topics:
        lines.append(f"- Focus Topics: {', '.join(config.focus_topics)}")
    return "\n".join(lines)


class _CallSlots:
    """Bounds concurrent client calls and remembers when each call got its slot."""

    def __init__(self, limit: int):
        self._semaphore = threading.Semaphore(limit)
        self._lock = threading.Lock()
        self._started: Dict[QuestionType, float] = {}
        self._released = set()

    def run(self, question_type: QuestionType, fn, *args):
        self._semaphore.acquire()
        with self._lock:
            self._started[question_type] = time.monotonic()
        try:
            return fn(*args)
        finally:
            self.release(question_type)

    def started_at(self, question_type: QuestionType) -> Optional[float]:
        with self._lock:
            return self._started.get(question_type)

    def release(self, question_type: QuestionType) -> None:
        """Give the slot back once, whether the call finished or was abandoned."""
        with self._lock:
            if question_type in self._released:
                return
            self._released.add(question_type)
        self._semaphore.release()
