"""
Single-prompt quiz generation used when the advanced pipeline fails.
"""
import logging
from typing import Optional

from core.config import FALLBACK_CHAR_LIMIT
from core.errors import MalformedResponseError
from core.llm_client import TextGenerationClient
from core.prompt_manager import PromptManager
from core.response_parser import parse_json_object
from models.quiz_models import AdvancedQuizQuestion, QuizConfig, QuizGenerationResult
from services.generation.question_generator import settings_block

logger = logging.getLogger(__name__)


class StandardQuizGenerator:
    """One prompt, one flat list of questions. Errors propagate to the caller."""

    def __init__(
        self,
        client: TextGenerationClient,
        prompts: Optional[PromptManager] = None,
        char_limit: int = FALLBACK_CHAR_LIMIT,
    ):
        self.client = client
        self.prompts = prompts or PromptManager()
        self.char_limit = char_limit

    def generate(self, content_text: str, config: QuizConfig) -> QuizGenerationResult:
        """
        Generate a quiz straight from the document text.

        Raises:
            GenerationError: from the client
            MalformedResponseError: if the reply has no usable JSON object
        """
        prompt = self.prompts.render(
            "standard_quiz",
            count=config.question_count,
            content=(content_text or "")[:self.char_limit],
            question_types=", ".join(t.value for t in config.question_types),
            settings=settings_block(config),
        )
        logger.debug("Standard quiz prompt: %d chars", len(prompt))

        response = self.client.generate(prompt)
        parsed = parse_json_object(response)
        if not parsed.ok:
            raise MalformedResponseError(
                f"Standard quiz reply unusable: {parsed.error.reason}",
                stage="fallback",
            )

        items = parsed.value.get("questions")
        if not isinstance(items, list):
            raise MalformedResponseError("Standard quiz reply has no questions array", stage="fallback")

        questions = []
        for index, item in enumerate(items, start=1):
            question = AdvancedQuizQuestion.from_dict(item, default_id=f"q_{index}")
            if question is None or question.type not in config.question_types:
                continue
            if config.time_per_question:
                question = question.with_changes(time_limit=config.time_per_question)
            questions.append(question)

        questions = questions[:config.question_count]
        topics = parsed.value.get("topics")
        topics = tuple(str(t).strip() for t in topics if str(t).strip()) if isinstance(topics, list) else ()

        logger.info(
            "Standard quiz generation returned %d of %d requested questions",
            len(questions), config.question_count,
        )
        return QuizGenerationResult(
            questions=tuple(questions),
            requested_count=config.question_count,
            used_fallback=True,
            topics=topics,
        )
