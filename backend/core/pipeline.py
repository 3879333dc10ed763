"""
Main pipeline orchestration for quiz generation.
"""
import logging
from typing import Optional

from core.errors import PipelineError, error_kind_of
from core.llm_client import OllamaClient, TextGenerationClient
from core.prompt_manager import PromptManager
from models.content_models import ProcessedContent
from models.quiz_models import QuizConfig, QuizGenerationResult
from services.generation.question_generator import AdvancedQuestionGenerator
from services.generation.standard_generator import StandardQuizGenerator
from services.processing.content_processor import ContentProcessor

logger = logging.getLogger(__name__)


class QuizGenerationPipeline:
    """Orchestrates content processing, advanced generation and the fallback path."""

    def __init__(
        self,
        client: Optional[TextGenerationClient] = None,
        processor: Optional[ContentProcessor] = None,
        generator: Optional[AdvancedQuestionGenerator] = None,
        fallback: Optional[StandardQuizGenerator] = None,
        prompts: Optional[PromptManager] = None,
    ):
        if client is None and None in (processor, generator, fallback):
            client = OllamaClient()
        prompts = prompts or PromptManager()

        self.client = client
        self.processor = processor or ContentProcessor(client, prompts)
        self.generator = generator or AdvancedQuestionGenerator(client, prompts)
        self.fallback = fallback or StandardQuizGenerator(client, prompts)

    def run(self, document_id: str, content: str, config: QuizConfig) -> QuizGenerationResult:
        """
        Generate a quiz for one document.

        Pipeline Stages:
        1. Content processing
        2. Advanced question generation
        3. Standard single-prompt generation, only if stage 1 or 2 raised

        Args:
            document_id: Identifier carried into the processed content
            content: Raw document text
            config: Validated quiz configuration

        Returns:
            QuizGenerationResult; may hold fewer questions than requested

        Raises:
            PipelineError: if the fallback fails as well
        """
        logger.info("Starting quiz generation for %s", document_id)

        try:
            processed = self.processor.process_document(document_id, content)
            questions = self.generator.generate_questions_advanced(processed, config)
        except Exception as e:
            logger.warning(
                "Advanced generation failed for %s, falling back to standard generation: %s",
                document_id, e,
            )
            return self._run_fallback(document_id, content, config)

        result = QuizGenerationResult(
            questions=tuple(questions),
            requested_count=config.question_count,
            used_fallback=False,
            topics=processed.metadata.topics,
        )
        logger.info(
            "Quiz generation complete for %s: %d/%d questions",
            document_id, result.delivered_count, result.requested_count,
        )
        return result

    def process_only(self, document_id: str, content: str) -> ProcessedContent:
        """Run content processing alone."""
        return self.processor.process_document(document_id, content)

    def _run_fallback(self, document_id: str, content: str, config: QuizConfig) -> QuizGenerationResult:
        try:
            result = self.fallback.generate(content, config)
        except Exception as e:
            logger.error("Fallback generation failed for %s: %s", document_id, e)
            raise PipelineError(
                f"Quiz generation failed: {e}",
                stage="fallback",
                kind=error_kind_of(e),
            ) from e

        logger.info(
            "Fallback generation complete for %s: %d/%d questions",
            document_id, result.delivered_count, result.requested_count,
        )
        return result


def build_pipeline(client: Optional[TextGenerationClient] = None) -> QuizGenerationPipeline:
    """Pipeline wired to the configured Ollama endpoint unless a client is given."""
    return QuizGenerationPipeline(client=client or OllamaClient())
