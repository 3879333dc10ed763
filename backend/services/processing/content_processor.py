"""
LLM-powered content processing: raw document text -> ProcessedContent.
"""
import logging
from typing import Any, Dict, List, Optional

from core.config import ANALYSIS_CHAR_LIMIT, RELATIONSHIP_CHAR_LIMIT
from core.llm_client import TextGenerationClient
from core.prompt_manager import PromptManager
from core.response_parser import parse_json_object
from models.content_models import (
    ContentDifficulty,
    ContentMetadata,
    Entity,
    ProcessedContent,
    Relationship,
    concepts_from_list,
    entities_from_list,
    relationships_from_list,
)
from services.processing.chunker import SemanticChunker
from services.processing.utils import (
    calculate_flesch_kincaid_grade,
    clean_text,
    count_words,
    reading_level_for_grade,
)

logger = logging.getLogger(__name__)

DEFAULT_TOPICS = ["General"]
DEFAULT_READING_LEVEL = "college"


class ContentProcessor:
    """Clean, analyze, chunk and relate a document's text."""

    def __init__(
        self,
        client: TextGenerationClient,
        prompts: Optional[PromptManager] = None,
        chunker: Optional[SemanticChunker] = None,
        analysis_char_limit: int = ANALYSIS_CHAR_LIMIT,
        relationship_char_limit: int = RELATIONSHIP_CHAR_LIMIT,
    ):
        self.client = client
        self.prompts = prompts or PromptManager()
        self.chunker = chunker or SemanticChunker()
        self.analysis_char_limit = analysis_char_limit
        self.relationship_char_limit = relationship_char_limit

    def process_document(self, document_id: str, raw_text: str) -> ProcessedContent:
        """
        Run the processing stages for one document.

        Stages:
        1. Clean text
        2. Analyze (entities, concepts, topics, key terms, reading level, difficulty)
        3. Semantic chunking
        4. Relationship extraction (only when entities were found)

        Failures in stages 2 and 4 degrade to defaults and are logged, never raised.
        """
        logger.info("Processing document %s (%d chars)", document_id, len(raw_text or ""))

        cleaned_text = clean_text(raw_text)

        analysis = self.analyze_content(cleaned_text)
        entities = analysis["entities"]
        concepts = analysis["concepts"]

        labels = [c.name for c in concepts] + list(analysis["key_terms"])
        chunks = self.chunker.chunk_text(cleaned_text, analysis["topics"], labels)

        relationships = self.extract_relationships(cleaned_text, entities)

        processed = ProcessedContent(
            document_id=document_id,
            raw_text=raw_text,
            cleaned_text=cleaned_text,
            entities=tuple(entities),
            concepts=tuple(concepts),
            relationships=tuple(relationships),
            semantic_chunks=tuple(chunks),
            metadata=ContentMetadata(
                word_count=count_words(cleaned_text),
                reading_level=analysis["reading_level"],
                topics=tuple(analysis["topics"]),
                key_terms=tuple(analysis["key_terms"]),
                difficulty=analysis["difficulty"],
            ),
        )

        logger.info(
            "Content processing complete for %s: %d entities, %d concepts, "
            "%d relationships, %d chunks",
            document_id,
            len(processed.entities),
            len(processed.concepts),
            len(processed.relationships),
            len(processed.semantic_chunks),
        )
        return processed

    def analyze_content(self, text: str) -> Dict[str, Any]:
        """Ask the LLM for entities, concepts and metadata; degrade on any failure."""
        prompt = self.prompts.render(
            "content_analysis", content=text[:self.analysis_char_limit]
        )

        try:
            response = self.client.generate(prompt)
        except Exception as e:
            logger.warning("Content analysis request failed, using defaults: %s", e)
            return self._default_analysis()

        parsed = parse_json_object(response)
        if not parsed.ok:
            logger.warning("Content analysis reply unusable (%s), using defaults", parsed.error.reason)
            return self._default_analysis()

        try:
            return self._build_analysis(parsed.value, text)
        except Exception as e:
            logger.warning("Content analysis reply could not be read, using defaults: %s", e)
            return self._default_analysis()

    def extract_relationships(self, text: str, entities: List[Entity]) -> List[Relationship]:
        """Entity-anchored relationship extraction; empty when there are no entities."""
        if not entities:
            return []

        prompt = self.prompts.render(
            "relationship_extraction",
            content=text[:self.relationship_char_limit],
            entities=", ".join(e.text for e in entities),
        )

        try:
            response = self.client.generate(prompt)
        except Exception as e:
            logger.warning("Relationship extraction request failed: %s", e)
            return []

        parsed = parse_json_object(response)
        if not parsed.ok:
            logger.warning("Relationship extraction reply unusable: %s", parsed.error.reason)
            return []

        try:
            return relationships_from_list(parsed.value.get("relationships"))
        except Exception as e:
            logger.warning("Relationship extraction reply could not be read: %s", e)
            return []

    def _build_analysis(self, data: Dict[str, Any], text: str) -> Dict[str, Any]:
        topics = _string_list(data.get("topics")) or list(DEFAULT_TOPICS)
        try:
            difficulty = ContentDifficulty(str(data.get("difficulty", "")).strip().lower())
        except ValueError:
            difficulty = ContentDifficulty.INTERMEDIATE

        reading_level = str(data.get("readingLevel") or "").strip()
        if not reading_level:
            reading_level = reading_level_for_grade(calculate_flesch_kincaid_grade(text))

        return {
            "entities": entities_from_list(data.get("entities")),
            "concepts": concepts_from_list(data.get("concepts")),
            "topics": topics,
            "key_terms": _string_list(data.get("keyTerms", data.get("key_terms"))),
            "reading_level": reading_level,
            "difficulty": difficulty,
        }

    def _default_analysis(self) -> Dict[str, Any]:
        return {
            "entities": [],
            "concepts": [],
            "topics": list(DEFAULT_TOPICS),
            "key_terms": [],
            "reading_level": DEFAULT_READING_LEVEL,
            "difficulty": ContentDifficulty.INTERMEDIATE,
        }


def _string_list(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    seen = []
    for value in values:
        if isinstance(value, (str, int, float)) and str(value).strip() and str(value).strip() not in seen:
            seen.append(str(value).strip())
    return seen
