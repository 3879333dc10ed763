"""
Semantic chunking service for segmenting cleaned text into topic-tagged chunks.
"""
import re
from typing import List, Sequence, Tuple

from models.content_models import SemanticChunk
from services.processing.utils import split_sentence_spans
from core.config import CHUNK_MIN_SENTENCES, CHUNK_MAX_SENTENCES


class SemanticChunker:
    """Groups sentences into chunks of CHUNK_MIN_SENTENCES..CHUNK_MAX_SENTENCES."""

    def __init__(
        self,
        min_sentences: int = CHUNK_MIN_SENTENCES,
        max_sentences: int = CHUNK_MAX_SENTENCES,
    ):
        """Initialize chunker with parameters."""
        if min_sentences < 1 or max_sentences < min_sentences:
            raise ValueError(
                f"Invalid chunk bounds: min={min_sentences}, max={max_sentences}"
            )
        self.min_sentences = min_sentences
        self.max_sentences = max_sentences

    def chunk_text(
        self,
        text: str,
        topics: Sequence[str],
        concept_labels: Sequence[str] = (),
    ) -> List[SemanticChunk]:
        """
        Create semantic chunks from cleaned text.

        Algorithm:
            1. Sentence segmentation into contiguous spans
            2. Group sentences, min_sentences per chunk; the group stretches up to
               max_sentences when that swallows the remaining tail
            3. Topic assigned round-robin over ``topics``
            4. Tag each chunk with the concept labels it mentions

        Chunk contents are exact slices of ``text``, so joining them gives the
        text back unchanged.
        """
        if not text:
            return []

        spans = split_sentence_spans(text)
        if not spans:
            return []

        topics = [t for t in topics if t] or ["General"]
        chunks = []

        for start_idx, end_idx in self._group_boundaries(len(spans)):
            start = spans[start_idx][0]
            end = spans[end_idx - 1][1]
            content = text[start:end]
            chunks.append(
                SemanticChunk(
                    id=f"chunk_{len(chunks) + 1}",
                    content=content,
                    topic=topics[len(chunks) % len(topics)],
                    start_index=start,
                    end_index=end,
                    concepts=self._mentioned(content, concept_labels),
                )
            )

        return chunks

    def _group_boundaries(self, sentence_count: int) -> List[Tuple[int, int]]:
        """Sentence index ranges [start, end) for each chunk."""
        groups = []
        start = 0
        while start < sentence_count:
            end = start + self.min_sentences
            remaining = sentence_count - end
            # Absorb a short tail instead of leaving a runt chunk behind
            if 0 < remaining <= self.max_sentences - self.min_sentences:
                end = sentence_count
            end = min(end, sentence_count)
            groups.append((start, end))
            start = end
        return groups

    @staticmethod
    def _mentioned(content: str, labels: Sequence[str]) -> Tuple[str, ...]:
        found = []
        for label in labels:
            if not label or label in found:
                continue
            if re.search(rf"(?<!\w){re.escape(label)}(?!\w)", content, re.IGNORECASE):
                found.append(label)
        return tuple(found)
