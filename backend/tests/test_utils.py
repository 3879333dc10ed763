"""
Unit tests for text processing utilities and semantic chunking.
"""
import pytest

from services.processing.chunker import SemanticChunker
from services.processing.utils import (
    calculate_flesch_kincaid_grade,
    clean_text,
    count_words,
    reading_level_for_grade,
    split_sentence_spans,
    split_sentences,
    text_similarity,
)


class TestCleanText:
    """Test text normalization."""

    def test_collapses_whitespace(self):
        """Test that whitespace runs become single spaces."""
        assert clean_text("  Cells\n\n divide\tquickly.  ") == "Cells divide quickly."

    def test_strips_disallowed_characters(self):
        """Test that symbols outside the allow-list are removed."""
        assert clean_text("ATP @ 100% #energy") == "ATP 100 energy"

    def test_keeps_basic_punctuation(self):
        """Test that sentence punctuation and quotes survive."""
        text = "Is it (really) true? Yes: it's \"ATP\"; see-also, done!"
        assert clean_text(text) == text

    def test_empty_input(self):
        """Test that None and blank input clean to an empty string."""
        assert clean_text(None) == ""
        assert clean_text("   ") == ""


class TestSentenceSplitting:
    """Test sentence segmentation."""

    def test_spans_cover_text(self):
        """Test that spans are contiguous and cover every character."""
        text = "First one. Second one! Third one? trailing fragment"
        spans = split_sentence_spans(text)

        assert spans[0][0] == 0
        assert spans[-1][1] == len(text)
        for (_, end), (start, _) in zip(spans, spans[1:]):
            assert end == start

    def test_split_sentences(self):
        """Test that sentences are stripped and keep their terminators."""
        assert split_sentences("One. Two?! Three") == ["One.", "Two?!", "Three"]

    def test_leading_punctuation(self):
        """Test that leading punctuation gets its own span."""
        text = "...then it ended."
        spans = split_sentence_spans(text)
        assert "".join(text[s:e] for s, e in spans) == text


class TestReadability:
    """Test reading level estimation."""

    def test_grade_is_clamped(self):
        """Test that the grade stays within 0-20."""
        assert 0 <= calculate_flesch_kincaid_grade("Go. Run. Sit.") <= 20
        long_words = "Internationalization institutionalization characteristically. " * 3
        assert calculate_flesch_kincaid_grade(long_words) == 20

    def test_empty_text_default(self):
        """Test the default grade for text without sentences."""
        assert calculate_flesch_kincaid_grade("") == 10.0

    @pytest.mark.parametrize("grade,level", [
        (3, "elementary"),
        (9, "high school"),
        (13, "college"),
        (18, "graduate"),
    ])
    def test_reading_level_for_grade(self, grade, level):
        """Test grade to reading level mapping."""
        assert reading_level_for_grade(grade) == level

    def test_count_words(self):
        assert count_words("one two  three") == 3
        assert count_words("") == 0


class TestTextSimilarity:
    """Test bag-of-words similarity."""

    def test_identical_text(self):
        assert text_similarity("What is ATP?", "what is atp") == pytest.approx(1.0)

    def test_disjoint_text(self):
        assert text_similarity("mitochondria", "photosynthesis") == 0.0

    def test_empty_text(self):
        assert text_similarity("", "") == 0.0


def _sentences(n):
    return " ".join(f"Sentence number {i} is here." for i in range(1, n + 1))


class TestSemanticChunker:
    """Test sentence grouping into chunks."""

    def test_chunks_reconstruct_text(self):
        """Test that joined chunk contents equal the input text."""
        text = _sentences(23)
        chunks = SemanticChunker().chunk_text(text, ["Biology"])

        assert "".join(c.content for c in chunks) == text
        assert chunks[0].start_index == 0
        assert chunks[-1].end_index == len(text)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert prev.end_index == nxt.start_index

    def test_default_grouping(self):
        """Test five sentences per chunk with a short tail absorbed."""
        chunker = SemanticChunker()

        # 12 sentences: 5 + 7 (tail of 2 absorbed)
        sizes = [len(split_sentences(c.content)) for c in chunker.chunk_text(_sentences(12), [])]
        assert sizes == [5, 7]

        # 13 sentences: 5 + 5 + 3 (tail of 3 is too long to absorb)
        sizes = [len(split_sentences(c.content)) for c in chunker.chunk_text(_sentences(13), [])]
        assert sizes == [5, 5, 3]

    def test_short_text_single_chunk(self):
        """Test that fewer than five sentences form one chunk."""
        chunks = SemanticChunker().chunk_text("One. Two.", ["Cells"])

        assert len(chunks) == 1
        assert chunks[0].id == "chunk_1"
        assert chunks[0].topic == "Cells"

    def test_round_robin_topics(self):
        """Test that topics cycle across chunks."""
        chunks = SemanticChunker(min_sentences=1, max_sentences=1).chunk_text(
            "A. B. C.", ["T1", "T2"]
        )
        assert [c.topic for c in chunks] == ["T1", "T2", "T1"]

    def test_general_topic_when_none_given(self):
        chunks = SemanticChunker().chunk_text("Only one sentence.", [])
        assert chunks[0].topic == "General"

    def test_concept_tagging(self):
        """Test that chunks record the labels they mention, whole words only."""
        chunks = SemanticChunker().chunk_text(
            "ATP is made in mitochondria. Catpower is unrelated.",
            ["ATP", "Mitochondria", "ribosome"],
        )
        assert chunks[0].concepts == ("ATP", "Mitochondria")

    def test_empty_text(self):
        assert SemanticChunker().chunk_text("", ["Topic"]) == []

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            SemanticChunker(min_sentences=5, max_sentences=3)
        with pytest.raises(ValueError):
            SemanticChunker(min_sentences=0)
