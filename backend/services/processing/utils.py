"""
Shared utilities for processing pipeline.
"""
import re
from collections import Counter
from typing import List, Tuple

import numpy as np

_WHITESPACE_RE = re.compile(r"\s+")
# Allow-list: word characters, whitespace and basic punctuation
_DISALLOWED_RE = re.compile(r"[^\w\s.,!?;:()\-'\"]")
# A run of non-terminators closed by a run of terminators, or a trailing fragment.
# Leading punctuation gets its own span so every character is covered.
_SENTENCE_RE = re.compile(r"[^.!?]+(?:[.!?]+|$)\s*|[.!?]+\s*")
_TOKEN_RE = re.compile(r"[a-z0-9]+")


def clean_text(text: str) -> str:
    """
    Normalize text.

    Operations:
        - Collapse whitespace runs to single spaces
        - Remove characters outside the allow-list
        - Trim
    """
    text = _WHITESPACE_RE.sub(" ", text or "")
    text = _DISALLOWED_RE.sub("", text)
    # Removing characters can leave doubled spaces behind
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def split_sentence_spans(text: str) -> List[Tuple[int, int]]:
    """
    Split text into sentence spans (start, end).

    Boundaries are runs of '.', '!' or '?'; trailing whitespace belongs to the
    sentence before it. Spans are contiguous and cover the whole text.
    """
    return [m.span() for m in _SENTENCE_RE.finditer(text or "") if m.end() > m.start()]


def split_sentences(text: str) -> List[str]:
    """Split text into stripped, non-empty sentences."""
    sentences = (text[start:end].strip() for start, end in split_sentence_spans(text))
    return [s for s in sentences if s]


def count_words(text: str) -> int:
    return len(text.split()) if text else 0


def calculate_flesch_kincaid_grade(text: str) -> float:
    """
    Calculate readability grade level (simplified).

    FK grade = 0.39 * ASL + 11.8 * ASW - 15.59
    Where ASL = average sentence length, ASW = average syllables per word
    """
    sentences = split_sentences(text)

    if not sentences:
        return 10.0

    words = text.split()
    if len(words) == 0:
        return 10.0

    total_syllables = sum(_count_syllables(word) for word in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables_per_word = total_syllables / len(words)

    fk_grade = (0.39 * avg_sentence_length) + (11.8 * avg_syllables_per_word) - 15.59

    return max(0, min(20, fk_grade))


def reading_level_for_grade(grade: float) -> str:
    """Map a Flesch-Kincaid grade onto the reading-level labels used in prompts."""
    if grade < 6:
        return "elementary"
    if grade < 12:
        return "high school"
    if grade < 16:
        return "college"
    return "graduate"


def _count_syllables(word: str) -> int:
    """Count syllables in a word (simplified heuristic)."""
    word = word.lower().strip(".,!?;:()\"'")
    if not word:
        return 1

    vowels = 'aeiouy'
    count = 0
    prev_was_vowel = False

    for char in word:
        is_vowel = char in vowels
        if is_vowel and not prev_was_vowel:
            count += 1
        prev_was_vowel = is_vowel

    # Handle silent e
    if word.endswith('e'):
        count -= 1

    return max(1, count)


def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall((text or "").lower())


def calculate_cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """Calculate cosine similarity between two vectors."""
    if len(vec1) == 0 or len(vec2) == 0:
        return 0.0

    dot_product = np.dot(vec1, vec2)
    norm1 = np.linalg.norm(vec1)
    norm2 = np.linalg.norm(vec2)

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return float(dot_product / (norm1 * norm2))


def text_similarity(text1: str, text2: str) -> float:
    """Bag-of-words cosine similarity of two strings (0.0-1.0)."""
    counts1 = Counter(tokenize(text1))
    counts2 = Counter(tokenize(text2))
    vocabulary = sorted(set(counts1) | set(counts2))
    if not vocabulary:
        return 0.0

    vec1 = np.array([counts1[token] for token in vocabulary], dtype=np.float32)
    vec2 = np.array([counts2[token] for token in vocabulary], dtype=np.float32)
    return calculate_cosine_similarity(vec1, vec2)
