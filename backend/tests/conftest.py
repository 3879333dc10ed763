"""
Shared fixtures: a scripted text generation client and sample content.
"""
import json
import threading

import pytest

from models.content_models import (
    Concept,
    ContentMetadata,
    Entity,
    EntityType,
    ProcessedContent,
    Relationship,
    RelationshipKind,
)


MITOCHONDRIA_TEXT = (
    "The mitochondria is the powerhouse of the cell. "
    "It produces ATP through respiration."
)

# First line of each built-in template
PROMPT_MARKERS = {
    "content_analysis": "Analyze this educational content",
    "relationship_extraction": "Extract key relationships",
    "mcq": "multiple-choice questions",
    "true_false": "True/False questions",
    "fill_blank": "Fill-in-the-Blank questions",
    "matching": "Matching questions",
    "short_answer": "Short Answer questions",
    "standard_quiz": "Generate a quiz with exactly",
}


class ScriptedClient:
    """
    Text generation client that answers by prompt kind.

    ``replies`` maps a PROMPT_MARKERS key to a string, a dict (sent as JSON)
    or an exception instance (raised). Unscripted prompts raise RuntimeError.
    """

    def __init__(self, replies=None):
        self.replies = dict(replies or {})
        self.prompts = []
        self._lock = threading.Lock()

    def kind_of(self, prompt):
        for kind, marker in PROMPT_MARKERS.items():
            if marker in prompt:
                return kind
        return None

    def calls(self, kind):
        return [p for p in self.prompts if self.kind_of(p) == kind]

    def generate(self, prompt):
        with self._lock:
            self.prompts.append(prompt)
        reply = self.replies.get(self.kind_of(prompt))
        if reply is None:
            raise RuntimeError("no scripted reply")
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


QUESTION_STEMS = [
    "Which organelle is responsible for producing ATP in eukaryotic cells?",
    "What process do mitochondria use to generate usable chemical energy?",
    "Why are mitochondria often described as the powerhouse of a cell?",
    "Which molecule stores the energy released during cellular respiration?",
    "Where inside a eukaryotic cell does the citric acid cycle take place?",
    "How does oxygen availability change the amount of ATP a cell produces?",
    "Which structures carry their own DNA separate from the nucleus?",
    "What happens to a muscle cell when its mitochondria stop working?",
]


def make_question(index, qtype, **overrides):
    """A distinct reply item that passes the standard quality threshold."""
    item = {
        "id": f"{qtype}_{index}",
        "type": qtype,
        "question": QUESTION_STEMS[index % len(QUESTION_STEMS)],
        "options": ["Mitochondria", "Ribosome", "Nucleus", "Golgi apparatus"],
        "correct_answer": "Mitochondria",
        "explanation": "Mitochondria carry out cellular respiration. That process yields most of the cell's ATP.",
        "difficulty": "medium",
        "topic": "Cell Biology",
    }
    item.update(overrides)
    return item


@pytest.fixture
def scripted_client():
    return ScriptedClient()


@pytest.fixture
def sample_content():
    return ProcessedContent(
        document_id="doc_1",
        raw_text=MITOCHONDRIA_TEXT,
        cleaned_text=MITOCHONDRIA_TEXT,
        entities=(
            Entity("mitochondria", EntityType.TERM, "powerhouse of the cell", 9),
            Entity("ATP", EntityType.TERM, "produced through respiration", 8),
            Entity("cell", EntityType.CONCEPT, "", 4),
        ),
        concepts=(
            Concept("Cellular respiration", "Process that produces ATP", ("ATP",), 8),
            Concept("Organelles", "Specialised cell structures", (), 4),
        ),
        relationships=(
            Relationship("mitochondria", "produces", "ATP", "It produces ATP through respiration.",
                         RelationshipKind.CAUSAL),
        ),
        metadata=ContentMetadata(
            word_count=13,
            topics=("Cell Biology",),
            key_terms=("mitochondria", "ATP"),
        ),
    )
