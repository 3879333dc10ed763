"""
Unit tests for advanced question generation.
"""
import random
import threading
import time

from core.errors import RateLimitedError
from models.content_models import ProcessedContent
from models.quiz_models import QuestionType, QuizConfig
from services.generation.question_generator import AdvancedQuestionGenerator

from conftest import MITOCHONDRIA_TEXT, ScriptedClient, make_question


def _generator(client, **kwargs):
    kwargs.setdefault("rng", random.Random(42))
    return AdvancedQuestionGenerator(client, **kwargs)


class TestGenerateQuestionsAdvanced:
    """Test the per-type generation flow."""

    def test_mitochondria_scenario(self, sample_content):
        """Test one prompt per requested type and a merged set of at most N."""
        client = ScriptedClient({
            "mcq": {"questions": [make_question(0, "mcq"), make_question(1, "mcq")]},
            "fill_blank": {"questions": [
                make_question(2, "fill_blank", options=None, correct_answer="ATP"),
                make_question(3, "fill_blank", options=None, correct_answer="respiration"),
            ]},
        })
        config = QuizConfig(
            question_count=4,
            question_types=("mcq", "fill_blank"),
            difficulty="intermediate",
        )

        questions = _generator(client).generate_questions_advanced(sample_content, config)

        assert len(client.calls("mcq")) == 1
        assert len(client.calls("fill_blank")) == 1
        assert "Generate 2 professional multiple-choice questions" in client.calls("mcq")[0]
        assert "Generate 2 Fill-in-the-Blank questions" in client.calls("fill_blank")[0]
        assert len(client.prompts) == 2

        assert len(questions) == 4
        assert {q.type for q in questions} == {QuestionType.MCQ, QuestionType.FILL_BLANK}

    def test_truncates_to_question_count(self, sample_content):
        client = ScriptedClient({
            "mcq": {"questions": [make_question(i, "mcq") for i in range(5)]},
        })
        config = QuizConfig(question_count=3, question_types=("mcq",))

        questions = _generator(client).generate_questions_advanced(sample_content, config)

        assert len(questions) == 3

    def test_failed_type_does_not_affect_others(self, sample_content):
        """Test that one type raising leaves the other type's questions intact."""
        client = ScriptedClient({
            "mcq": RateLimitedError("slow down"),
            "true_false": {"questions": [
                make_question(0, "true_false", options=None, correct_answer="True"),
            ]},
        })
        config = QuizConfig(question_count=4, question_types=("mcq", "true_false"))

        questions = _generator(client).generate_questions_advanced(sample_content, config)

        assert [q.type for q in questions] == [QuestionType.TRUE_FALSE]

    def test_all_types_fail_returns_empty(self, sample_content):
        client = ScriptedClient({"mcq": "garbage", "matching": RuntimeError("boom")})
        config = QuizConfig(question_count=4, question_types=("mcq", "matching"))

        assert _generator(client).generate_questions_advanced(sample_content, config) == []

    def test_empty_content_does_not_raise(self):
        """Test generation with no entities or concepts at all."""
        content = ProcessedContent(document_id="empty", raw_text="", cleaned_text="")
        client = ScriptedClient({"short_answer": {"questions": []}})
        config = QuizConfig(question_count=2, question_types=("short_answer", "mcq"))

        assert _generator(client).generate_questions_advanced(content, config) == []
        assert "None identified" in client.calls("short_answer")[0]

    def test_timed_out_type_is_skipped(self, sample_content):
        """Test that a type exceeding call_timeout contributes nothing."""
        release = threading.Event()

        class SlowMcqClient(ScriptedClient):
            def generate(self, prompt):
                if self.kind_of(prompt) == "mcq":
                    release.wait(5)
                return super().generate(prompt)

        client = SlowMcqClient({
            "mcq": {"questions": [make_question(0, "mcq")]},
            "short_answer": {"questions": [make_question(1, "short_answer", options=None)]},
        })
        config = QuizConfig(question_count=2, question_types=("mcq", "short_answer"))

        try:
            questions = _generator(client, call_timeout=0.1).generate_questions_advanced(
                sample_content, config
            )
        finally:
            release.set()

        assert [q.type for q in questions] == [QuestionType.SHORT_ANSWER]

    def test_hung_type_frees_its_slot(self, sample_content):
        """Test that a queued type still runs after the only slot's call times out."""
        release = threading.Event()

        class HungMcqClient(ScriptedClient):
            def generate(self, prompt):
                if self.kind_of(prompt) == "mcq":
                    release.wait(5)
                return super().generate(prompt)

        client = HungMcqClient({
            "mcq": {"questions": [make_question(0, "mcq")]},
            "short_answer": {"questions": [make_question(1, "short_answer", options=None)]},
        })
        config = QuizConfig(question_count=2, question_types=("mcq", "short_answer"))
        generator = _generator(client, max_workers=1, call_timeout=0.2)

        try:
            questions = generator.generate_questions_advanced(sample_content, config)
        finally:
            release.set()

        assert [q.type for q in questions] == [QuestionType.SHORT_ANSWER]

    def test_timeout_counts_from_call_start(self, sample_content):
        """Test that waiting for a slot does not eat into a call's timeout."""

        class SteadyClient(ScriptedClient):
            def generate(self, prompt):
                time.sleep(0.25)
                return super().generate(prompt)

        client = SteadyClient({
            "mcq": {"questions": [make_question(0, "mcq")]},
            "short_answer": {"questions": [make_question(1, "short_answer", options=None)]},
        })
        config = QuizConfig(question_count=2, question_types=("mcq", "short_answer"))
        generator = _generator(client, max_workers=1, call_timeout=0.4)

        questions = generator.generate_questions_advanced(sample_content, config)

        assert {q.type for q in questions} == {QuestionType.MCQ, QuestionType.SHORT_ANSWER}

    def test_duplicates_removed(self, sample_content):
        client = ScriptedClient({
            "mcq": {"questions": [make_question(0, "mcq"), make_question(0, "mcq", id="copy")]},
        })
        config = QuizConfig(question_count=2, question_types=("mcq",))

        questions = _generator(client).generate_questions_advanced(sample_content, config)

        assert len(questions) == 1


class TestGenerateByType:
    """Test parsing of a single type's reply."""

    def test_mismatched_types_dropped(self, sample_content):
        """Test that items of another type than requested are discarded."""
        client = ScriptedClient({"mcq": {"questions": [
            make_question(0, "mcq"),
            make_question(1, "true_false"),
            make_question(2, None),
        ]}})
        config = QuizConfig(question_count=3, question_types=("mcq",))

        questions = _generator(client).generate_by_type(QuestionType.MCQ, sample_content, config)

        assert [q.type for q in questions] == [QuestionType.MCQ, QuestionType.MCQ]
        assert [q.id for q in questions] == ["mcq_1", "mcq_3"]

    def test_time_limit_applied(self, sample_content):
        client = ScriptedClient({"mcq": {"questions": [make_question(0, "mcq", timeLimit=15)]}})
        config = QuizConfig(question_count=1, question_types=("mcq",), time_per_question=45)

        questions = _generator(client).generate_by_type(QuestionType.MCQ, sample_content, config)

        assert questions[0].time_limit == 45

    def test_missing_questions_array(self, sample_content):
        client = ScriptedClient({"mcq": {"items": []}})
        config = QuizConfig(question_count=1, question_types=("mcq",))

        assert _generator(client).generate_by_type(QuestionType.MCQ, sample_content, config) == []


class TestBuildPrompt:
    """Test type-specific prompt inputs."""

    def test_mcq_prompt_filters_by_importance(self, sample_content):
        config = QuizConfig(question_count=2, question_types=("mcq",))
        prompt = _generator(ScriptedClient()).build_prompt(QuestionType.MCQ, sample_content, config)

        assert "mitochondria (TERM)" in prompt
        assert "cell (CONCEPT)" not in prompt
        assert "Cellular respiration: Process that produces ATP" in prompt
        assert "Organelles" not in prompt
        assert "mitochondria produces ATP (causal)" in prompt

    def test_fill_blank_prompt_uses_key_terms(self, sample_content):
        config = QuizConfig(question_count=2, question_types=("fill_blank",))
        prompt = _generator(ScriptedClient()).build_prompt(QuestionType.FILL_BLANK, sample_content, config)

        assert "mitochondria, ATP" in prompt

    def test_settings_in_prompt(self, sample_content):
        config = QuizConfig(
            question_count=2,
            question_types=("true_false",),
            difficulty="expert",
            certification_level=True,
            focus_topics=("Metabolism",),
        )
        prompt = _generator(ScriptedClient()).build_prompt(QuestionType.TRUE_FALSE, sample_content, config)

        assert "Difficulty: expert" in prompt
        assert "Certification Level: True" in prompt
        assert "Focus Topics: Metabolism" in prompt
        assert MITOCHONDRIA_TEXT not in prompt
