"""
Centralized prompt file management with fallback templates.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from core.config import PROMPTS_DIR

logger = logging.getLogger(__name__)

# Placeholders each template must accept; checked by ConfigValidator
PROMPT_FIELDS = {
    "content_analysis": ["content"],
    "relationship_extraction": ["content", "entities"],
    "mcq_generation": ["count", "entities", "concepts", "relationships", "settings"],
    "true_false_generation": ["count", "relationships", "concepts", "settings"],
    "fill_blank_generation": ["count", "key_terms", "entities", "settings"],
    "matching_generation": ["count", "concepts", "relationships", "settings"],
    "short_answer_generation": ["count", "concepts", "settings"],
    "standard_quiz": ["count", "content", "question_types", "settings"],
}


class PromptManager:
    """Manages prompt file loading with consistent fallback behavior."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = Path(prompts_dir) if prompts_dir else PROMPTS_DIR
        self.loaded_prompts: Dict[str, str] = {}

        # Fallback templates
        self.fallback_templates = {
            "content_analysis": _CONTENT_ANALYSIS,
            "relationship_extraction": _RELATIONSHIP_EXTRACTION,
            "mcq_generation": _MCQ_GENERATION,
            "true_false_generation": _TRUE_FALSE_GENERATION,
            "fill_blank_generation": _FILL_BLANK_GENERATION,
            "matching_generation": _MATCHING_GENERATION,
            "short_answer_generation": _SHORT_ANSWER_GENERATION,
            "standard_quiz": _STANDARD_QUIZ,
        }

    def get_prompt(self, prompt_name: str) -> str:
        """
        Load prompt by name with fallback.

        Args:
            prompt_name: Name of prompt file (without .txt extension)

        Returns:
            Prompt template string
        """
        # Return cached if already loaded
        if prompt_name in self.loaded_prompts:
            return self.loaded_prompts[prompt_name]

        # Try to load from file
        prompt_file = self.prompts_dir / f"{prompt_name}.txt"

        if prompt_file.exists():
            try:
                template = prompt_file.read_text(encoding="utf-8")

                # Validate not empty
                if not template.strip():
                    raise ValueError(f"Prompt file is empty: {prompt_file}")

                self.loaded_prompts[prompt_name] = template
                return template

            except (OSError, ValueError) as e:
                logger.warning("Failed to load prompt file %s: %s", prompt_file, e)
                # Fall through to fallback

        # Use fallback template
        if prompt_name in self.fallback_templates:
            logger.debug("Using built-in template for: %s", prompt_name)
            template = self.fallback_templates[prompt_name]
            self.loaded_prompts[prompt_name] = template
            return template

        # No fallback available
        raise FileNotFoundError(
            f"Prompt file not found and no fallback available: {prompt_name}.txt. "
            f"Expected at: {prompt_file}"
        )

    def render(self, prompt_name: str, **fields: object) -> str:
        """Fill a template's placeholders."""
        return self.get_prompt(prompt_name).format(**fields)


_QUESTION_RULES = """STRICT REQUIREMENTS:
- NEVER mention "the document", "the text" or "according to the text"
- Every question must be self-contained with full context
- Every explanation must be at least two sentences"""


_CONTENT_ANALYSIS = """Analyze this educational content and extract key information.

CONTENT:
{content}

Provide a JSON response with:
1. entities: named entities (people, organizations, locations, dates, key terms)
2. concepts: main concepts with descriptions
3. topics: high-level topics covered
4. keyTerms: most important terms/vocabulary
5. readingLevel: estimated reading level (elementary, high school, college, graduate)
6. difficulty: overall difficulty (beginner, intermediate, advanced, expert)

Format:
{{
  "entities": [
    {{"text": "Entity Name", "type": "PERSON|ORGANIZATION|LOCATION|DATE|CONCEPT|TERM", "context": "surrounding text", "importance": 7}}
  ],
  "concepts": [
    {{"name": "Concept Name", "description": "Brief description", "relatedTerms": ["term1", "term2"], "importance": 8}}
  ],
  "topics": ["Topic 1", "Topic 2"],
  "keyTerms": ["term1", "term2"],
  "readingLevel": "college",
  "difficulty": "intermediate"
}}

Importance is an integer from 1 to 10.
Return ONLY valid JSON."""


_RELATIONSHIP_EXTRACTION = """Extract key relationships from this text.

TEXT:
{content}

Focus on these entities: {entities}

Return relationships in JSON format:
{{
  "relationships": [
    {{"subject": "X", "predicate": "causes", "object": "Y", "sentence": "Supporting sentence from the text.", "type": "causal"}}
  ]
}}

Types: causal, hierarchical, temporal, definitional
Return ONLY valid JSON."""


_MCQ_GENERATION = """Generate {count} professional multiple-choice questions.

CONTENT ANALYSIS:
Key Entities:
{entities}

Key Concepts:
{concepts}

Relationships:
{relationships}

CONFIGURATION:
{settings}

GENERATION TECHNIQUES:
1. Entity-based: test knowledge of key entities
2. Relationship-based: test understanding of how concepts relate
3. Application-based: real-world scenario questions
4. Analysis-based: require critical thinking

""" + _QUESTION_RULES + """
- Exactly 4 options per question with plausible distractors
- Spread the correct answer evenly across the four positions

Return JSON format:
{{
  "questions": [
    {{
      "id": "1",
      "type": "mcq",
      "question": "Scenario-based question...",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": "Option A",
      "explanation": "Detailed explanation...",
      "difficulty": "medium",
      "topic": "Related concept",
      "professionalScenario": "Context if applicable",
      "metadata": {{"crossTopic": true, "requiresAnalysis": true, "answerDistribution": "balanced"}}
    }}
  ]
}}

Return ONLY valid JSON."""


_TRUE_FALSE_GENERATION = """Generate {count} professional True/False questions.

RELATIONSHIPS:
{relationships}

CONCEPTS:
{concepts}

CONFIGURATION:
{settings}

""" + _QUESTION_RULES + """
- Test understanding of relationships and concepts
- Create nuanced statements that require analysis; avoid obvious statements
- Mix true and false statements evenly

Return JSON format:
{{
  "questions": [
    {{
      "id": "1",
      "type": "true_false",
      "question": "Statement requiring analysis...",
      "options": ["True", "False"],
      "correct_answer": "True",
      "explanation": "Why this is true or false...",
      "difficulty": "medium",
      "topic": "Concept",
      "metadata": {{"crossTopic": false, "requiresAnalysis": true, "answerDistribution": "balanced"}}
    }}
  ]
}}

Return ONLY valid JSON."""


_FILL_BLANK_GENERATION = """Generate {count} Fill-in-the-Blank questions.

KEY TERMS: {key_terms}

ENTITIES: {entities}

CONFIGURATION:
{settings}

""" + _QUESTION_RULES + """
- Create context-rich sentences
- Remove one key term per sentence and mark the gap with _____
- Ensure exactly one correct answer
- Test understanding, not just memorization

Return JSON format:
{{
  "questions": [
    {{
      "id": "1",
      "type": "fill_blank",
      "question": "Sentence with a _____ gap.",
      "correct_answer": "answer",
      "explanation": "Why this is correct...",
      "difficulty": "easy",
      "topic": "Concept",
      "metadata": {{"crossTopic": false, "requiresAnalysis": false, "answerDistribution": "balanced"}}
    }}
  ]
}}

Return ONLY valid JSON."""


_MATCHING_GENERATION = """Generate {count} Matching questions.

CONCEPTS:
{concepts}

RELATIONSHIPS:
{relationships}

CONFIGURATION:
{settings}

""" + _QUESTION_RULES + """
- Create logical pairs (terms-definitions, causes-effects, concepts-examples)
- 4-6 pairs per question
- Test conceptual understanding

Return JSON format:
{{
  "questions": [
    {{
      "id": "1",
      "type": "matching",
      "question": "Match each concept with its definition:",
      "options": ["Term 1 - Definition A", "Term 2 - Definition B", "Term 3 - Definition C", "Term 4 - Definition D"],
      "correct_answer": ["Term 1 - Definition A", "Term 2 - Definition B", "Term 3 - Definition C", "Term 4 - Definition D"],
      "explanation": "Why each pair belongs together...",
      "difficulty": "medium",
      "topic": "Concept",
      "metadata": {{"crossTopic": true, "requiresAnalysis": true, "answerDistribution": "balanced"}}
    }}
  ]
}}

Return ONLY valid JSON."""


_SHORT_ANSWER_GENERATION = """Generate {count} Short Answer questions.

KEY CONCEPTS:
{concepts}

CONFIGURATION:
{settings}

""" + _QUESTION_RULES + """
- Test application and analysis
- Require 2-3 sentence responses
- Professional scenarios for advanced levels

Return JSON format:
{{
  "questions": [
    {{
      "id": "1",
      "type": "short_answer",
      "question": "Explain how...",
      "correct_answer": "Expected answer points",
      "explanation": "Model answer...",
      "difficulty": "hard",
      "topic": "Concept",
      "professionalScenario": "Real-world context",
      "metadata": {{"crossTopic": true, "requiresAnalysis": true, "answerDistribution": "balanced"}}
    }}
  ]
}}

Return ONLY valid JSON."""


_STANDARD_QUIZ = """Generate a quiz with exactly {count} questions.

CONTENT:
{content}

QUESTION TYPES: {question_types}

CONFIGURATION:
{settings}

""" + _QUESTION_RULES + """
- Questions should test understanding and application, not just recall
- Multiple choice questions have 4 options with plausible distractors

Return EXACT JSON format:
{{
  "title": "Assessment Quiz",
  "topics": ["Topic 1", "Topic 2"],
  "questions": [
    {{
      "id": "1",
      "type": "mcq",
      "question": "Question text?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correct_answer": "Option A",
      "explanation": "Why this answer is correct...",
      "difficulty": "medium",
      "topic": "Concept",
      "professionalScenario": "Optional real-world context",
      "metadata": {{"crossTopic": false, "requiresAnalysis": true, "answerDistribution": "random"}}
    }}
  ]
}}

Return ONLY valid JSON."""
