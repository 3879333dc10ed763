"""
Configuration validation for the quiz generation backend.
Validates prompt templates, the text generation service, and settings on startup.
"""
import requests
from pathlib import Path
from typing import List, Dict, Any, Optional


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigValidator:
    """Validates system configuration before pipeline execution."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        self.prompts_dir = prompts_dir
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str]
            }
        """
        self.errors = []
        self.warnings = []

        self._validate_prompt_files()
        available_models = self._validate_ollama_connection()
        if available_models is not None:
            self._validate_ollama_models(available_models)
        self._validate_config_values()

        return {
            "valid": len(self.errors) == 0,
            "errors": self.errors,
            "warnings": self.warnings
        }

    def raise_for_errors(self) -> Dict[str, Any]:
        """Run validate_all and raise ConfigurationError if anything is invalid."""
        result = self.validate_all()
        if not result["valid"]:
            raise ConfigurationError("; ".join(result["errors"]))
        return result

    def _validate_prompt_files(self):
        """Check that prompt overrides, where present, accept the expected placeholders."""
        from core.config import PROMPTS_DIR
        from core.prompt_manager import PROMPT_FIELDS

        prompts_dir = Path(self.prompts_dir) if self.prompts_dir else PROMPTS_DIR

        if not prompts_dir.exists():
            self.warnings.append(
                f"Prompts directory not found: {prompts_dir}. Using built-in templates."
            )
            return

        for prompt_name, fields in PROMPT_FIELDS.items():
            path = prompts_dir / f"{prompt_name}.txt"
            if not path.exists():
                continue
            if path.stat().st_size == 0:
                self.warnings.append(f"Prompt file is empty: {path.name}. Using built-in template.")
                continue

            template = path.read_text(encoding="utf-8")
            try:
                template.format(**{field: "" for field in fields})
            except (KeyError, IndexError, ValueError) as e:
                self.errors.append(
                    f"Prompt file {path.name} does not render with fields "
                    f"{', '.join(fields)}: {e!r}. Double any literal braces."
                )

    def _validate_ollama_connection(self) -> Optional[List[str]]:
        """Check that Ollama service is reachable; returns the pulled model names."""
        from core.config import OLLAMA_BASE_URL

        try:
            response = requests.get(f"{OLLAMA_BASE_URL}/api/tags", timeout=5)
            response.raise_for_status()
            return [model.get("name", "") for model in response.json().get("models", [])]
        except requests.exceptions.ConnectionError:
            self.errors.append(
                f"Cannot connect to Ollama at {OLLAMA_BASE_URL}. "
                "Ensure Ollama is running: `ollama serve`"
            )
        except requests.exceptions.Timeout:
            self.errors.append(
                f"Ollama connection timeout at {OLLAMA_BASE_URL}. "
                "Check network or Ollama performance."
            )
        except Exception as e:
            self.errors.append(f"Ollama connection error: {e}")
        return None

    def _validate_ollama_models(self, available_models: List[str]):
        """Check that the configured generation model is pulled."""
        from core.config import OLLAMA_MODEL

        # "mixtral" and "mixtral:latest" name the same model
        wanted = OLLAMA_MODEL if ":" in OLLAMA_MODEL else f"{OLLAMA_MODEL}:latest"
        if OLLAMA_MODEL not in available_models and wanted not in available_models:
            self.errors.append(
                f"Required model not found: {OLLAMA_MODEL}. "
                f"Pull it with: `ollama pull {OLLAMA_MODEL}`"
            )

    def _validate_config_values(self):
        """Validate configuration value ranges and types."""
        from core.config import (
            CHUNK_MIN_SENTENCES,
            CHUNK_MAX_SENTENCES,
            QUALITY_THRESHOLD_STANDARD,
            QUALITY_THRESHOLD_CERTIFICATION,
            DUPLICATE_SIMILARITY_THRESHOLD,
            MAX_CONCURRENT_LLM_CALLS,
            LLM_CALL_TIMEOUT,
            LLM_TEMPERATURE,
        )

        # Chunk size validation
        if CHUNK_MIN_SENTENCES < 1:
            self.errors.append(f"CHUNK_MIN_SENTENCES ({CHUNK_MIN_SENTENCES}) must be >= 1")

        if CHUNK_MAX_SENTENCES < CHUNK_MIN_SENTENCES:
            self.errors.append(
                f"CHUNK_MAX_SENTENCES ({CHUNK_MAX_SENTENCES}) must be >= "
                f"CHUNK_MIN_SENTENCES ({CHUNK_MIN_SENTENCES})"
            )

        # Quality threshold validation
        for name, value in (
            ("QUALITY_THRESHOLD_STANDARD", QUALITY_THRESHOLD_STANDARD),
            ("QUALITY_THRESHOLD_CERTIFICATION", QUALITY_THRESHOLD_CERTIFICATION),
        ):
            if not (0.0 <= value <= 100.0):
                self.errors.append(f"{name} ({value}) must be between 0 and 100")

        if QUALITY_THRESHOLD_CERTIFICATION < QUALITY_THRESHOLD_STANDARD:
            self.warnings.append(
                "QUALITY_THRESHOLD_CERTIFICATION is below QUALITY_THRESHOLD_STANDARD; "
                "certification quizzes will be filtered less strictly"
            )

        if not (0.0 < DUPLICATE_SIMILARITY_THRESHOLD <= 1.0):
            self.errors.append(
                f"DUPLICATE_SIMILARITY_THRESHOLD ({DUPLICATE_SIMILARITY_THRESHOLD}) "
                "must be in (0.0, 1.0]"
            )

        if MAX_CONCURRENT_LLM_CALLS < 1:
            self.errors.append(f"MAX_CONCURRENT_LLM_CALLS ({MAX_CONCURRENT_LLM_CALLS}) must be >= 1")

        if LLM_CALL_TIMEOUT <= 0:
            self.errors.append(f"LLM_CALL_TIMEOUT ({LLM_CALL_TIMEOUT}) must be positive")

        # Temperature validation
        if not (0.0 <= LLM_TEMPERATURE <= 1.0):
            self.warnings.append(
                f"LLM_TEMPERATURE ({LLM_TEMPERATURE}) outside normal range [0.0, 1.0]"
            )


# Global validator instance
config_validator = ConfigValidator()
