"""
Shared FastAPI dependencies.
"""
from functools import lru_cache

from core.pipeline import QuizGenerationPipeline, build_pipeline


@lru_cache(maxsize=1)
def get_pipeline() -> QuizGenerationPipeline:
    """Process-wide pipeline, created on first request."""
    return build_pipeline()
