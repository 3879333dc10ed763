"""
Quiz generation API routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_pipeline
from api.models.requests import QuizGenerateRequest
from api.models.responses import QuizGenerateResponse
from core.errors import ErrorKind, PipelineError
from core.pipeline import QuizGenerationPipeline

logger = logging.getLogger(__name__)

router = APIRouter()

_THROTTLED = {ErrorKind.QUOTA_EXCEEDED, ErrorKind.RATE_LIMITED}


@router.post("/generate", response_model=QuizGenerateResponse)
def generate_quiz(
    request: QuizGenerateRequest,
    pipeline: QuizGenerationPipeline = Depends(get_pipeline),
):
    """
    Generate a quiz from a document's text.

    Returns fewer questions than requested when quality filtering removes some;
    check ``shortfall``.
    """
    try:
        config = request.config.to_config()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        result = pipeline.run(request.document_id, request.content, config)
    except PipelineError as e:
        status_code = 429 if e.kind in _THROTTLED else 502
        logger.error("Quiz generation failed for %s: %s", request.document_id, e)
        raise HTTPException(status_code=status_code, detail=e.to_dict())

    return QuizGenerateResponse.from_result(result)
