"""
Document processing API routes.
"""
from fastapi import APIRouter, Depends
from typing import Any, Dict

from api.dependencies import get_pipeline
from api.models.requests import DocumentProcessRequest
from core.pipeline import QuizGenerationPipeline

router = APIRouter()


@router.post("/process")
def process_document(
    request: DocumentProcessRequest,
    pipeline: QuizGenerationPipeline = Depends(get_pipeline),
) -> Dict[str, Any]:
    """Run content processing only and return the processed content."""
    processed = pipeline.process_only(request.document_id, request.content)
    return processed.to_dict()
