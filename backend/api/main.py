"""
FastAPI main application.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from core.config import API_V1_PREFIX, CORS_ORIGINS, LOG_LEVEL, SKIP_STARTUP_VALIDATION
from core.config_validator import config_validator
from api.routes import documents, quizzes

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Quiz Generation API",
    description="Document analysis and question generation API",
    version="1.0.0",
)


@app.on_event("startup")
async def validate_configuration():
    """Validate configuration on application startup."""
    if SKIP_STARTUP_VALIDATION:
        logger.info("Skipping configuration validation (SKIP_STARTUP_VALIDATION=true)")
        return

    logger.info("Validating configuration...")

    validation_result = config_validator.validate_all()

    for warning in validation_result["warnings"]:
        logger.warning(warning)

    # Log errors and fail if invalid
    if not validation_result["valid"]:
        for error in validation_result["errors"]:
            logger.error(error)
        logger.critical("Application startup aborted due to configuration errors")
        raise SystemExit(1)

    logger.info("Configuration validated successfully")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(quizzes.router, prefix=f"{API_V1_PREFIX}/quizzes", tags=["quizzes"])
app.include_router(documents.router, prefix=f"{API_V1_PREFIX}/documents", tags=["documents"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Quiz Generation API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
