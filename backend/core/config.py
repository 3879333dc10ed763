"""
Configuration management for the quiz generation backend.
Loads configuration from environment variables and .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in the backend directory or project root
BACKEND_DIR = Path(__file__).parent.parent
PROJECT_ROOT = BACKEND_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

# Load .env file if it exists
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
else:
    # Also try loading from backend directory
    backend_env = BACKEND_DIR / ".env"
    if backend_env.exists():
        load_dotenv(backend_env)

PROMPTS_DIR = BACKEND_DIR / "prompts"

# Text generation service (Ollama-compatible)
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "mixtral:latest")

# LLM settings (can be overridden via env vars)
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.4"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4096"))
LLM_CALL_TIMEOUT = float(os.getenv("LLM_CALL_TIMEOUT", "120"))  # seconds, per prompt
MAX_CONCURRENT_LLM_CALLS = int(os.getenv("MAX_CONCURRENT_LLM_CALLS", "5"))

# How much document text goes into each prompt (characters)
ANALYSIS_CHAR_LIMIT = int(os.getenv("ANALYSIS_CHAR_LIMIT", "20000"))
RELATIONSHIP_CHAR_LIMIT = int(os.getenv("RELATIONSHIP_CHAR_LIMIT", "10000"))
FALLBACK_CHAR_LIMIT = int(os.getenv("FALLBACK_CHAR_LIMIT", "30000"))

# Semantic chunking
CHUNK_MIN_SENTENCES = int(os.getenv("CHUNK_MIN_SENTENCES", "5"))
CHUNK_MAX_SENTENCES = int(os.getenv("CHUNK_MAX_SENTENCES", "7"))

# Quality thresholds (0-100)
QUALITY_THRESHOLD_STANDARD = float(os.getenv("QUALITY_THRESHOLD_STANDARD", "60"))
QUALITY_THRESHOLD_CERTIFICATION = float(os.getenv("QUALITY_THRESHOLD_CERTIFICATION", "70"))

# Near-duplicate filtering
ENABLE_DUPLICATE_FILTER = os.getenv("ENABLE_DUPLICATE_FILTER", "true").lower() == "true"
DUPLICATE_SIMILARITY_THRESHOLD = float(os.getenv("DUPLICATE_SIMILARITY_THRESHOLD", "0.9"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# API configuration
API_V1_PREFIX = "/api/v1"
# CORS origins can be comma-separated list in env var
CORS_ORIGINS_STR = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
CORS_ORIGINS = [origin.strip() for origin in CORS_ORIGINS_STR.split(",") if origin.strip()]
SKIP_STARTUP_VALIDATION = os.getenv("SKIP_STARTUP_VALIDATION", "false").lower() == "true"
