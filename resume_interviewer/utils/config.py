"""
Configuration module for {SYSTEM_NAME}.

This module provides configuration settings and utilities for the {SYSTEM_NAME}.
"""
import os
import logging
import tempfile
from typing import Dict, Any
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()
# Get the absolute path to the project root directory
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
ENV_FILE_PATH = os.path.join(PROJECT_ROOT, ".env")
DATA_DIR = os.path.join(PROJECT_ROOT, "data")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Set up logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- System Configuration ---
SYSTEM_NAME = os.getenv("SYSTEM_NAME", "Resume Interviewer")
PING_MESSAGE = os.getenv("PING_MESSAGE", "pong")

# Session store configuration
SESSION_STORE_BACKEND = os.environ.get("SESSION_STORE_BACKEND", "file").lower()
SESSION_STORE_PATH = os.environ.get("SESSION_STORE_PATH", os.path.join(DATA_DIR, "db.json"))

# MongoDB configuration
MONGODB_URI = os.environ.get("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DATABASE = os.environ.get("MONGODB_DATABASE", "resume_interviewer")
MONGODB_SESSIONS_COLLECTION = os.environ.get("MONGODB_SESSIONS_COLLECTION", "sessions")

# LLM configuration
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
LLM_TEMPERATURE = float(os.environ.get("LLM_TEMPERATURE", "0.2"))
LLM_MAX_OUTPUT_TOKENS = int(os.environ.get("LLM_MAX_OUTPUT_TOKENS", "8192"))

# Upload configuration
RESUME_STORAGE_DIR = os.environ.get("RESUME_STORAGE_DIR", os.path.join(DATA_DIR, "resumes"))
UPLOAD_TMP_DIR = os.environ.get("UPLOAD_TMP_DIR", tempfile.gettempdir())
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# HTTP configuration
ALLOWED_ORIGINS = [o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", "true")
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("SERVER_PORT", "8080"))

# Candidate client configuration
API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:8080")
API_TIMEOUT_SECONDS = float(os.environ.get("API_TIMEOUT_SECONDS", "120"))
INTERVIEW_STATE_FILE = os.environ.get(
    "INTERVIEW_STATE_FILE",
    os.path.join(os.path.expanduser("~"), ".resume_interviewer", "state.json"),
)


def get_store_config() -> Dict[str, Any]:
    """
    Get session store configuration.

    Returns:
        Dictionary with the selected backend and its settings
    """
    return {
        "backend": SESSION_STORE_BACKEND,
        "path": SESSION_STORE_PATH,
        "uri": MONGODB_URI,
        "database": MONGODB_DATABASE,
        "sessions_collection": MONGODB_SESSIONS_COLLECTION,
    }


def get_db_config() -> Dict[str, str]:
    """
    Get MongoDB configuration.

    Returns:
        Dictionary with MongoDB configuration
    """
    return {
        "uri": MONGODB_URI,
        "database": MONGODB_DATABASE,
        "sessions_collection": MONGODB_SESSIONS_COLLECTION,
    }


def get_llm_config() -> Dict[str, Any]:
    """
    Get LLM configuration.

    Returns:
        Dictionary with LLM configuration
    """
    return {
        "api_key": GOOGLE_API_KEY,
        "model": GEMINI_MODEL,
        "temperature": LLM_TEMPERATURE,
        "max_output_tokens": LLM_MAX_OUTPUT_TOKENS,
    }


def get_upload_config() -> Dict[str, Any]:
    """Get resume upload configuration."""
    return {
        "storage_dir": RESUME_STORAGE_DIR,
        "tmp_dir": UPLOAD_TMP_DIR,
        "max_bytes": MAX_UPLOAD_BYTES,
    }


def get_client_config() -> Dict[str, Any]:
    """Get configuration for the terminal candidate client."""
    return {
        "base_url": API_BASE_URL,
        "timeout": API_TIMEOUT_SECONDS,
        "state_file": INTERVIEW_STATE_FILE,
    }


def log_config():
    """Log current configuration values (excluding sensitive information)."""
    logger.info("Current configuration:")
    logger.info(f"- System Name: {SYSTEM_NAME}")
    logger.info(f"- Session Store Backend: {SESSION_STORE_BACKEND}")
    if SESSION_STORE_BACKEND == "mongodb":
        logger.info(f"- MongoDB Database: {MONGODB_DATABASE}")
        logger.info(f"- Sessions Collection: {MONGODB_SESSIONS_COLLECTION}")
    else:
        logger.info(f"- Session Store Path: {SESSION_STORE_PATH}")
    logger.info(f"- Gemini Model: {GEMINI_MODEL}")
    logger.info(f"- LLM Temperature: {LLM_TEMPERATURE}")
    logger.info(f"- LLM Max Output Tokens: {LLM_MAX_OUTPUT_TOKENS}")
    logger.info(f"- Resume Storage: {RESUME_STORAGE_DIR}")
    logger.info(f"- Max Upload Size: {MAX_UPLOAD_BYTES} bytes")
    logger.info(f"- Rate Limiting: {'enabled' if RATE_LIMIT_ENABLED else 'disabled'}")
    logger.info(f"- Google API Key: {'Configured' if GOOGLE_API_KEY else 'Not configured'}")
