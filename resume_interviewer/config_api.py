"""
Configuration API for the Resume Interviewer platform.
"""
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field
from typing import Dict
import logging

from resume_interviewer.utils.config import SYSTEM_NAME, GEMINI_MODEL, GOOGLE_API_KEY

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

# Define Pydantic model for config response
class ConfigResponse(BaseModel):
    """Model for system configuration response."""
    system_name: str = Field(..., description="Name of the interviewer system")
    version: str = Field(..., description="API version")
    store_backend: str = Field(..., description="Active session store backend")
    model: str = Field(..., description="Generation model used for questions and scoring")
    features: Dict[str, bool] = Field(default_factory=dict, description="Available system features")

@router.get("/api/system-config", response_model=ConfigResponse)
async def get_system_config(request: Request):
    """Get system configuration details."""
    app = request.app
    store = getattr(app.state, "session_store", None)

    return {
        "system_name": SYSTEM_NAME,
        "version": getattr(app, "version", "1.0.0"),
        "store_backend": getattr(store, "backend_name", "unknown"),
        "model": GEMINI_MODEL,
        "features": {
            "question_generation": bool(GOOGLE_API_KEY),
            "resume_upload": getattr(app.state, "resume_service", None) is not None,
            "rate_limiting": getattr(app.state.limiter, "enabled", False),
        }
    }
