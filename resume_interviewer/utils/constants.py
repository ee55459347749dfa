"""
Constants used throughout the Resume Interviewer application.
"""

# Countdown per difficulty, in seconds
DIFFICULTY_DURATIONS = {
    "easy": 20,
    "medium": 60,
    "hard": 120,
}
DEFAULT_DIFFICULTY = "medium"

# Question generation defaults
DEFAULT_QUESTION_COUNT = 6
DEFAULT_MAX_SCORE = 10

# Final score bounds
MIN_FINAL_SCORE = 0
MAX_FINAL_SCORE = 100

# Resume upload
ALLOWED_RESUME_EXTENSIONS = {".pdf", ".docx", ".txt"}
RESUME_URL_PREFIX = "/resumes"

# Rate limits
RATE_LIMIT_UPLOAD = "10/minute"
RATE_LIMIT_GENERATION = "20/minute"

# Candidate summary defaults
UNKNOWN_CANDIDATE_NAME = "Unknown"

# Error messages
ERROR_SESSION_ID_REQUIRED = "sessionId is required"
ERROR_SESSION_NOT_FOUND = "session not found"
ERROR_NO_FILE = "No file uploaded"
ERROR_EMPTY_RESPONSE = "Empty response received"
ERROR_QUESTIONS_LOCKED = "questions can no longer be regenerated once answering has started"
