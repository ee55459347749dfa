"""
Utilities for the Resume Interviewer platform: configuration, storage and helpers.
"""
