"""
Data models for the Resume Interviewer platform.
"""
