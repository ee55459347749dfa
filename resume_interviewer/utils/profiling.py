"""
Timing utilities.

This module provides helpers for measuring how long generation calls and
request handling take in the Resume Interviewer.
"""
import time
import logging
import asyncio
import functools
from contextlib import contextmanager

# Configure logging
logger = logging.getLogger(__name__)

@contextmanager
def timer(name: str, log_level: int = logging.DEBUG):
    """
    Context manager for timing code blocks.

    Args:
        name: Name of the operation being timed
        log_level: Logging level to use (default: DEBUG)

    Example:
        with timer("gemini_generate"):
            text = await client.generate(prompt)
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed_time = time.perf_counter() - start_time
        logger.log(log_level, f"TIMER - {name}: {elapsed_time:.4f} seconds")

def timed_function(log_level: int = logging.INFO):
    """
    Decorator that logs the execution time of a function or coroutine.

    Args:
        log_level: Logging level to use (default: INFO)

    Example:
        @timed_function()
        async def generate_questions(...):
            # ...
    """
    def decorator(func):
        if asyncio.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with timer(func.__name__, log_level=log_level):
                    return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with timer(func.__name__, log_level=log_level):
                return func(*args, **kwargs)
        return wrapper
    return decorator
