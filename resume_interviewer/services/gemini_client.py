"""
Gemini text generation adapter.

Sends one prompt to the configured Gemini model and returns the raw text it
generates. Prompt content and output parsing live in the interview service;
this adapter only moves text in and out and reports transport failures.
"""
import logging
from typing import Any, Callable, Dict, Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from resume_interviewer.core.errors import ServiceResponseMalformed, ServiceUnavailable
from resume_interviewer.utils.config import get_llm_config
from resume_interviewer.utils.constants import ERROR_EMPTY_RESPONSE
from resume_interviewer.utils.profiling import timer

logger = logging.getLogger(__name__)

ModelFactory = Callable[..., Any]


class GeminiClient:
    """Adapter around ``ChatGoogleGenerativeAI`` returning plain text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        model_factory: ModelFactory = ChatGoogleGenerativeAI,
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY)
            model: Gemini model name (defaults to GEMINI_MODEL)
            model_factory: Callable building the chat model (overridable in tests)
        """
        llm_config = get_llm_config()
        self.api_key = api_key or llm_config["api_key"]
        self.model = model or llm_config["model"]
        self._model_factory = model_factory
        self._models: Dict[tuple, Any] = {}

    def _get_model(self, temperature: float, max_output_tokens: int):
        key = (temperature, max_output_tokens)
        if key not in self._models:
            self._models[key] = self._model_factory(
                model=self.model,
                google_api_key=self.api_key,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
                max_retries=0,
            )
        return self._models[key]

    async def generate(self, prompt: str, temperature: float = 0.0, max_output_tokens: int = 8192) -> str:
        """
        Generate text for ``prompt``.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_output_tokens: Upper bound on generated tokens

        Returns:
            The generated text

        Raises:
            ServiceUnavailable: Missing API key, transport error or non-success status
            ServiceResponseMalformed: The response carried no text
        """
        if not self.api_key:
            raise ServiceUnavailable("GOOGLE_API_KEY not set")

        try:
            model = self._get_model(temperature, max_output_tokens)
            with timer("gemini_generate", log_level=logging.INFO):
                response = await model.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error(f"Gemini call failed: {e}")
            raise ServiceUnavailable(f"Gemini call failed: {e}") from e

        text = _extract_text(getattr(response, "content", None))
        if not text:
            logger.error(f"Gemini response carried no text: {response!r}")
            raise ServiceResponseMalformed(ERROR_EMPTY_RESPONSE)
        return text


def _extract_text(content: Any) -> str:
    """Flatten message content, which may be a string or a list of parts."""
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts).strip()
    return ""
