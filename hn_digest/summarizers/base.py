"""
Base class for LLM summarizers.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..config import TRUNCATION_MARKER, FALLBACK_MODELS
from ..llm_client import OpenRouterClient
from ..models import SummarizerConfig
from ..logging_config import get_logger


class BaseSummarizer(ABC):
    """Abstract base class for summarizers that send fetched text to an LLM."""

    default_instructions = ""

    def __init__(self, config: Optional[SummarizerConfig] = None, client: Optional[OpenRouterClient] = None):
        self.config = config or SummarizerConfig()
        self.client = client or OpenRouterClient()
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def summarize(self, url: str, instructions: Optional[str] = None) -> str:
        """
        Summarize the content found at ``url``.

        Args:
            url: Where to fetch the content from
            instructions: Custom instructions replacing the default prompt

        Returns:
            The model's answer
        """
        pass

    def _truncate(self, text: str) -> str:
        limit = self.config.max_input_chars
        if len(text) <= limit:
            return text
        self.logger.debug(f"Truncating input from {len(text)} to {limit} characters")
        return f"{text[:limit]} {TRUNCATION_MARKER}"

    def _build_prompt(self, instructions: Optional[str], preamble: str, text: str) -> str:
        instructions = (instructions or "").strip() or self.default_instructions
        return f"{instructions}\n\n{preamble}\n\n{self._truncate(text)}"

    def _complete(self, prompt: str) -> str:
        """Send the prompt, walking the fallback model list when allowed."""
        parameters = {
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

        if not self.config.allow_fallback:
            return self.client.ask(prompt, model=self.config.model, parameters=parameters)

        models = [self.config.model]
        models += [model for model in FALLBACK_MODELS if model != self.config.model]
        return self.client.ask_with_fallback(prompt, models=models, parameters=parameters)
