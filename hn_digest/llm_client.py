"""
OpenRouter chat-completions client.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional

import requests
from dotenv import dotenv_values

from .config import (
    OPENROUTER_API_URL,
    OPENROUTER_API_KEY_VAR,
    OPENROUTER_TIMEOUT,
    DEFAULT_ENV_FILE,
    DEFAULT_REFERER,
    DEFAULT_APP_TITLE,
    FALLBACK_MODELS,
)
from .logging_config import get_logger, log_performance


class APIKeyError(RuntimeError):
    """The OpenRouter API key could not be found."""


class OpenRouterClient:
    """Minimal client for the OpenRouter chat completions endpoint."""

    def __init__(self, api_key: Optional[str] = None, env_file: str = DEFAULT_ENV_FILE, timeout: float = OPENROUTER_TIMEOUT):
        self.api_key = api_key
        self.env_file = Path(env_file)
        self.api_url = OPENROUTER_API_URL
        self.timeout = timeout
        self.logger = get_logger(self.__class__.__name__)

    def resolve_api_key(self) -> str:
        """
        Find the API key.

        Checked in order: the key passed to the constructor, the
        OPENROUTER_API_KEY environment variable, then the same entry in the
        local .env file. The .env file is read without touching os.environ.
        """
        if self.api_key:
            return self.api_key

        api_key = os.getenv(OPENROUTER_API_KEY_VAR)
        if api_key:
            return api_key

        try:
            if not self.env_file.is_file():
                raise APIKeyError("API key not found in environment variables and no .env file found")

            api_key = dotenv_values(self.env_file).get(OPENROUTER_API_KEY_VAR)
            if not api_key:
                raise APIKeyError(f"{OPENROUTER_API_KEY_VAR} not found in .env file")
        except APIKeyError as e:
            raise APIKeyError(f"Error loading API key: {e}") from e

        self.logger.debug(f"Loaded API key from {self.env_file}")
        return api_key

    @log_performance(get_logger("OpenRouterClient.generate_text"), "OpenRouter API call")
    def generate_text(
        self,
        prompt: str,
        model: Optional[str] = None,
        referer: Optional[str] = None,
        title: Optional[str] = None,
        parameters: Optional[Dict] = None,
    ) -> Dict:
        """
        Send a single-message chat completion request.

        Args:
            prompt: User message to send
            model: OpenRouter model id; defaults to the first fallback model
            referer: Value for the HTTP-Referer attribution header
            title: Value for the X-Title attribution header
            parameters: Extra request body fields such as temperature or max_tokens

        Returns:
            The decoded JSON response
        """
        if not prompt:
            raise ValueError("Prompt is required")

        api_key = self.resolve_api_key()
        model = model or FALLBACK_MODELS[0]

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": referer or DEFAULT_REFERER,
            "X-Title": title or DEFAULT_APP_TITLE,
        }
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            **(parameters or {}),
        }

        self.logger.debug(f"Sending {len(prompt)} character prompt to {model}")

        try:
            response = requests.post(self.api_url, headers=headers, json=payload, timeout=self.timeout)
            if not response.ok:
                raise RuntimeError(f"OpenRouter API error ({response.status_code}): {response.text}")
            return response.json()
        except (requests.RequestException, ValueError, RuntimeError) as e:
            raise RuntimeError(f"Error calling OpenRouter API: {e}") from e

    def ask(self, prompt: str, model: Optional[str] = None, **kwargs) -> str:
        """Send a prompt and return only the generated text."""
        result = self.generate_text(prompt, model=model, **kwargs)

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not content:
            self.logger.error(f"Unexpected response from OpenRouter: {result}")
            raise RuntimeError("Unexpected response format from OpenRouter API")

        return content

    def ask_with_fallback(self, prompt: str, models: Optional[List[str]] = None, **kwargs) -> str:
        """Try each model in turn and return the first answer."""
        models = models or FALLBACK_MODELS
        last_error = None

        for model in models:
            try:
                return self.ask(prompt, model=model, **kwargs)
            except APIKeyError:
                raise
            except RuntimeError as e:
                self.logger.warning(f"Model {model} failed, trying next: {e}")
                last_error = e

        raise RuntimeError(f"All models failed; last error: {last_error}")
