# src/memo_manager/llm/client.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import openai
from openai import OpenAI

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    return exc.__class__.__name__ in {
        "AuthenticationError",
        "PermissionDeniedError",
    }


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError))


def build_client(settings: Any) -> OpenAI:
    """
    Create the OpenAI client for ingestion.

    No secrets are needed until this is called. Automatic retries stay off:
    a failed file is logged and picked up on the next import run.
    """
    api_key = getattr(settings, "openai_api_key", None)
    if not api_key or not str(api_key).strip():
        raise RuntimeError("OpenAI API key is not set. Set OPENAI_API_KEY in your .env.")

    base_url = getattr(settings, "openai_base_url", None) or None
    return OpenAI(api_key=str(api_key), base_url=base_url, max_retries=0)


def describe_openai_error(err: Exception) -> str:
    if _is_auth_error(err):
        return "OpenAI authentication failed. Check OPENAI_API_KEY."
    if _is_rate_limit_error(err):
        return "OpenAI is rate-limiting requests. Try again later or lower the concurrency."
    if _is_connection_error(err):
        return "OpenAI network/timeout error."
    return f"{err.__class__.__name__}: {str(err).strip() or 'OpenAI error.'}"


class OpenAITranscriber:
    """Whisper transcription through the OpenAI audio API."""

    def __init__(self, client: OpenAI, *, model: str = "whisper-1") -> None:
        self._client = client
        self._model = model

    def transcribe(self, path: Path) -> str | None:
        try:
            with open(path, "rb") as fh:
                result = self._client.audio.transcriptions.create(model=self._model, file=fh)
        except openai.OpenAIError as e:
            logger.error("Transcription failed file=%s: %s", path, describe_openai_error(e))
            return None

        text = getattr(result, "text", None)
        return str(text) if text else None


class OpenAILabeller:
    """
    Chat-completion classifier.

    The user message is the categorization prompt, a blank line, then the
    transcript. The raw answer is returned; validation is the caller's job.
    """

    def __init__(self, client: OpenAI, *, prompt: str, model: str = "gpt-3.5-turbo") -> None:
        self._client = client
        self._prompt = prompt
        self._model = model

    def label(self, transcript: str) -> str | None:
        try:
            result = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": f"{self._prompt}\n\n{transcript}"}],
            )
        except openai.OpenAIError as e:
            logger.error("Labelling request failed: %s", describe_openai_error(e))
            return None

        try:
            content = result.choices[0].message.content
        except (AttributeError, IndexError):
            content = None
        return content or None
