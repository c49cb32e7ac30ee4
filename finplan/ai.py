"""Thin client for OpenAI-compatible chat completion APIs (OpenRouter by default)."""

from __future__ import annotations

import json
import logging
from typing import Any

import openai
from openai import OpenAI
from pydantic import BaseModel

from finplan.settings import settings

logger = logging.getLogger(__name__)

JSONSchema = dict[str, Any]


class AIServiceError(RuntimeError):
    pass


class AIUsage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class AIResponse(BaseModel):
    text: str
    model: str
    usage: AIUsage | None = None


def _strip_code_fence(content: str) -> str:
    """Some models wrap JSON answers in a markdown fence; unwrap it."""
    stripped = content.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()


class AIClient:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: OpenAI | None = None,
    ) -> None:
        key = api_key or settings.ai_api_key
        if not key and client is None:
            raise AIServiceError("Missing AI API key")
        self.model = model or settings.ai_model
        self.client = client or OpenAI(
            api_key=key,
            base_url=settings.ai_base_url,
            timeout=settings.ai_timeout,
            max_retries=0,
            default_headers={"HTTP-Referer": settings.app_url, "X-Title": settings.app_name},
        )

    def generate(self, prompt: str, model: str | None = None) -> AIResponse:
        if not prompt or not prompt.strip():
            raise AIServiceError("Prompt cannot be empty")
        return self._complete(prompt, model or self.model)

    def generate_structured(self, prompt: str, schema: JSONSchema, model: str | None = None) -> dict[str, Any]:
        """Ask for a JSON answer matching ``schema`` and return it parsed."""
        if not prompt or not prompt.strip():
            raise AIServiceError("Prompt cannot be empty")
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema.get("title", "response"), "schema": schema, "strict": True},
        }
        response = self._complete(prompt, model or self.model, response_format=response_format)
        try:
            data = json.loads(_strip_code_fence(response.text))
        except ValueError as e:
            raise AIServiceError(f"AI response is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AIServiceError("AI response is not a JSON object")
        missing = [key for key in schema.get("required", []) if key not in data]
        if missing:
            raise AIServiceError(f"AI response is missing fields: {', '.join(missing)}")
        return data

    def _complete(self, prompt: str, model: str, **extra: Any) -> AIResponse:
        logger.info("Requesting completion model=%s prompt_chars=%d", model, len(prompt))
        try:
            completion = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                **extra,
            )
        except openai.APITimeoutError as e:
            raise AIServiceError("Request timeout - AI service took too long to respond") from e
        except openai.APIStatusError as e:
            raise AIServiceError(f"AI API error: {e.status_code} - {e.message}") from e
        except openai.OpenAIError as e:
            raise AIServiceError(f"Failed to generate AI response: {e}") from e
        response = self._map_response(completion)
        logger.debug("Completion received model=%s usage=%s", response.model, response.usage)
        return response

    @staticmethod
    def _map_response(completion: Any) -> AIResponse:
        choices = getattr(completion, "choices", None)
        if not choices:
            raise AIServiceError("Invalid response format from AI API")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not isinstance(getattr(completion, "model", None), str):
            raise AIServiceError("Invalid response format from AI API")
        usage = getattr(completion, "usage", None)
        return AIResponse(
            text=content,
            model=completion.model,
            usage=AIUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
            if usage
            else None,
        )
