from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from finplan.ai import AIClient, AIServiceError, _strip_code_fence


def _completion(content, model="mistralai/mistral-7b-instruct", usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        model=model,
        usage=usage,
    )


SCHEMA = {
    "title": "planning_generation",
    "type": "object",
    "properties": {"name": {"type": "string"}, "plan": {"type": "string"}},
    "required": ["name", "plan"],
}


class TestStripCodeFence:
    def test_plain(self):
        assert _strip_code_fence(' {"a": 1} ') == '{"a": 1}'

    def test_fenced(self):
        assert _strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'


class TestAIClient:
    def setup_method(self):
        self.openai_client = MagicMock()
        self.client = AIClient(model="test-model", client=self.openai_client)

    def test_missing_key(self):
        with patch("finplan.ai.settings") as mock_settings:
            mock_settings.ai_api_key = ""
            with pytest.raises(AIServiceError, match="Missing AI API key"):
                AIClient()

    def test_builds_openai_client_from_settings(self):
        with patch("finplan.ai.OpenAI") as mock_openai, patch("finplan.ai.settings") as mock_settings:
            mock_settings.ai_api_key = "key"
            mock_settings.ai_base_url = "https://openrouter.ai/api/v1"
            mock_settings.ai_timeout = 12.0
            AIClient()
        kwargs = mock_openai.call_args.kwargs
        assert kwargs["api_key"] == "key"
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["timeout"] == 12.0

    def test_generate(self):
        usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        self.openai_client.chat.completions.create.return_value = _completion("Olá", usage=usage)

        response = self.client.generate("Diga olá")

        assert response.text == "Olá"
        assert response.usage.total_tokens == 15
        kwargs = self.openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"] == [{"role": "user", "content": "Diga olá"}]

    def test_generate_model_override(self):
        self.openai_client.chat.completions.create.return_value = _completion("ok", model="other")
        assert self.client.generate("x", model="other").model == "other"

    @pytest.mark.parametrize("prompt", ["", "   "])
    def test_empty_prompt(self, prompt):
        with pytest.raises(AIServiceError, match="empty"):
            self.client.generate(prompt)
        self.openai_client.chat.completions.create.assert_not_called()

    def test_invalid_response_format(self):
        self.openai_client.chat.completions.create.return_value = SimpleNamespace(choices=[], model="m", usage=None)
        with pytest.raises(AIServiceError, match="Invalid response format"):
            self.client.generate("x")

    def test_non_string_content(self):
        self.openai_client.chat.completions.create.return_value = _completion(None)
        with pytest.raises(AIServiceError):
            self.client.generate("x")

    def test_timeout(self):
        request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
        self.openai_client.chat.completions.create.side_effect = openai.APITimeoutError(request=request)
        with pytest.raises(AIServiceError, match="timeout"):
            self.client.generate("x")

    def test_status_error(self):
        request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
        response = httpx.Response(429, request=request)
        self.openai_client.chat.completions.create.side_effect = openai.RateLimitError(
            "rate limited", response=response, body=None
        )
        with pytest.raises(AIServiceError, match="429"):
            self.client.generate("x")

    def test_generate_structured(self):
        self.openai_client.chat.completions.create.return_value = _completion('{"name": "Viagem", "plan": "Guardar"}')

        data = self.client.generate_structured("Planeje", SCHEMA)

        assert data == {"name": "Viagem", "plan": "Guardar"}
        response_format = self.openai_client.chat.completions.create.call_args.kwargs["response_format"]
        assert response_format["type"] == "json_schema"
        assert response_format["json_schema"]["name"] == "planning_generation"
        assert response_format["json_schema"]["schema"] is SCHEMA

    def test_generate_structured_fenced(self):
        self.openai_client.chat.completions.create.return_value = _completion(
            '```json\n{"name": "Viagem", "plan": "Guardar"}\n```'
        )
        assert self.client.generate_structured("Planeje", SCHEMA)["name"] == "Viagem"

    def test_generate_structured_invalid_json(self):
        self.openai_client.chat.completions.create.return_value = _completion("not json")
        with pytest.raises(AIServiceError, match="not valid JSON"):
            self.client.generate_structured("Planeje", SCHEMA)

    def test_generate_structured_not_object(self):
        self.openai_client.chat.completions.create.return_value = _completion("[1, 2]")
        with pytest.raises(AIServiceError, match="not a JSON object"):
            self.client.generate_structured("Planeje", SCHEMA)

    def test_generate_structured_missing_fields(self):
        self.openai_client.chat.completions.create.return_value = _completion('{"name": "Viagem"}')
        with pytest.raises(AIServiceError, match="plan"):
            self.client.generate_structured("Planeje", SCHEMA)
