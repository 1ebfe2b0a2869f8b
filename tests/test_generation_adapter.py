"""
Unit tests for the generation adapter: response parsing and the OpenAI client.
"""
import asyncio
import json

import httpx
import pytest

from ping_engine.errors import GenerationUnavailable, MalformedGenerationOutput
from ping_engine.services.generation_adapter import GenerationAdapter
from ping_engine.services.openai_client import OpenAIResponsesClient
from ping_engine.services.response_parsing import (
    extract_response_text,
    parse_json_content,
    parse_question_set,
)

MESSAGES = [
    {"role": "system", "content": "rules"},
    {"role": "user", "content": "task"},
]


def _responses_body(text):
    return {
        "output": [
            {"type": "message", "content": [{"type": "output_text", "text": text}]},
        ]
    }


class TestResponseParsing:
    def test_plain_and_fenced_json(self):
        assert parse_json_content('{"a": 1}') == {"a": 1}
        assert parse_json_content('```json\n{"a": 1}\n```') == {"a": 1}
        assert parse_json_content('Sure! {"a": 1} hope that helps') == {"a": 1}

    def test_not_json(self):
        assert parse_json_content("no json here") is None
        assert parse_json_content("[1, 2]") is None
        assert parse_json_content("") is None

    def test_parse_question_set_accepts_original_spellings(self, valid_questions):
        raw = [dict(q) for q in valid_questions]
        raw[0]["level"] = "L1_discovery"
        raw[1]["level"] = "L2_bridge"
        raw[1]["why_it_works"] = raw[1].pop("rationale")
        candidate = parse_question_set(json.dumps({"questions": raw}))
        assert candidate.questions[0].level == "discovery"
        assert candidate.questions[1].level == "bridge"
        assert candidate.questions[1].rationale == "Open and low-stakes."

    def test_parse_question_set_skips_empty_text(self, question):
        content = json.dumps({"questions": [question(text="  "), question("opportunity_probe")]})
        assert len(parse_question_set(content).questions) == 1

    def test_non_json_is_malformed(self):
        with pytest.raises(MalformedGenerationOutput):
            parse_question_set("I cannot help with that.")

    def test_missing_questions_is_malformed(self):
        with pytest.raises(MalformedGenerationOutput):
            parse_question_set('{"summary": {}}')

    def test_unknown_style_is_malformed(self, question):
        with pytest.raises(MalformedGenerationOutput):
            parse_question_set(json.dumps({"questions": [question(style="flattery")]}))

    def test_extract_response_text(self):
        text, refusal = extract_response_text(_responses_body('{"questions": []}'))
        assert text == '{"questions": []}'
        assert refusal == ""
        _, refusal = extract_response_text({"output": [{"type": "refusal", "refusal": "no"}]})
        assert refusal == "no"


class TestOpenAIResponsesClient:
    def _client(self, handler, api_key="sk-test"):
        return OpenAIResponsesClient(
            api_url="https://example.test/v1/responses",
            model_name="test-model",
            api_key=api_key,
            transport=httpx.MockTransport(handler),
        )

    def test_complete_returns_text_and_sends_schema(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=_responses_body('{"questions": []}'))

        content = asyncio.run(self._client(handler).complete(MESSAGES))
        assert content == '{"questions": []}'
        body = seen[0]
        assert body["model"] == "test-model"
        assert body["instructions"] == "rules"
        assert body["input"] == [{"role": "user", "content": "task"}]
        assert body["text"]["format"]["name"] == "ping_question_set"

    def test_schema_rejection_is_not_retried(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content)["text"]["format"]["type"])
            if len(seen) == 1:
                return httpx.Response(400, text="Invalid json_schema")
            return httpx.Response(200, json=_responses_body('{"questions": []}'))

        with pytest.raises(GenerationUnavailable) as exc_info:
            asyncio.run(self._client(handler).complete(MESSAGES))
        assert seen == ["json_schema"]
        assert exc_info.value.stage == "openai_call"

    def test_http_error_status(self):
        client = self._client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(GenerationUnavailable) as exc_info:
            asyncio.run(client.complete(MESSAGES))
        assert "500" in str(exc_info.value)

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(GenerationUnavailable):
            asyncio.run(self._client(handler).complete(MESSAGES))

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = self._client(lambda request: httpx.Response(200, json={}), api_key=None)
        with pytest.raises(GenerationUnavailable) as exc_info:
            asyncio.run(client.complete(MESSAGES))
        assert exc_info.value.stage == "config"

    def test_refusal_is_malformed(self):
        body = {"output": [{"type": "refusal", "refusal": "I can't"}]}
        client = self._client(lambda request: httpx.Response(200, json=body))
        with pytest.raises(MalformedGenerationOutput):
            asyncio.run(client.complete(MESSAGES))

    def test_empty_output_is_malformed(self):
        client = self._client(lambda request: httpx.Response(200, json={"output": []}))
        with pytest.raises(MalformedGenerationOutput):
            asyncio.run(client.complete(MESSAGES))


class TestGenerationAdapter:
    def test_backend_exception_becomes_unavailable(self):
        async def backend(messages):
            raise ConnectionError("down")

        with pytest.raises(GenerationUnavailable):
            asyncio.run(GenerationAdapter(backend).generate(MESSAGES))

    def test_generate_parses_backend_output(self, fake_backend, model_content, valid_questions):
        backend = fake_backend(model_content(valid_questions))
        candidate = asyncio.run(GenerationAdapter(backend).generate(MESSAGES))
        assert len(candidate.questions) == 4
        assert backend.calls == [MESSAGES]

    def test_malformed_backend_output(self, fake_backend):
        with pytest.raises(MalformedGenerationOutput):
            asyncio.run(GenerationAdapter(fake_backend("not json")).generate(MESSAGES))
