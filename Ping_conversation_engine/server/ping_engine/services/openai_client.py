from dataclasses import dataclass
from typing import Any

import httpx

from ..config import (
    GENERATION_TEMPERATURE,
    GENERATION_TIMEOUT_SECONDS,
    MAX_OUTPUT_TOKENS,
    MODEL_NAME,
    OPENAI_API_URL,
    get_api_key,
)
from ..errors import GenerationUnavailable, MalformedGenerationOutput
from .response_parsing import extract_response_text
from .utils.constants import RESPONSE_SCHEMA


@dataclass
class OpenAIResponsesResult:
    status_code: int
    body_text: str
    data: dict[str, Any] | None


class OpenAIResponsesClient:
    def __init__(
        self,
        api_url: str = OPENAI_API_URL,
        model_name: str = MODEL_NAME,
        timeout_seconds: float = GENERATION_TIMEOUT_SECONDS,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.api_key = api_key
        self.transport = transport

    async def generate_structured_questions(
        self,
        *,
        api_key: str,
        messages: list[dict[str, str]],
        temperature: float = GENERATION_TEMPERATURE,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
    ) -> OpenAIResponsesResult:
        system_msg, user_msg = _split_messages(messages)
        input_items = _build_input_items(messages, user_msg)

        request_body = {
            "model": self.model_name,
            "input": input_items,
            "instructions": system_msg,
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
            "text": {"format": RESPONSE_SCHEMA},
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
            response = await client.post(self.api_url, headers=headers, json=request_body)

        data: dict[str, Any] | None = None
        try:
            data = response.json()
        except ValueError:
            data = None

        return OpenAIResponsesResult(
            status_code=response.status_code,
            body_text=response.text,
            data=data,
        )

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Backend callable: messages in, raw model text out."""
        api_key = self.api_key or get_api_key()
        if not api_key:
            raise GenerationUnavailable("OPENAI_API_KEY is not set", stage="config")

        try:
            result = await self.generate_structured_questions(api_key=api_key, messages=messages)
        except httpx.HTTPError as exc:
            raise GenerationUnavailable(
                f"OpenAI request failed: {type(exc).__name__}: {exc}", stage="openai_request"
            ) from exc

        if result.status_code >= 400:
            raise GenerationUnavailable(
                f"OpenAI API error: {result.status_code} - {result.body_text[:500]}",
                stage="openai_call",
            )

        data = result.data or {}
        content, refusal = extract_response_text(data)
        if refusal:
            raise MalformedGenerationOutput(refusal, stage="openai_refusal")
        if not content:
            content = data.get("output_text", "") if isinstance(data, dict) else ""
        if not content:
            raise MalformedGenerationOutput("Empty response from model", stage="openai_empty")
        return content


def _split_messages(messages: list[dict[str, str]]) -> tuple[str, str]:
    system_msg = ""
    user_msg = ""
    for msg in messages:
        role = msg.get("role")
        if role == "system":
            system_msg = msg.get("content", "")
        elif role == "user":
            user_msg = msg.get("content", "")
    return system_msg, user_msg


def _build_input_items(messages: list[dict[str, str]], user_msg: str) -> list[dict[str, str]]:
    if user_msg:
        return [{"role": "user", "content": user_msg}]

    non_system = [
        {"role": msg.get("role", "user"), "content": msg.get("content", "")}
        for msg in messages
        if msg.get("role") != "system"
    ]
    return non_system or [{"role": "user", "content": ""}]
