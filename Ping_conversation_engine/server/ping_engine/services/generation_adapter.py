from typing import Awaitable, Callable

from ..config import debug_enabled
from ..errors import GenerationUnavailable, PingEngineError
from ..models import QuestionSet
from .openai_client import OpenAIResponsesClient
from .response_parsing import parse_question_set

# Anything that turns chat messages into raw model text: the OpenAI client in
# production, a plain async function in tests.
Backend = Callable[[list[dict[str, str]]], Awaitable[str]]


class GenerationAdapter:
    """One backend call per invocation; no retries, no substitute content."""

    def __init__(self, backend: Backend | None = None) -> None:
        self.backend = backend or OpenAIResponsesClient().complete

    async def fetch(self, messages: list[dict[str, str]]) -> str:
        try:
            content = await self.backend(messages)
        except PingEngineError:
            raise
        except Exception as exc:
            raise GenerationUnavailable(
                f"Generation backend failed: {type(exc).__name__}: {exc}", stage="backend_call"
            ) from exc

        if debug_enabled("OPENAI_DEBUG"):
            print("Model raw content:", content)
        return content or ""

    async def generate(self, messages: list[dict[str, str]]) -> QuestionSet:
        return parse_question_set(await self.fetch(messages))
