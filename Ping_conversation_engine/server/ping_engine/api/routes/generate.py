from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ...errors import PingEngineError
from ...models import GenerateRequest, LegacyGenerateResponse, QuestionSet
from ...services.generation_service import GenerationService
from ...services.normalizer import from_legacy_payload, is_legacy_payload, to_legacy_questions

router = APIRouter()
generation_service = GenerationService()


def get_generation_service() -> GenerationService:
    return generation_service


@router.post("/generate-questions", response_model=QuestionSet)
async def generate_questions(payload: GenerateRequest) -> QuestionSet:
    return await get_generation_service().generate(payload)


@router.post("/generate-chat-questions", response_model=LegacyGenerateResponse)
async def generate_chat_questions(body: dict[str, Any] = Body(...)):
    """Accepts both the current request body and the old flat one."""
    try:
        if is_legacy_payload(body):
            payload = from_legacy_payload(body)
        else:
            payload = GenerateRequest.model_validate(body)
        result = await get_generation_service().generate(payload)
    except (PingEngineError, ValidationError) as exc:
        # Old clients expect an explicit empty list, never placeholder questions.
        return JSONResponse(status_code=500, content={"error": str(exc), "questions": []})

    return LegacyGenerateResponse(questions=to_legacy_questions(result), ping_result=result)
