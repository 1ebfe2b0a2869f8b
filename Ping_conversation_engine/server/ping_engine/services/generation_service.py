import json
import time
import uuid
from pathlib import Path
from typing import Any

from ..config import MODEL_NAME, REQUEST_LOG_PATH, debug_enabled
from ..errors import PingEngineError
from ..logging_utils import append_ndjson, new_log_record, record_error
from ..models import GenerateRequest, QuestionSet
from .generation_adapter import Backend, GenerationAdapter
from .normalizer import normalize_request
from .planning.overlaps import build_overlap_summary
from .planning.ranking import rank_questions
from .render.prompt_render import build_prompt_context
from .utils.validation import validate_question_set


class GenerationService:
    """Runs normalize -> detect -> compose -> generate -> validate -> rank.

    Holds configuration only; every call builds its own records, so one
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        adapter: GenerationAdapter | None = None,
        model_name: str = MODEL_NAME,
        log_path: Path | None = REQUEST_LOG_PATH,
    ) -> None:
        self.adapter = adapter or GenerationAdapter()
        self.model_name = model_name
        self.log_path = log_path

    async def generate(self, payload: GenerateRequest | dict[str, Any]) -> QuestionSet:
        start_time = time.perf_counter()
        request_id = uuid.uuid4().hex
        if isinstance(payload, dict):
            payload = GenerateRequest.model_validate(payload)
        log_record = new_log_record(
            request_id, "generate_questions", mode=payload.mode, model_name=self.model_name
        )

        stage = "normalize"
        try:
            you, other, context, prefs, notes = normalize_request(payload)

            stage = "detect_overlaps"
            overlaps = build_overlap_summary(you, other, context)

            stage = "compose_prompt"
            messages, debug_log = build_prompt_context(
                payload.mode,
                context,
                you,
                other,
                prefs,
                notes,
                overlaps,
                request_id=request_id,
                model_name=self.model_name,
            )
            log_record["debug"] = debug_log
            log_record["messages"] = messages
            if debug_enabled("PROMPT_DEBUG"):
                print(json.dumps(debug_log, ensure_ascii=True))

            stage = "generate"
            candidate = await self.adapter.generate(messages)

            stage = "validate"
            result = validate_question_set(candidate, context, prefs, overlaps)
            log_record["violations"] = result.violations

            stage = "rank"
            question_set = rank_questions(result.question_set, context, prefs)
        except Exception as exc:
            record_error(log_record, exc.stage if isinstance(exc, PingEngineError) else stage, exc)
            log_record["latency_ms"] = int((time.perf_counter() - start_time) * 1000)
            append_ndjson(self.log_path, log_record)
            raise

        # Shape only; question text is not persisted.
        log_record["questions"] = [
            {"level": q.level, "style": q.style, "flags": q.flags.model_dump()}
            for q in question_set.questions
        ]
        log_record["top_picks"] = question_set.top_picks
        log_record["latency_ms"] = int((time.perf_counter() - start_time) * 1000)
        log_record["status"] = "ok"
        append_ndjson(self.log_path, log_record)
        return question_set


async def generate_questions(
    mode: str,
    context: Any,
    self_profile: Any,
    other_profile: Any = None,
    preferences: Any = None,
    notes_context: Any = None,
    *,
    service: GenerationService | None = None,
    backend: Backend | None = None,
) -> QuestionSet:
    """Build one ranked, validated question set for a conversation.

    Pass either a ready `service` or a `backend` to build one around, not both.
    """
    if service is not None and backend is not None:
        raise ValueError("pass either service or backend, not both")
    if service is None:
        service = GenerationService(adapter=GenerationAdapter(backend))
    request = GenerateRequest(
        mode=mode,
        context=_as_mapping(context),
        you=_as_mapping(self_profile),
        other=_as_mapping(other_profile) if other_profile is not None else None,
        prefs=_as_mapping(preferences) if preferences is not None else None,
        notes_context=_as_mapping(notes_context) if notes_context is not None else None,
    )
    return await service.generate(request)


def _as_mapping(value: Any) -> dict[str, Any]:
    if hasattr(value, "model_dump"):
        return value.model_dump()
    return dict(value or {})
