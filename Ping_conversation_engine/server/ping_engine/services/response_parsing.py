import json
import re
from typing import Any

from pydantic import ValidationError

from ..errors import MalformedGenerationOutput
from ..models import QuestionSet


def parse_json_content(content: str) -> dict[str, Any] | None:
    if not content:
        return None
    candidate = content.strip()
    fence = re.search(r"```(?:json)?\s*([\s\S]*?)```", candidate, re.IGNORECASE)
    if fence:
        candidate = fence.group(1).strip()
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        start = candidate.find("{")
        end = candidate.rfind("}")
        if start == -1 or end == -1 or end <= start:
            return None
        try:
            parsed = json.loads(candidate[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def parse_question_set(content: str) -> QuestionSet:
    """Turn raw model text into an unvalidated candidate question set."""
    raw = parse_json_content(content)
    if raw is None:
        raise MalformedGenerationOutput("Model did not return JSON", stage="parse_json")

    questions = raw.get("questions")
    if not isinstance(questions, list):
        raise MalformedGenerationOutput("Response has no questions list", stage="parse_schema")
    if not all(isinstance(item, dict) for item in questions):
        raise MalformedGenerationOutput("Question entries must be objects", stage="parse_schema")
    raw = {**raw, "questions": [q for q in questions if str(q.get("text") or "").strip()]}
    if not isinstance(raw.get("summary", {}), dict):
        raw = {**raw, "summary": {}}
    if not isinstance(raw.get("top_picks", []), list):
        raw = {**raw, "top_picks": []}

    try:
        return QuestionSet.model_validate(raw)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise MalformedGenerationOutput(
            f"Response does not match the question set schema: {', '.join(fields)}",
            stage="parse_schema",
        ) from exc


def extract_response_text(data: dict[str, Any]) -> tuple[str, str]:
    output = data.get("output", []) if isinstance(data, dict) else []
    texts: list[str] = []
    refusals: list[str] = []
    for item in output or []:
        if item.get("type") == "message":
            for part in item.get("content", []):
                if part.get("type") == "output_text":
                    texts.append(part.get("text", ""))
                elif part.get("type") == "refusal":
                    refusals.append(part.get("refusal", ""))
        elif item.get("type") == "refusal":
            refusals.append(item.get("refusal", ""))
    return "\n".join([t for t in texts if t]).strip(), "\n".join(
        [r for r in refusals if r]
    ).strip()
