"""Coerce loosely-typed profile / context payloads into the engine's models.

Nothing here raises on bad input: unknown values fall back to defaults and
missing fields stay empty. Biographical fields are never filled in.
"""

from typing import Any

from ..models import Context, GenerateRequest, NotesContext, Preferences, Profile, QuestionSet
from .utils.constants import (
    DEFAULT_NOISE_LEVEL,
    DEFAULT_STAGE,
    DEFAULT_TIME_BUDGET_MINUTES,
    EVENT_CATEGORIES,
    EVENT_CATEGORY_ALIASES,
    LEGACY_CATEGORY_BY_STYLE,
    LEGACY_DEFAULTS,
    LEGACY_DEPTH_BY_LEVEL,
    STAGES,
)
from .utils.text_utils import clean_text

PROFILE_ALIASES = {
    "goals_next_period": ("goals_next_period", "goals_next_90_days", "goals"),
    "help_offers": ("help_offers", "help_offer"),
}

CONTEXT_ALIASES = {
    "event_label": ("event_label", "event_name"),
    "event_category": ("event_category", "event_type"),
    "time_budget_minutes": ("time_budget_minutes", "time_budget_min"),
    "conversation_stage": ("conversation_stage", "stage"),
}


def as_plain_dict(value: Any) -> dict[str, Any]:
    """Convert Pydantic models and mappings into plain dictionaries."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        dumped = model_dump()
        return dumped if isinstance(dumped, dict) else {}
    return {}


def _pick(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def _string_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return ()
    items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
    seen: dict[str, None] = {}
    for item in items:
        text = clean_text(item)
        if text and text not in seen:
            seen[text] = None
    return tuple(seen)


def _as_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _choice(value: Any, allowed: list[str], default: str | None) -> str | None:
    text = clean_text(value)
    if not text:
        return default
    key = text.lower()
    return key if key in allowed else default


def normalize_profile(raw: Any) -> Profile:
    data = as_plain_dict(raw)
    return Profile(
        name=clean_text(data.get("name")),
        role=clean_text(data.get("role")),
        company=clean_text(data.get("company")),
        school=clean_text(data.get("school")),
        interests=_string_tuple(data.get("interests")),
        goals_next_period=_string_tuple(_pick(data, PROFILE_ALIASES["goals_next_period"])),
        recent_win=clean_text(data.get("recent_win")),
        help_offers=_string_tuple(_pick(data, PROFILE_ALIASES["help_offers"])),
    )


def normalize_context(raw: Any) -> Context:
    data = as_plain_dict(raw)

    category = clean_text(_pick(data, CONTEXT_ALIASES["event_category"]))
    if category:
        category = EVENT_CATEGORY_ALIASES.get(category.lower(), category)

    noise = _as_int(data.get("noise_level"), DEFAULT_NOISE_LEVEL)
    budget = _as_int(_pick(data, CONTEXT_ALIASES["time_budget_minutes"]), DEFAULT_TIME_BUDGET_MINUTES)
    if budget <= 0:
        budget = DEFAULT_TIME_BUDGET_MINUTES

    return Context(
        event_label=clean_text(_pick(data, CONTEXT_ALIASES["event_label"])),
        event_category=_choice(category, EVENT_CATEGORIES, None),
        noise_level=min(3, max(0, noise)),
        time_budget_minutes=budget,
        conversation_stage=_choice(
            _pick(data, CONTEXT_ALIASES["conversation_stage"]), STAGES, DEFAULT_STAGE
        ),
        city=clean_text(data.get("city")),
    )


def normalize_preferences(raw: Any) -> Preferences:
    data = as_plain_dict(raw)
    return Preferences(
        allow_playful=_as_bool(data.get("allow_playful"), True),
        include_favorites=_as_bool(data.get("include_favorites"), True),
        temporal_focus=_choice(data.get("temporal_focus"), ["present", "near_future"], "present"),
        vulnerability_level=_choice(data.get("vulnerability_level"), ["low", "med", "high"], "low"),
    )


def normalize_notes(raw: Any) -> NotesContext:
    data = as_plain_dict(raw)
    return NotesContext(
        my_note_about_them=clean_text(data.get("my_note_about_them")),
        overlaps_detected=_string_tuple(data.get("overlaps_detected")),
    )


def normalize_request(
    payload: GenerateRequest | dict[str, Any],
) -> tuple[Profile, Profile | None, Context, Preferences, NotesContext]:
    if isinstance(payload, dict):
        payload = GenerateRequest.model_validate(payload)

    other = normalize_profile(payload.other) if payload.other is not None else None
    return (
        normalize_profile(payload.you),
        other,
        normalize_context(payload.context),
        normalize_preferences(payload.prefs),
        normalize_notes(payload.notes_context),
    )


def is_legacy_payload(body: dict[str, Any]) -> bool:
    return not body.get("mode")


def from_legacy_payload(body: dict[str, Any]) -> GenerateRequest:
    """Translate the old flat request body into a `generate_openers` request."""

    def value(key: str) -> Any:
        found = body.get(key)
        return LEGACY_DEFAULTS[key] if found is None else found

    shared = body.get("sharedInterests")
    contact_name = body.get("contactName")

    other = None
    if contact_name:
        other = {"name": contact_name, "role": body.get("contactProfile")}

    return GenerateRequest(
        mode="generate_openers",
        context={
            "event_type": value("eventType"),
            "noise_level": value("noiseLevel"),
            "time_budget_min": value("timeBudget"),
            "stage": value("stage"),
            "city": value("city"),
        },
        you={"name": "User", "interests": shared if isinstance(shared, list) else []},
        other=other,
        prefs={
            "allow_playful": True,
            "include_favorites": True,
            "temporal_focus": "present",
            "vulnerability_level": "low",
        },
    )


def to_legacy_questions(question_set: QuestionSet) -> list[dict[str, Any]]:
    return [
        {
            "text": q.text,
            "category": LEGACY_CATEGORY_BY_STYLE[q.style],
            "depth": LEGACY_DEPTH_BY_LEVEL[q.level],
            "follow_up": q.follow_up,
            "rationale": q.rationale,
            "research_tags": [q.style, q.level],
        }
        for q in question_set.questions
    ]
