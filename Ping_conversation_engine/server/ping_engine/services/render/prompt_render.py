import json
from typing import Any

from ...models import Context, NotesContext, OverlapSummary, Preferences, Profile
from ..utils.constants import (
    FOLLOW_UP_PLACEHOLDER,
    LOUD_NOISE_LEVEL,
    MAX_QUESTIONS,
    MAX_WORDS_DEFAULT,
    MAX_WORDS_LOUD,
    MIN_QUESTIONS,
    RED_ZONE_TOPICS,
    TIME_PRESSED_MINUTES,
)
from ..utils.debug import build_debug_log

MODE_FRAMING = {
    "generate_openers": (
        "You generate conversation openers for two people meeting in person. "
        "The person asking is YOU; the person being asked is OTHER."
    ),
    "followup_nudge": (
        "You write follow-up nudges: short questions YOU can send to OTHER after they already met, "
        "picking the thread back up without pressure."
    ),
    "event_digest_copy": (
        "You write questions for an event digest: openers YOU can carry into the event described in CONTEXT, "
        "usable with anyone in the room."
    ),
    "guest_view_copy": (
        "You write questions shown on a guest view: openers a visitor can ask YOU, "
        "based only on YOU's public profile."
    ),
}

STAGE_GUIDANCE = {
    "icebreaker": "Stage=icebreaker: focus on discovery questions plus one opportunity_probe.",
    "warm": "Stage=warm: bridge questions are welcome; catalyst only if it builds on a stated goal.",
    "deep": "Stage=deep: any level fits; 'why' questions are allowed when comfort is explicit.",
}

OUTPUT_SCHEMA_LINES = [
    "{",
    '  "summary": {',
    '    "detected_commonalities": ["string"],',
    '    "detected_complements": ["string"],',
    '    "context_notes": "string"',
    "  },",
    '  "questions": [',
    "    {",
    '      "level": "discovery" | "bridge" | "catalyst",',
    '      "style": "soft_curiosity" | "shared_interest" | "opportunity_probe" | "playful_personal",',
    '      "text": "string",',
    '      "rationale": "string",',
    f'      "follow_up": "string with {FOLLOW_UP_PLACEHOLDER}",',
    '      "flags": {"loud_safe": true, "time_safe": true, "boundary_ok": true}',
    "    }",
    "  ],",
    '  "top_picks": [0, 1, 2]',
    "}",
]


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


def _model_dict(model: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


def build_instruction_block(mode: str, context: Context, prefs: Preferences) -> str:
    loud = context.noise_level >= LOUD_NOISE_LEVEL
    time_pressed = context.time_budget_minutes <= TIME_PRESSED_MINUTES
    word_cap = MAX_WORDS_LOUD if loud else MAX_WORDS_DEFAULT

    if prefs.allow_playful:
        playful_rule = "- At most ONE playful_personal question."
    else:
        playful_rule = "- Do NOT write any playful_personal question."

    lines = [
        "ROLE: You are the Ping! conversation engine.",
        MODE_FRAMING.get(mode, MODE_FRAMING["generate_openers"]),
        "",
        "PHILOSOPHY:",
        "- Curiosity over agenda. Human-first, non-cringey, inclusive.",
        "- Escalation ladder: ask discovery-level questions early, escalate to catalyst-level only with "
        "positive signal, reserve deep 'why' questions for warm/deep stages.",
        "- Ask WHAT/HOW early; WHY later.",
        f"- Never touch red-zone topics: {', '.join(RED_ZONE_TOPICS)}.",
        "- Do NOT fabricate details. Use only facts stated in the profiles and notes.",
        "- Must work even if OTHER is not a Ping! user.",
        "",
        "RULES:",
        f"- Produce between {MIN_QUESTIONS} and {MAX_QUESTIONS} questions.",
        "- Include at least ONE opportunity_probe that offers help non-instrumentally.",
        playful_rule,
        "- Use a mix of styles: soft_curiosity, shared_interest, opportunity_probe"
        + (", playful_personal." if prefs.allow_playful else "."),
        "- Use a mix of levels: discovery, bridge, catalyst.",
        "- One question per line; never stack questions.",
        f"- Every question text is at most {word_cap} words.",
        f"- Every follow_up references {FOLLOW_UP_PLACEHOLDER} literally, as a placeholder.",
        STAGE_GUIDANCE[context.conversation_stage],
    ]
    if time_pressed:
        lines.append("- Time is very short: prefer discovery questions.")
    lines.extend(["", "OUTPUT: Valid JSON only matching the schema in the task. No prose, no markdown."])
    return "\n".join(lines)


def build_task_block(
    context: Context,
    you: Profile,
    other: Profile | None,
    prefs: Preferences,
    notes: NotesContext,
    overlaps: OverlapSummary,
) -> str:
    return "\n".join(
        [
            "Generate questions for this context.",
            "",
            f"CONTEXT: {_dump(_model_dict(context))}",
            f"YOU: {_dump(_model_dict(you))}",
            f"OTHER: {_dump(_model_dict(other)) if other is not None else '(none: single-profile mode)'}",
            f"PREFERENCES: {_dump(_model_dict(prefs))}",
            f"NOTES: {_dump(_model_dict(notes))}",
            "",
            "DETECTED:",
            f"- Commonalities: {', '.join(overlaps.detected_commonalities) or 'none'}",
            f"- Complements: {', '.join(overlaps.detected_complements) or 'none'}",
            f"- Context notes: {overlaps.context_notes}",
            "",
            "OUTPUT_JSON_SCHEMA (shape):",
            *OUTPUT_SCHEMA_LINES,
        ]
    )


def build_prompt_context(
    mode: str,
    context: Context,
    you: Profile,
    other: Profile | None,
    prefs: Preferences,
    notes: NotesContext,
    overlaps: OverlapSummary,
    request_id: str = "",
    model_name: str = "",
) -> tuple[list[dict[str, str]], dict[str, Any]]:
    system = build_instruction_block(mode, context, prefs)
    user = build_task_block(context, you, other, prefs, notes, overlaps)
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
    debug_log = build_debug_log(
        request_id=request_id,
        model_name=model_name,
        mode=mode,
        context=_model_dict(context),
        you=_model_dict(you),
        other=_model_dict(other) if other is not None else None,
        prefs=_model_dict(prefs),
        overlaps=_model_dict(overlaps),
    )
    return messages, debug_log


def build_prompt(
    mode: str,
    context: Context,
    you: Profile,
    other: Profile | None,
    prefs: Preferences,
    notes: NotesContext,
    overlaps: OverlapSummary,
) -> list[dict[str, str]]:
    messages, _ = build_prompt_context(mode, context, you, other, prefs, notes, overlaps)
    return messages
