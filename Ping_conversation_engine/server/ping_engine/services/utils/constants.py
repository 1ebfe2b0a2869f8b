RED_ZONE_TOPICS = ["politics", "religion", "health", "trauma", "salary", "appearance"]

LOUD_NOISE_LEVEL = 2
MAX_WORDS_LOUD = 14
MAX_WORDS_DEFAULT = 20
TIME_PRESSED_MINUTES = 2

MIN_QUESTIONS = 3
MAX_QUESTIONS = 5
MAX_TOP_PICKS = 3

FOLLOW_UP_PLACEHOLDER = "{{their_last_point}}"

QUESTION_LEVELS = ["discovery", "bridge", "catalyst"]
QUESTION_STYLES = ["soft_curiosity", "shared_interest", "opportunity_probe", "playful_personal"]
EVENT_CATEGORIES = ["mixer", "career_fair", "conference", "class", "social"]
STAGES = ["icebreaker", "warm", "deep"]

EVENT_CATEGORY_ALIASES = {
    "startup_mixer": "mixer",
    "careerfair": "career_fair",
    "career fair": "career_fair",
}

DEFAULT_NOISE_LEVEL = 0
DEFAULT_TIME_BUDGET_MINUTES = 15
DEFAULT_STAGE = "icebreaker"

# Defaults applied when the old flat request body is converted.
LEGACY_DEFAULTS = {
    "eventType": "conference",
    "noiseLevel": 1,
    "timeBudget": 15,
    "stage": "icebreaker",
    "city": "Boston",
}

LEGACY_CATEGORY_BY_STYLE = {
    "opportunity_probe": "opportunity",
    "playful_personal": "fun",
    "shared_interest": "interests",
    "soft_curiosity": "project",
}

LEGACY_DEPTH_BY_LEVEL = {"discovery": 1, "bridge": 2, "catalyst": 3}

_FLAGS_SCHEMA = {
    "type": "object",
    "properties": {
        "loud_safe": {"type": "boolean"},
        "time_safe": {"type": "boolean"},
        "boundary_ok": {"type": "boolean"},
    },
    "required": ["loud_safe", "time_safe", "boundary_ok"],
    "additionalProperties": False,
}

RESPONSE_SCHEMA = {
    "type": "json_schema",
    "name": "ping_question_set",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "summary": {
                "type": "object",
                "properties": {
                    "detected_commonalities": {"type": "array", "items": {"type": "string"}},
                    "detected_complements": {"type": "array", "items": {"type": "string"}},
                    "context_notes": {"type": "string"},
                },
                "required": ["detected_commonalities", "detected_complements", "context_notes"],
                "additionalProperties": False,
            },
            "questions": {
                "type": "array",
                "minItems": MIN_QUESTIONS,
                "maxItems": MAX_QUESTIONS,
                "items": {
                    "type": "object",
                    "properties": {
                        "level": {"type": "string", "enum": QUESTION_LEVELS},
                        "style": {"type": "string", "enum": QUESTION_STYLES},
                        "text": {"type": "string"},
                        "rationale": {"type": "string"},
                        "follow_up": {"type": "string"},
                        "flags": _FLAGS_SCHEMA,
                    },
                    "required": ["level", "style", "text", "rationale", "follow_up", "flags"],
                    "additionalProperties": False,
                },
            },
            "top_picks": {"type": "array", "items": {"type": "integer"}},
        },
        "required": ["summary", "questions", "top_picks"],
        "additionalProperties": False,
    },
}
