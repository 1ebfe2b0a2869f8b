from ...models import Context, Preferences, Question, QuestionSet
from ..utils.constants import MAX_TOP_PICKS

STAGE_WEIGHTS = {
    "icebreaker": {"discovery": 3, "bridge": 1, "catalyst": 0},
    "warm": {"discovery": 1, "bridge": 3, "catalyst": 1},
    "deep": {"discovery": 2, "bridge": 2, "catalyst": 2},
}

BASE_STYLE_WEIGHTS = {
    "opportunity_probe": 2,
    "shared_interest": 0,
    "soft_curiosity": 1,
    "playful_personal": 0,
}


def stage_weight(level: str, stage: str) -> int:
    return STAGE_WEIGHTS.get(stage, STAGE_WEIGHTS["deep"]).get(level, 0)


def style_weight(style: str, prefs: Preferences, has_commonalities: bool) -> int:
    score = BASE_STYLE_WEIGHTS.get(style, 0)
    if style == "shared_interest" and has_commonalities:
        score += 2
    if style == "opportunity_probe" and prefs.temporal_focus == "near_future":
        score += 1
    if style == "playful_personal" and prefs.vulnerability_level != "low":
        score += 1
    return score


def score_question(question: Question, context: Context, prefs: Preferences, has_commonalities: bool) -> int:
    score = stage_weight(question.level, context.conversation_stage)
    score += style_weight(question.style, prefs, has_commonalities)
    if not question.flags.time_safe:
        score -= 1
    return score


def select_top_picks(question_set: QuestionSet, context: Context, prefs: Preferences) -> list[int]:
    has_commonalities = bool(question_set.summary.detected_commonalities)
    scores = [
        score_question(q, context, prefs, has_commonalities) for q in question_set.questions
    ]
    # sorted() is stable, so equal scores keep list order.
    ranked = sorted(range(len(scores)), key=lambda i: scores[i], reverse=True)
    return ranked[:MAX_TOP_PICKS]


def rank_questions(question_set: QuestionSet, context: Context, prefs: Preferences) -> QuestionSet:
    return question_set.model_copy(
        update={"top_picks": select_top_picks(question_set, context, prefs)}
    )
