from dataclasses import dataclass, field
from typing import Any

from ...errors import ConstraintViolation, InsufficientValidQuestions
from ...models import Context, OverlapSummary, Preferences, Question, QuestionFlags, QuestionSet
from .constants import (
    FOLLOW_UP_PLACEHOLDER,
    LOUD_NOISE_LEVEL,
    MAX_QUESTIONS,
    MAX_WORDS_LOUD,
    MIN_QUESTIONS,
    RED_ZONE_TOPICS,
    TIME_PRESSED_MINUTES,
)
from .text_utils import contains_any, truncate_words, word_count


@dataclass
class ValidationResult:
    question_set: QuestionSet
    violations: list[dict[str, Any]] = field(default_factory=list)


def red_zone_hits(text: str) -> list[str]:
    return contains_any(text, RED_ZONE_TOPICS)


def is_boundary_ok(text: str) -> bool:
    return not red_zone_hits(text)


def apply_loud_limit(text: str, context: Context) -> tuple[str, bool]:
    if context.noise_level < LOUD_NOISE_LEVEL:
        return text, True
    text = truncate_words(text, MAX_WORDS_LOUD)
    return text, word_count(text) <= MAX_WORDS_LOUD


def is_time_safe(question: Question, context: Context) -> bool:
    if context.time_budget_minutes <= TIME_PRESSED_MINUTES:
        return question.level == "discovery"
    return True


def check_diversity(questions: list[Question], prefs: Preferences) -> None:
    probes = sum(1 for q in questions if q.style == "opportunity_probe")
    playful = sum(1 for q in questions if q.style == "playful_personal")
    if probes < 1:
        raise ConstraintViolation("No opportunity_probe question survived validation")
    if not prefs.allow_playful and playful:
        raise ConstraintViolation(
            f"{playful} playful_personal question(s) returned while playful is disabled"
        )
    if playful > 1:
        raise ConstraintViolation(f"{playful} playful_personal questions returned; at most 1 allowed")


def cap_question_count(questions: list[Question]) -> list[Question]:
    """Keep the first five, making sure an opportunity_probe is among them."""
    if len(questions) <= MAX_QUESTIONS:
        return questions
    kept = list(range(MAX_QUESTIONS))
    if not any(questions[i].style == "opportunity_probe" for i in kept):
        first_probe = next(
            (i for i, q in enumerate(questions) if q.style == "opportunity_probe"), None
        )
        if first_probe is not None:
            kept[-1] = first_probe
    return [questions[i] for i in kept]


def validate_question_set(
    candidate: QuestionSet,
    context: Context,
    prefs: Preferences,
    summary: OverlapSummary,
) -> ValidationResult:
    violations: list[dict[str, Any]] = []
    kept: list[Question] = []

    for index, question in enumerate(candidate.questions):
        hits = red_zone_hits(question.text)
        if hits:
            violations.append({"index": index, "rule": "boundary", "dropped": True, "topics": hits})
            continue

        text, loud_safe = apply_loud_limit(question.text, context)
        if text != question.text:
            violations.append(
                {
                    "index": index,
                    "rule": "loud_safe",
                    "dropped": False,
                    "words_before": word_count(question.text),
                }
            )
        if FOLLOW_UP_PLACEHOLDER not in question.follow_up:
            violations.append({"index": index, "rule": "follow_up_placeholder", "dropped": False})

        kept.append(
            question.model_copy(
                update={
                    "text": text,
                    "flags": QuestionFlags(
                        loud_safe=loud_safe,
                        time_safe=is_time_safe(question, context),
                        boundary_ok=True,
                    ),
                }
            )
        )

    if len(kept) < MIN_QUESTIONS:
        raise InsufficientValidQuestions(
            f"Only {len(kept)} question(s) left after safety filtering; need at least {MIN_QUESTIONS}"
        )
    kept = cap_question_count(kept)
    check_diversity(kept, prefs)

    question_set = QuestionSet(
        summary=summary.model_copy(deep=True),
        questions=kept,
        top_picks=[],
    )
    return ValidationResult(question_set=question_set, violations=violations)
