from ...models import Context, OverlapSummary, Profile
from ..utils.constants import LOUD_NOISE_LEVEL, TIME_PRESSED_MINUTES
from ..utils.text_utils import fold

NOISE_LABELS = {0: "quiet", 1: "moderate", 2: "loud", 3: "very loud"}


def detect_commonalities(you: Profile, other: Profile | None) -> list[str]:
    if other is None:
        return []
    overlaps: list[str] = []

    their_interests = {fold(i) for i in other.interests}
    for interest in you.interests:
        key = fold(interest)
        if key and key in their_interests and key not in overlaps:
            overlaps.append(key)

    for mine, theirs in ((you.school, other.school), (you.company, other.company)):
        if mine and theirs and fold(mine) == fold(theirs):
            overlaps.append(mine)

    return overlaps


def detect_complements(you: Profile, other: Profile | None) -> list[str]:
    """Pair each of our help offers with any of their goals it overlaps."""
    if other is None:
        return []
    complements: list[str] = []
    offers = [fold(o) for o in you.help_offers]
    goals = [fold(g) for g in other.goals_next_period]
    for offer in offers:
        for goal in goals:
            if offer and goal and (offer in goal or goal in offer):
                complements.append(f"{offer} → {goal}")
    return complements


def describe_context(context: Context) -> str:
    parts: list[str] = []
    if context.event_label and context.event_category:
        parts.append(f"{context.event_label} ({context.event_category.replace('_', ' ')})")
    elif context.event_label or context.event_category:
        parts.append((context.event_label or context.event_category or "").replace("_", " "))
    if context.city:
        parts.append(f"in {context.city}")
    parts.append(f"{NOISE_LABELS.get(context.noise_level, 'quiet')} room")
    parts.append(f"{context.time_budget_minutes} min budget")
    parts.append(f"{context.conversation_stage} stage")

    notes = ", ".join(parts)
    constraints: list[str] = []
    if context.noise_level >= LOUD_NOISE_LEVEL:
        constraints.append("keep questions short")
    if context.time_budget_minutes <= TIME_PRESSED_MINUTES:
        constraints.append("discovery questions only fit the time")
    if constraints:
        notes += "; " + "; ".join(constraints)
    return notes


def build_overlap_summary(you: Profile, other: Profile | None, context: Context) -> OverlapSummary:
    return OverlapSummary(
        detected_commonalities=detect_commonalities(you, other),
        detected_complements=detect_complements(you, other),
        context_notes=describe_context(context),
    )
