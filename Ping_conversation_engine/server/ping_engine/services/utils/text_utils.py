_TRAILING_PUNCT = ".,;:!?-"


def fold(text: str | None) -> str:
    return (text or "").strip().casefold()


def clean_text(value: object) -> str | None:
    """Collapse whitespace; empty strings become None."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (str, int, float)):
        return None
    text = " ".join(str(value).split())
    return text or None


def words(text: str) -> list[str]:
    return (text or "").split()


def word_count(text: str) -> int:
    return len(words(text))


def truncate_words(text: str, limit: int) -> str:
    """Keep the first `limit` words and close the sentence with a question mark."""
    tokens = words(text)
    if len(tokens) <= limit:
        return text
    head = " ".join(tokens[:limit]).rstrip(_TRAILING_PUNCT).rstrip()
    return f"{head}?"


def contains_any(text: str, needles: list[str]) -> list[str]:
    lowered = (text or "").lower()
    return [needle for needle in needles if needle and needle.lower() in lowered]
