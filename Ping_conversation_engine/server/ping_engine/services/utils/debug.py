from typing import Any


def build_debug_log(
    request_id: str,
    model_name: str,
    mode: str,
    context: dict[str, Any],
    you: dict[str, Any],
    other: dict[str, Any] | None,
    prefs: dict[str, Any],
    overlaps: dict[str, Any],
) -> dict[str, Any]:
    return {
        "request_id": request_id,
        "model_name": model_name,
        "mode": mode,
        "context": context,
        "you": you,
        "other": other,
        "single_profile": other is None,
        "prefs": prefs,
        "overlaps": overlaps,
    }
