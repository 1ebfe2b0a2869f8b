import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def new_log_record(request_id: str, event: str, **fields: Any) -> dict[str, Any]:
    now = utc_now_iso()
    record: dict[str, Any] = {"ts": now, "request_id": request_id, "event": event}
    record.update(fields)
    return record


def record_error(record: dict[str, Any], stage: str, exc: BaseException) -> dict[str, Any]:
    record["error"] = {
        "stage": stage,
        "type": type(exc).__name__,
        "msg": str(exc),
    }
    record["status"] = "error"
    return record


def append_ndjson(path: Path | None, record: dict[str, Any]) -> None:
    """Append one JSON object as a single line.

    Never raises: logging must not break the request path. A `None` path
    disables request logging.
    """

    if path is None:
        return
    try:
        ensure_dir(path.parent)
        line = json.dumps(record, ensure_ascii=True, separators=(",", ":"), default=str)
        with path.open("a", encoding="utf-8") as f:
            f.write(line)
            f.write("\n")
    except Exception:
        return
