import os
from pathlib import Path

from dotenv import load_dotenv

# Load `server/.env` (if present) so local dev doesn't require re-exporting env vars.
# This runs before we read OPENAI_MODEL / OPENAI_API_KEY from the environment.
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

DEFAULT_MODEL_NAME = "gpt-4.1-2025-04-14"
MODEL_NAME = os.getenv("OPENAI_MODEL", DEFAULT_MODEL_NAME)
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/responses")

# Network ceiling for the single backend call. Unrelated to the
# conversation time budget, which is a content constraint.
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "15"))
MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "1200"))
GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", "0.7"))

# Path: Ping_conversation_engine/logs/requests.ndjson
DEFAULT_LOG_PATH = Path(__file__).resolve().parents[2] / "logs" / "requests.ndjson"
REQUEST_LOG_PATH = Path(os.getenv("PING_REQUEST_LOG", str(DEFAULT_LOG_PATH)))


def get_api_key() -> str:
    return os.getenv("OPENAI_API_KEY", "")


def debug_enabled(flag: str) -> bool:
    return os.getenv(flag, "0") == "1"
