# docchat/config.py
"""
Centralized configuration: model names, provider endpoints, retrieval knobs.
Everything can be overridden from the environment or a local .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        value = int(raw)
    except ValueError:
        return int(default)
    return max(minimum, value)


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        value = float(raw)
    except ValueError:
        return float(default)
    return max(float(minimum), value)


# --- Providers ---
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.openai.com/v1/")
LLM_API_KEY = os.getenv("LLM_API_KEY", "")
EMBEDDING_BACKEND = os.getenv("EMBEDDING_BACKEND", "local").strip().lower()  # "local" or "api"
DATAMUSE_URL = os.getenv("DATAMUSE_URL", "https://api.datamuse.com/words")
LANGUAGETOOL_URL = os.getenv("LANGUAGETOOL_URL", "https://api.languagetool.org/v2/check")
HTTP_TIMEOUT_S = _env_float("HTTP_TIMEOUT_S", 10.0, minimum=1.0)

# --- Models ---
EMBEDDING_MODEL_NAME = os.getenv(
    "EMBEDDING_MODEL_NAME",
    "text-embedding-3-small" if EMBEDDING_BACKEND == "api" else "all-MiniLM-L6-v2",
)
CHAT_MODEL_NAME = os.getenv("CHAT_MODEL_NAME", "gpt-4o-mini")
CHAT_TEMPERATURE = _env_float("CHAT_TEMPERATURE", 0.2, minimum=0.0)

# --- Chunking / Retrieval ---
MAX_CHARS_PER_CHUNK = _env_int("MAX_CHARS_PER_CHUNK", 2500, minimum=100)
RETRIEVAL_TOP_K = _env_int("RETRIEVAL_TOP_K", 4, minimum=1)
# Forwarded history never exceeds 8 turns.
HISTORY_TURNS = min(8, _env_int("HISTORY_TURNS", 8, minimum=0))

# --- Query enrichment toggles ---
ENABLE_SYNONYMS = _env_bool("ENABLE_SYNONYMS", True)
ENABLE_SPELLCHECK = _env_bool("ENABLE_SPELLCHECK", False)

# Semantic answers need a chat provider; without a key the session
# answers from keyword matches only.
SEMANTIC_MODE_AVAILABLE = bool(LLM_API_KEY)
