"""
Application configuration (env, settings, constants).

Responsibility: Centralize config loading, environment variables, and app-wide
constants. Keeps the rest of the app decoupled from how config is sourced.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


# OpenAI (completions + embeddings)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-4o-mini").strip() or "gpt-4o-mini"
)
EMBEDDING_MODEL: str = (
    os.getenv("EMBEDDING_MODEL", "text-embedding-ada-002").strip() or "text-embedding-ada-002"
)
LLM_TEMPERATURE: float = _env_float("LLM_TEMPERATURE", 0.7)

# Vector collection: text-embedding-ada-002 = 1536 dims
VECTOR_DIM: int = _env_int("VECTOR_DIM", 1536)

# Milvus Cloud (from env)
MILVUS_URI: str = os.getenv("MILVUS_URI", "").strip()
MILVUS_TOKEN: str = os.getenv("MILVUS_TOKEN", "").strip()
COLLECTION_NAME: str = os.getenv("COLLECTION_NAME", "documents").strip() or "documents"
RAG_TOP_K: int = _env_int("RAG_TOP_K", 3)

# API timeouts (seconds)
LLM_API_TIMEOUT: float = _env_float("LLM_API_TIMEOUT", 60.0)
TOOLS_HTTP_TIMEOUT: float = _env_float("TOOLS_HTTP_TIMEOUT", 15.0)

# Agent bounds
MAX_TOOL_ROUNDS: int = _env_int("MAX_TOOL_ROUNDS", 8)
MAX_PLAN_STEPS: int = _env_int("MAX_PLAN_STEPS", 10)
SUMMARY_MAX_CONTEXT_CHARS: int = _env_int("SUMMARY_MAX_CONTEXT_CHARS", 48_000)

# Direct prompting
BASIC_MAX_TOKENS: int = 500

# OpenWeatherMap (weather tool)
OPENWEATHER_API_KEY: str = os.getenv("OPENWEATHER_API_KEY", "").strip()
OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
