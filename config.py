"""
Runtime configuration for the Vita-Me content engine.
Values come from the environment (optionally a local .env file).
"""
import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

LOGGER_NAME = "vita_me"

# LLM provider (智谱 GLM, OpenAI-compatible endpoint)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://open.bigmodel.cn/api/paas/v4")
LLM_MODEL = os.getenv("LLM_MODEL", "glm-4-plus")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "2"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2500"))
LLM_BACKOFF_SECONDS = 1.0

# Caller-side flow
CONNECTING_DELAY_SECONDS = float(os.getenv("CONNECTING_DELAY_SECONDS", "0.8"))
SESSION_MAX_RETRIES = int(os.getenv("SESSION_MAX_RETRIES", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PERF_LOG = os.getenv("PERF_LOG") == "1"

# Model-specific temperature settings
MODEL_TEMPERATURES = {
    "glm-4-plus": 0.8,
    "glm-4": 0.7,
    "glm-4-flash": 0.8,
    "deepseek-chat": 0.7,
    "gpt-4o": 0.7,
    "gpt-4o-mini": 0.7,
}


def get_optimal_temperature(model: str) -> float:
    """Get the temperature for a given model."""
    return MODEL_TEMPERATURES.get(model, 0.7)


def get_api_key() -> str:
    """Return the configured LLM key, or an empty string when unset."""
    api_key = os.getenv("ZHIPU_API_KEY") or os.getenv("LLM_API_KEY") or ""
    if api_key == "replace_me":
        return ""
    return api_key


_logging_configured = False


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging once and return the application logger."""
    global _logging_configured
    if not _logging_configured:
        logging.basicConfig(
            level=(level or LOG_LEVEL).upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        _logging_configured = True
    return logging.getLogger(LOGGER_NAME)
