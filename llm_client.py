"""
Cached OpenAI-compatible client factory for reuse across requests.
"""
from __future__ import annotations

from functools import lru_cache
from openai import OpenAI

from config import LLM_TIMEOUT_SECONDS


@lru_cache(maxsize=8)
def get_llm_client(api_key: str, base_url: str, timeout: float = LLM_TIMEOUT_SECONDS) -> OpenAI:
    """
    Return a cached OpenAI client for a given key/base URL pair.
    SDK-level retries are disabled; callers own the retry policy.
    """
    return OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
