"""
AI interpretation via an OpenAI-compatible chat-completions endpoint (智谱 GLM by default).

One call per invocation: bounded retries with linear backoff for transient
failures, immediate failure on authentication errors, and strict validation
of the JSON envelope the model returns.
"""
import json
import logging
import time
from typing import Optional

import openai
from pydantic import ValidationError

from bazi_utils import DEFAULT_FORM
from config import (
    LLM_BACKOFF_SECONDS,
    LLM_BASE_URL,
    LLM_MAX_RETRIES,
    LLM_MAX_TOKENS,
    LLM_MODEL,
    LOGGER_NAME,
    PERF_LOG,
    get_api_key,
    get_optimal_temperature,
)
from llm_client import get_llm_client
from models import AIEnvelope, BirthFormData, ChartInput, GeneratedContent
from text_utils import extract_json_object, filter_content, strip_code_fences

logger = logging.getLogger(LOGGER_NAME)


class InterpretationError(Exception):
    """Base class for every failure of the AI path."""
    kind = "error"


class ConfigurationError(InterpretationError):
    """No API credential configured; nothing was sent."""
    kind = "configuration"


class AuthenticationFailed(InterpretationError):
    """Provider rejected the credential (401/403)."""
    kind = "authentication"


class RetriesExhausted(InterpretationError):
    """Transient failures outlasted the retry budget."""
    kind = "exhausted"

    def __init__(self, message: str, attempts: int, last_error: Optional[Exception] = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class ResponseFormatError(InterpretationError):
    """Response could not be parsed or lacks required fields."""
    kind = "format"

    def __init__(self, message: str, raw_content: str = ""):
        super().__init__(message)
        self.raw_content = raw_content


_NON_RETRYABLE = (openai.AuthenticationError, openai.PermissionDeniedError)


def build_interpretation_prompt(chart: ChartInput, form: BirthFormData) -> str:
    """
    Builds the interpretation prompt with a strict JSON output example.
    """
    chart_json = json.dumps(chart.model_dump(), ensure_ascii=False, indent=2)
    return f"""
你是一位温和智慧的命理师，请根据以下八字信息生成个性化解读。

基本信息：
- 出生时间：{form.year}年{form.month}月{form.day}日{form.hour}时
- 八字数据：{chart_json}

请用温和、积极、现代的语言风格，避免传统命理中的消极表述。每个方面都要个性化，不要使用通用模板。

请严格按照以下JSON格式返回，不要添加任何其他文字：

{{
  "personality": "性格特点分析，体现独特个性，100-150字",
  "career": "事业发展建议，结合现代职场，100-150字",
  "love": "感情运势，现代情感观念，100-150字",
  "advice": "今日行动建议，具体可执行，80-120字",
  "luckyColor": "一个具体的颜色名称",
  "vitamin": "今日能量补充建议，如'多巴胺森林漫步'",
  "elementBalance": "五行平衡状态描述",
  "wealth": {{
    "title": "今日财运主题，简洁有吸引力",
    "advice": "财运分析和具体建议，包含可执行的理财行动，120-180字",
    "luckyDirection": "有利的方位，如'东南方'",
    "luckyTime": "最佳理财决策时间段，如'14:00-16:00'",
    "suggestion": "具体的理财行动建议，如'适合定投基金'"
  }},
  "health": {{
    "morning": {{
      "action": "晨间养生活动，具体可执行，如'饮一杯温润的茉莉花茶'",
      "benefit": "这个活动的好处和效果，50-80字"
    }},
    "flow": {{
      "action": "心流时刻活动，具体可执行，如'冥想与自然白噪音'",
      "benefit": "这个活动的好处和最佳时间，50-80字，包含具体时间段"
    }}
  }}
}}

重要要求：
1. 语言现代化，避免"克夫"、"命硬"等传统负面词汇
2. 建议要实用，符合现代生活
3. 保持积极正面的基调
4. 内容要有个性化差异，不要千篇一律
5. 严格遵循JSON格式，确保可以被解析
"""


def call_chat_completion(
    client,
    prompt: str,
    model: str,
    temperature: float,
    max_tokens: int = LLM_MAX_TOKENS,
    max_retries: int = LLM_MAX_RETRIES,
    sleep=time.sleep,
) -> str:
    """
    Send one user message and return the reply text.

    Attempts = max_retries + 1, sleeping backoff * attempt before each retry.
    401/403 raise AuthenticationFailed at once.
    """
    last_error = None
    attempts = max_retries + 1

    for attempt in range(attempts):
        if attempt > 0:
            sleep(LLM_BACKOFF_SECONDS * attempt)
            logger.info("LLM retry attempt=%s model=%s", attempt, model)

        start_time = time.monotonic()
        try:
            response = client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            if not response.choices or response.choices[0].message is None:
                raise ValueError("API返回格式异常: missing choices[0].message")
            if PERF_LOG:
                logger.info(
                    "[PERF] llm call model=%s attempt=%s total_ms=%s",
                    model, attempt + 1, int((time.monotonic() - start_time) * 1000),
                )
            return response.choices[0].message.content or ""
        except _NON_RETRYABLE as e:
            logger.error("LLM authentication failed model=%s status=%s", model, e.status_code)
            raise AuthenticationFailed(f"API认证失败: {e}") from e
        except (openai.APIError, ValueError) as e:
            last_error = e
            logger.warning(
                "LLM call failed (attempt %s/%s) model=%s error_type=%s error=%s",
                attempt + 1, attempts, model, type(e).__name__, e,
            )

    raise RetriesExhausted(
        f"LLM call failed after {attempts} attempts: {last_error}",
        attempts=attempts,
        last_error=last_error,
    ) from last_error


def parse_interpretation(content: str) -> AIEnvelope:
    """Strip fences, extract the first JSON object and validate required fields."""
    cleaned = strip_code_fences(content)
    candidate = extract_json_object(cleaned)
    if candidate is None:
        logger.debug("No JSON object in LLM response: %r", content)
        raise ResponseFormatError("AI响应格式错误: 未找到JSON对象", raw_content=content)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug("Unparsable LLM response: %r", content)
        raise ResponseFormatError(f"AI响应格式错误: {e}", raw_content=content) from e

    if not isinstance(data, dict):
        raise ResponseFormatError("AI响应格式错误: 顶层不是对象", raw_content=content)

    try:
        return AIEnvelope.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError(f"AI返回的JSON缺少必要字段: {e}", raw_content=content) from e


def envelope_to_content(envelope: AIEnvelope, model: Optional[str] = None) -> GeneratedContent:
    """Convert a validated envelope into report content, bias-filtering free text."""
    has_filtered = False

    def clean(text):
        nonlocal has_filtered
        if not text:
            return text
        result = filter_content(text)
        has_filtered = has_filtered or result.was_modified
        return result.content

    wealth = envelope.wealth.model_copy()
    wealth.title = clean(wealth.title)
    wealth.advice = clean(wealth.advice)
    wealth.suggestion = clean(wealth.suggestion)

    health = envelope.health.model_copy(deep=True)
    for item in (health.morning, health.flow):
        item.action = clean(item.action)
        item.benefit = clean(item.benefit)

    return GeneratedContent(
        personality=clean(envelope.personality),
        career=clean(envelope.career),
        wealth=wealth,
        health=health,
        advice=clean(envelope.advice),
        love=clean(envelope.love),
        vitamin=envelope.vitamin,
        lucky_color=envelope.lucky_color,
        element_balance=envelope.element_balance,
        has_filtered=has_filtered,
        source="ai",
        model=model,
    )


def generate_interpretation(
    chart: ChartInput,
    form: Optional[BirthFormData] = None,
    *,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    model: Optional[str] = None,
    client=None,
    max_retries: Optional[int] = None,
    sleep=time.sleep,
) -> GeneratedContent:
    """
    Ask the LLM for a full interpretation of a chart.

    Raises:
        ConfigurationError: no API key and no client supplied.
        AuthenticationFailed: the provider answered 401/403.
        RetriesExhausted: transient failures beyond the retry budget.
        ResponseFormatError: reply is not a valid interpretation envelope.
    """
    form = form or DEFAULT_FORM
    model = model or LLM_MODEL
    max_retries = LLM_MAX_RETRIES if max_retries is None else max_retries

    if client is None:
        api_key = api_key or get_api_key()
        if not api_key or api_key == "replace_me":
            logger.warning("LLM API key not configured, skipping AI interpretation")
            raise ConfigurationError("LLM API key not configured")
        client = get_llm_client(api_key, base_url or LLM_BASE_URL)

    prompt = build_interpretation_prompt(chart, form)
    content = call_chat_completion(
        client,
        prompt,
        model=model,
        temperature=get_optimal_temperature(model),
        max_retries=max_retries,
        sleep=sleep,
    )
    envelope = parse_interpretation(content)
    logger.info("AI interpretation generated model=%s", model)
    return envelope_to_content(envelope, model=model)
