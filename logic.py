"""
Vita-Me Content Logic Module.
Deterministic, seed-driven content synthesis from a birth form and chart.
The same birth data always yields the same report.
"""
import re
import itertools
import logging
from typing import Optional

from bazi_utils import DEFAULT_FORM
from config import LOGGER_NAME
from models import (
    BirthFormData,
    ChartInput,
    GeneratedContent,
    HealthAdvice,
    HealthItem,
    WealthAdvice,
)
from templates import (
    BALANCE_ELEMENTS,
    BALANCE_STATES,
    CATEGORY_OFFSETS,
    CONTENT_TEMPLATES,
    FALLBACK_VARIABLE,
    HEALTH_FLOW_ITEMS,
    HEALTH_MORNING_ITEMS,
    LUCKY_COLORS,
    MONEY_ADVICE_OPTIONS,
    VARIABLE_LIBRARY,
    VITAMINS,
)
from text_utils import filter_content

logger = logging.getLogger(LOGGER_NAME)

# {variable} placeholders use ASCII identifiers only
_PLACEHOLDER_RE = re.compile(r'\{([A-Za-z0-9_]+)\}')

# Decorrelates adjacent placeholders within one template
VARIABLE_STRIDE = 17


def derive_seed(year: int, month: int, day: int, hour: int) -> int:
    """
    Map birth fields to a seed in [0, 999].
    Out-of-calendar values are accepted and simply wrap.
    """
    return (year * 1000 + month * 100 + day * 10 + hour) % 1000


def seed_from_form(form: BirthFormData) -> int:
    return derive_seed(form.year, form.month, form.day, form.hour)


def select_template(seed: int, category: str) -> str:
    """Pick one template of a category: pool[seed % len(pool)]."""
    pool = CONTENT_TEMPLATES[category]
    return pool[seed % len(pool)]


def select_variable(seed: int, name: str, index_offset: int = 0) -> str:
    """Pick a filler value; unknown variable names fall back to 默认."""
    pool = VARIABLE_LIBRARY.get(name) or [FALLBACK_VARIABLE]
    return pool[(seed + index_offset * VARIABLE_STRIDE) % len(pool)]


def fill_template(template: str, seed: int) -> str:
    """Replace every {name} left to right, the k-th one with index_offset k."""
    counter = itertools.count()
    return _PLACEHOLDER_RE.sub(
        lambda match: select_variable(seed, match.group(1), next(counter)),
        template,
    )


def generate_category_text(seed: int, category: str) -> str:
    category_seed = seed + CATEGORY_OFFSETS[category]
    return fill_template(select_template(category_seed, category), category_seed)


def generate_vitamin_and_color(seed: int) -> dict:
    return {
        "vitamin": VITAMINS[seed % len(VITAMINS)],
        "lucky_color": LUCKY_COLORS[seed % len(LUCKY_COLORS)],
    }


def generate_element_balance(seed: int) -> str:
    """Two-clause 五行 balance descriptor, e.g. 木气充盈，火气待补."""
    n_elements = len(BALANCE_ELEMENTS)
    n_states = len(BALANCE_STATES)
    primary = BALANCE_ELEMENTS[seed % n_elements]
    primary_state = BALANCE_STATES[seed % n_states]
    secondary = BALANCE_ELEMENTS[(seed + 1) % n_elements]
    secondary_state = BALANCE_STATES[(seed + 2) % n_states]
    return f"{primary}气{primary_state}，{secondary}气{secondary_state}"


def generate_money_advice(seed: int) -> WealthAdvice:
    """今日财运建议 - one of the fixed options, advice text filtered."""
    option = MONEY_ADVICE_OPTIONS[seed % len(MONEY_ADVICE_OPTIONS)]
    advice = WealthAdvice(**option)
    advice.advice = filter_content(advice.advice).content
    return advice


def generate_health_advice(seed: int) -> HealthAdvice:
    health_seed = seed + CATEGORY_OFFSETS["health"]
    morning = HEALTH_MORNING_ITEMS[health_seed % len(HEALTH_MORNING_ITEMS)]
    flow = HEALTH_FLOW_ITEMS[(health_seed + VARIABLE_STRIDE) % len(HEALTH_FLOW_ITEMS)]
    return HealthAdvice(morning=HealthItem(**morning), flow=HealthItem(**flow))


def synthesize(chart: ChartInput, form: Optional[BirthFormData] = None) -> GeneratedContent:
    """
    Build the full templated report for one birth input.

    The chart is accepted for interface parity with the AI path; every choice
    here is driven by the birth-form seed alone.
    """
    form = form or DEFAULT_FORM
    seed = seed_from_form(form)

    texts = {}
    has_filtered = False
    for category in CONTENT_TEMPLATES:
        result = filter_content(generate_category_text(seed, category))
        texts[category] = result.content
        has_filtered = has_filtered or result.was_modified

    wealth = generate_money_advice(seed)
    wealth.summary = texts["wealth"]
    health = generate_health_advice(seed)
    health.summary = texts["health"]
    extras = generate_vitamin_and_color(seed)

    logger.debug("Synthesized content seed=%s day_master=%s filtered=%s", seed, chart.day_master, has_filtered)

    return GeneratedContent(
        personality=texts["personality"],
        career=texts["career"],
        wealth=wealth,
        health=health,
        advice=texts["advice"],
        love=texts["love"],
        vitamin=extras["vitamin"],
        lucky_color=extras["lucky_color"],
        element_balance=generate_element_balance(seed),
        has_filtered=has_filtered,
        source="template",
    )
