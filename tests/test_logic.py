import os
import sys

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bazi_utils import DEFAULT_FORM
from logic import (
    derive_seed,
    fill_template,
    generate_element_balance,
    generate_money_advice,
    generate_vitamin_and_color,
    select_template,
    select_variable,
    synthesize,
)
from models import BirthFormData, ChartInput
from templates import CONTENT_TEMPLATES, VARIABLE_LIBRARY

CHART = ChartInput(
    year_pillar="庚午",
    month_pillar="辛巳",
    day_pillar="庚辰",
    hour_pillar="壬午",
    day_master="庚",
    wuxing=["金火", "金火", "金土", "水火"],
)


def test_derive_seed_formula():
    assert derive_seed(1990, 5, 15, 12) == 662
    assert derive_seed(0, 0, 0, 0) == 0
    assert derive_seed(2000, 1, 1, 0) == 110


def test_derive_seed_always_in_range_and_deterministic():
    for year in (-50, 0, 1, 1899, 1990, 2024, 99999):
        for month in (-1, 0, 5, 13):
            for day in (0, 15, 31, 45):
                for hour in (-3, 0, 12, 23, 99):
                    seed = derive_seed(year, month, day, hour)
                    assert 0 <= seed <= 999
                    assert seed == derive_seed(year, month, day, hour)


def test_out_of_range_fields_wrap_instead_of_failing():
    assert derive_seed(0, 0, 0, -1) == 999
    assert derive_seed(1990, 13, 45, 99) == (1990000 + 1300 + 450 + 99) % 1000


def test_select_template_stays_in_pool():
    for category, pool in CONTENT_TEMPLATES.items():
        for seed in range(0, 1600, 7):
            assert select_template(seed, category) in pool


def test_seed_zero_picks_first_entry_of_every_pool():
    for category, pool in CONTENT_TEMPLATES.items():
        assert select_template(0, category) == pool[0]
    for name, pool in VARIABLE_LIBRARY.items():
        assert select_variable(0, name) == pool[0]


def test_select_variable_uses_stride_per_offset():
    # season has 8 entries: (0 + 1 * 17) % 8 == 1
    assert select_variable(0, "season", 1) == "盛夏"
    assert select_variable(3, "element", 2) == VARIABLE_LIBRARY["element"][(3 + 34) % 5]


def test_unknown_variable_falls_back_to_default_literal():
    assert select_variable(42, "no_such_pool") == "默认"
    assert fill_template("向{direction}发展", 7) == "向默认发展"


def test_fill_template_offsets_each_placeholder():
    assert fill_template("{season}{season}", 0) == "初春盛夏"


def test_fill_template_seed_zero_personality():
    text = fill_template(CONTENT_TEMPLATES["personality"][0], 0)
    assert text == (
        "妳的生命底色如同初春的溪流石畔，带有坚韧的气质与创造的内在力量。"
        "妳擅长在机遇中寻找平衡，内心深处有着感性的感知力。"
    )


def test_element_balance_offsets():
    assert generate_element_balance(0) == "木气充盈，火气待补"
    assert generate_element_balance(662) == "土气待补，金气不足"


def test_vitamin_color_and_money_advice():
    extras = generate_vitamin_and_color(662)
    assert extras["vitamin"] == "去甲肾上腺素专注力提升"
    assert extras["lucky_color"] == "日落橙 (Sunset Orange)"
    assert generate_money_advice(662).title == "财务规划优化"
    assert generate_money_advice(0).lucky_direction == "东南方"


def test_synthesize_is_reproducible():
    form = BirthFormData(year=1990, month=5, day=15, hour=12)
    first = synthesize(CHART, form)
    second = synthesize(CHART, form)
    assert first.model_dump_json() == second.model_dump_json()


def test_synthesize_seed_zero_content():
    content = synthesize(CHART, BirthFormData(year=0, month=0, day=0, hour=0))
    assert content.personality.startswith("妳的生命底色如同初春的溪流石畔")
    # career category seed 100 -> template 1, none of its variables have pools
    assert content.career == "妳具备默认的核心能力，在默认中能够展现优势。未来可以考虑向默认发展，重点培养默认技能。"
    assert content.vitamin == "多巴胺森林漫步"
    assert content.lucky_color == "鼠尾草绿 (Sage Green)"
    assert content.element_balance == "木气充盈，火气待补"
    assert content.wealth.title == "今日财运指南"
    assert content.source == "template"
    assert content.has_filtered is False


def test_synthesize_fills_every_field():
    content = synthesize(CHART, BirthFormData(year=1988, month=11, day=3, hour=7))
    for text in (content.personality, content.career, content.advice, content.love,
                 content.wealth.summary, content.health.summary):
        assert text
        assert "{" not in text
    assert content.health.morning.action
    assert content.health.flow.benefit


def test_synthesize_defaults_form():
    assert synthesize(CHART).model_dump() == synthesize(CHART, DEFAULT_FORM).model_dump()
    assert (DEFAULT_FORM.year, DEFAULT_FORM.month, DEFAULT_FORM.day, DEFAULT_FORM.hour) == (1990, 5, 15, 12)


def test_serialized_content_uses_wire_names():
    data = synthesize(CHART).model_dump(by_alias=True)
    assert "luckyColor" in data
    assert "elementBalance" in data
    assert "luckyDirection" in data["wealth"]
