import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bazi_utils import (
    DEFAULT_CHART,
    calculate_chart,
    calculate_strength,
    collect_wealth_findings,
    count_elements,
    get_ten_god,
    get_year_pillar,
    parse_birth_form,
)
from models import ChartInput

WATER_CHART = ChartInput(
    year_pillar="丙午",
    month_pillar="丁巳",
    day_pillar="壬子",
    hour_pillar="丙午",
    day_master="壬",
    wuxing=["火火", "火火", "水水", "火火"],
)


def test_parse_birth_form():
    form = parse_birth_form("1990-05-15", "12:30")
    assert (form.year, form.month, form.day, form.hour) == (1990, 5, 15, 12)


def test_parse_birth_form_degrades_bad_parts_to_zero():
    form = parse_birth_form("abcd-xx-15", "")
    assert (form.year, form.month, form.day, form.hour) == (0, 0, 15, 0)
    form = parse_birth_form("", None)
    assert (form.year, form.month, form.day, form.hour) == (0, 0, 0, 0)


def test_calculate_chart_known_date():
    chart = calculate_chart("1990-05-15", "12:00")
    assert chart.year_pillar == "庚午"
    assert chart.month_pillar == "辛巳"
    assert chart.hour_pillar[1] == "午"
    assert chart.day_master == chart.day_pillar[0]
    assert len(chart.wuxing) == 4
    assert all(len(entry) == 2 for entry in chart.wuxing)


def test_calculate_chart_invalid_input_uses_default_chart():
    assert calculate_chart("1990-13-45", "12:00") == DEFAULT_CHART
    assert calculate_chart("not a date", "25:99") == DEFAULT_CHART


def test_get_year_pillar():
    assert get_year_pillar(2026) == "丙午"
    assert get_year_pillar(1990) == "庚午"


def test_count_elements():
    counts = count_elements(["金火", "金火", "水水", "木火"])
    assert counts.model_dump() == {"wood": 1, "fire": 3, "earth": 0, "metal": 2, "water": 2}
    assert count_elements([]).model_dump() == {"wood": 0, "fire": 0, "earth": 0, "metal": 0, "water": 0}


def test_get_ten_god():
    assert get_ten_god("甲", "甲") == "比肩"
    assert get_ten_god("壬", "丁") == "正财"
    assert get_ten_god("壬", "丙") == "偏财"
    assert get_ten_god("甲", "庚") == "七杀"


def test_calculate_strength_weak_out_of_season():
    strength = calculate_strength(WATER_CHART)
    assert strength["result"] == "weak"
    assert strength["is_strong"] is False
    assert strength["joy_elements"] == ["水", "金"]
    assert "失令" in strength["score_info"]


def test_calculate_strength_strong_in_season():
    chart = ChartInput(
        year_pillar="庚申",
        month_pillar="壬子",
        day_pillar="壬申",
        hour_pillar="辛亥",
        day_master="壬",
        wuxing=["金金", "水水", "水金", "金水"],
    )
    strength = calculate_strength(chart)
    assert strength["result"] == "strong"
    assert "水" not in strength["joy_elements"]


def test_collect_wealth_findings():
    findings = collect_wealth_findings(WATER_CHART)
    assert findings.direct_wealth_stems == 1
    assert findings.indirect_wealth_stems == 2
    assert findings.wealth_main_qi == 3
    assert findings.wealth_residual_qi == 0
    assert findings.output_generates_wealth is False
    assert findings.special_pattern is None
    assert findings.branches == ["午", "巳", "子", "午"]
    assert findings.wealth_element_count == 6
    assert findings.favorable_element == "水"
    assert findings.ten_god_counts["正财"] == 3


def test_collect_wealth_findings_follow_the_strong():
    chart = ChartInput(
        year_pillar="壬子",
        month_pillar="癸亥",
        day_pillar="壬申",
        hour_pillar="庚子",
        day_master="壬",
        wuxing=["水水", "水水", "水金", "金水"],
    )
    assert collect_wealth_findings(chart).special_pattern == "从旺"
