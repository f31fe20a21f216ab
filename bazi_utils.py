"""
八字工具类 - 排盘、十神、身强身弱、财星统计
Wraps lunar-python for chart derivation and exposes the chart facts the
content and wealth engines consume.
"""
import logging
from datetime import datetime
from typing import Optional

from lunar_python import Solar

from config import LOGGER_NAME
from models import BirthFormData, ChartInput, ElementCount, WealthFindings

logger = logging.getLogger(LOGGER_NAME)

STEMS = ["甲", "乙", "丙", "丁", "戊", "己", "庚", "辛", "壬", "癸"]

# 地支藏干 [本气, 中气, 余气]
ZANG_GAN = {
    "子": ["癸"], "丑": ["己", "癸", "辛"], "寅": ["甲", "丙", "戊"],
    "卯": ["乙"], "辰": ["戊", "乙", "癸"], "巳": ["丙", "戊", "庚"],
    "午": ["丁", "己"], "未": ["己", "丁", "乙"], "申": ["庚", "壬", "戊"],
    "酉": ["辛"], "戌": ["戊", "辛", "丁"], "亥": ["壬", "甲"],
}

WUXING_MAP = {
    "甲": "木", "乙": "木", "寅": "木", "卯": "木",
    "丙": "火", "丁": "火", "巳": "火", "午": "火",
    "戊": "土", "己": "土", "辰": "土", "戌": "土", "丑": "土", "未": "土",
    "庚": "金", "辛": "金", "申": "金", "酉": "金",
    "壬": "水", "癸": "水", "亥": "水", "子": "水",
}

# Key 生 Value / Key 克 Value
PRODUCING = {"木": "火", "火": "土", "土": "金", "金": "水", "水": "木"}
CONTROLLING = {"木": "土", "火": "金", "土": "水", "金": "木", "水": "火"}
RESOURCE = {v: k for k, v in PRODUCING.items()}

ELEMENT_KEYS = {"木": "wood", "火": "fire", "土": "earth", "金": "metal", "水": "water"}

# (目标天干索引 - 日主天干索引) % 10
TEN_GODS = {
    0: "比肩", 1: "劫财", 2: "食神", 3: "伤官", 4: "偏财",
    5: "正财", 6: "七杀", 7: "正官", 8: "偏印", 9: "正印",
}

# 地支六合 / 六冲
BRANCH_COMBOS = {
    frozenset(["子", "丑"]), frozenset(["寅", "亥"]), frozenset(["卯", "戌"]),
    frozenset(["辰", "酉"]), frozenset(["巳", "申"]), frozenset(["午", "未"]),
}
BRANCH_CLASHES = {
    frozenset(["子", "午"]), frozenset(["丑", "未"]), frozenset(["寅", "申"]),
    frozenset(["卯", "酉"]), frozenset(["辰", "戌"]), frozenset(["巳", "亥"]),
}

# 排盘失败时的兜底命盘
DEFAULT_CHART = ChartInput(
    year_pillar="甲子",
    month_pillar="甲子",
    day_pillar="甲子",
    hour_pillar="甲子",
    day_master="甲",
    wuxing=["木水", "木水", "木水", "木水"],
)

DEFAULT_FORM = BirthFormData(year=1990, month=5, day=15, hour=12)


def _to_int(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def parse_birth_form(date_str: str, time_str: str = "12:00") -> BirthFormData:
    """
    Split "YYYY-MM-DD" / "HH:MM" into integer fields.
    Non-numeric parts become 0; no calendar validation happens here.
    """
    date_parts = (date_str or "").split("-")
    date_parts += [""] * (3 - len(date_parts))
    hour_part = (time_str or "").split(":")[0]
    return BirthFormData(
        year=_to_int(date_parts[0]),
        month=_to_int(date_parts[1]),
        day=_to_int(date_parts[2]),
        hour=_to_int(hour_part),
    )


def calculate_chart(date_str: str, time_str: str = "12:00") -> ChartInput:
    """
    Derive the four pillars for a solar date/time with lunar-python.
    Falls back to DEFAULT_CHART when the input cannot be parsed.
    """
    try:
        dt = datetime.strptime(f"{date_str} {time_str}", "%Y-%m-%d %H:%M")
        solar = Solar.fromYmdHms(dt.year, dt.month, dt.day, dt.hour, dt.minute, 0)
        eight_char = solar.getLunar().getEightChar()
        day_pillar = eight_char.getDay()
        return ChartInput(
            year_pillar=eight_char.getYear(),
            month_pillar=eight_char.getMonth(),
            day_pillar=day_pillar,
            hour_pillar=eight_char.getTime(),
            day_master=day_pillar[0],
            wuxing=[
                eight_char.getYearWuXing(),
                eight_char.getMonthWuXing(),
                eight_char.getDayWuXing(),
                eight_char.getTimeWuXing(),
            ],
        )
    except Exception as e:
        logger.warning("Chart calculation failed for %s %s, using default chart: %s", date_str, time_str, e)
        return DEFAULT_CHART.model_copy(deep=True)


def get_year_pillar(year: int) -> str:
    """干支 of a calendar year, sampled mid-year so 立春 never matters."""
    solar = Solar.fromYmdHms(year, 6, 15, 12, 0, 0)
    return solar.getLunar().getEightChar().getYear()


def count_elements(wuxing) -> ElementCount:
    """Count every element character across the composition entries."""
    counts = {key: 0 for key in ELEMENT_KEYS.values()}
    for entry in wuxing or []:
        for char in entry:
            key = ELEMENT_KEYS.get(char)
            if key:
                counts[key] += 1
    return ElementCount(**counts)


def get_ten_god(day_master: str, target_stem: str) -> str:
    """十神 of target_stem seen from day_master."""
    diff = (STEMS.index(target_stem) - STEMS.index(day_master)) % 10
    return TEN_GODS[diff]


def get_hidden_stems(branch: str) -> list:
    return ZANG_GAN.get(branch, [])


class BaziStrengthCalculator:
    """身强身弱 - 加权打分法"""

    # 月令最重; 日干是自己, 不计分
    WEIGHTS = {
        "year_stem": 4, "year_branch": 4,
        "month_stem": 8, "month_branch": 40,
        "day_branch": 12,
        "hour_stem": 8, "hour_branch": 8,
    }

    def calculate(self, chart: ChartInput) -> dict:
        """
        :return: dict with result (strong/weak), is_strong, score_info, joy_elements
        """
        dm_wx = WUXING_MAP[chart.day_master]
        resource_wx = RESOURCE[dm_wx]
        y, m, d, h = chart.pillars

        positions = [
            ("year_stem", y[0]), ("year_branch", y[1]),
            ("month_stem", m[0]), ("month_branch", m[1]),
            ("day_branch", d[1]),
            ("hour_stem", h[0]), ("hour_branch", h[1]),
        ]
        score = sum(
            self.WEIGHTS[name]
            for name, char in positions
            if WUXING_MAP.get(char) in (dm_wx, resource_wx)
        )

        # 得令门槛低, 失令门槛高
        month_wx = WUXING_MAP.get(m[1])
        de_ling = month_wx in (dm_wx, resource_wx)
        threshold = 38 if de_ling else 48
        is_strong = score >= threshold

        return {
            "result": "strong" if is_strong else "weak",
            "is_strong": is_strong,
            "score_info": f"同党得分: {score}, 判定阈值: {threshold} ({'得令' if de_ling else '失令'})",
            "joy_elements": self.joy_elements(is_strong, dm_wx),
        }

    @staticmethod
    def joy_elements(is_strong: bool, dm_wx: str) -> list:
        """身强喜克泄耗, 身弱喜生扶"""
        same_party = [dm_wx, RESOURCE[dm_wx]]
        if is_strong:
            return [wx for wx in ["金", "木", "水", "火", "土"] if wx not in same_party]
        return same_party


_STRENGTH_CALC = BaziStrengthCalculator()


def calculate_strength(chart: ChartInput) -> dict:
    return _STRENGTH_CALC.calculate(chart)


def _detect_special_pattern(chart: ChartInput) -> str:
    dm_wx = WUXING_MAP[chart.day_master]
    resource_wx = RESOURCE[dm_wx]
    output_wx = PRODUCING[dm_wx]

    chars = [c for pillar in chart.pillars for c in pillar]
    elements = [WUXING_MAP.get(c) for c in chars]
    if sum(1 for wx in elements if wx in (dm_wx, resource_wx)) >= 7:
        return "从旺"

    # 日干以外七字
    others = elements[:4] + elements[5:]
    if sum(1 for wx in others if wx == output_wx) >= 5 and resource_wx not in others:
        return "从儿"
    return None


def collect_wealth_findings(chart: ChartInput, strength: Optional[dict] = None) -> WealthFindings:
    """Gather the 财星 facts of a chart for the wealth scorer."""
    dm = chart.day_master
    dm_wx = WUXING_MAP[dm]
    wealth_wx = CONTROLLING[dm_wx]
    strength = strength or calculate_strength(chart)

    visible_stems = [chart.year_pillar[0], chart.month_pillar[0], chart.hour_pillar[0]]
    branches = [p[1] for p in chart.pillars]

    ten_god_counts = {}
    for stem in visible_stems:
        god = get_ten_god(dm, stem)
        ten_god_counts[god] = ten_god_counts.get(god, 0) + 1
    for branch in branches:
        hidden = get_hidden_stems(branch)
        if hidden:
            god = get_ten_god(dm, hidden[0])
            ten_god_counts[god] = ten_god_counts.get(god, 0) + 1

    main_qi = 0
    residual_qi = 0
    for branch in branches:
        hidden = get_hidden_stems(branch)
        if not hidden:
            continue
        if WUXING_MAP[hidden[0]] == wealth_wx:
            main_qi += 1
        if any(WUXING_MAP[h] == wealth_wx for h in hidden[1:]):
            residual_qi += 1

    output_count = ten_god_counts.get("食神", 0) + ten_god_counts.get("伤官", 0)
    wealth_count = ten_god_counts.get("正财", 0) + ten_god_counts.get("偏财", 0)

    element_tags = chart.element_tags or "".join(WUXING_MAP.get(c, "") for p in chart.pillars for c in p)
    joy = strength.get("joy_elements") or []

    return WealthFindings(
        direct_wealth_stems=sum(1 for s in visible_stems if get_ten_god(dm, s) == "正财"),
        indirect_wealth_stems=sum(1 for s in visible_stems if get_ten_god(dm, s) == "偏财"),
        wealth_main_qi=main_qi,
        wealth_residual_qi=residual_qi,
        output_generates_wealth=output_count > 0 and wealth_count > 0,
        special_pattern=_detect_special_pattern(chart),
        ten_god_counts=ten_god_counts,
        branches=branches,
        wealth_element_count=element_tags.count(wealth_wx),
        favorable_element=joy[0] if joy else None,
    )
