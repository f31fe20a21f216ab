"""
财运评分引擎 - rule-table wealth scoring from day master, strength and chart findings.

total = clamp(native * balance_multiplier + yearly_luck, 40, 99)

The tier, radar and compass tables are plain data so they can be swapped
without touching the scoring code.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from bazi_utils import (
    BRANCH_CLASHES,
    BRANCH_COMBOS,
    CONTROLLING,
    PRODUCING,
    WUXING_MAP,
    get_year_pillar,
)
from config import LOGGER_NAME
from models import RadarItem, WealthCompass, WealthFindings, WealthScore

logger = logging.getLogger(LOGGER_NAME)

NATIVE_BASE = 10
NATIVE_MAX = 60
SPECIAL_PATTERN_SCORE = 50
SPECIAL_PATTERNS = ("从儿", "从旺")

NATIVE_BONUSES = {
    "direct_wealth_stem": 10,    # 正财透干
    "indirect_wealth_stem": 15,  # 偏财透干
    "wealth_main_qi": 20,        # 财星为本气
    "wealth_residual_qi": 8,     # 财星为中气/余气
    "output_generates_wealth": 15,  # 食伤生财
}

# (strong, abundant) -> multiplier
BALANCE_MULTIPLIERS = {
    (True, True): 1.2,
    (False, True): 0.6,
    (True, False): 0.8,
    (False, False): 1.0,
}
ABUNDANT_WEALTH_THRESHOLD = 2

REFERENCE_YEAR = 2026
DEFAULT_REFERENCE_PILLAR = get_year_pillar(REFERENCE_YEAR)  # 丙午

# role of the year element for the day master -> (low, high)
YEARLY_LUCK_RANGES = {
    "财星": (30, 40),
    "食伤": (25, 35),
    "官杀": (15, 25),
    "印星": (20, 30),
    "比劫": (10, 20),
}
# 身强喜克泄耗, 身弱喜生扶
STRONG_FAVOURED_ROLES = ("财星", "食伤", "官杀")
CLASH_PENALTY = -10
COMBO_BONUS = 5
YEARLY_LUCK_MAX = 40

TOTAL_MIN = 40
TOTAL_MAX = 99

# Ascending (min_score, tier, tier_tag)
WEALTH_TIERS = (
    (40, "C1", "温饱安稳 · 资产1万以下"),
    (50, "C2", "小有积蓄 · 资产1万-10万"),
    (60, "B3", "稳步积累 · 资产10万-50万"),
    (70, "B4", "中产殷实 · 资产50万-300万"),
    (80, "A5", "富足有余 · 资产300万-1000万"),
    (88, "A6", "大富之象 · 资产1000万-1亿"),
    (95, "A7", "巨富格局 · 资产1亿以上"),
)

GOD_GROUPS = {
    "正财": ("正财",),
    "偏财": ("偏财",),
    "官杀": ("正官", "七杀"),
    "印星": ("正印", "偏印"),
    "食伤": ("食神", "伤官"),
    "比劫": ("比肩", "劫财"),
}

# subject, (group, mode) primary, (group, mode) secondary, analysis high, analysis low
RADAR_DIMENSIONS = (
    ("正财收入", ("正财", "presence"), ("官杀", "presence"),
     "正财有根，工资与主业收入稳定，适合在本职上深耕。",
     "正财不显，主业收入起伏较大，宜提升专业壁垒换取稳定现金流。"),
    ("偏财机遇", ("偏财", "presence"), ("食伤", "presence"),
     "偏财灵动，副业与投资嗅觉敏锐，可适度把握额外机会。",
     "偏财偏弱，不宜重仓投机，以稳健配置为主。"),
    ("事业财势", ("官杀", "presence"), ("印星", "presence"),
     "官星助力，平台与职位能带来财富增量。",
     "官星不旺，宜以个人能力与作品积累口碑。"),
    ("守财能力", ("比劫", "absence"), ("印星", "presence"),
     "比劫不扰，守财有道，积蓄能稳步增长。",
     "比劫较多，合伙与借贷需谨慎，建议设立强制储蓄。"),
    ("贵人助财", ("印星", "presence"), ("食伤", "presence"),
     "印星护身，常得长辈与贵人提携。",
     "贵人缘需主动经营，多参与行业社群拓展人脉。"),
)
RADAR_MIN = 60
RADAR_MAX = 98
RADAR_HIGH_SCORE = 80
PRIMARY_WEIGHT = 0.7
SECONDARY_WEIGHT = 0.3

COMPASS_TABLE = {
    "木": {
        "direction": "正东方",
        "lucky_item": "绿植盆栽或木质手串",
        "action_sop": "在工位东侧摆放一盆绿植，每周固定一天复盘收支，让财富像树木一样稳步生长。",
    },
    "火": {
        "direction": "正南方",
        "lucky_item": "红色手绳或暖色台灯",
        "action_sop": "重要的商务沟通安排在上午，多曝光自己的作品与成果，以热度带动财运。",
    },
    "土": {
        "direction": "东北方",
        "lucky_item": "黄水晶或陶瓷摆件",
        "action_sop": "优先配置稳健型资产，建立三到六个月的应急储备，以厚土承载财富。",
    },
    "金": {
        "direction": "正西方",
        "lucky_item": "金属饰品或白色钱包",
        "action_sop": "为每一笔支出设定预算上限，签约与决策前列清单逐项核对，以决断守住财富。",
    },
    "水": {
        "direction": "正北方",
        "lucky_item": "流水摆件或黑曜石",
        "action_sop": "保持信息流动，定期与行业伙伴交流，顺势而为寻找新的收入渠道。",
    },
}

_STRENGTH_ALIASES = {
    "strong": True, "身强": True, "身旺": True,
    "weak": False, "身弱": False,
}


def _clamp(value, low, high):
    return max(low, min(high, value))


def _group_count(findings: WealthFindings, group: str) -> int:
    return sum(findings.ten_god_counts.get(god, 0) for god in GOD_GROUPS[group])


def year_role(dm_wx: str, year_wx: str) -> str:
    """Role the year element plays for the day master (十神大类)."""
    if year_wx == dm_wx:
        return "比劫"
    if PRODUCING[dm_wx] == year_wx:
        return "食伤"
    if CONTROLLING[dm_wx] == year_wx:
        return "财星"
    if CONTROLLING[year_wx] == dm_wx:
        return "官杀"
    return "印星"


class WealthScoringEngine:
    """Evaluates the wealth rule tables for one chart."""

    def __init__(
        self,
        reference_pillar: str = DEFAULT_REFERENCE_PILLAR,
        tiers=WEALTH_TIERS,
        radar_dimensions=RADAR_DIMENSIONS,
        compass_table=COMPASS_TABLE,
    ):
        self.reference_pillar = reference_pillar
        self.tiers = tiers
        self.radar_dimensions = radar_dimensions
        self.compass_table = compass_table

    def native_score(self, findings: WealthFindings) -> int:
        if findings.special_pattern in SPECIAL_PATTERNS:
            return SPECIAL_PATTERN_SCORE

        score = NATIVE_BASE
        score += NATIVE_BONUSES["direct_wealth_stem"] * findings.direct_wealth_stems
        score += NATIVE_BONUSES["indirect_wealth_stem"] * findings.indirect_wealth_stems
        score += NATIVE_BONUSES["wealth_main_qi"] * findings.wealth_main_qi
        score += NATIVE_BONUSES["wealth_residual_qi"] * findings.wealth_residual_qi
        if findings.output_generates_wealth:
            score += NATIVE_BONUSES["output_generates_wealth"]
        return min(score, NATIVE_MAX)

    @staticmethod
    def is_wealth_abundant(findings: WealthFindings) -> bool:
        total = (
            findings.direct_wealth_stems
            + findings.indirect_wealth_stems
            + findings.wealth_main_qi
            + findings.wealth_residual_qi
        )
        return total >= ABUNDANT_WEALTH_THRESHOLD

    def balance_multiplier(self, is_strong: bool, findings: WealthFindings) -> float:
        return BALANCE_MULTIPLIERS[(is_strong, self.is_wealth_abundant(findings))]

    def yearly_luck_score(self, dm_wx: str, is_strong: bool, findings: WealthFindings) -> int:
        year_stem, year_branch = self.reference_pillar[0], self.reference_pillar[1]
        role = year_role(dm_wx, WUXING_MAP[year_stem])
        low, high = YEARLY_LUCK_RANGES[role]
        favoured = (role in STRONG_FAVOURED_ROLES) == is_strong
        score = high if favoured else low

        pairs = {frozenset([branch, year_branch]) for branch in findings.branches}
        if pairs & BRANCH_CLASHES:
            score += CLASH_PENALTY
        if pairs & BRANCH_COMBOS:
            score += COMBO_BONUS
        return _clamp(score, 0, YEARLY_LUCK_MAX)

    def tier_for(self, total_score: int) -> tuple:
        tier, tag = self.tiers[0][1], self.tiers[0][2]
        for min_score, name, tier_tag in self.tiers:
            if total_score >= min_score:
                tier, tag = name, tier_tag
        return tier, tag

    @staticmethod
    def _factor(count: int, mode: str) -> int:
        capped = min(count, 3)
        if mode == "absence":
            return 95 - 12 * capped
        return 60 + 14 * capped

    def radar(self, findings: WealthFindings) -> list:
        items = []
        for subject, primary, secondary, high_text, low_text in self.radar_dimensions:
            p = self._factor(_group_count(findings, primary[0]), primary[1])
            s = self._factor(_group_count(findings, secondary[0]), secondary[1])
            score = int(_clamp(round(p * PRIMARY_WEIGHT + s * SECONDARY_WEIGHT), RADAR_MIN, RADAR_MAX))
            items.append(RadarItem(
                subject=subject,
                score=score,
                analysis=high_text if score >= RADAR_HIGH_SCORE else low_text,
            ))
        return items

    def compass(self, dm_wx: str, findings: WealthFindings) -> WealthCompass:
        """财星方位; falls back to the favourable element when the chart has no wealth element."""
        element = CONTROLLING[dm_wx]
        if findings.wealth_element_count == 0 and findings.favorable_element in self.compass_table:
            element = findings.favorable_element
        return WealthCompass(element=element, **self.compass_table[element])

    def _degraded(self, findings: Optional[WealthFindings] = None) -> WealthScore:
        total = _clamp(NATIVE_BASE, TOTAL_MIN, TOTAL_MAX)
        tier, tag = self.tier_for(total)
        return WealthScore(
            native_score=NATIVE_BASE,
            balance_multiplier=1.0,
            yearly_luck_score=0,
            total_score=total,
            tier=tier,
            tier_tag=tag,
            comment="命盘信息不足，财运按基准分估算。",
            radar=self.radar(findings or WealthFindings()),
            compass=None,
        )

    def score(self, day_master: str, strength, findings) -> WealthScore:
        """Never raises: malformed inputs yield the baseline score."""
        try:
            dm_wx = WUXING_MAP[day_master]
            is_strong = _STRENGTH_ALIASES[strength] if isinstance(strength, str) else bool(strength["is_strong"])
            if not isinstance(findings, WealthFindings):
                findings = WealthFindings.model_validate(findings)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.warning("Wealth scoring inputs malformed, using baseline: %s", e)
            return self._degraded()

        native = self.native_score(findings)
        multiplier = self.balance_multiplier(is_strong, findings)
        yearly = self.yearly_luck_score(dm_wx, is_strong, findings)
        total = int(_clamp(round(native * multiplier + yearly), TOTAL_MIN, TOTAL_MAX))
        tier, tag = self.tier_for(total)
        role = year_role(dm_wx, WUXING_MAP[self.reference_pillar[0]])

        return WealthScore(
            native_score=native,
            balance_multiplier=multiplier,
            yearly_luck_score=yearly,
            total_score=total,
            tier=tier,
            tier_tag=tag,
            comment=f"综合财运指数{total}分，位列{tier}。{self.reference_pillar}流年为妳的{role}之年。",
            radar=self.radar(findings),
            compass=self.compass(dm_wx, findings),
        )


_DEFAULT_ENGINE = WealthScoringEngine()


def score_wealth(day_master: str, strength, findings) -> WealthScore:
    return _DEFAULT_ENGINE.score(day_master, strength, findings)
