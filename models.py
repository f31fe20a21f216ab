"""
Pydantic records shared by the content engine, the wealth scorer and the API.
"""
from typing import Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BirthFormData(BaseModel):
    """Birth date/time fields used to derive the content seed."""
    year: int = Field(1990, description="Year of birth")
    month: int = Field(5, description="Month of birth")
    day: int = Field(15, description="Day of birth")
    hour: int = Field(12, description="Hour of birth (0-23)")


class ChartInput(BaseModel):
    """Four pillars as returned by the chart derivation step."""
    year_pillar: str = Field(..., description="Year pillar (年柱), e.g. 庚午")
    month_pillar: str = Field(..., description="Month pillar (月柱)")
    day_pillar: str = Field(..., description="Day pillar (日柱)")
    hour_pillar: str = Field(..., description="Hour pillar (时柱)")
    wuxing: List[str] = Field(
        default_factory=list,
        description="Elemental composition per pillar, e.g. ['金火', '金火', '水水', '木火']",
    )
    day_master: str = Field(..., description="Day Master (日主)")

    @property
    def pillars(self) -> List[str]:
        return [self.year_pillar, self.month_pillar, self.day_pillar, self.hour_pillar]

    @property
    def element_tags(self) -> str:
        """All element characters in pillar order (8 for a full chart)."""
        return "".join(self.wuxing)


class ElementCount(BaseModel):
    wood: int = 0
    fire: int = 0
    earth: int = 0
    metal: int = 0
    water: int = 0


class WealthFindings(BaseModel):
    """Chart facts the wealth scorer works from."""
    direct_wealth_stems: int = Field(0, ge=0, description="正财 among visible stems")
    indirect_wealth_stems: int = Field(0, ge=0, description="偏财 among visible stems")
    wealth_main_qi: int = Field(0, ge=0, description="Branches whose main hidden stem is the wealth element")
    wealth_residual_qi: int = Field(0, ge=0, description="Branches holding the wealth element as a secondary hidden stem")
    output_generates_wealth: bool = Field(False, description="食伤生财 present")
    special_pattern: Optional[str] = Field(None, description="从儿 / 从旺 when the whole chart follows one force")
    ten_god_counts: Dict[str, int] = Field(default_factory=dict)
    branches: List[str] = Field(default_factory=list)
    wealth_element_count: int = Field(0, ge=0)
    favorable_element: Optional[str] = None


# --- Generated content ---

class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


def _text_or_empty(value):
    # Models sometimes answer null or a number for optional text
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class WealthAdvice(_AliasedModel):
    title: str = Field(..., min_length=1)
    advice: str = Field(..., min_length=1)
    lucky_direction: str = Field("", alias="luckyDirection")
    lucky_time: str = Field("", alias="luckyTime")
    suggestion: str = ""
    summary: Optional[str] = None

    @field_validator("lucky_direction", "lucky_time", "suggestion", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return _text_or_empty(value)


class HealthItem(_AliasedModel):
    action: str = Field(..., min_length=1)
    benefit: str = ""

    @field_validator("benefit", mode="before")
    @classmethod
    def _optional_benefit(cls, value):
        return _text_or_empty(value)

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_text(cls, data):
        # Some models answer "morning": "..." instead of an object
        if isinstance(data, str):
            return {"action": data}
        return data


class HealthAdvice(_AliasedModel):
    morning: HealthItem
    flow: HealthItem
    summary: Optional[str] = None


class GeneratedContent(_AliasedModel):
    """Everything a report card renders for one birth input."""
    personality: str
    career: str
    wealth: WealthAdvice
    health: HealthAdvice
    advice: str = ""
    love: str = ""
    vitamin: str = ""
    lucky_color: str = Field("", alias="luckyColor")
    element_balance: str = Field("", alias="elementBalance")
    has_filtered: bool = Field(False, alias="hasFiltered")
    source: str = Field("template", description="template / ai / default")
    model: Optional[str] = None


class AIEnvelope(_AliasedModel):
    """
    Shape an LLM response must have before it is accepted.
    Only personality, career, wealth.title/advice and health.morning/flow are required.
    """
    personality: str = Field(..., min_length=1)
    career: str = Field(..., min_length=1)
    wealth: WealthAdvice
    health: HealthAdvice
    advice: str = ""
    love: str = ""
    vitamin: str = ""
    lucky_color: str = Field("", alias="luckyColor")
    element_balance: str = Field("", alias="elementBalance")

    @field_validator("advice", "love", "vitamin", "lucky_color", "element_balance", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return _text_or_empty(value)


# --- Wealth score ---

class RadarItem(BaseModel):
    subject: str
    score: int = Field(..., ge=60, le=98)
    analysis: str


class WealthCompass(BaseModel):
    direction: str
    element: str
    lucky_item: str
    action_sop: str


class WealthScore(BaseModel):
    native_score: int = Field(..., ge=10, le=60)
    balance_multiplier: float
    yearly_luck_score: int = Field(..., ge=0, le=40)
    total_score: int = Field(..., ge=40, le=99)
    tier: str
    tier_tag: str = ""
    comment: str = ""
    radar: List[RadarItem] = Field(default_factory=list)
    compass: Optional[WealthCompass] = None
