"""
FastAPI Backend for Vita-Me (BaZi content cards)

Provides RESTful endpoints for chart derivation, templated content,
wealth scoring and AI interpretation.
"""
from typing import Optional, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from config import setup_logging
from ai_interpreter import (
    AuthenticationFailed,
    ConfigurationError,
    InterpretationError,
    ResponseFormatError,
    RetriesExhausted,
    generate_interpretation,
)
from bazi_utils import (
    calculate_chart,
    calculate_strength,
    collect_wealth_findings,
    count_elements,
    parse_birth_form,
)
from logic import synthesize
from models import ChartInput, ElementCount, GeneratedContent, WealthScore
from templates import DEFAULT_CONTENT
from wealth import score_wealth

logger = setup_logging()


# --- Pydantic Models for Request/Response ---

class BirthInput(BaseModel):
    """Birth date and time as entered on the form."""
    date: str = Field(..., description="Birth date, YYYY-MM-DD", examples=["1990-05-15"])
    time: str = Field("12:00", description="Birth time, HH:MM", examples=["12:00"])


class ChartResponse(BaseModel):
    """Response for /api/chart endpoint."""
    chart: ChartInput
    elements: ElementCount
    strength: str = Field(..., description="strong / weak")
    joy_elements: List[str] = Field(default_factory=list, description="Favourable elements (喜用神)")
    score_info: Optional[str] = None


_ERROR_STATUS = {
    ConfigurationError: 503,
    AuthenticationFailed: 502,
    ResponseFormatError: 502,
    RetriesExhausted: 504,
}


# --- FastAPI App Initialization ---

app = FastAPI(
    title="Vita-Me API",
    description="八字生命图谱 - 排盘、模板内容、财运评分与 AI 解读",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- API Endpoints ---

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Vita-Me API is running"}


@app.post("/api/chart", response_model=ChartResponse)
def get_chart(data: BirthInput):
    """Four pillars, element counts and day-master strength."""
    chart = calculate_chart(data.date, data.time)
    strength = calculate_strength(chart)
    return ChartResponse(
        chart=chart,
        elements=count_elements(chart.wuxing),
        strength=strength["result"],
        joy_elements=strength["joy_elements"],
        score_info=strength["score_info"],
    )


@app.post("/api/content", response_model=GeneratedContent)
def get_content(data: BirthInput):
    """Deterministic templated content for a birth input."""
    chart = calculate_chart(data.date, data.time)
    form = parse_birth_form(data.date, data.time)
    return synthesize(chart, form)


@app.post("/api/wealth", response_model=WealthScore)
def get_wealth(data: BirthInput):
    """Wealth score, tier, radar and compass."""
    chart = calculate_chart(data.date, data.time)
    strength = calculate_strength(chart)
    findings = collect_wealth_findings(chart, strength)
    return score_wealth(chart.day_master, strength["result"], findings)


@app.post("/api/interpretation", response_model=GeneratedContent)
def get_interpretation(data: BirthInput, fallback: bool = False):
    """
    AI-generated content.

    With fallback=true any AI failure returns the static default content
    instead of an error response.
    """
    chart = calculate_chart(data.date, data.time)
    form = parse_birth_form(data.date, data.time)
    try:
        return generate_interpretation(chart, form)
    except InterpretationError as e:
        if fallback:
            logger.info("AI interpretation failed (%s), serving default content", e.kind)
            return DEFAULT_CONTENT
        raise HTTPException(
            status_code=_ERROR_STATUS.get(type(e), 500),
            detail=f"AI interpretation error ({e.kind}): {e}",
        )


# --- Run with: uvicorn main:app --reload ---
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
