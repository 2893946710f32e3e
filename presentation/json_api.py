"""
JSON API response types.

Structured camelCase responses for web API consumption.
Can be used with FastAPI, Flask, or any web framework.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from domain import (
    AnalysisResult,
    FundamentalScoreResult,
    Judgment,
    TechnicalIndicatorSnapshot,
    TechnicalScoreResult,
)


# ============================================================================
# Response Models
# ============================================================================

class CamelModel(BaseModel):
    """Base response model: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MACDResponse(CamelModel):
    macd: float
    signal: float
    histogram: float


class BollingerBandsResponse(CamelModel):
    upper: float
    middle: float
    lower: float


class MovingAveragesResponse(CamelModel):
    ma5: float
    ma25: float
    ma75: float


class StochasticResponse(CamelModel):
    k: float
    d: float


class IchimokuResponse(CamelModel):
    tenkan_sen: float
    kijun_sen: float
    senkou_span_a: float
    senkou_span_b: float


class IndicatorsResponse(CamelModel):
    """Latest indicator values."""
    rsi: float
    macd: MACDResponse
    bollinger_bands: BollingerBandsResponse
    moving_averages: MovingAveragesResponse
    stochastic: StochasticResponse
    ichimoku: IchimokuResponse


class TechnicalResponse(IndicatorsResponse):
    """API response for the technical analysis."""
    score: int
    reasons: list[str]
    risks: list[str]
    mode: str
    simplified: bool
    data_points: int | None = None
    defaulted: list[str]


class FundamentalResponse(CamelModel):
    """API response for the fundamental analysis."""
    per_score: int
    pbr_score: int
    roe_score: int
    dividend_score: int
    growth_score: int
    stability_score: int
    score: int
    reasons: list[str]
    risks: list[str]


class JudgmentResponse(CamelModel):
    """API response for the final judgment."""
    score: int
    signal: str
    recommendation: str
    reasons: list[str]
    risks: list[str]


class AnalysisResponse(CamelModel):
    """Full analysis API response for one instrument."""
    symbol: str
    name: str | None = None
    technical: TechnicalResponse
    fundamental: FundamentalResponse
    judgment: JudgmentResponse
    updated_at: datetime


class SnapshotResponse(IndicatorsResponse):
    """Indicator-only response (no scoring)."""
    symbol: str
    current_price: float
    defaulted: list[str]


class ErrorResponse(CamelModel):
    """One failed symbol in a batch."""
    symbol: str
    code: str | None = None
    message: str | None = None


class BatchResponse(CamelModel):
    """API response for a batch run."""
    generated_at: datetime
    results: list[AnalysisResponse]
    errors: list[ErrorResponse]
    total: int


# ============================================================================
# Conversion Functions
# ============================================================================

def _indicator_fields(snapshot: TechnicalIndicatorSnapshot) -> dict[str, Any]:
    return {
        "rsi": snapshot.rsi,
        "macd": MACDResponse(**snapshot.macd._asdict()),
        "bollinger_bands": BollingerBandsResponse(**snapshot.bollinger_bands._asdict()),
        "moving_averages": MovingAveragesResponse(**snapshot.moving_averages._asdict()),
        "stochastic": StochasticResponse(**snapshot.stochastic._asdict()),
        "ichimoku": IchimokuResponse(**snapshot.ichimoku._asdict()),
    }


def _technical_to_response(technical: TechnicalScoreResult) -> TechnicalResponse:
    """Convert TechnicalScoreResult to API response."""
    return TechnicalResponse(
        **_indicator_fields(technical.snapshot),
        score=technical.score,
        reasons=list(technical.reasons),
        risks=list(technical.risks),
        mode=technical.mode.value,
        simplified=technical.simplified,
        data_points=technical.data_points,
        defaulted=sorted(technical.snapshot.defaulted),
    )


def _fundamental_to_response(fundamental: FundamentalScoreResult) -> FundamentalResponse:
    """Convert FundamentalScoreResult to API response."""
    b = fundamental.breakdown
    return FundamentalResponse(
        per_score=b.per_score,
        pbr_score=b.pbr_score,
        roe_score=b.roe_score,
        dividend_score=b.dividend_score,
        growth_score=b.growth_score,
        stability_score=b.stability_score,
        score=fundamental.score,
        reasons=list(fundamental.reasons),
        risks=list(fundamental.risks),
    )


def _judgment_to_response(judgment: Judgment) -> JudgmentResponse:
    """Convert Judgment to API response."""
    return JudgmentResponse(
        score=judgment.score,
        signal=judgment.signal.value,
        recommendation=judgment.signal.code,
        reasons=list(judgment.reasons),
        risks=list(judgment.risks),
    )


def to_api_response(result: AnalysisResult) -> AnalysisResponse:
    """
    Convert AnalysisResult to API response.

    Args:
        result: Analysis result from the pipeline

    Returns:
        Structured API response
    """
    return AnalysisResponse(
        symbol=result.symbol,
        name=result.name,
        technical=_technical_to_response(result.technical),
        fundamental=_fundamental_to_response(result.fundamental),
        judgment=_judgment_to_response(result.judgment),
        updated_at=result.updated_at,
    )


def to_snapshot_response(symbol: str, snapshot: TechnicalIndicatorSnapshot) -> SnapshotResponse:
    """Convert an indicator snapshot to API response."""
    return SnapshotResponse(
        symbol=symbol,
        current_price=snapshot.current_price,
        defaulted=sorted(snapshot.defaulted),
        **_indicator_fields(snapshot),
    )


def to_error_response(
    symbol: str,
    detail: dict[str, Any] | None = None,
    message: str | None = None,
) -> ErrorResponse:
    """Convert an AnalysisError.to_dict() payload (or a bare message) to API response."""
    detail = detail or {}
    return ErrorResponse(
        symbol=symbol,
        code=detail.get("code"),
        message=detail.get("message") or message,
    )


def to_batch_response(
    results: list[AnalysisResult],
    errors: list[ErrorResponse] | None = None,
    generated_at: datetime | None = None,
) -> BatchResponse:
    """Convert a list of results (and failures) to a batch response."""
    return BatchResponse(
        generated_at=generated_at or datetime.now(),
        results=[to_api_response(r) for r in results],
        errors=errors or [],
        total=len(results),
    )


def to_json(result: AnalysisResult) -> dict[str, Any]:
    """
    Convert AnalysisResult to JSON-serializable dict.

    Args:
        result: Analysis result

    Returns:
        JSON-serializable dictionary with camelCase keys
    """
    response = to_api_response(result)
    return response.model_dump(mode="json", by_alias=True)
