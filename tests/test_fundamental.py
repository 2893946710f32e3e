"""
Tests for the fundamental scorer.

Tests cover:
- Threshold table edges (strict upper bounds, missing values)
- Growth and stability additive scores
- Weighted total, narrative and risks
"""

import pytest

from domain import FUNDAMENTAL_WEIGHTS, Fundamentals, ScoreTable, score_fundamental
from domain.fundamental import (
    NEUTRAL_REASON,
    NO_RISK,
    FundamentalWeights,
    score_dividend,
    score_growth,
    score_pbr,
    score_per,
    score_roe,
    score_stability,
)


class TestScoreTables:
    """Bucket lookups use strict upper bounds."""

    @pytest.mark.parametrize("per,expected", [
        (5, 85),
        (8, 80),
        (14.9, 75),
        (20, 50),
        (34.9, 35),
        (35, 20),
        (0, 50),
        (-3, 50),
        (None, 50),
    ])
    def test_per(self, per, expected):
        assert score_per(per) == expected

    @pytest.mark.parametrize("pbr,expected", [
        (0.3, 90),
        (0.5, 85),
        (0.9, 80),
        (1.2, 70),
        (2.5, 40),
        (4.0, 25),
        (None, 50),
    ])
    def test_pbr(self, pbr, expected):
        assert score_pbr(pbr) == expected

    @pytest.mark.parametrize("roe,expected", [
        (-0.1, 20),
        (0, 30),
        (5, 45),
        (10, 70),
        (18, 85),
        (30, 90),
        (35, 80),
        (None, 50),
    ])
    def test_roe(self, roe, expected):
        assert score_roe(roe) == expected

    @pytest.mark.parametrize("dividend_yield,expected", [
        (0.4, 45),
        (1.0, 55),
        (2.0, 75),
        (3.0, 85),
        (6.0, 70),
        (8.0, 50),
        (-0.5, 45),
        (0, 40),
        (None, 40),
    ])
    def test_dividend(self, dividend_yield, expected):
        assert score_dividend(dividend_yield) == expected

    def test_unordered_bounds_rejected(self):
        with pytest.raises(ValueError, match="ascending"):
            ScoreTable(buckets=((10, 50), (5, 60)), fallback=0, missing=0)


class TestGrowthAndStability:
    """Additive sub-scores around 50."""

    def test_growth_neutral(self):
        assert score_growth(Fundamentals()) == 50

    def test_growth_small_cap_high_roe(self):
        f = Fundamentals(market_cap=50e9, roe=20)
        assert score_growth(f) == 75

    def test_growth_large_cap(self):
        assert score_growth(Fundamentals(market_cap=2e12)) == 53

    def test_stability_large_steady_payer(self):
        f = Fundamentals(market_cap=6e12, roe=12, dividend_yield=2.5, pbr=1.2)
        assert score_stability(f) == 88

    def test_stability_distressed(self):
        f = Fundamentals(pbr=0.4, roe=3)
        assert score_stability(f) == 35

    @pytest.mark.parametrize("pbr,expected", [
        (0.4, 35),
        (-1.2, 35),
        (0, 50),
        (0.5, 50),
    ])
    def test_stability_low_pbr(self, pbr, expected):
        assert score_stability(Fundamentals(pbr=pbr)) == expected


class TestWeights:
    """Weight set validation."""

    def test_default_sums_to_one(self):
        w = FUNDAMENTAL_WEIGHTS
        assert w.per + w.pbr + w.roe + w.dividend + w.growth + w.stability == pytest.approx(1.0)

    def test_bad_weights_rejected(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            FundamentalWeights(per=0.5)


class TestScoreFundamental:
    """Weighted total and narrative."""

    def test_value_stock(self, value_fundamentals):
        result = score_fundamental(Fundamentals.model_validate(value_fundamentals))
        assert result.breakdown.as_dict() == {
            "per": 80,
            "pbr": 85,
            "roe": 85,
            "dividend": 85,
            "growth": 60,
            "stability": 68,
        }
        assert result.score == 79
        assert result.reasons == (
            "PER of 9.0x looks undervalued",
            "PBR of 0.70x is cheap relative to net assets",
            "ROE of 18.0% shows high profitability",
            "Dividend yield of 3.00% is attractive",
        )
        assert result.risks == (NO_RISK,)

    def test_empty_fundamentals_are_neutral(self):
        result = score_fundamental(Fundamentals())
        assert result.score == 49
        assert result.reasons == (NEUTRAL_REASON,)
        assert result.risks == (NO_RISK,)

    def test_expensive_and_distressed(self):
        f = Fundamentals(per=40, pbr=0.4, roe=-5, dividend_yield=7)
        result = score_fundamental(f)
        assert "PER of 40.0x looks expensive" in result.reasons
        assert "ROE of -5.0% points to profitability challenges" in result.reasons
        assert result.risks == (
            "PER of 40.0x is high; risk of expectations resetting",
            "PBR below 0.5x; check the financial condition",
            "Profitability needs to improve",
            "Dividend yield is high; watch for a dividend cut",
        )

    def test_negative_pbr_risk(self):
        result = score_fundamental(Fundamentals(pbr=-1.2))
        assert result.breakdown.pbr_score == 50
        assert result.breakdown.stability_score == 35
        assert "PBR below 0.5x; check the financial condition" in result.risks

    def test_weak_stability_risk(self):
        result = score_fundamental(Fundamentals(pbr=0.4, roe=3))
        assert result.breakdown.stability_score == 35
        assert "Financial stability has room for improvement" in result.risks

    def test_growth_and_stability_reasons(self):
        f = Fundamentals(market_cap=6e12, roe=20, dividend_yield=2.0)
        result = score_fundamental(f)
        assert result.breakdown.growth_score == 60
        assert result.breakdown.stability_score == 88
        assert "Financial stability is high" in result.reasons

    def test_score_in_range(self):
        for f in (
            Fundamentals(per=1, pbr=0.1, roe=100, dividend_yield=20, market_cap=1),
            Fundamentals(per=500, pbr=50, roe=-80, dividend_yield=0.01),
        ):
            assert 0 <= score_fundamental(f).score <= 100
