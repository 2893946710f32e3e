"""Shared fixtures: synthetic daily price histories and stock bundles."""

from datetime import date, timedelta

import pytest

from domain import Fundamentals, PriceSeries, StockData


def price_rows(closes: list[float], start: date = date(2024, 1, 1)) -> list[dict]:
    """Daily OHLCV rows with a 1.0 high/low spread around each close."""
    return [
        {
            "date": (start + timedelta(days=i)).isoformat(),
            "open": c,
            "high": c + 1,
            "low": c - 1,
            "close": c,
            "volume": 10_000 + i,
        }
        for i, c in enumerate(closes)
    ]


def make_stock(
    symbol: str,
    closes: list[float],
    fundamentals: dict | None = None,
    name: str | None = None,
) -> StockData:
    return StockData(
        symbol=symbol,
        name=name,
        prices=PriceSeries.from_rows(price_rows(closes)),
        fundamentals=Fundamentals.model_validate(fundamentals or {}),
    )


@pytest.fixture
def rising_closes():
    """100 days rising by 1.0 a day."""
    return [100.0 + i for i in range(100)]


@pytest.fixture
def falling_closes():
    """100 days falling by 1.0 a day."""
    return [200.0 - i for i in range(100)]


@pytest.fixture
def value_fundamentals():
    """Cheap, profitable, dividend-paying company."""
    return {"per": 9, "pbr": 0.7, "roe": 18, "dividendYield": 3.0}


@pytest.fixture
def rising_stock(rising_closes, value_fundamentals):
    return make_stock("7203", rising_closes, value_fundamentals, name="Toyota Motor")


@pytest.fixture
def short_stock():
    """30 days of history: too short for a full analysis."""
    return make_stock("6758", [100.0 + (i % 5) for i in range(30)])


@pytest.fixture
def empty_stock():
    return StockData(symbol="9999")
