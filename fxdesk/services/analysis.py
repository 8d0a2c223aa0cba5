# fxdesk/services/analysis.py

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from fxdesk.services.errors import InstrumentNotFound
from fxdesk.services.rates import RateProvider


@dataclass(frozen=True)
class Analysis:
    sentiment: str
    confidence: int
    reasoning: str
    recommendation: str
    target_price: float
    stop_loss: float


@dataclass(frozen=True)
class AnalysisResult:
    instrument: str
    current_price: float
    analysis: Analysis
    timestamp: datetime


class AnalysisProvider(ABC):
    """Anything that can turn (instrument, prompt) into an AnalysisResult."""

    @abstractmethod
    def analyze(self, instrument: str, prompt: str) -> AnalysisResult:
        ...


def _bullish(instrument: str, rate: float) -> Analysis:
    return Analysis(
        sentiment="bullish",
        confidence=75,
        reasoning=(
            f"Technical indicators show strong upward momentum for {instrument}. "
            "RSI indicates oversold conditions with potential for reversal."
        ),
        recommendation="BUY",
        target_price=rate * 1.02,
        stop_loss=rate * 0.98,
    )


def _bearish(instrument: str, rate: float) -> Analysis:
    return Analysis(
        sentiment="bearish",
        confidence=68,
        reasoning=(
            f"Market sentiment suggests downward pressure on {instrument}. "
            "Economic indicators point to potential weakness."
        ),
        recommendation="SELL",
        target_price=rate * 0.98,
        stop_loss=rate * 1.02,
    )


def _neutral(instrument: str, rate: float) -> Analysis:
    return Analysis(
        sentiment="neutral",
        confidence=45,
        reasoning=f"Mixed signals for {instrument}. Market consolidation expected with sideways movement.",
        recommendation="HOLD",
        target_price=rate,
        stop_loss=rate * 0.99,
    )


TEMPLATES: List[Callable[[str, float], Analysis]] = [_bullish, _bearish, _neutral]


class TemplateAnalysisProvider(AnalysisProvider):
    """
    Canned analysis picked by prompt keywords.

    - "buy" / "bullish"  -> bullish template
    - "sell" / "bearish" -> bearish template
    - anything else      -> random template
    """

    def __init__(self, rates: RateProvider, rng: Optional[random.Random] = None):
        self._rates = rates
        self._rng = rng or random.Random()

    def _pick(self, prompt: str) -> Callable[[str, float], Analysis]:
        text = prompt.lower()
        if "buy" in text or "bullish" in text:
            return _bullish
        if "sell" in text or "bearish" in text:
            return _bearish
        return self._rng.choice(TEMPLATES)

    def analyze(self, instrument: str, prompt: str) -> AnalysisResult:
        symbol = instrument.upper()
        rate = self._rates.current_rate(symbol)
        if rate is None:
            raise InstrumentNotFound(f"Currency pair not supported: {symbol}")

        template = self._pick(prompt)

        return AnalysisResult(
            instrument=symbol,
            current_price=rate,
            analysis=template(symbol, rate),
            timestamp=datetime.now(timezone.utc),
        )
