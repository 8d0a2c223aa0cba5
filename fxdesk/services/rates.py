# fxdesk/services/rates.py

import random
from typing import Dict, List, Mapping, Optional

from fxdesk.config import BASE_RATES, DEFAULT_RATE_JITTER


class RateProvider:
    """
    Synthetic market rates.

    Every call samples fresh jitter around the base price:
        rate = base * (1 + j),  j uniform in [-jitter, +jitter)
    Nothing is cached between calls.
    """

    def __init__(
        self,
        base_rates: Optional[Mapping[str, float]] = None,
        *,
        jitter: float = DEFAULT_RATE_JITTER,
        rng: Optional[random.Random] = None,
    ):
        self._base_rates: Dict[str, float] = {
            symbol.upper(): float(price)
            for symbol, price in (base_rates if base_rates is not None else BASE_RATES).items()
        }
        self._jitter = jitter
        self._rng = rng or random.Random()

    @property
    def instruments(self) -> List[str]:
        return list(self._base_rates)

    def supports(self, instrument: str) -> bool:
        return instrument.upper() in self._base_rates

    def current_rate(self, instrument: str) -> Optional[float]:
        base = self._base_rates.get(instrument.upper())
        if base is None:
            return None

        variation = (self._rng.random() - 0.5) * 2 * self._jitter
        return base * (1 + variation)

    def all_rates(self) -> Dict[str, float]:
        return {symbol: self.current_rate(symbol) for symbol in self._base_rates}
