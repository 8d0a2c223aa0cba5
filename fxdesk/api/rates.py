from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fxdesk.deps import get_rate_provider
from fxdesk.schemas.rates import RateOut, RatesOut
from fxdesk.services.errors import InstrumentNotFound
from fxdesk.services.rates import RateProvider

router = APIRouter(prefix="/api/rates", tags=["rates"])


@router.get("", response_model=RatesOut)
def get_rates(rates: RateProvider = Depends(get_rate_provider)):
    """Current price for every supported pair (fresh sample each)."""
    return RatesOut(rates=rates.all_rates(), timestamp=datetime.now(timezone.utc))


# `:path` so that "EUR/USD" reaches the handler in one piece
@router.get("/{instrument:path}", response_model=RateOut)
def get_rate(instrument: str, rates: RateProvider = Depends(get_rate_provider)):
    symbol = instrument.upper()
    if not rates.supports(symbol):
        raise InstrumentNotFound(f"Currency pair not found: {symbol}")

    rate = rates.current_rate(symbol)

    return RateOut(instrument=symbol, rate=rate, timestamp=datetime.now(timezone.utc))
