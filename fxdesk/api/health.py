from fastapi import APIRouter, Depends

from fxdesk.deps import get_ledger, get_rate_provider
from fxdesk.services.ledger import Ledger
from fxdesk.services.rates import RateProvider

router = APIRouter(tags=["system"])


@router.get("/health")
def health_check(
    rates: RateProvider = Depends(get_rate_provider),
    ledger: Ledger = Depends(get_ledger),
):
    return {
        "status": "healthy",
        "instruments": len(rates.instruments),
        "openPositions": ledger.open_position_count(),
    }
