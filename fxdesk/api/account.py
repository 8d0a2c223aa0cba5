from fastapi import APIRouter, Depends

from fxdesk.deps import get_ledger
from fxdesk.schemas.positions import AccountOut
from fxdesk.services.ledger import Ledger

router = APIRouter(prefix="/api/account", tags=["account"])


@router.get("", response_model=AccountOut)
def get_account(ledger: Ledger = Depends(get_ledger)):
    """Balance plus mark-to-market of OPEN positions only."""
    summary = ledger.account_summary()

    return AccountOut(
        balance=float(summary.balance),
        equity=float(summary.equity),
        unrealized_pnl=float(summary.unrealized_pnl),
        open_positions=summary.open_positions,
        used_margin=float(summary.used_margin),
    )
