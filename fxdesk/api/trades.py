from fastapi import APIRouter, Depends

from fxdesk.deps import get_ledger
from fxdesk.schemas.positions import PositionOut, TradeOut, TradeRequest
from fxdesk.services.ledger import Ledger

router = APIRouter(prefix="/api/trade", tags=["trades"])


@router.post("", response_model=TradeOut)
def open_trade(payload: TradeRequest, ledger: Ledger = Depends(get_ledger)):
    """
    Open a simulated position at the current rate.

    Reserves quantity * rate / leverage from the balance.
    Rejected outright if the balance cannot cover it.
    """
    position, balance = ledger.open_position(
        instrument=payload.instrument,
        direction=payload.direction,
        quantity=payload.quantity,
        leverage=payload.leverage,
    )

    return TradeOut(
        message="Position executed successfully",
        position=PositionOut.from_position(position),
        remaining_balance=float(balance),
    )
