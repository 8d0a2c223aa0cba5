# fxdesk/api/positions.py

from fastapi import APIRouter, Depends

from fxdesk.deps import get_ledger
from fxdesk.schemas.positions import (
    CloseOut,
    PositionOut,
    PositionsOut,
    PositionWithPnLOut,
    _f,
)
from fxdesk.services.ledger import Ledger

router = APIRouter(prefix="/api/positions", tags=["positions"])


@router.get("", response_model=PositionsOut)
def get_positions(ledger: Ledger = Depends(get_ledger)):
    """
    Every position in open order, each with a fresh price.
    totalPnL = live PnL of OPEN + realized PnL of CLOSED.
    """
    report = ledger.list_positions()

    return PositionsOut(
        positions=[
            PositionWithPnLOut.from_position(
                v.position,
                current_price=_f(v.current_price),
                realized_pnl=float(v.pnl),
            )
            for v in report.positions
        ],
        balance=float(report.balance),
        total_pnl=float(report.total_pnl),
    )


@router.get("/{position_id}", response_model=PositionOut)
def get_position(position_id: str, ledger: Ledger = Depends(get_ledger)):
    return PositionOut.from_position(ledger.get_position(position_id))


@router.post("/{position_id}/close", response_model=CloseOut)
def close_position(position_id: str, ledger: Ledger = Depends(get_ledger)):
    position, balance = ledger.close_position(position_id)

    return CloseOut(
        message="Position closed successfully",
        position=PositionOut.from_position(position),
        new_balance=float(balance),
    )
