from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from fxdesk.models.enums import Direction, PositionStatus
from fxdesk.models.position import Position
from fxdesk.schemas.common import CamelModel


def _f(x):
    return float(x) if x is not None else None


class TradeRequest(BaseModel):
    instrument: Optional[str] = Field(None, validation_alias=AliasChoices("pair", "instrument"))
    direction: Optional[str] = Field(None, validation_alias=AliasChoices("action", "direction"))
    quantity: Optional[float] = Field(None, validation_alias=AliasChoices("amount", "quantity"))
    leverage: Optional[float] = 1


class PositionOut(CamelModel):
    id: str
    instrument: str = Field(alias="pair")
    direction: Direction = Field(alias="action")
    quantity: float = Field(alias="amount")
    leverage: float
    open_price: float
    open_time: datetime
    status: PositionStatus
    required_margin: float

    close_price: Optional[float] = None
    close_time: Optional[datetime] = None
    realized_pnl: Optional[float] = Field(None, alias="pnl")

    @classmethod
    def from_position(cls, p: Position, **extra):
        fields = dict(
            id=p.id,
            instrument=p.instrument,
            direction=p.direction,
            quantity=_f(p.quantity),
            leverage=_f(p.leverage),
            open_price=_f(p.open_price),
            open_time=p.open_time,
            status=p.status,
            required_margin=_f(p.required_margin),
            close_price=_f(p.close_price),
            close_time=p.close_time,
            realized_pnl=_f(p.realized_pnl),
        )
        fields.update(extra)
        return cls(**fields)


class PositionWithPnLOut(PositionOut):
    current_price: Optional[float] = None
    # live PnL for OPEN, realized PnL for CLOSED
    realized_pnl: float = Field(0.0, alias="pnl")


class TradeOut(CamelModel):
    message: str
    position: PositionOut
    remaining_balance: float


class CloseOut(CamelModel):
    message: str
    position: PositionOut
    new_balance: float


class PositionsOut(CamelModel):
    positions: List[PositionWithPnLOut]
    balance: float
    total_pnl: float = Field(alias="totalPnL")


class AccountOut(CamelModel):
    balance: float
    equity: float
    unrealized_pnl: float = Field(alias="totalPnL")
    open_positions: int
    used_margin: float
