# fxdesk/models/position.py

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fxdesk.models.enums import Direction, PositionStatus


@dataclass
class Position:
    """
    A single leveraged exposure held in memory by the ledger.

    Everything up to required_margin is fixed at open.
    close_price / close_time / realized_pnl are set once, on close.
    """

    id: str
    instrument: str
    direction: Direction
    quantity: Decimal
    leverage: Decimal
    open_price: Decimal
    open_time: datetime
    required_margin: Decimal
    status: PositionStatus = PositionStatus.OPEN

    close_price: Optional[Decimal] = None
    close_time: Optional[datetime] = None
    realized_pnl: Optional[Decimal] = None

    @property
    def is_open(self) -> bool:
        return self.status is PositionStatus.OPEN
