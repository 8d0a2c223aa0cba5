# fxdesk/services/ledger.py

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from fxdesk.config import DEFAULT_INITIAL_BALANCE
from fxdesk.models import Direction, Position, PositionStatus
from fxdesk.services.errors import (
    AlreadyClosed,
    InstrumentNotFound,
    InsufficientBalance,
    InvalidDirection,
    InvalidLeverage,
    InvalidQuantity,
    MissingField,
    PositionNotFound,
)
from fxdesk.services.pnl import as_decimal, position_pnl, required_margin, round2
from fxdesk.services.rates import RateProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionView:
    position: Position
    current_price: Optional[Decimal]
    pnl: Decimal


@dataclass(frozen=True)
class PositionsReport:
    positions: List[PositionView]
    balance: Decimal
    total_pnl: Decimal


@dataclass(frozen=True)
class AccountSummary:
    balance: Decimal
    equity: Decimal
    unrealized_pnl: Decimal
    open_positions: int
    used_margin: Decimal


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _parse_direction(value) -> Direction:
    if isinstance(value, Direction):
        return value
    try:
        return Direction(str(value).strip().upper())
    except ValueError:
        raise InvalidDirection("Action must be BUY or SELL") from None


def _parse_positive(value, name: str, error) -> Decimal:
    if isinstance(value, bool):
        raise error(f"{name} must be a number")
    try:
        d = as_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise error(f"{name} must be a number") from None
    if not d.is_finite() or d <= 0:
        raise error(f"{name} must be greater than zero")
    return d


class Ledger:
    """
    In-memory account: one cash balance plus an append-only list of positions.

    Balance rules:
    - open:  balance -= required_margin
    - close: balance += required_margin + realized_pnl

    Every mutating call validates first and mutates last, under one lock,
    so a rejected call leaves no trace.
    """

    def __init__(self, rates: RateProvider, initial_balance=DEFAULT_INITIAL_BALANCE):
        self._rates = rates
        self._balance = as_decimal(initial_balance)
        self._positions: List[Position] = []
        self._lock = threading.RLock()

    @property
    def balance(self) -> Decimal:
        with self._lock:
            return self._balance

    def _current_price(self, instrument: str) -> Optional[Decimal]:
        rate = self._rates.current_rate(instrument)
        return as_decimal(rate) if rate is not None else None

    def _find(self, position_id: str) -> Position:
        for p in self._positions:
            if p.id == position_id:
                return p
        raise PositionNotFound(f"Position not found: {position_id}")

    # =================================================
    # OPEN
    # =================================================
    def open_position(
        self,
        instrument,
        direction,
        quantity,
        leverage=1,
    ) -> Tuple[Position, Decimal]:
        """Open a position at the current rate. Returns (position, new balance)."""
        if _is_blank(instrument) or _is_blank(direction) or _is_blank(quantity):
            raise MissingField("Pair, action, and amount are required")

        symbol = str(instrument).strip().upper()
        side = _parse_direction(direction)
        qty = _parse_positive(quantity, "Amount", InvalidQuantity)
        lev = _parse_positive(1 if leverage is None else leverage, "Leverage", InvalidLeverage)

        with self._lock:
            price = self._current_price(symbol)
            if price is None:
                raise InstrumentNotFound(f"Currency pair not found: {symbol}")

            margin = required_margin(qty, price, lev)
            if margin > self._balance:
                logger.warning(
                    "Rejected %s %s x%s: margin %s exceeds balance %s",
                    side.value, symbol, qty, margin, self._balance,
                )
                raise InsufficientBalance("Insufficient balance")

            position = Position(
                id=str(uuid.uuid4()),
                instrument=symbol,
                direction=side,
                quantity=qty,
                leverage=lev,
                open_price=price,
                open_time=datetime.now(timezone.utc),
                required_margin=margin,
            )
            self._positions.append(position)
            self._balance -= margin

            logger.info(
                "Opened %s %s %s qty=%s lev=%s @ %s (margin %s, balance %s)",
                position.id, side.value, symbol, qty, lev, price, margin, self._balance,
            )
            return replace(position), self._balance

    # =================================================
    # READ
    # =================================================
    def get_position(self, position_id: str) -> Position:
        with self._lock:
            return replace(self._find(position_id))

    def list_positions(self) -> PositionsReport:
        """
        All positions in open order with a live price.

        OPEN positions are marked to market (rounded per position).
        CLOSED positions report their stored realized PnL.
        An instrument the rate source can no longer price counts as 0 PnL.
        """
        with self._lock:
            views: List[PositionView] = []
            for p in self._positions:
                current = self._current_price(p.instrument)

                if p.is_open:
                    pnl = Decimal("0")
                    if current is not None:
                        pnl = position_pnl(p.direction, p.open_price, current, p.quantity, p.leverage)
                    pnl = round2(pnl)
                else:
                    pnl = p.realized_pnl

                views.append(PositionView(position=replace(p), current_price=current, pnl=pnl))

            total = round2(sum((v.pnl for v in views), Decimal("0")))
            return PositionsReport(positions=views, balance=self._balance, total_pnl=total)

    # =================================================
    # CLOSE
    # =================================================
    def close_position(self, position_id: str) -> Tuple[Position, Decimal]:
        """Close at the current rate. Returns (position, new balance)."""
        with self._lock:
            position = self._find(position_id)
            if not position.is_open:
                raise AlreadyClosed("Position is already closed")

            # Instruments are assumed to stay priceable between open and close;
            # if the table changed, refuse rather than guess a price.
            price = self._current_price(position.instrument)
            if price is None:
                raise InstrumentNotFound(f"Currency pair not found: {position.instrument}")

            pnl = round2(
                position_pnl(
                    position.direction,
                    position.open_price,
                    price,
                    position.quantity,
                    position.leverage,
                )
            )

            position.status = PositionStatus.CLOSED
            position.close_price = price
            position.close_time = datetime.now(timezone.utc)
            position.realized_pnl = pnl

            self._balance += position.required_margin + pnl

            logger.info(
                "Closed %s %s @ %s (pnl %s, balance %s)",
                position.id, position.instrument, price, pnl, self._balance,
            )
            return replace(position), self._balance

    # =================================================
    # ACCOUNT
    # =================================================
    def account_summary(self) -> AccountSummary:
        """
        Balance, equity and margin over OPEN positions only.

        Per-position PnL is summed unrounded; only the total is rounded.
        """
        with self._lock:
            open_positions = [p for p in self._positions if p.is_open]

            unrealized = Decimal("0")
            for p in open_positions:
                current = self._current_price(p.instrument)
                if current is None:
                    continue
                unrealized += position_pnl(p.direction, p.open_price, current, p.quantity, p.leverage)

            used_margin = sum((p.required_margin for p in open_positions), Decimal("0"))

            return AccountSummary(
                balance=self._balance,
                equity=self._balance + unrealized,
                unrealized_pnl=round2(unrealized),
                open_positions=len(open_positions),
                used_margin=used_margin,
            )

    def open_position_count(self) -> int:
        with self._lock:
            return sum(1 for p in self._positions if p.is_open)
