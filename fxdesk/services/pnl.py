from decimal import ROUND_HALF_UP, Decimal

from fxdesk.models.enums import Direction

_CENT = Decimal("0.01")


def as_decimal(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


def round2(x) -> Decimal:
    return as_decimal(x).quantize(_CENT, rounding=ROUND_HALF_UP)


def required_margin(quantity, price, leverage) -> Decimal:
    return as_decimal(quantity) * as_decimal(price) / as_decimal(leverage)


def position_pnl(
    direction: Direction,
    open_price,
    current_price,
    quantity,
    leverage,
) -> Decimal:
    """
    Direction-aware, leveraged PnL. Not rounded.

    BUY  profits when current > open
    SELL profits when current < open
    """
    open_ = as_decimal(open_price)
    current = as_decimal(current_price)

    if direction is Direction.BUY:
        price_diff = current - open_
    elif direction is Direction.SELL:
        price_diff = open_ - current
    else:
        raise ValueError(f"Invalid direction: {direction}")

    return price_diff * as_decimal(quantity) * as_decimal(leverage)
