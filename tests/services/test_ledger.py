from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from fxdesk.models.enums import Direction, PositionStatus
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
from fxdesk.services.ledger import Ledger


# =================================================
# Open
# =================================================
def test_open_reserves_margin(ledger):
    position, balance = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)

    assert position.required_margin == Decimal("108.5")
    assert position.open_price == Decimal("1.085")
    assert position.status is PositionStatus.OPEN
    assert position.direction is Direction.BUY
    assert position.close_price is None
    assert position.realized_pnl is None
    assert balance == Decimal("9891.5")
    assert ledger.balance == Decimal("9891.5")


def test_open_defaults_to_leverage_one(ledger):
    position, balance = ledger.open_position("EUR/USD", "SELL", 1000)

    assert position.leverage == Decimal("1")
    assert position.required_margin == Decimal("1085")
    assert balance == Decimal("8915")


def test_open_normalizes_symbol_and_direction(ledger):
    position, _ = ledger.open_position("eur/usd", "buy", 10)

    assert position.instrument == "EUR/USD"
    assert position.direction is Direction.BUY


def test_open_assigns_unique_ids(ledger):
    a, _ = ledger.open_position("EUR/USD", "BUY", 10)
    b, _ = ledger.open_position("EUR/USD", "BUY", 10)

    assert a.id != b.id


def test_margin_equal_to_balance_is_allowed(rates):
    ledger = Ledger(rates, initial_balance=Decimal("108.5"))

    _, balance = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)

    assert balance == Decimal("0")


def test_insufficient_balance_leaves_state_untouched(rates):
    ledger = Ledger(rates, initial_balance=100)

    with pytest.raises(InsufficientBalance):
        ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)

    assert ledger.balance == Decimal("100")
    assert ledger.list_positions().positions == []


@pytest.mark.parametrize(
    "args",
    [
        (None, "BUY", 10),
        ("EUR/USD", None, 10),
        ("EUR/USD", "BUY", None),
        ("", "BUY", 10),
        ("EUR/USD", "  ", 10),
    ],
)
def test_missing_fields(ledger, args):
    with pytest.raises(MissingField):
        ledger.open_position(*args)

    assert ledger.balance == Decimal("10000")


def test_invalid_direction(ledger):
    with pytest.raises(InvalidDirection):
        ledger.open_position("EUR/USD", "HOLD", 10)


@pytest.mark.parametrize("qty", [0, -5, "abc", True, float("nan")])
def test_invalid_quantity(ledger, qty):
    with pytest.raises(InvalidQuantity):
        ledger.open_position("EUR/USD", "BUY", qty)


@pytest.mark.parametrize("lev", [0, -1])
def test_invalid_leverage(ledger, lev):
    with pytest.raises(InvalidLeverage):
        ledger.open_position("EUR/USD", "BUY", 10, leverage=lev)


def test_unknown_instrument(ledger):
    with pytest.raises(InstrumentNotFound):
        ledger.open_position("XXX/YYY", "BUY", 10)

    assert ledger.balance == Decimal("10000")
    assert ledger.list_positions().positions == []


# =================================================
# Close
# =================================================
def test_close_scenario(ledger, rates):
    position, _ = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)
    rates.set("EUR/USD", 1.095)

    closed, balance = ledger.close_position(position.id)

    assert closed.status is PositionStatus.CLOSED
    assert closed.close_price == Decimal("1.095")
    assert closed.close_time is not None
    assert closed.realized_pnl == Decimal("100.00")
    assert balance == Decimal("10100.00")


def test_close_returns_margin_plus_loss(ledger, rates):
    position, before = ledger.open_position("USD/JPY", "SELL", 10, leverage=5)
    rates.set("USD/JPY", 150.0)

    closed, after = ledger.close_position(position.id)

    # SELL into a rising price: (148.5 - 150.0) * 10 * 5
    assert closed.realized_pnl == Decimal("-75.00")
    assert after == before + position.required_margin + closed.realized_pnl


def test_close_twice_is_rejected(ledger):
    position, _ = ledger.open_position("EUR/USD", "BUY", 100)
    closed, balance = ledger.close_position(position.id)

    with pytest.raises(AlreadyClosed):
        ledger.close_position(position.id)

    after = ledger.get_position(position.id)
    assert ledger.balance == balance
    assert after.close_price == closed.close_price
    assert after.close_time == closed.close_time
    assert after.realized_pnl == closed.realized_pnl


def test_close_unknown_id(ledger):
    with pytest.raises(PositionNotFound):
        ledger.close_position("does-not-exist")


def test_close_when_instrument_dropped(ledger, rates):
    position, balance = ledger.open_position("EUR/USD", "BUY", 100)
    del rates.prices["EUR/USD"]

    with pytest.raises(InstrumentNotFound):
        ledger.close_position(position.id)

    assert ledger.balance == balance
    assert ledger.get_position(position.id).status is PositionStatus.OPEN


def test_returned_position_is_a_copy(ledger):
    position, _ = ledger.open_position("EUR/USD", "BUY", 100)
    position.status = PositionStatus.CLOSED

    assert ledger.get_position(position.id).status is PositionStatus.OPEN


# =================================================
# List
# =================================================
def test_list_marks_open_positions_to_market(ledger, rates):
    buy, _ = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)
    sell, _ = ledger.open_position("USD/JPY", "SELL", 10)
    rates.set("EUR/USD", 1.095)
    rates.set("USD/JPY", 148.0)

    report = ledger.list_positions()

    assert [v.position.id for v in report.positions] == [buy.id, sell.id]
    assert report.positions[0].pnl == Decimal("100.00")
    assert report.positions[0].current_price == Decimal("1.095")
    assert report.positions[1].pnl == Decimal("5.00")
    assert report.total_pnl == Decimal("105.00")
    assert report.balance == ledger.balance


def test_list_uses_stored_pnl_for_closed(ledger, rates):
    position, _ = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)
    rates.set("EUR/USD", 1.095)
    ledger.close_position(position.id)
    rates.set("EUR/USD", 1.2)

    report = ledger.list_positions()

    assert report.positions[0].pnl == Decimal("100.00")
    assert report.positions[0].current_price == Decimal("1.2")
    assert report.total_pnl == Decimal("100.00")


def test_list_unpriceable_instrument_counts_zero(ledger, rates):
    ledger.open_position("EUR/USD", "BUY", 1000)
    del rates.prices["EUR/USD"]

    view = ledger.list_positions().positions[0]

    assert view.current_price is None
    assert view.pnl == Decimal("0")


def test_list_rounds_per_position(ledger, rates):
    ledger.open_position("EUR/USD", "BUY", 1)
    rates.set("EUR/USD", 1.09)

    # (1.09 - 1.085) * 1 = 0.005 -> 0.01 half-up
    assert ledger.list_positions().positions[0].pnl == Decimal("0.01")


# =================================================
# Account
# =================================================
def test_account_summary_open_positions_only(ledger, rates):
    a, _ = ledger.open_position("EUR/USD", "BUY", 1000, leverage=10)
    b, _ = ledger.open_position("USD/JPY", "BUY", 10, leverage=2)
    ledger.close_position(b.id)
    rates.set("EUR/USD", 1.095)

    summary = ledger.account_summary()

    assert summary.open_positions == 1
    assert summary.used_margin == a.required_margin
    assert summary.unrealized_pnl == Decimal("100.00")
    assert summary.balance == ledger.balance
    assert summary.equity == summary.balance + Decimal("100")


def test_account_summary_rounds_only_the_total(ledger, rates):
    ledger.open_position("EUR/USD", "BUY", 1)
    ledger.open_position("EUR/USD", "BUY", 1)
    rates.set("EUR/USD", 1.08775)

    # each leg is 0.00275 (0.00 on its own), together 0.0055 -> 0.01
    assert ledger.account_summary().unrealized_pnl == Decimal("0.01")
    assert [v.pnl for v in ledger.list_positions().positions] == [Decimal("0.00")] * 2


def test_account_summary_unpriceable_instrument_counts_zero(ledger, rates):
    ledger.open_position("EUR/USD", "BUY", 1000)
    del rates.prices["EUR/USD"]

    summary = ledger.account_summary()

    assert summary.open_positions == 1
    assert summary.unrealized_pnl == Decimal("0")
    assert summary.equity == summary.balance


def test_account_summary_is_stable_without_trades(ledger):
    ledger.open_position("EUR/USD", "BUY", 100, leverage=5)

    first = ledger.account_summary()
    second = ledger.account_summary()

    assert first.used_margin == second.used_margin
    assert first.open_positions == second.open_positions


def test_empty_account(ledger):
    summary = ledger.account_summary()

    assert summary.balance == Decimal("10000")
    assert summary.equity == Decimal("10000")
    assert summary.used_margin == Decimal("0")
    assert summary.open_positions == 0


# =================================================
# Concurrency
# =================================================
def test_concurrent_opens_never_overdraw(rates):
    rates.set("EUR/USD", 1.0)
    ledger = Ledger(rates, initial_balance=1000)

    def attempt(_):
        try:
            ledger.open_position("EUR/USD", "BUY", 100)
            return True
        except InsufficientBalance:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(50)))

    assert sum(results) == 10
    assert ledger.balance == Decimal("0")


def test_concurrent_closes_close_once(ledger):
    position, _ = ledger.open_position("EUR/USD", "BUY", 100)

    def attempt(_):
        try:
            ledger.close_position(position.id)
            return True
        except AlreadyClosed:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(20)))

    assert sum(results) == 1
    assert ledger.balance == Decimal("10000")
