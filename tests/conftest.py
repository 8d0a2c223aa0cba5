import pytest

from fxdesk.services.ledger import Ledger


class StaticRates:
    """Rate source with prices the test sets by hand. No jitter."""

    def __init__(self, prices=None):
        self.prices = dict(prices or {"EUR/USD": 1.085, "USD/JPY": 148.5})

    @property
    def instruments(self):
        return list(self.prices)

    def supports(self, instrument):
        return instrument.upper() in self.prices

    def current_rate(self, instrument):
        return self.prices.get(instrument.upper())

    def all_rates(self):
        return dict(self.prices)

    def set(self, instrument, price):
        self.prices[instrument] = price


@pytest.fixture()
def rates():
    return StaticRates()


@pytest.fixture()
def ledger(rates):
    return Ledger(rates, initial_balance=10000)
