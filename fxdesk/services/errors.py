class TradingError(ValueError):
    """Base class for request-level failures raised by the trading services."""

    status_code = 400
    code = "trading_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(TradingError):
    code = "missing_field"


class InvalidDirection(TradingError):
    code = "invalid_direction"


class InvalidQuantity(TradingError):
    code = "invalid_quantity"


class InvalidLeverage(TradingError):
    code = "invalid_leverage"


class InstrumentNotFound(TradingError):
    status_code = 404
    code = "instrument_not_found"


class InsufficientBalance(TradingError):
    code = "insufficient_balance"


class PositionNotFound(TradingError):
    status_code = 404
    code = "position_not_found"


class AlreadyClosed(TradingError):
    code = "already_closed"
