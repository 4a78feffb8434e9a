"""Exceptions raised by the valuation and risk engine."""


class ValuationError(Exception):
    """Base class for all valuation engine errors."""


class InvalidInputError(ValuationError, ZeroDivisionError):
    """Raised when an input makes a derived figure undefined.

    The only case today is a zero cost basis when computing a gain/loss
    percentage.
    """


class DegeneratePortfolioError(ValuationError):
    """Raised when risk metrics are requested for a book worth nothing."""

    def __init__(self, total_value: float = 0.0):
        self.total_value = total_value
        super().__init__(f"Portfolio has zero value (total_value={total_value})")


class InsufficientMarginError(ValuationError):
    """Raised by the trade-entry margin check, never by the engine itself."""

    def __init__(self, available: float, required: float):
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient cash for margin requirement: "
            f"available ${available:,.2f}, required ${required:,.2f}"
        )


class StaleSnapshotError(ValuationError):
    """Raised when a publish was computed from a snapshot that is no longer current."""

    def __init__(self, expected_version: int, current_version: int):
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            f"Snapshot moved from v{expected_version} to v{current_version} during recalculation"
        )
