class SalesAnalyticsError(Exception):
    """Base class for errors raised by the seller report computation."""


class InvalidInputDataError(SalesAnalyticsError, ValueError):
    """The sellers, products or purchase records are missing, malformed or empty."""


class MissingCalculatorsError(SalesAnalyticsError, TypeError):
    """The revenue or bonus calculation function was not supplied."""


class InvalidConfigurationError(SalesAnalyticsError, ValueError):
    """A report option, such as the top products limit, is out of range."""
