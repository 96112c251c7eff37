"""MarketPulse: cryptocurrency and stock market dashboard."""

__version__ = "0.1.0"
