"""Market simulation engine: position ledger, hedges, indicators, tick records."""

__version__ = "0.1.0"
