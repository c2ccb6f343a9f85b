"""hauptbuch: general ledger calculations for German double-entry bookkeeping."""

__version__ = "0.1.0"
