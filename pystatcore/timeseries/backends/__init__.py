"""Time-series backends."""
