"""Output formatters and table projections."""
