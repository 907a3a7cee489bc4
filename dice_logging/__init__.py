"""CSV logging for max-cut runs (Polars-backed)."""
