"""Provider trip catalog data."""
