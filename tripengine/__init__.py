"""Trip pricing and lifecycle engine."""
