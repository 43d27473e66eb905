"""Admin services package."""
