"""Public route modules, one per storefront area."""
