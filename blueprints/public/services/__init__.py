"""Public storefront services."""
