"""Admin route modules, one per back-office area."""
