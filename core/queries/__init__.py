"""Query functions, one module per table."""
