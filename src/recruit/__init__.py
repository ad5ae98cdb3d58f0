"""Sheriff recruitment engagement backend."""
