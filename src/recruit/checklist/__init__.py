"""Background document checklist."""
