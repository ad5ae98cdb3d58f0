"""Points ledger and action catalogue."""
