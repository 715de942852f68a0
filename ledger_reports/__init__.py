"""Multi-currency reporting over a double-entry ledger."""
