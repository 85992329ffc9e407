"""Storage backend integrations for ledgerline."""
