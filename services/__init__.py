"""Domain services for the Blog Generator (prompt rules and generation bookkeeping)."""
