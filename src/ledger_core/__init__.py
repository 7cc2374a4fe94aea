"""ledger-core: atomic, deadlock-free transfers between account balances."""
