"""Domain layer - Core ledger entities and rules.

This layer contains:
- Entities: Account balances and immutable Payment records
- Domain Exceptions: The closed error taxonomy of the ledger core

The domain layer has NO dependencies on external frameworks or infrastructure.
"""
