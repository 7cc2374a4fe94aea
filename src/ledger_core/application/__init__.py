"""Application layer - Use cases and port definitions.

This layer contains:
- Use Cases: TransferEngine and the transaction-owning account/payment services
- Ports: Abstract interfaces for the transactional store and its repositories
- Backoff: Retry delay policies for lock contention

The application layer depends only on the domain layer.
Infrastructure implementations are injected via ports.
"""
