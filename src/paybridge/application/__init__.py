"""Application layer - Use cases and port definitions.

This layer contains:
- Use Cases: InitializePayment and HandleWebhook, composed by PaymentOrchestrator
- Ports: Abstract interfaces for the store, gateways, notification, time and locks
- DTOs and Results: use case input/output and explicit success/failure values

The application layer depends only on the domain layer.
Infrastructure implementations are injected via ports.
"""
