"""Domain layer - Core business logic, entities, and rules.

This layer contains:
- Entities: the Payment aggregate and its lifecycle enums
- Value Objects: Money, EmailAddress, CallbackUrl, PaymentReference, PaymentId
- Domain Exceptions: validation and state errors carrying stable error codes

The domain layer has NO dependencies on external frameworks or infrastructure.
"""
