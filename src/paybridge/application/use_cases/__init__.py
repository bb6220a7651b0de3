"""Use cases - One class per application operation."""

from paybridge.application.use_cases.handle_webhook import HandleWebhookUseCase
from paybridge.application.use_cases.initialize_payment import InitializePaymentUseCase

__all__ = [
    "HandleWebhookUseCase",
    "InitializePaymentUseCase",
]
