from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from paybridge.application.dtos import PaymentInitResult, PaymentVerificationResult
    from paybridge.application.results import Result
    from paybridge.domain.entities import Payment, PaymentProvider


class PaymentGateway(ABC):
    """Port for one payment provider's checkout API and webhook contract.

    Contract:
    - Methods never raise for expected failures; they return Result.failure
      with an ErrorCode
    - Instances are stateless aside from provider configuration bound at
      construction, and safe to share across concurrent requests
    - verify_signature() MUST operate on the exact raw bytes received, never
      on re-serialized JSON
    - parse_webhook() MUST report non-payment events as UNSUPPORTED_EVENT so
      the caller can ignore them instead of failing
    """

    @property
    @abstractmethod
    def provider(self) -> PaymentProvider:
        """The provider this gateway serves; used for dispatch."""

    @abstractmethod
    def initialize(self, payment: Payment) -> Result[PaymentInitResult]:
        """Create a provider checkout session for the payment.

        The amount is sent in the provider's minor unit and the payment's
        reference and id are embedded so the webhook can be correlated.

        Failure codes: NETWORK_ERROR, TIMEOUT_ERROR, PARSE_ERROR,
        MISSING_AUTH_URL, and provider rejections (PROVIDER_AUTH_ERROR,
        INVALID_REQUEST, RATE_LIMIT_ERROR, PROVIDER_UNAVAILABLE, PROVIDER_ERROR).
        """

    @abstractmethod
    def verify_signature(self, raw_payload: bytes, signature: str) -> Result[bool]:
        """Authenticate a webhook body against its signature header.

        Failure codes: INVALID_SIGNATURE (mismatch), MISSING_SIGNATURE,
        SIGNATURE_VERIFICATION_ERROR (internal failure, e.g. no secret).
        """

    @abstractmethod
    def parse_webhook(self, raw_payload: bytes) -> Result[PaymentVerificationResult]:
        """Extract (reference, amount) from a successful-charge event.

        Failure codes: UNSUPPORTED_EVENT, JSON_PARSE_ERROR, INVALID_STRUCTURE,
        EMPTY_REFERENCE, INVALID_AMOUNT.
        """
