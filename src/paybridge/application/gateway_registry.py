from __future__ import annotations

from typing import TYPE_CHECKING

from paybridge.domain.entities import PaymentProvider

if TYPE_CHECKING:
    from collections.abc import Iterable

    from paybridge.application.ports import PaymentGateway


class GatewayRegistry:
    """Maps each PaymentProvider to the one gateway that serves it.

    Built once at startup and read-only afterwards, so it can be shared
    by concurrent requests.
    """

    def __init__(self, gateways: Iterable[PaymentGateway]) -> None:
        self._gateways: dict[PaymentProvider, PaymentGateway] = {}
        for gateway in gateways:
            if gateway.provider in self._gateways:
                raise ValueError(f"Gateway already registered for provider {gateway.provider.name}")
            self._gateways[gateway.provider] = gateway

    def get(self, provider: PaymentProvider) -> PaymentGateway | None:
        return self._gateways.get(provider)

    def resolve(self, provider_name: str) -> PaymentGateway | None:
        """Look up a gateway by provider name, case-insensitively."""
        provider = PaymentProvider.from_name(provider_name)
        if provider is None:
            return None
        return self._gateways.get(provider)

    @property
    def providers(self) -> frozenset[PaymentProvider]:
        return frozenset(self._gateways)
