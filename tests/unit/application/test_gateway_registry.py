import pytest

from paybridge.application.gateway_registry import GatewayRegistry
from paybridge.domain.entities import PaymentProvider


class TestGatewayRegistry:
    def test_get_returns_registered_gateway(self, stub_gateway) -> None:
        registry = GatewayRegistry([stub_gateway])

        assert registry.get(PaymentProvider.PAYSTACK) is stub_gateway
        assert registry.providers == frozenset({PaymentProvider.PAYSTACK})

    def test_get_returns_none_for_unregistered_provider(self, stub_gateway) -> None:
        registry = GatewayRegistry([stub_gateway])

        assert registry.get(PaymentProvider.FLUTTERWAVE) is None

    @pytest.mark.parametrize("name", ["paystack", "PAYSTACK", "PayStack"])
    def test_resolve_is_case_insensitive(self, stub_gateway, name: str) -> None:
        assert GatewayRegistry([stub_gateway]).resolve(name) is stub_gateway

    @pytest.mark.parametrize("name", ["", "stripe", "flutterwave"])
    def test_resolve_returns_none_when_nothing_serves_the_name(
        self, stub_gateway, name: str
    ) -> None:
        assert GatewayRegistry([stub_gateway]).resolve(name) is None

    def test_rejects_two_gateways_for_one_provider(self, stub_gateway) -> None:
        with pytest.raises(ValueError, match="PAYSTACK"):
            GatewayRegistry([stub_gateway, stub_gateway])

    def test_empty_registry(self) -> None:
        registry = GatewayRegistry([])

        assert registry.providers == frozenset()
        assert registry.resolve("paystack") is None
