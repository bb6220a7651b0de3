from uuid import UUID

import pytest

from paybridge.domain.exceptions import DomainException, InvalidPaymentIdError
from paybridge.domain.value_objects.payment_id import PaymentId


class TestPaymentIdGenerate:
    def test_generate_creates_valid_payment_id(self) -> None:
        payment_id = PaymentId.generate()

        assert isinstance(payment_id.value, UUID)

    def test_generate_creates_unique_ids(self) -> None:
        assert PaymentId.generate() != PaymentId.generate()


class TestPaymentIdFromString:
    def test_from_string_parses_valid_uuid(self) -> None:
        uuid_str = "550e8400-e29b-41d4-a716-446655440000"

        payment_id = PaymentId.from_string(uuid_str)

        assert payment_id.value == UUID(uuid_str)
        assert str(payment_id) == uuid_str

    def test_from_string_parses_uuid_without_hyphens(self) -> None:
        payment_id = PaymentId.from_string("550e8400e29b41d4a716446655440000")

        assert payment_id.value == UUID("550e8400-e29b-41d4-a716-446655440000")

    @pytest.mark.parametrize("value", ["not-a-valid-uuid", "", "550e8400-e29b-41d4-a716"])
    def test_from_string_raises_for_invalid_input(self, value: str) -> None:
        with pytest.raises(InvalidPaymentIdError) as exc_info:
            PaymentId.from_string(value)

        assert exc_info.value.error_code == "INVALID_PAYMENT_ID"
        assert isinstance(exc_info.value, DomainException)

    def test_from_string_raises_for_none(self) -> None:
        with pytest.raises(InvalidPaymentIdError):
            PaymentId.from_string(None)  # type: ignore[arg-type]


class TestPaymentIdValueSemantics:
    def test_payment_id_is_frozen(self) -> None:
        payment_id = PaymentId.generate()

        with pytest.raises(AttributeError):
            payment_id.value = UUID("550e8400-e29b-41d4-a716-446655440000")  # type: ignore[misc]

    def test_equal_ids_are_equal_and_hash_alike(self) -> None:
        uuid_str = "550e8400-e29b-41d4-a716-446655440000"
        first = PaymentId.from_string(uuid_str)
        second = PaymentId.from_string(uuid_str)

        assert first == second
        assert len({first, second}) == 1

    def test_payment_id_not_equal_to_raw_uuid(self) -> None:
        uuid_val = UUID("550e8400-e29b-41d4-a716-446655440000")

        assert PaymentId(value=uuid_val) != uuid_val  # type: ignore[comparison-overlap]
