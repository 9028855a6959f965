"""Tests for custom exception hierarchy."""

import pytest

from frac_estate.exceptions import (
    ConfigurationError,
    ContractError,
    FracEstateError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InsufficientPaymentError,
    InvalidAmountError,
    InvalidTokenParametersError,
    MalformedAddressError,
    NoHoldersError,
    NonPayableError,
    SinkError,
    SoldOutError,
    TransactionRevertedError,
    UnauthorizedError,
    UnknownContractError,
    UnknownMethodError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_root_is_exception(self) -> None:
        assert isinstance(FracEstateError("test"), Exception)

    @pytest.mark.parametrize(
        "exc_cls",
        [
            ConfigurationError,
            SinkError,
            MalformedAddressError,
            InvalidTokenParametersError,
            UnknownContractError,
            TransactionRevertedError,
            ContractError,
        ],
    )
    def test_direct_subclasses(self, exc_cls: type) -> None:
        assert isinstance(exc_cls("test"), FracEstateError)

    @pytest.mark.parametrize(
        "exc_cls",
        [
            UnknownMethodError,
            SoldOutError,
            UnauthorizedError,
            InsufficientPaymentError,
            NonPayableError,
            InsufficientAllowanceError,
            InsufficientBalanceError,
            InvalidAmountError,
            NoHoldersError,
        ],
    )
    def test_contract_rejections(self, exc_cls: type) -> None:
        err = exc_cls("test")
        assert isinstance(err, ContractError)
        assert isinstance(err, FracEstateError)

    def test_value_errors(self) -> None:
        assert isinstance(MalformedAddressError("x"), ValueError)
        assert isinstance(InvalidAmountError("x"), ValueError)
        assert isinstance(InvalidTokenParametersError("x"), ValueError)

    def test_configuration_error_is_not_a_revert(self) -> None:
        assert not isinstance(ConfigurationError("x"), ContractError)

    def test_reverted_error_carries_receipt(self) -> None:
        receipt = object()
        err = TransactionRevertedError("buy() reverted", receipt=receipt)
        assert err.receipt is receipt
        assert str(err) == "buy() reverted"

    def test_reverted_error_without_receipt(self) -> None:
        assert TransactionRevertedError("boom").receipt is None
