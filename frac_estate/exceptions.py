"""Custom exception hierarchy for frac-estate."""


class FracEstateError(Exception):
    """Base exception for all frac-estate errors."""


class ConfigurationError(FracEstateError):
    """Raised when configuration is invalid or missing."""


class SinkError(FracEstateError):
    """Raised when a sink operation fails."""


class MalformedAddressError(FracEstateError, ValueError):
    """Raised when an address or private key cannot be parsed."""


class InvalidTokenParametersError(FracEstateError, ValueError):
    """Raised when property token parameters violate their invariants."""


class UnknownContractError(FracEstateError):
    """Raised when no contract is deployed at the requested address."""


class TransactionRevertedError(FracEstateError):
    """Raised client-side when a submitted transaction was reverted.

    The reverted receipt is kept on ``receipt`` so callers can inspect
    the revert reason and transaction id.
    """

    def __init__(self, message: str, receipt=None) -> None:
        super().__init__(message)
        self.receipt = receipt


class ContractError(FracEstateError):
    """Base class for contract rejections; the transaction is reverted."""


class UnknownMethodError(ContractError):
    """Raised when a contract does not expose the requested method."""


class SoldOutError(ContractError):
    """Raised when a purchase would exceed the fraction cap."""


class UnauthorizedError(ContractError):
    """Raised when a restricted method is called by someone other than the owner."""


class InsufficientPaymentError(ContractError):
    """Raised when the attached call value does not match the cost."""


class NonPayableError(ContractError):
    """Raised when value is attached to a method that does not accept it."""


class InsufficientAllowanceError(ContractError):
    """Raised when a spender's allowance does not cover the transfer."""


class InsufficientBalanceError(ContractError):
    """Raised when an account cannot cover a debit."""


class InvalidAmountError(ContractError, ValueError):
    """Raised for zero, negative or out-of-range amounts."""


class NoHoldersError(ContractError):
    """Raised when dividends are deposited before any fraction is sold."""
