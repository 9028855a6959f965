"""Enumeration types for the fractional property domain."""

from enum import Enum


class PaymentKind(str, Enum):
    NATIVE = "NATIVE"  # TRX, priced in sun
    TOKEN = "TOKEN"  # TRC20 asset such as USDT, priced in micro-units


class TxStatus(str, Enum):
    SUCCESS = "SUCCESS"
    REVERTED = "REVERTED"


class EventType(str, Enum):
    TRANSFER = "Transfer"
    APPROVAL = "Approval"
    FRACTIONS_PURCHASED = "FractionsPurchased"
    DIVIDENDS_DEPOSITED = "DividendsDeposited"
    DIVIDENDS_CLAIMED = "DividendsClaimed"
    PROCEEDS_WITHDRAWN = "ProceedsWithdrawn"
    CONTRACT_DEPLOYED = "ContractDeployed"


class Network(str, Enum):
    MAINNET = "mainnet"
    SHASTA = "shasta"
    NILE = "nile"
    DEVELOPMENT = "development"
