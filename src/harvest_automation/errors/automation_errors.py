"""AutomationError — base exception class and its chain/API subclasses."""

from __future__ import annotations


class AutomationError(Exception):
    """Base error for all harvest-automation operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "automation-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ChainNotConfiguredError(AutomationError):
    """Unknown chain label, or a chain without automation contracts."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="chain-not-configured")


class SignerError(AutomationError):
    """Missing or unusable signing key."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="signer-error")


class OpsContractError(AutomationError):
    """RPC failure or revert from the automation Ops contract."""

    def __init__(self, message: str, *, method: str = "") -> None:
        super().__init__(message, code="ops-contract-error")
        self.method = method


class TransactionFailedError(AutomationError):
    """Transaction reverted, was dropped, or never confirmed."""

    def __init__(self, message: str, *, tx_hash: str = "") -> None:
        super().__init__(message, code="transaction-failed")
        self.tx_hash = tx_hash


class AutomationAPIError(AutomationError):
    """Error from the automation network HTTP API."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, code="automation-api-error")
        self.status_code = status_code
