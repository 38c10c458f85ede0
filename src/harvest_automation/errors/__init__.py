"""Error hierarchy rooted at ``AutomationError``."""

from harvest_automation.errors.automation_errors import (
    AutomationAPIError,
    AutomationError,
    ChainNotConfiguredError,
    OpsContractError,
    SignerError,
    TransactionFailedError,
)

__all__ = [
    "AutomationAPIError",
    "AutomationError",
    "ChainNotConfiguredError",
    "OpsContractError",
    "SignerError",
    "TransactionFailedError",
]
