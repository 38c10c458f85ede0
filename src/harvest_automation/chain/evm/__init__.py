"""EVM account and transaction handles."""

from harvest_automation.chain.evm.models import PendingTransaction
from harvest_automation.chain.evm.signer import Signer

__all__ = ["PendingTransaction", "Signer"]
