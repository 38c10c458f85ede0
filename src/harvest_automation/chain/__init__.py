"""Chain layer — EVM signer, transaction handles, Ops contract."""

from harvest_automation.chain.evm import PendingTransaction, Signer
from harvest_automation.chain.ops import OpsContract

__all__ = ["OpsContract", "PendingTransaction", "Signer"]
