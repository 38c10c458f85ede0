"""Ops — the automation network's task registry contract."""

from harvest_automation.chain.ops.abi import OPS_ABI
from harvest_automation.chain.ops.contract import OpsContract

__all__ = ["OPS_ABI", "OpsContract"]
