"""Automation SDK result types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from harvest_automation.chain.evm.models import PendingTransaction


@dataclass(frozen=True)
class CancelTaskResult:
    """Result of ``OpsSDK.cancel_task``.

    Attributes:
        tx: The submitted ``cancelTask`` transaction.
    """

    tx: PendingTransaction
