"""Shared test fixtures for the harvest-automation test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from harvest_automation.automation.client import AutomationTaskClient
from harvest_automation.automation.sdk import OpsSDK
from harvest_automation.chain.evm.signer import Signer
from harvest_automation.chain.ops.contract import OpsContract
from harvest_automation.config.settings import ChainConfig

HARVESTER = "0x1111111111111111111111111111111111111111"
OPERATIONS = "0x2222222222222222222222222222222222222222"
ADMIN = "0x3333333333333333333333333333333333333333"
GAS_PRICE = 30_000_000_000

# Well-known throwaway key from the web3.py documentation
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def chain_config() -> ChainConfig:
    """A chain bundle with both automation contracts configured."""
    return ChainConfig(
        id="polygon",
        chain_id=137,
        rpc_url="https://rpc.polygon.test",
        och_harvester=HARVESTER,
        och_operations=OPERATIONS,
    )


@pytest.fixture
def signer() -> MagicMock:
    """A signer double with a fixed address and gas price."""
    fake = MagicMock(spec=Signer)
    fake.address = ADMIN
    fake.gas_price = AsyncMock(return_value=GAS_PRICE)
    fake.send = AsyncMock(side_effect=AssertionError("unexpected transaction"))
    return fake


@pytest.fixture
def ops() -> MagicMock:
    """An Ops contract double; every coroutine method is an AsyncMock."""
    return MagicMock(spec=OpsContract)


@pytest.fixture
def sdk() -> MagicMock:
    """An automation SDK double."""
    return MagicMock(spec=OpsSDK)


@pytest.fixture
def make_tx():
    """Factory for pending-transaction doubles."""

    def _make(tx_hash: str = "0x" + "aa" * 32, *, error: Exception | None = None) -> MagicMock:
        tx = MagicMock()
        tx.tx_hash = tx_hash
        if error is None:
            tx.wait = AsyncMock(return_value={"status": 1})
        else:
            tx.wait = AsyncMock(side_effect=error)
        return tx

    return _make


@pytest.fixture
def client(signer, chain_config, ops, sdk) -> AutomationTaskClient:
    """A task client wired to the doubles above (not yet initialized)."""
    return AutomationTaskClient(signer, chain_config, should_log=True, ops=ops, sdk=sdk)
