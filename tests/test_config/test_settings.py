"""Tests for the configuration system."""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING

import pytest
from eth_utils import to_checksum_address
from pydantic import ValidationError

from harvest_automation.config.settings import (
    AppConfig,
    AutomationAPIConfig,
    ChainConfig,
    RPCConfig,
    SignerConfig,
    _load_yaml,
)
from harvest_automation.errors.automation_errors import ChainNotConfiguredError

if TYPE_CHECKING:
    from pathlib import Path

HARVESTER_LOWER = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
OPERATIONS_LOWER = "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    """Verify all default values are correct."""

    def test_signer_defaults(self) -> None:
        cfg = SignerConfig()
        assert cfg.private_key == ""

    def test_signer_key_hidden_from_repr(self) -> None:
        cfg = SignerConfig(private_key="0xsecret")
        assert "0xsecret" not in repr(cfg)

    def test_rpc_defaults(self) -> None:
        cfg = RPCConfig()
        assert cfg.confirmation_timeout == 120.0
        assert cfg.poll_latency == 0.5

    def test_automation_defaults(self) -> None:
        cfg = AutomationAPIConfig()
        assert cfg.url == "https://api.gelato.digital"
        assert cfg.timeout == 30.0

    def test_app_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.debug is False
        assert cfg.should_log is False
        assert cfg.chains == {}


# ---------------------------------------------------------------------------
# ChainConfig
# ---------------------------------------------------------------------------


class TestChainConfig:
    def test_addresses_checksummed(self) -> None:
        chain = ChainConfig(
            id="polygon",
            chain_id=137,
            och_harvester=HARVESTER_LOWER,
            och_operations=OPERATIONS_LOWER,
        )
        assert chain.och_harvester == to_checksum_address(HARVESTER_LOWER)
        assert chain.och_operations == to_checksum_address(OPERATIONS_LOWER)
        assert chain.supports_automation is True

    def test_invalid_address_rejected(self) -> None:
        with pytest.raises(ValidationError, match="invalid contract address"):
            ChainConfig(id="polygon", chain_id=137, och_harvester="0x1234")

    def test_empty_address_treated_as_missing(self) -> None:
        chain = ChainConfig(id="polygon", chain_id=137, och_harvester="")
        assert chain.och_harvester is None

    def test_require_automation(self) -> None:
        chain = ChainConfig(id="fantom", chain_id=250, och_harvester=HARVESTER_LOWER)
        assert chain.supports_automation is False
        with pytest.raises(ChainNotConfiguredError, match="fantom"):
            chain.require_automation()

    def test_label(self) -> None:
        assert ChainConfig(id="arbitrum", chain_id=42161).label == "ARBITRUM"


# ---------------------------------------------------------------------------
# Environment variable overrides
# ---------------------------------------------------------------------------


class TestEnvOverrides:
    def test_top_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARVEST_SHOULD_LOG", "true")
        assert AppConfig().should_log is True

    def test_nested_signer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARVEST_SIGNER__PRIVATE_KEY", "0xabc")
        assert AppConfig().signer.private_key == "0xabc"

    def test_nested_rpc(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARVEST_RPC__CONFIRMATION_TIMEOUT", "30")
        assert AppConfig().rpc.confirmation_timeout == 30.0


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "harvest.yaml"
    path.write_text(
        textwrap.dedent(
            f"""\
            should_log: true
            automation:
              url: https://automation.test
            chains:
              polygon:
                chain_id: 137
                rpc_url: https://rpc.polygon.test
                och_harvester: "{HARVESTER_LOWER}"
                och_operations: "{OPERATIONS_LOWER}"
              fantom:
                chain_id: 250
            """
        ),
        encoding="utf-8",
    )
    return path


class TestYaml:
    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nope.yaml") == {}

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        assert _load_yaml(path) == {}

    def test_from_yaml(self, tmp_path: Path) -> None:
        cfg = AppConfig.from_yaml(_write_config(tmp_path))
        assert cfg.should_log is True
        assert cfg.automation.url == "https://automation.test"
        assert set(cfg.chains) == {"polygon", "fantom"}

        polygon = cfg.chains["polygon"]
        assert polygon.id == "polygon"
        assert polygon.chain_id == 137
        assert polygon.och_harvester == to_checksum_address(HARVESTER_LOWER)
        assert cfg.chains["fantom"].supports_automation is False

    def test_env_wins_over_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARVEST_SHOULD_LOG", "false")
        cfg = AppConfig.from_yaml(_write_config(tmp_path))
        assert cfg.should_log is False

    def test_config_path_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HARVEST_CONFIG_PATH", str(_write_config(tmp_path)))
        assert "polygon" in AppConfig().chains


class TestGetChain:
    def test_lookup(self, tmp_path: Path) -> None:
        cfg = AppConfig.from_yaml(_write_config(tmp_path))
        assert cfg.get_chain("polygon").chain_id == 137
        assert cfg.get_chain("POLYGON").chain_id == 137

    def test_unknown(self) -> None:
        with pytest.raises(ChainNotConfiguredError, match="unknown chain"):
            AppConfig().get_chain("optimism")
