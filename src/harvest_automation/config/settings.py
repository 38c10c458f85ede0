"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``HARVEST_``, nested via ``__``)
2. YAML config file (``--config path`` or ``HARVEST_CONFIG_PATH`` env var)
3. Defaults defined here
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from harvest_automation.errors.automation_errors import ChainNotConfiguredError

# ---------------------------------------------------------------------------
# Per-chain bundle
# ---------------------------------------------------------------------------


class ChainConfig(BaseModel):
    """Addresses and endpoints for one chain.

    ``och_harvester`` and ``och_operations`` are optional so that chains
    without automation support can still be listed in the same file.
    """

    id: str
    chain_id: int
    rpc_url: str = ""
    och_harvester: str | None = None
    och_operations: str | None = None

    @field_validator("och_harvester", "och_operations")
    @classmethod
    def _checksum(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if not is_address(value):
            msg = f"invalid contract address: {value}"
            raise ValueError(msg)
        return to_checksum_address(value)

    @property
    def label(self) -> str:
        """Upper-cased chain label used in log lines."""
        return self.id.upper()

    @property
    def supports_automation(self) -> bool:
        return self.och_harvester is not None and self.och_operations is not None

    def require_automation(self) -> None:
        """Raise unless both harvester and operations addresses are set."""
        if not self.supports_automation:
            msg = f"chain {self.id} has no harvester/operations contract configured"
            raise ChainNotConfiguredError(msg)


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class SignerConfig(BaseSettings):
    """Automation admin key."""

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_SIGNER__",
        case_sensitive=False,
    )

    private_key: str = Field(default="", repr=False)


class RPCConfig(BaseSettings):
    """JSON-RPC and confirmation settings."""

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_RPC__",
        case_sensitive=False,
    )

    confirmation_timeout: float = 120.0
    poll_latency: float = 0.5


class AutomationAPIConfig(BaseSettings):
    """Automation network HTTP API settings."""

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_AUTOMATION__",
        case_sensitive=False,
    )

    url: str = "https://api.gelato.digital"
    timeout: float = 30.0


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``HARVEST_`` prefix),
    an optional YAML file, and built-in defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="HARVEST_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    should_log: bool = False
    config_path: str = ""

    signer: SignerConfig = Field(default_factory=SignerConfig)
    rpc: RPCConfig = Field(default_factory=RPCConfig)
    automation: AutomationAPIConfig = Field(default_factory=AutomationAPIConfig)
    chains: dict[str, ChainConfig] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if config_path:
            yaml_data = _load_yaml(config_path)
            # YAML values serve as defaults; env vars (already in *values*) win.
            for key, val in yaml_data.items():
                if key not in values or values[key] is None:
                    values[key] = val
                elif isinstance(val, dict) and isinstance(values.get(key), dict):
                    merged = {**val, **values[key]}
                    values[key] = merged

        # A chain's id defaults to its key in the mapping
        chains = values.get("chains")
        if isinstance(chains, dict):
            values["chains"] = {
                key: {"id": key, **chain} if isinstance(chain, dict) else chain
                for key, chain in chains.items()
            }
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def get_chain(self, label: str) -> ChainConfig:
        """Look up a chain bundle by label (case-insensitive)."""
        chain = self.chains.get(label) or self.chains.get(label.lower())
        if chain is None:
            msg = f"unknown chain: {label}"
            raise ChainNotConfiguredError(msg)
        return chain
