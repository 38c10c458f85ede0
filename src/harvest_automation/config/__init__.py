"""Configuration — pydantic-settings models with YAML overlay."""

from harvest_automation.config.settings import (
    AppConfig,
    AutomationAPIConfig,
    ChainConfig,
    RPCConfig,
    SignerConfig,
)

__all__ = ["AppConfig", "AutomationAPIConfig", "ChainConfig", "RPCConfig", "SignerConfig"]
