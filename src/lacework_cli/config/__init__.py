"""Credential profiles stored in ~/.lacework.toml."""
from lacework_cli.config.store import ProfileStore, default_config_path

__all__ = ["ProfileStore", "default_config_path"]
