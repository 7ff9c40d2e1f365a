"""Hydra config composition helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, Union

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import OmegaConf

from balanced_dag.config.schema import AppConfig, register_configs
from balanced_dag.core import BalanceSettings
from balanced_dag.errors import ConfigError, ValidationError
from balanced_dag.validators import validate_settings

DEFAULT_CONFIG_PATH = "configs"
DEFAULT_CONFIG_NAME = "default"


def _normalize_overrides(overrides: Optional[Sequence[str]]) -> list[str]:
    if not overrides:
        return []
    return [item for item in overrides if item and item != "--"]


def _normalize_config_name(config_name: str) -> str:
    if config_name.endswith((".yaml", ".yml")):
        return Path(config_name).stem
    return config_name


def compose_config(
    *,
    config_path: Union[Path, str] = DEFAULT_CONFIG_PATH,
    config_name: str = DEFAULT_CONFIG_NAME,
    overrides: Optional[Sequence[str]] = None,
) -> Any:
    register_configs()
    config_dir = Path(config_path)
    if not config_dir.is_absolute():
        config_dir = (Path.cwd() / config_dir).resolve()
    if not config_dir.exists():
        raise ConfigError(f"Config directory not found: {config_dir}")
    if GlobalHydra.instance().is_initialized():
        GlobalHydra.instance().clear()
    try:
        with initialize_config_dir(config_dir=str(config_dir), version_base=None):
            return compose(
                config_name=_normalize_config_name(config_name),
                overrides=_normalize_overrides(overrides),
            )
    except ConfigError:
        raise
    except Exception as exc:
        raise ConfigError(f"Failed to compose config from {config_dir}: {exc}") from exc


def default_config(overrides: Optional[Sequence[str]] = None) -> Any:
    """Structured defaults for runs without a config directory."""
    cfg = OmegaConf.structured(AppConfig)
    dotlist = _normalize_overrides(overrides)
    if dotlist:
        try:
            cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(dotlist))
        except Exception as exc:
            raise ConfigError(f"Invalid config overrides {dotlist}: {exc}") from exc
    return cfg


def resolve_config(cfg: Any) -> dict[str, Any]:
    if not OmegaConf.is_config(cfg):
        if isinstance(cfg, Mapping):
            return dict(cfg)
        raise ConfigError("Config must be an OmegaConf object or mapping.")
    resolved = OmegaConf.to_container(
        cfg,
        resolve=True,
        throw_on_missing=False,
    )
    if not isinstance(resolved, dict):
        raise ConfigError("Resolved config must be a mapping.")
    return resolved


def format_config(cfg: Any) -> str:
    return OmegaConf.to_yaml(cfg, resolve=True)


def settings_from_config(cfg: Any) -> BalanceSettings:
    resolved = resolve_config(cfg)
    balance = resolved.get("balance", {})
    if balance is None:
        balance = {}
    if not isinstance(balance, Mapping):
        raise ConfigError("balance config must be a mapping.")
    unknown = sorted(set(balance) - {"max_paths", "validate_acyclic", "verify"})
    if unknown:
        raise ConfigError(f"Unknown balance config keys: {unknown}.")
    defaults = BalanceSettings()
    settings = BalanceSettings(
        max_paths=balance.get("max_paths", defaults.max_paths),
        validate_acyclic=balance.get("validate_acyclic", defaults.validate_acyclic),
        verify=balance.get("verify", defaults.verify),
    )
    try:
        validate_settings(settings)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_NAME",
    "compose_config",
    "default_config",
    "format_config",
    "resolve_config",
    "settings_from_config",
]
