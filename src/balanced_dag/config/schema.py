"""Structured config schema for Hydra."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional

from hydra.core.config_store import ConfigStore


@dataclass
class BalanceConfig:
    # null disables the guard; enumeration is exponential in branching.
    max_paths: Optional[int] = 100000
    validate_acyclic: bool = True
    verify: bool = True


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class OutputConfig:
    path: str = ""
    tables: str = ""


@dataclass
class AppConfig:
    graph: str = ""
    balance: BalanceConfig = field(default_factory=BalanceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def register_configs() -> None:
    cs = ConfigStore.instance()
    try:
        cs.store(group="schema", name="base", node=AppConfig, package="_global_")
    except Exception as exc:
        logging.getLogger(__name__).warning(
            "Hydra config store registration failed: %s", exc
        )


__all__ = [
    "AppConfig",
    "BalanceConfig",
    "LoggingConfig",
    "OutputConfig",
    "register_configs",
]
