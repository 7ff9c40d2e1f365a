"""CLI entry point."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from balanced_dag.core import balanced_dag, enumerate_paths
from balanced_dag.errors import BalancedDagError, ConfigError
from balanced_dag.export import write_tables
from balanced_dag.hydra_utils import (
    DEFAULT_CONFIG_NAME,
    DEFAULT_CONFIG_PATH,
    compose_config,
    default_config,
    format_config,
    resolve_config,
    settings_from_config,
)
from balanced_dag.logging_utils import (
    DEFAULT_LOGGER_NAME,
    configure_logging,
    log_exception,
    resolve_log_level,
    run_with_error_handling,
)
from balanced_dag.serialization import (
    format_path,
    load_graph_file,
    result_payload,
    write_result,
)

_SUBCOMMANDS: Sequence[str] = (
    "help",
    "cfg",
    "balance",
    "paths",
)

logger = logging.getLogger(__name__)


def _load_config(args: argparse.Namespace) -> Any:
    config_dir = Path(args.config_path)
    if config_dir.exists():
        return compose_config(
            config_path=config_dir,
            config_name=args.config_name,
            overrides=args.overrides,
        )
    if args.config_path != DEFAULT_CONFIG_PATH:
        raise ConfigError(f"Config directory not found: {config_dir}")
    logger.debug("No %s directory; using structured defaults.", config_dir)
    return default_config(args.overrides)


def _apply_log_level(resolved: dict[str, Any]) -> None:
    level = (resolved.get("logging") or {}).get("level")
    if not level:
        return
    try:
        logging.getLogger(DEFAULT_LOGGER_NAME).setLevel(resolve_log_level(level))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def _split_graph_override(args: argparse.Namespace) -> None:
    # `balance graph=foo.yaml` lands in the positional slot.
    if args.graph and "=" in args.graph and not Path(args.graph).exists():
        args.overrides = [args.graph, *(args.overrides or [])]
        args.graph = None


def _resolve_graph_path(args: argparse.Namespace, resolved: dict[str, Any]) -> Path:
    graph = args.graph or resolved.get("graph")
    if not graph:
        raise ConfigError(
            "No graph file given.",
            user_message="Pass a graph file or set graph=<path> in the config.",
        )
    return Path(graph)


def _cfg_handler(args: argparse.Namespace) -> None:
    cfg = _load_config(args)
    print(format_config(cfg), end="")


def _balance_handler(args: argparse.Namespace) -> None:
    _split_graph_override(args)
    cfg = _load_config(args)
    resolved = resolve_config(cfg)
    _apply_log_level(resolved)
    settings = settings_from_config(cfg)
    if args.max_paths is not None:
        settings = replace(settings, max_paths=args.max_paths)

    adjacency, vertices = load_graph_file(_resolve_graph_path(args, resolved))
    result = balanced_dag(adjacency, vertices, settings=settings)

    output_cfg = resolved.get("output") or {}
    output = args.output or output_cfg.get("path")
    tables = args.tables or output_cfg.get("tables")
    if output:
        path = write_result(output, result, include_paths=args.include_paths)
        logger.info("Wrote balanced weights to %s", path)
    else:
        payload = result_payload(result, include_paths=args.include_paths)
        print(json.dumps(payload, indent=2, ensure_ascii=True))
    if tables:
        written = write_tables(result, tables)
        for name, path in written.items():
            logger.info("Wrote %s table to %s", name, path)


def _paths_handler(args: argparse.Namespace) -> None:
    _split_graph_override(args)
    cfg = _load_config(args)
    resolved = resolve_config(cfg)
    _apply_log_level(resolved)
    settings = settings_from_config(cfg)
    if args.max_paths is not None:
        settings = replace(settings, max_paths=args.max_paths)
    adjacency, vertices = load_graph_file(_resolve_graph_path(args, resolved))
    for path in enumerate_paths(adjacency, vertices, settings=settings):
        print(" -> ".join(format_path(path)))


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config-path",
        default=DEFAULT_CONFIG_PATH,
        help="Path to the Hydra config directory.",
    )
    parser.add_argument(
        "--config-name",
        default=DEFAULT_CONFIG_NAME,
        help="Hydra config name (without extension).",
    )


def _add_graph_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "graph",
        nargs="?",
        default=None,
        help="Graph file (.json/.yaml) with 'adjacency' and optional 'vertices'.",
    )
    parser.add_argument(
        "--max-paths",
        type=int,
        default=None,
        help="Override balance.max_paths.",
    )
    _add_config_arguments(parser)
    parser.add_argument(
        "overrides",
        nargs="*",
        help="Hydra overrides (ex: balance.verify=false logging.level=DEBUG).",
    )


def _register_help_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    parser: argparse.ArgumentParser,
) -> None:
    def _handler(_args: argparse.Namespace) -> None:
        parser.print_help()

    help_parser = subparsers.add_parser(
        "help",
        help="Show top-level help.",
        description="Show top-level help.",
    )
    help_parser.set_defaults(handler=_handler)


def _register_cfg_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    cfg_parser = subparsers.add_parser(
        "cfg",
        help="Compose and print Hydra config.",
        description="Compose and print Hydra config.",
    )
    _add_config_arguments(cfg_parser)
    cfg_parser.add_argument(
        "overrides",
        nargs="*",
        help="Hydra overrides (ex: balance.max_paths=500).",
    )
    cfg_parser.set_defaults(handler=_cfg_handler)


def _register_balance_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    balance_parser = subparsers.add_parser(
        "balance",
        help="Compute edge weights and vertex progress for a DAG.",
        description="Compute edge weights and vertex progress for a DAG.",
    )
    balance_parser.add_argument(
        "--output",
        default=None,
        help="Write the result here (.json or .yaml) instead of stdout.",
    )
    balance_parser.add_argument(
        "--tables",
        default=None,
        help="Directory for CSV tables of progresses and weights.",
    )
    balance_parser.add_argument(
        "--include-paths",
        action="store_true",
        help="Include the enumerated start-to-end paths in the JSON result.",
    )
    _add_graph_arguments(balance_parser)
    balance_parser.set_defaults(handler=_balance_handler)


def _register_paths_subcommand(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    paths_parser = subparsers.add_parser(
        "paths",
        help="List start-to-end paths, longest first.",
        description="List start-to-end paths, longest first.",
    )
    _add_graph_arguments(paths_parser)
    paths_parser.set_defaults(handler=_paths_handler)


def _build_parser(subcommands: Iterable[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="balanced-dag",
        description="balanced_dag command line interface.",
    )
    parser.add_argument(
        "--traceback",
        action="store_true",
        help="Show full traceback on errors.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    for name in subcommands:
        if name == "help":
            _register_help_subcommand(subparsers, parser)
            continue
        if name == "cfg":
            _register_cfg_subcommand(subparsers)
            continue
        if name == "balance":
            _register_balance_subcommand(subparsers)
            continue
        if name == "paths":
            _register_paths_subcommand(subparsers)
            continue
        raise ValueError(f"Unknown subcommand: {name!r}")
    return parser


def _forward_overrides(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    extras: Sequence[str],
) -> None:
    # Positionals typed after an option are left over by argparse.
    if not extras:
        return
    unknown = [item for item in extras if item.startswith("-") or "=" not in item]
    if unknown or not hasattr(args, "overrides"):
        parser.error(f"unrecognized arguments: {' '.join(extras)}")
    args.overrides = [*(args.overrides or []), *extras]


def _cli_main(
    *,
    cli_logger: logging.Logger,
    argv: Optional[Sequence[str]] = None,
) -> None:
    parser = _build_parser(_SUBCOMMANDS)
    args, extras = parser.parse_known_args(argv)
    _forward_overrides(parser, args, extras)
    if not getattr(args, "command", None):
        parser.print_help()
        raise SystemExit(2)
    try:
        args.handler(args)
    except BalancedDagError as exc:
        log_exception(cli_logger, exc, show_traceback=args.traceback)
        raise SystemExit(1) from None


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point with standard logging/error handling."""
    cli_logger = configure_logging()
    run_with_error_handling(
        _cli_main,
        logger=cli_logger,
        cli_logger=cli_logger,
        argv=argv,
    )


if __name__ == "__main__":
    main()
