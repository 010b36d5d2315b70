"""aicore-models CLI entrypoint."""

import argparse
import json
import sys
from typing import List, Optional

from aicore_models._internal.exceptions import ConfigError
from aicore_models.catalog import categorize_models
from aicore_models.config import AICoreConfig, load_config
from aicore_models.discovery import ModelDiscoveryService
from aicore_models.utils.logging import configure_logging


def build_service(config: AICoreConfig) -> ModelDiscoveryService:
    return ModelDiscoveryService.from_settings(config.discovery)


def cmd_list(args: argparse.Namespace) -> int:
    config: AICoreConfig = args.config
    credentials = config.credentials.with_force_refresh(args.refresh)
    result = build_service(config).discover(credentials)

    if args.json:
        print(json.dumps(result.to_payload(), indent=2))
        return 0

    if result.is_empty:
        print("No deployed models found.")
        return 0

    if args.deployments:
        for pair in result.deployments:
            print(f"  {pair.model_name:<36} {pair.deployment_id}")
    else:
        for name in result.model_names:
            print(f"  {name}")
    if result.orchestration_available:
        print("Orchestration mode available.")
    return 0


def cmd_categorize(args: argparse.Namespace) -> int:
    config: AICoreConfig = args.config
    result = build_service(config).discover(config.credentials)
    categorized = categorize_models(result.deployments)

    print("Deployed models:")
    for pair in categorized.deployed:
        print(f"  {pair.model_name:<36} {pair.deployment_id}")
    print("Not deployed models:")
    for name in categorized.not_deployed:
        print(f"  {name}")
    return 0


def cmd_cache_path(args: argparse.Namespace) -> int:
    config: AICoreConfig = args.config
    print(config.discovery.cache_path)
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    try:
        import aicore_models

        print(f"aicore-models {aicore_models.__version__}")
    except AttributeError:
        print("aicore-models (version unknown)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aicore-models", description="Discover models deployed on SAP AI Core"
    )
    parser.add_argument("--config", help="Path to config.yaml (default: ~/.aicore/config.yaml)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    list_parser = subparsers.add_parser("list", help="List deployed models")
    list_parser.add_argument(
        "--refresh", action="store_true", help="Ignore the cache and fetch live"
    )
    list_parser.add_argument(
        "--deployments", action="store_true", help="Show deployment ids next to models"
    )
    list_parser.add_argument("--json", action="store_true", help="Print the JSON payload")
    list_parser.set_defaults(func=cmd_list)

    categorize_parser = subparsers.add_parser(
        "categorize", help="Group supported models by deployment state"
    )
    categorize_parser.set_defaults(func=cmd_categorize)

    cache_parser = subparsers.add_parser("cache-path", help="Show the cache file location")
    cache_parser.set_defaults(func=cmd_cache_path)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    parser.set_defaults(func=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code for the shell
            - 0: Success
            - 1: Configuration could not be loaded
            - 2: Incorrect usage (shows help)
            - 130: Interrupted by user (Ctrl+C)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.func is None:
        parser.print_help()
        return 2

    configure_logging(verbose=args.verbose)

    try:
        args.config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
