"""Entry point for running the registry as a module."""

import argparse
import os
import sys
from typing import List, Optional

import uvicorn

from subscription_registry.config import Config, ConfigurationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="subscription-registry",
        description="Subscription Registry - in-memory subscriptions with subscriber and owner checks",
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8080")),
        help="Port to bind to (default: 8080)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.getenv("LOG_LEVEL", "INFO"),
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default=os.getenv("LOG_FORMAT", "json"),
    )
    parser.add_argument(
        "--config",
        default=os.getenv("REGISTRY_CONFIG_PATH"),
        help="Path to registry.yaml (default: config/registry.yaml, built-in defaults if absent)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        default=os.getenv("RELOAD", "false").lower() == "true",
        help="Enable auto-reload for development",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Validate registry.yaml, then serve the registry with uvicorn."""
    args = build_parser().parse_args(argv)

    # Fail before uvicorn imports the app
    try:
        config = Config(args.config)
    except ConfigurationError as e:
        print(f"Invalid registry configuration: {e}", file=sys.stderr)
        sys.exit(2)

    os.environ["LOG_LEVEL"] = args.log_level
    os.environ["LOG_FORMAT"] = args.log_format
    if args.config:
        os.environ["REGISTRY_CONFIG_PATH"] = args.config

    if args.log_format == "console":
        host_settings = config.host_settings
        print("=" * 60)
        print("Subscription Registry v0.1.0")
        print("=" * 60)
        print(f"Listening: {args.host}:{args.port}")
        print(f"Config: {config.config_path}")
        print(f"Clock: {config.clock_mode}")
        print(f"Expiry window: {config.expiry_window}")
        print(f"Caller header: {host_settings.caller_header}")
        if host_settings.allow_anonymous:
            print(f"Anonymous callers: {host_settings.anonymous_identity}")
        else:
            print("Anonymous callers: rejected")
        print("=" * 60)

    try:
        uvicorn.run(
            "subscription_registry.main:app",
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
            reload=args.reload,
            access_log=False,  # RequestLoggingMiddleware logs requests
        )
    except KeyboardInterrupt:
        print("\nShutting down gracefully...")
        sys.exit(0)


if __name__ == "__main__":
    main()
