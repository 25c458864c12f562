#!/usr/bin/env python3
"""
Start the Holiday Tracker API.

Always a single process: the geocoding pace is kept in memory, so several
workers would each send their own one request per second.
"""

import argparse
import sys

from holiday_tracker.config.loader import ConfigLoader, load_config_for_environment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Holiday Tracker API Server")
    parser.add_argument(
        "--env",
        choices=["development", "staging", "production", "testing"],
        help="Environment to load .env.<env> for (default: ENVIRONMENT or development)"
    )
    parser.add_argument("--host", help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")

    tools = parser.add_mutually_exclusive_group()
    tools.add_argument("--list-envs", action="store_true", help="List .env.<env> files found")
    tools.add_argument("--validate-env", metavar="ENV", help="Check that .env.<ENV> loads")
    tools.add_argument("--create-sample", metavar="ENV", help="Write .env.<ENV>.sample")
    return parser


def main():
    args = build_parser().parse_args()

    if args.list_envs:
        for env in ConfigLoader.get_available_environments():
            print(env)
        return

    if args.validate_env:
        ok = ConfigLoader.validate_environment_config(args.validate_env)
        print(f"{args.validate_env}: {'valid' if ok else 'invalid or missing'}")
        sys.exit(0 if ok else 1)

    if args.create_sample:
        try:
            print(ConfigLoader.create_sample_env_file(args.create_sample))
        except (OSError, ValueError) as e:
            print(f"Failed to create sample configuration: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        settings = load_config_for_environment(args.env)
    except ValueError as e:
        print(f"Failed to load configuration: {e}", file=sys.stderr)
        sys.exit(1)

    host = args.host or settings.host
    port = args.port or settings.port
    reload = args.reload or settings.reload

    print(
        f"Starting {settings.app_name} v{settings.app_version} "
        f"({settings.environment.value}) on {host}:{port}, database {settings.database_url}"
    )

    import uvicorn

    if reload:
        # The reloader needs an import string; the app then reads settings from the environment
        uvicorn.run(
            "holiday_tracker.main:app",
            host=host,
            port=port,
            reload=True,
            log_level=settings.log_level.value.lower(),
        )
        return

    from holiday_tracker.main import create_app

    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
