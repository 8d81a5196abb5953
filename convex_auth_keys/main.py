"""
Command line entry point.

    convex-auth-keys                       print fresh values
    convex-auth-keys --write               upsert them into .env.local
    convex-auth-keys --sync-convex         show which vars would be synced
    convex-auth-keys --setup --apply       write, then push to Convex
"""
import argparse
import asyncio
import sys
from typing import List, Optional

from pydantic import ValidationError

from convex_auth_keys.config import RunOptions, load_settings
from convex_auth_keys.exceptions import AuthKeysException, ConfigurationError
from convex_auth_keys.logging_config import get_logger, setup_logging
from convex_auth_keys.services.sync import AuthKeySetup

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convex-auth-keys",
        description="Generate Convex Auth keys and secrets, optionally writing and syncing them.",
    )
    parser.add_argument("--write", action="store_true", help="Write generated values to the env file")
    parser.add_argument("--sync-convex", action="store_true", help="Sync env file values to the Convex deployment")
    parser.add_argument("--setup", action="store_true", help="Shorthand for --write --sync-convex")
    parser.add_argument("--apply", action="store_true", help="Actually run `convex env set` (dry-run otherwise)")
    parser.add_argument("--env-file", default=None, help="Env file to read and write (default: .env.local)")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the tool.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    options = RunOptions.from_flags(
        write=args.write,
        sync_convex=args.sync_convex,
        setup=args.setup,
        apply=args.apply,
    )

    try:
        try:
            settings = load_settings(env_file_name=args.env_file, debug=args.debug)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        setup_logging(settings.debug)
        logger.debug("run_started", **options.model_dump())
        asyncio.run(AuthKeySetup(settings, options).run())
    except AuthKeysException as e:
        sys.stderr.write(f"{e}\n")
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
