"""Command-line interface for the R2 client.

Provides argument parsing and the main entry point. Each invocation runs
exactly one subcommand against the configured endpoint.
"""

import argparse
import sys
from dataclasses import replace
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from r2cli import __version__
from r2cli.commands import COMMANDS, CommandError
from r2cli.config import ConfigError, config_from_mapping, environment_snapshot
from r2cli.headers import collect_headers
from r2cli.logging_utils import configure_logging
from r2cli.models import CliConfig
from r2cli.multipart import PartsFileError
from r2cli.reporter import ConsoleReporter
from r2cli.s3_client import build_s3_client

# Errors reported as a one-line message instead of a traceback
COMMAND_ERRORS = (
    CommandError,
    PartsFileError,
    ClientError,
    BotoCoreError,
    OSError,
)


def _add_bucket(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-b", "--bucket", required=True, help="S3 bucket name")


def _add_key(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-k", "--key", required=True, help="Object key")


def _add_upload_id(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-u", "--upload-id",
        required=True,
        help="Multipart upload ID",
    )


def _add_prefix(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-f", "--prefix",
        default=None,
        help="Object prefix for filtering",
    )


def _add_profile(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p", "--profile",
        default=None,
        help="AWS profile (default: PROFILE from the config file)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="r2-cli",
        description="Minimal client for S3-compatible object storage",
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (default: ~/.r2-cli.cfg)",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command", required=True)

    cmd = subparsers.add_parser("create-multipart-upload", help="Start a multipart upload")
    _add_bucket(cmd)
    _add_key(cmd)
    _add_profile(cmd)

    cmd = subparsers.add_parser("upload-part", help="Upload one part of a multipart upload")
    _add_bucket(cmd)
    _add_key(cmd)
    cmd.add_argument(
        "-n", "--part-number",
        type=int,
        required=True,
        help="Part number",
    )
    cmd.add_argument("-f", "--file", required=True, help="File to upload")
    _add_upload_id(cmd)
    _add_profile(cmd)

    cmd = subparsers.add_parser("complete-multipart-upload", help="Complete a multipart upload")
    _add_bucket(cmd)
    _add_key(cmd)
    _add_upload_id(cmd)
    cmd.add_argument(
        "-f", "--file",
        required=True,
        help="File containing part information",
    )
    _add_profile(cmd)

    cmd = subparsers.add_parser("put-object", help="Upload a file as a single object")
    _add_bucket(cmd)
    _add_key(cmd)
    cmd.add_argument("-f", "--file", required=True, help="File to upload")
    _add_profile(cmd)

    cmd = subparsers.add_parser("delete-object", help="Delete an object")
    _add_bucket(cmd)
    _add_key(cmd)
    _add_profile(cmd)

    cmd = subparsers.add_parser("create-bucket", help="Create a bucket")
    _add_bucket(cmd)
    _add_profile(cmd)

    cmd = subparsers.add_parser("list-objects", help="List the first page of objects")
    _add_bucket(cmd)
    _add_prefix(cmd)
    _add_profile(cmd)

    cmd = subparsers.add_parser("count-objects", help="Count all objects")
    _add_bucket(cmd)
    _add_prefix(cmd)

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    return build_parser().parse_args(argv)


def log_config(logger, config: CliConfig) -> None:
    """Log the loaded settings at DEBUG level, secret masked."""
    secret = config.aws_secret_access_key
    masked = f"{secret[:4]}..." if len(secret) > 4 else "****"
    logger.debug("ENDPOINT_URL %s", config.endpoint_url)
    logger.debug("AWS_ACCESS_KEY_ID %s", config.aws_access_key_id)
    logger.debug("AWS_SECRET_ACCESS_KEY %s", masked)
    logger.debug("DEBUG %s", config.debug)
    logger.debug("PROFILE %s", config.profile)
    logger.debug(
        "REPLACE_UNDERSCORES_WITH_DASHES %s",
        config.replace_underscores_with_dashes,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 on success, 1 when the command failed,
        2 for configuration errors
    """
    args = parse_args(argv)

    # Load configuration
    try:
        snapshot = environment_snapshot(args.config)
        config = config_from_mapping(snapshot)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if getattr(args, "profile", None):
        config = replace(config, profile=args.profile)

    logger = configure_logging(config.debug)
    log_config(logger, config)

    reporter = ConsoleReporter()
    handler = COMMANDS[args.command]

    try:
        headers = collect_headers(snapshot, config.replace_underscores_with_dashes)
        s3_client = build_s3_client(config, headers)
        handler(s3_client, args, reporter)
    except COMMAND_ERRORS as e:
        logger.debug("%s failed", args.command, exc_info=True)
        reporter.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
