"""Configuration loading for the R2 command-line client.

Settings come from two sources:
1. Process environment variables - take priority
2. A key=value file at ~/.r2-cli.cfg (python-dotenv syntax)

Required keys:
    ENDPOINT_URL=https://<account>.r2.cloudflarestorage.com
    AWS_ACCESS_KEY_ID=xxx
    AWS_SECRET_ACCESS_KEY=xxx

Optional keys:
    DEBUG=true
    PROFILE=default
    REPLACE_UNDERSCORES_WITH_DASHES=false
"""

import os
from pathlib import Path
from typing import Mapping, Optional, Union

from botocore.utils import is_valid_endpoint_url, is_valid_ipv6_endpoint_url
from dotenv import dotenv_values

from r2cli.models import CliConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


DEFAULT_CONFIG_PATH = Path.home() / ".r2-cli.cfg"

# Keys that must be present before any command runs
REQUIRED_KEYS = [
    "ENDPOINT_URL",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(
    value: Optional[str],
    default: bool = False,
    strict: bool = True,
) -> bool:
    """Coerce a configuration string to a boolean.

    Args:
        value: Raw value, or None when the key is absent.
        default: Result for absent or empty values.
        strict: Reject unknown spellings. When False, anything that is not a
                true spelling is False.

    Returns:
        The coerced boolean.

    Raises:
        ConfigError: If strict and the value is not a recognised boolean
                     spelling.
    """
    if value is None or value.strip() == "":
        return default

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES or not strict:
        return False

    raise ConfigError(f"Invalid boolean value: {value!r}")


def environment_snapshot(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Merge the config file with the process environment.

    Values already present in the environment win over the file, matching
    python-dotenv's non-overriding behaviour.

    Args:
        config_path: Path to the key=value file (defaults to ~/.r2-cli.cfg).
        environ: Environment mapping (defaults to os.environ).

    Returns:
        A plain dict snapshot, safe to keep for the rest of the run.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    snapshot: dict[str, str] = {}
    if path.is_file():
        for key, value in dotenv_values(path).items():
            if value is not None:
                snapshot[key] = value

    snapshot.update(env)
    return snapshot


def config_from_mapping(values: Mapping[str, str]) -> CliConfig:
    """Build a CliConfig from an already merged mapping.

    Raises:
        ConfigError: If any required key is missing or empty, or the
                     endpoint is not a URL botocore accepts.
    """
    missing = [key for key in REQUIRED_KEYS if not values.get(key)]
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    endpoint_url = values["ENDPOINT_URL"]
    if not (is_valid_endpoint_url(endpoint_url) or is_valid_ipv6_endpoint_url(endpoint_url)):
        raise ConfigError(f"Invalid ENDPOINT_URL: {endpoint_url}")

    return CliConfig(
        endpoint_url=endpoint_url,
        aws_access_key_id=values["AWS_ACCESS_KEY_ID"],
        aws_secret_access_key=values["AWS_SECRET_ACCESS_KEY"],
        # DEBUG is shared with other tools, so unknown values mean off
        debug=parse_bool(values.get("DEBUG"), default=False, strict=False),
        profile=values.get("PROFILE") or None,
        replace_underscores_with_dashes=parse_bool(
            values.get("REPLACE_UNDERSCORES_WITH_DASHES"), default=True
        ),
    )


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CliConfig:
    """Load the client configuration.

    A missing config file is not an error on its own; the required keys may
    all come from the environment.

    Args:
        config_path: Path to the key=value file (defaults to ~/.r2-cli.cfg).
        environ: Environment mapping (defaults to os.environ).

    Returns:
        The validated CliConfig.

    Raises:
        ConfigError: If required keys are missing or a flag is malformed.
    """
    return config_from_mapping(environment_snapshot(config_path, environ))
